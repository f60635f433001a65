"""
Configuration settings for the PeopleFinder pipeline.
Centralized configuration for all modules.
"""

from dataclasses import dataclass


@dataclass
class SilhouetteCodes:
    """Pixel class codes of a silhouette raster."""

    EXTERIOR = 0
    INTERIOR = 64    # written by the flood fill
    OUTLINE = 255


class PipelineConfig:
    """Configuration for the entire pedestrian classification pipeline."""

    # Silhouette raster
    SILHOUETTE = {
        'ROWS': 128,
        'COLS': 64,
        'SEED_PIXEL': (64, 32),     # (row, col)
        'CORNER_PIXEL': (0, 0),
        'MAX_INTERIOR': 8192,
        'MAX_OUTLINE': 4096
    }

    # Skeleton fitting
    SKELETON = {
        'THRESHOLD': 5,
        'TORSO_LOWER_ROW': 48,
        'WAIST_UPPER_ROW': 64,
        'WAIST_LOWER_ROW': 80,
        'FOOT_UPPER_ROW': 70,
        'LEFT_FOOT_CORNER': (127, 1),
        'RIGHT_FOOT_CORNER': (127, 63),
        'ARM_WIDTH_DIVISOR': 10,
        'CLOSEST_PIXEL_SKIP': 200
    }

    # Verdict thresholds (number of landmarks inside their trained box)
    CLASSIFIER = {
        'PEDESTRIAN_SCORE': 7,
        'SOMETHING_SCORE': 3
    }

    # Blob -> silhouette adapter
    CONTOUR_EXTRACTION = {
        'BINARY_THRESHOLD': 127,
        'MIN_AREA': 50,
        'MAX_SHAPES': 20,
        'KERNEL_SIZE': 3
    }

    # Training corpus
    DATASET = {
        'IMAGE_EXTENSIONS': ['.png', '.jpg', '.jpeg', '.bmp', '.pgm'],
        'MAX_FILES': 2000
    }

    # Visualization Colors (BGR)
    VIZ_COLORS = {
        'EXTERIOR': (0, 0, 0),
        'INTERIOR': (64, 0, 0),
        'OUTLINE': (0, 0, 255),
        'LIMB': (255, 0, 255),
        'NODE': (0, 255, 0),
        'SCALE': 3
    }

    # Landmark colour mapping for the range plot (matplotlib names)
    LANDMARK_COLOR_MAP = {
        'head': 'gold',
        'torso': 'orange',
        'waist': 'red',
        'left_foot': 'teal',
        'right_foot': 'purple',
        'left_shoulder': 'cyan',
        'right_shoulder': 'magenta',
        'left_elbow': 'deepskyblue',
        'left_hand': 'blue',
        'right_elbow': 'hotpink',
        'right_hand': 'crimson',
    }
