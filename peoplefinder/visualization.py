"""
Visualization utilities for the PeopleFinder pipeline.

Landmarks are (row, col); OpenCV drawing calls take (x, y) = (col, row).
All conversion between the two happens in this module.
"""

import cv2
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle
from typing import List, Optional, Tuple
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))
from config import PipelineConfig, SilhouetteCodes
from .models import LANDMARK_NAMES, MISSING, Skeleton
from .range_model import RangeModel


# Limb segments as landmark index pairs
SKELETON_EDGES = (
    (0, 1), (1, 2), (2, 3), (2, 4),     # head to feet
    (1, 5), (5, 7), (7, 8),             # left side
    (1, 6), (6, 9), (9, 10),            # right side
)


def _to_cv(pixel, scale: int) -> Tuple[int, int]:
    """(row, col) landmark -> (x, y) centre of its scaled cell."""
    return (int(pixel[1]) * scale + scale // 2, int(pixel[0]) * scale + scale // 2)


def render_silhouette(raster: np.ndarray, colors: dict = None) -> np.ndarray:
    """
    Colour a silhouette raster and scale it up for display.

    Args:
        raster: (rows, cols) raster of SilhouetteCodes
        colors: Optional colour dict, uses PipelineConfig.VIZ_COLORS if None

    Returns:
        BGR image, SCALE times the raster size
    """
    colors = colors or PipelineConfig.VIZ_COLORS
    vis = np.zeros(raster.shape[:2] + (3,), dtype=np.uint8)
    vis[raster == SilhouetteCodes.EXTERIOR] = colors['EXTERIOR']
    vis[raster == SilhouetteCodes.INTERIOR] = colors['INTERIOR']
    vis[raster == SilhouetteCodes.OUTLINE] = colors['OUTLINE']

    scale = colors['SCALE']
    h, w = raster.shape[:2]
    return cv2.resize(vis, (w * scale, h * scale), interpolation=cv2.INTER_NEAREST)


def draw_skeleton(img: np.ndarray, skeleton: Skeleton, colors: dict = None) -> np.ndarray:
    """
    Draw limbs and landmark markers on a rendered silhouette.

    Args:
        img: Output of render_silhouette
        skeleton: Fitted landmarks; missing ones and their limbs are skipped
        colors: Optional colour dict, uses PipelineConfig.VIZ_COLORS if None

    Returns:
        Annotated copy of the image
    """
    colors = colors or PipelineConfig.VIZ_COLORS
    scale = colors['SCALE']
    vis = img.copy()

    for a, b in SKELETON_EDGES:
        if skeleton[a] == MISSING or skeleton[b] == MISSING:
            continue
        cv2.line(vis, _to_cv(skeleton[a], scale), _to_cv(skeleton[b], scale),
                 colors['LIMB'], 1, cv2.LINE_AA)

    for node in skeleton:
        if node != MISSING:
            cv2.circle(vis, _to_cv(node, scale), max(2, scale), colors['NODE'], 1)

    return vis


def add_label_to_image(img: np.ndarray,
                       text: str,
                       color: Tuple[int, int, int] = (255, 255, 255),
                       bg_color: Tuple[int, int, int] = (0, 0, 0)) -> np.ndarray:
    """
    Add a banner with a label above an image.

    Args:
        img: Input image (BGR or grayscale)
        text: Label text
        color: Text color
        bg_color: Banner color

    Returns:
        Taller image with the banner on top
    """
    if len(img.shape) == 2:
        img = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)

    h, w = img.shape[:2]
    bar_h = max(14, h // 12)
    font_scale = w / 400.0

    banner = np.full((bar_h, w, 3), bg_color, dtype=np.uint8)
    cv2.putText(banner, text, (3, int(bar_h * 0.75)), cv2.FONT_HERSHEY_SIMPLEX,
                font_scale, color, 1, cv2.LINE_AA)

    return np.vstack([banner, img])


def create_grid_visualization(images: List[np.ndarray],
                              labels: Optional[List[str]] = None,
                              cols: Optional[int] = None) -> np.ndarray:
    """
    Arrange equally sized images in a grid.

    Args:
        images: List of images to arrange
        labels: Optional labels for each image
        cols: Optional number of columns, auto-calculated if None

    Returns:
        Grid visualization
    """
    if not images:
        raise ValueError("No images provided")

    n = len(images)
    if cols is None:
        cols = int(np.ceil(np.sqrt(n)))
    rows = int(np.ceil(n / cols))

    if labels:
        images = [add_label_to_image(img, label) for img, label in zip(images, labels)]
    else:
        images = list(images)

    # Pad with blank tiles
    h, w = images[0].shape[:2]
    while len(images) < rows * cols:
        images.append(np.zeros((h, w, 3), dtype=np.uint8))

    image_rows = [np.hstack(images[r * cols:(r + 1) * cols]) for r in range(rows)]
    return np.vstack(image_rows)


def plot_range_model(model: RangeModel, output_path, color_map: dict = None,
                     silhouette_config: dict = None):
    """
    Save a plot of every landmark's trained box over the silhouette canvas.

    Args:
        model: Trained range model
        output_path: Image file to write
        color_map: Optional landmark -> colour, uses PipelineConfig.LANDMARK_COLOR_MAP if None
        silhouette_config: Optional config dict, uses PipelineConfig.SILHOUETTE if None
    """
    color_map = color_map or PipelineConfig.LANDMARK_COLOR_MAP
    silhouette_config = silhouette_config or PipelineConfig.SILHOUETTE
    rows, cols = silhouette_config['ROWS'], silhouette_config['COLS']

    fig, ax = plt.subplots(figsize=(4, 8))
    ax.set_xlim(0, cols)
    ax.set_ylim(rows, 0)
    ax.set_aspect('equal')
    ax.set_title(f"Landmark ranges ({model.sample_count} samples)", fontsize=10)

    for i, name in enumerate(LANDMARK_NAMES):
        lo, hi = model.bounds(i)
        if lo.row > hi.row or lo.col > hi.col:
            continue
        color = color_map.get(name, 'gray')
        ax.add_patch(Rectangle((lo.col, lo.row), hi.col - lo.col + 1, hi.row - lo.row + 1,
                               fill=False, edgecolor=color, linewidth=1.5, label=name))

    if ax.patches:
        ax.legend(loc='upper right', fontsize=6)

    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
