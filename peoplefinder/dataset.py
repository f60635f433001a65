"""
Training corpus loading.
"""

import cv2
import numpy as np
from pathlib import Path
from typing import List, Tuple
import sys

sys.path.append(str(Path(__file__).parent.parent))
from config import PipelineConfig
from .contour_extraction import to_grayscale


def search_dataset_files(directory, config: dict = None) -> List[Path]:
    """
    List the image files of a training directory.

    Args:
        directory: Directory of ground-truth silhouette images
        config: Optional config dict, uses PipelineConfig.DATASET if None

    Returns:
        Sorted image paths, at most MAX_FILES of them

    Raises:
        FileNotFoundError: If the directory does not exist
    """
    config = config or PipelineConfig.DATASET
    input_path = Path(directory)
    if not input_path.is_dir():
        raise FileNotFoundError(f"Training directory does not exist: {input_path}")

    extensions = {ext.lower() for ext in config['IMAGE_EXTENSIONS']}
    image_files = sorted(f for f in input_path.iterdir()
                         if f.is_file() and f.suffix.lower() in extensions)
    return image_files[:config['MAX_FILES']]


def load_image(path, size: Tuple[int, int] = None) -> np.ndarray:
    """
    Read one image as single channel, resized to (width, height).

    Raises:
        RuntimeError: If the image cannot be read
    """
    if size is None:
        size = (PipelineConfig.SILHOUETTE['COLS'], PipelineConfig.SILHOUETTE['ROWS'])

    image = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise RuntimeError(f"Could not read image: {path}")
    return cv2.resize(to_grayscale(image), size)


def load_dataset_files(paths, size: Tuple[int, int] = None) -> List[np.ndarray]:
    """Load every readable image; unreadable files are reported and skipped."""
    images = []
    for path in paths:
        try:
            images.append(load_image(path, size))
        except RuntimeError as e:
            print(f"  Warning: {e}, skipping")
    return images
