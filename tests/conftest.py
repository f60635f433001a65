"""
Test fixtures: synthetic silhouette rasters.
"""

import os
import sys

import cv2
import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
os.environ.setdefault('MPLBACKEND', 'Agg')

from config import SilhouetteCodes
from peoplefinder.models import Pixel, Skeleton
from peoplefinder.silhouette import SilhouetteIndex

ROWS, COLS = 128, 64

# Landmarks fitted on make_box_raster(): interior rows 3..124, cols 3..60
BOX_SKELETON = Skeleton(
    head=Pixel(8, 3),
    torso=Pixel(18, 32),
    waist=Pixel(64, 32),
    left_foot=Pixel(124, 3),
    right_foot=Pixel(124, 60),
    left_shoulder=Pixel(18, 8),
    right_shoulder=Pixel(18, 55),
    left_elbow=Pixel(41, 8),
    left_hand=Pixel(64, 8),
    right_elbow=Pixel(41, 55),
    right_hand=Pixel(64, 55),
)


def make_box_raster(top: int = 2, bottom: int = 125, left: int = 2, right: int = 61) -> np.ndarray:
    """Closed rectangular outline, unfilled."""
    raster = np.full((ROWS, COLS), SilhouetteCodes.EXTERIOR, dtype=np.uint8)
    cv2.rectangle(raster, (left, top), (right, bottom), SilhouetteCodes.OUTLINE, 1)
    return raster


def index_from_raster(raster: np.ndarray) -> SilhouetteIndex:
    """Index a raster as-is, without the seed and flood checks."""
    return SilhouetteIndex(raster,
                           np.argwhere(raster == SilhouetteCodes.INTERIOR),
                           np.argwhere(raster == SilhouetteCodes.OUTLINE))


def make_rect_image(top: int = 10, bottom: int = 110, left: int = 20, right: int = 40) -> np.ndarray:
    """White filled rectangle on black, the size of a training image."""
    image = np.zeros((ROWS, COLS), dtype=np.uint8)
    cv2.rectangle(image, (left, top), (right, bottom), 255, -1)
    return image


@pytest.fixture
def box_raster():
    return make_box_raster()


@pytest.fixture
def box_index(box_raster):
    return SilhouetteIndex.build(box_raster)


@pytest.fixture
def full_raster():
    return np.full((ROWS, COLS), SilhouetteCodes.INTERIOR, dtype=np.uint8)


@pytest.fixture
def full_index(full_raster):
    return SilhouetteIndex.build(full_raster)


@pytest.fixture
def empty_raster():
    return np.full((ROWS, COLS), SilhouetteCodes.EXTERIOR, dtype=np.uint8)


@pytest.fixture
def open_box_raster():
    raster = make_box_raster()
    raster[2, 20:30] = SilhouetteCodes.EXTERIOR
    return raster


@pytest.fixture
def training_dir(tmp_path):
    """Directory with three identical ground-truth rectangles."""
    directory = tmp_path / "training"
    directory.mkdir()
    for i in range(3):
        cv2.imwrite(str(directory / f"person_{i}.png"), make_rect_image())
    return directory
