"""
Contour Extraction Module

Turns blobs in a grayscale image into fixed-size outline rasters that the
skeleton fitter can fill and index.
"""

import cv2
import numpy as np
from typing import List, Optional
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))
from config import PipelineConfig, SilhouetteCodes


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Single channel copy of a BGR, BGRA or grayscale image."""
    if image.ndim == 2:
        return image.copy()
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
    return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)


class ContourExtractor:
    """Extracts outlined silhouettes of foreground blobs."""

    def __init__(self, config: dict = None, silhouette_config: dict = None):
        """
        Initialize contour extractor.

        Args:
            config: Optional config dict, uses PipelineConfig.CONTOUR_EXTRACTION if None
            silhouette_config: Optional config dict, uses PipelineConfig.SILHOUETTE if None
        """
        self.config = config or PipelineConfig.CONTOUR_EXTRACTION
        silhouette_config = silhouette_config or PipelineConfig.SILHOUETTE
        self.size = (silhouette_config['COLS'], silhouette_config['ROWS'])  # cv2 (w, h)
        self.min_area = self.config['MIN_AREA']
        self.max_shapes = self.config['MAX_SHAPES']

    def binarize(self, image: np.ndarray) -> np.ndarray:
        """Foreground mask (255) of a bright-on-dark image."""
        gray = to_grayscale(image)
        _, mask = cv2.threshold(gray, self.config['BINARY_THRESHOLD'], 255, cv2.THRESH_BINARY)

        k = self.config['KERNEL_SIZE']
        kernel = cv2.getStructuringElement(cv2.MORPH_ELLIPSE, (k, k))
        return cv2.morphologyEx(mask, cv2.MORPH_CLOSE, kernel)

    def find_blobs(self, mask: np.ndarray) -> List[np.ndarray]:
        """External contours above the minimum area, largest first."""
        contours, _ = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_NONE)
        valid = [c for c in contours if cv2.contourArea(c) >= self.min_area]
        valid.sort(key=cv2.contourArea, reverse=True)
        return valid[:self.max_shapes]

    def outline_raster(self, blob_mask: np.ndarray) -> Optional[np.ndarray]:
        """
        Redraw the largest blob of a mask as a one pixel outline.

        Args:
            blob_mask: Binary mask already at silhouette size

        Returns:
            Raster of EXTERIOR with the outline drawn as OUTLINE, or None
        """
        contours, _ = cv2.findContours(blob_mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_NONE)
        if not contours:
            return None

        largest = max(contours, key=cv2.contourArea)
        raster = np.full(blob_mask.shape[:2], SilhouetteCodes.EXTERIOR, dtype=np.uint8)
        cv2.drawContours(raster, [largest], -1, SilhouetteCodes.OUTLINE, 1)
        return raster

    def normalize_blob(self, mask: np.ndarray, contour: np.ndarray) -> Optional[np.ndarray]:
        """Crop one blob to its bounding box and scale it to silhouette size."""
        blob = np.zeros(mask.shape[:2], dtype=np.uint8)
        cv2.drawContours(blob, [contour], -1, 255, -1)

        x, y, w, h = cv2.boundingRect(contour)
        crop = blob[y:y + h, x:x + w]
        resized = cv2.resize(crop, self.size, interpolation=cv2.INTER_NEAREST)
        return self.outline_raster(resized)

    def extract_all(self, image: np.ndarray) -> List[np.ndarray]:
        """
        Main extraction method.

        Args:
            image: Frame or training image (BGR or grayscale)

        Returns:
            List of outline rasters, one per blob, largest blob first
        """
        mask = self.binarize(image)
        shapes = []
        for contour in self.find_blobs(mask):
            raster = self.normalize_blob(mask, contour)
            if raster is not None:
                shapes.append(raster)
        return shapes

    def extract_largest(self, image: np.ndarray) -> Optional[np.ndarray]:
        """Outline raster of the biggest blob, None if the image is empty."""
        mask = self.binarize(image)
        blobs = self.find_blobs(mask)
        if not blobs:
            return None
        return self.normalize_blob(mask, blobs[0])
