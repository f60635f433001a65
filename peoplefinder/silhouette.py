"""
Silhouette Index Module

Validates a three-class silhouette raster, fills its interior and exposes the
interior and outline pixels in row-major order.
"""

import cv2
import numpy as np
from typing import Optional
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))
from config import PipelineConfig, SilhouetteCodes
from .models import Pixel


class SilhouetteIndex:
    """Row-major pixel index of one filled silhouette."""

    def __init__(self,
                 raster: np.ndarray,
                 interior: np.ndarray,
                 outline: np.ndarray,
                 reason: Optional[str] = None):
        self.raster = raster
        self.interior = interior
        self.outline = outline
        self.reason = reason
        self.rows, self.cols = raster.shape[:2]
        self._interior_rows = interior[:, 0]
        self._outline_rows = outline[:, 0]

    @property
    def valid(self) -> bool:
        return self.reason is None

    @classmethod
    def build(cls, raster: np.ndarray, config: dict = None) -> 'SilhouetteIndex':
        """
        Fill the silhouette from its seed pixel and index its pixels.

        Args:
            raster: (rows, cols) uint8 array of SilhouetteCodes values
            config: Optional config dict, uses PipelineConfig.SILHOUETTE if None

        Returns:
            SilhouetteIndex, check `valid` before fitting
        """
        config = config or PipelineConfig.SILHOUETTE
        expected = (config['ROWS'], config['COLS'])
        if raster is None or raster.ndim != 2 or raster.shape != expected:
            shape = None if raster is None else raster.shape
            raise ValueError(f"Silhouette must be a single channel {expected} raster, got {shape}")

        filled = raster.astype(np.uint8, copy=True)
        seed_row, seed_col = config['SEED_PIXEL']
        corner_row, corner_col = config['CORNER_PIXEL']
        reason = None

        seed_value = filled[seed_row, seed_col]
        if seed_value == SilhouetteCodes.OUTLINE:
            reason = 'seed pixel lies on the outline'
        elif seed_value != SilhouetteCodes.INTERIOR:
            # OpenCV takes the seed as (x, y)
            cv2.floodFill(filled, None, (seed_col, seed_row), SilhouetteCodes.INTERIOR, flags=4)
            if filled[corner_row, corner_col] == SilhouetteCodes.INTERIOR:
                reason = 'flood fill bled to the corner, contour is open'

        interior = np.argwhere(filled == SilhouetteCodes.INTERIOR)
        outline = np.argwhere(filled == SilhouetteCodes.OUTLINE)

        if reason is None and len(interior) == 0:
            reason = 'no interior pixels'
        if reason is None and len(interior) > config['MAX_INTERIOR']:
            reason = f'interior has {len(interior)} pixels'
        if reason is None and len(outline) > config['MAX_OUTLINE']:
            reason = f'outline has {len(outline)} pixels'

        return cls(filled, interior, outline, reason)

    def first_interior_index(self, row: int, start: int = 0) -> int:
        """Index of the first interior pixel at or after `start` with row >= `row`."""
        start = min(max(start, 0), len(self.interior))
        return start + int(np.searchsorted(self._interior_rows[start:], row, side='left'))

    def first_outline_index(self, row: int, start: int = 0) -> int:
        """Index of the first outline pixel at or after `start` with row >= `row`."""
        start = min(max(start, 0), len(self.outline))
        return start + int(np.searchsorted(self._outline_rows[start:], row, side='left'))

    def pixel(self, index: int) -> Pixel:
        r, c = self.interior[index]
        return Pixel(int(r), int(c))

    def outline_pixel(self, index: int) -> Pixel:
        r, c = self.outline[index]
        return Pixel(int(r), int(c))

    def in_bounds(self, p) -> bool:
        return 0 <= p[0] < self.rows and 0 <= p[1] < self.cols

    def is_outline(self, p) -> bool:
        return self.in_bounds(p) and self.raster[p[0], p[1]] == SilhouetteCodes.OUTLINE

    def is_interior(self, p) -> bool:
        return self.in_bounds(p) and self.raster[p[0], p[1]] == SilhouetteCodes.INTERIOR

    def __len__(self) -> int:
        return len(self.interior)
