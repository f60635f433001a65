"""
Body Detection Module

Locates the head, torso, waist, feet and shoulders on a filled silhouette.
Each finder starts scanning the interior pixels at the index seed left by
the previous finder and returns a new seed for the next one.
"""

import numpy as np
from typing import Iterator, Tuple
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))
from config import PipelineConfig
from .models import Detection, MISSING, Pixel, RowRun
from .silhouette import SilhouetteIndex


def iter_row_runs(pixels: np.ndarray,
                  start: int,
                  stop_row: int,
                  contiguous: bool = True) -> Iterator[RowRun]:
    """
    Yield consecutive runs of row-major pixels.

    Args:
        pixels: (N, 2) row-major array of (row, col)
        start: Index of the first pixel to consider
        stop_row: Runs starting on this row or below are not yielded
        contiguous: If True a run continues only while the next pixel is the
            expected one, (row, col + 1); gaps from arms and hands split it.
            If False a run is a whole row.

    Yields:
        RowRun for each run
    """
    rows, cols = pixels[:, 0], pixels[:, 1]
    n = len(pixels)
    i = start
    while i < n and rows[i] < stop_row:
        first = i
        i += 1
        while i < n and rows[i] == rows[first]:
            if contiguous and cols[i] != cols[first] + (i - first):
                break
            i += 1
        yield RowRun(int(rows[first]), int(cols[first]), i - first, i - 1)


class BodyDetector:
    """Finds the landmarks on the centre line of the body plus the shoulders."""

    def __init__(self, config: dict = None):
        """
        Initialize body detector.

        Args:
            config: Optional config dict, uses PipelineConfig.SKELETON if None
        """
        self.config = config or PipelineConfig.SKELETON
        self.threshold = self.config['THRESHOLD']

    def find_head(self, silhouette: SilhouetteIndex) -> Detection:
        """Topmost interior pixel, pushed `threshold` rows into the head."""
        if len(silhouette) == 0:
            return Detection.missing(0)

        # Row-major order puts the crown first
        crown = silhouette.pixel(0)
        return Detection(Pixel(crown.row + self.threshold, crown.col), 0)

    def find_torso(self, silhouette: SilhouetteIndex, head: Pixel, seed: int = 0) -> Detection:
        """
        Locate the torso below the narrowest run (the neck) under the head.

        Runs are contiguous, so hands beside the neck neither widen its row
        nor pull the landmark off the body.

        Args:
            silhouette: Filled silhouette
            head: Head landmark
            seed: Interior index to start from

        Returns:
            Detection whose seed is the last pixel of the narrowest run
        """
        if head == MISSING:
            return Detection.missing(seed)

        lower_bound = max(self.config['TORSO_LOWER_ROW'], head.row + 1)
        start = silhouette.first_interior_index(head.row + self.threshold, seed)

        narrowest = None
        for run in iter_row_runs(silhouette.interior, start, lower_bound, contiguous=True):
            if narrowest is None or run.length < narrowest.length:
                narrowest = run

        if narrowest is None:
            return Detection.missing(seed)

        return Detection(Pixel(narrowest.row + self.threshold, narrowest.mid_col),
                         narrowest.last_index)

    def find_waist(self, silhouette: SilhouetteIndex, torso: Pixel, seed: int = 0) -> Detection:
        """Locate the waist at the widest unbroken run in the hip region."""
        if torso == MISSING:
            return Detection.missing(seed)

        upper_bound = max(self.config['WAIST_UPPER_ROW'], torso.row + 1)
        start = silhouette.first_interior_index(upper_bound + self.threshold, seed)

        widest = self._widest_run(silhouette, start, self.config['WAIST_LOWER_ROW'])
        if widest is None:
            return Detection.missing(seed)

        return Detection(Pixel(widest.row - self.threshold, widest.mid_col), widest.last_index)

    def find_foot(self,
                  silhouette: SilhouetteIndex,
                  waist: Pixel,
                  corner: Tuple[int, int],
                  seed: int = 0) -> Detection:
        """
        Locate a foot as the lower body pixel closest to a bottom corner.

        Args:
            silhouette: Filled silhouette
            waist: Waist landmark
            corner: (row, col) bottom corner the foot points to
            seed: Interior index to start from

        Returns:
            Detection whose seed is the index of the foot pixel
        """
        if waist == MISSING:
            return Detection.missing(seed)

        upper_bound = max(self.config['FOOT_UPPER_ROW'], waist.row + 1)
        start = silhouette.first_interior_index(upper_bound + self.threshold, seed)

        candidates = silhouette.interior[start:]
        if len(candidates) == 0:
            return Detection.missing(seed)

        dists = np.hypot(candidates[:, 0] - corner[0], candidates[:, 1] - corner[1])
        best = start + int(np.argmin(dists))
        return Detection(silhouette.pixel(best), best)

    def find_shoulders(self,
                       silhouette: SilhouetteIndex,
                       torso: Pixel,
                       seed: int = 0) -> Tuple[Detection, Detection, int]:
        """
        Place both shoulders on the widest run just below the torso landmark.

        Args:
            silhouette: Filled silhouette
            torso: Torso landmark
            seed: Interior index to start from

        Returns:
            Tuple of (left_shoulder, right_shoulder, arm_width)
            - arm_width: tenth of the shoulder run, at least 1
        """
        if torso == MISSING:
            return Detection.missing(seed), Detection.missing(seed), 1

        start = silhouette.first_interior_index(torso.row, seed)
        widest = self._widest_run(silhouette, start, torso.row + self.threshold + 1)
        if widest is None:
            return Detection.missing(seed), Detection.missing(seed), 1

        arm_width = max(1, widest.length // self.config['ARM_WIDTH_DIVISOR'])
        left = Pixel(widest.row, widest.left_col + arm_width)
        right = Pixel(widest.row, widest.right_col - arm_width)

        return Detection(left, widest.last_index), Detection(right, widest.last_index), arm_width

    def _widest_run(self, silhouette: SilhouetteIndex, start: int, stop_row: int):
        widest = None
        for run in iter_row_runs(silhouette.interior, start, stop_row, contiguous=True):
            if widest is None or run.length > widest.length:
                widest = run
        return widest
