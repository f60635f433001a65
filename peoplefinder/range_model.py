"""
Range Model Module

Per-landmark axis-aligned bounding boxes learned from ground-truth skeletons.
RangeTrainer accumulates the boxes; freeze() hands out a read-only RangeModel
for classification.
"""

import numpy as np
from typing import Tuple

from .models import LANDMARK_NAMES, MISSING, Pixel, Skeleton


class RangeModel:
    """
    Read-only landmark boxes.

    A landmark is inside box i when lower[i] <= landmark < upper[i] on both
    axes. The upper bound is exclusive and sits one past the largest trained
    coordinate, so every training landmark is inside its own box.
    """

    def __init__(self, lower: np.ndarray, upper: np.ndarray, sample_count: int = 0):
        self._lower = np.array(lower, dtype=np.int64)
        self._upper = np.array(upper, dtype=np.int64)
        self._lower.setflags(write=False)
        self._upper.setflags(write=False)
        self.sample_count = sample_count

    @classmethod
    def untrained(cls) -> 'RangeModel':
        """Model whose boxes contain nothing."""
        return RangeTrainer().freeze()

    @property
    def lower(self) -> np.ndarray:
        return self._lower

    @property
    def upper(self) -> np.ndarray:
        return self._upper

    @property
    def is_trained(self) -> bool:
        return self.sample_count > 0

    def contains(self, landmark: Pixel, index: int) -> bool:
        lo, hi = self._lower[index], self._upper[index]
        return bool(lo[0] <= landmark[0] < hi[0] and lo[1] <= landmark[1] < hi[1])

    def bounds(self, index: int) -> Tuple[Pixel, Pixel]:
        """Inclusive (min, max) trained corners of box `index`."""
        lo, hi = self._lower[index], self._upper[index]
        return Pixel(int(lo[0]), int(lo[1])), Pixel(int(hi[0]) - 1, int(hi[1]) - 1)

    def describe(self) -> str:
        lines = []
        for i, name in enumerate(LANDMARK_NAMES):
            lo, hi = self.bounds(i)
            lines.append(f"{name:>15}: rows {lo.row}-{hi.row}, cols {lo.col}-{hi.col}")
        return "\n".join(lines)

    def __eq__(self, other) -> bool:
        if not isinstance(other, RangeModel):
            return NotImplemented
        return (np.array_equal(self._lower, other._lower)
                and np.array_equal(self._upper, other._upper))


class RangeTrainer:
    """Widens each landmark's box toward every accepted training skeleton."""

    def __init__(self, n_landmarks: int = len(LANDMARK_NAMES)):
        self.n_landmarks = n_landmarks
        self.reset()

    def reset(self):
        """Start from the empty box: min at the missing marker, max at the origin."""
        self.min_range = np.tile(np.array(MISSING, dtype=np.int64), (self.n_landmarks, 1))
        self.max_range = np.zeros((self.n_landmarks, 2), dtype=np.int64)
        self.sample_count = 0

    def update(self, skeleton: Skeleton):
        """
        Fold one skeleton into the boxes.

        Args:
            skeleton: Sequence of n_landmarks (row, col) landmarks
        """
        nodes = np.array(list(skeleton), dtype=np.int64)
        if nodes.shape != (self.n_landmarks, 2):
            raise ValueError(f"Expected {self.n_landmarks} landmarks, got shape {nodes.shape}")

        np.minimum(self.min_range, nodes, out=self.min_range)
        np.maximum(self.max_range, nodes, out=self.max_range)
        self.sample_count += 1

    def freeze(self) -> RangeModel:
        return RangeModel(self.min_range.copy(), self.max_range + 1, self.sample_count)
