"""
Data models for skeleton fitting.
"""

from dataclasses import dataclass
from typing import NamedTuple


class Pixel(NamedTuple):
    """Silhouette position, row grows toward the feet."""
    row: int
    col: int


# Landmark that was not found
MISSING = Pixel(1000, 1000)

LANDMARK_NAMES = (
    'head',
    'torso',
    'waist',
    'left_foot',
    'right_foot',
    'left_shoulder',
    'right_shoulder',
    'left_elbow',
    'left_hand',
    'right_elbow',
    'right_hand',
)


class Skeleton(NamedTuple):
    """The 11 body-part landmarks of one silhouette, in index order."""
    head: Pixel = MISSING
    torso: Pixel = MISSING
    waist: Pixel = MISSING
    left_foot: Pixel = MISSING
    right_foot: Pixel = MISSING
    left_shoulder: Pixel = MISSING
    right_shoulder: Pixel = MISSING
    left_elbow: Pixel = MISSING
    left_hand: Pixel = MISSING
    right_elbow: Pixel = MISSING
    right_hand: Pixel = MISSING

    @classmethod
    def empty(cls) -> 'Skeleton':
        return cls()

    @classmethod
    def from_landmarks(cls, landmarks) -> 'Skeleton':
        """Build from a sequence of 11 (row, col) pairs."""
        landmarks = list(landmarks)
        if len(landmarks) != len(LANDMARK_NAMES):
            raise ValueError(f"Expected {len(LANDMARK_NAMES)} landmarks, got {len(landmarks)}")
        return cls(*(Pixel(int(r), int(c)) for r, c in landmarks))

    def found(self):
        """Names of the landmarks that were located."""
        return [name for name, p in zip(self._fields, self) if p != MISSING]


@dataclass(frozen=True)
class Detection:
    """Result of one landmark detector plus the index seed for the next one."""
    pixel: Pixel
    seed: int
    found: bool = True

    @classmethod
    def missing(cls, seed: int) -> 'Detection':
        return cls(MISSING, seed, False)


@dataclass(frozen=True)
class RowRun:
    """A run of interior pixels on one row."""
    row: int
    left_col: int
    length: int
    last_index: int

    @property
    def right_col(self) -> int:
        return self.left_col + self.length - 1

    @property
    def mid_col(self) -> int:
        return self.left_col + self.length // 2
