"""
Limb Detection Module

Locates elbows and hands. Arm segments are assumed to be about as long as
half the torso-to-waist distance.
"""

import numpy as np
from typing import Optional, Tuple
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))
from config import PipelineConfig
from .models import Detection, MISSING, Pixel
from .silhouette import SilhouetteIndex


# 8-neighbourhood in the order the outline tracer tries it
NEIGHBOUR_OFFSETS = (
    (1, 1),     # lower right
    (1, 0),     # lower
    (1, -1),    # lower left
    (0, 1),     # right
    (0, -1),    # left
    (-1, 1),    # upper right
    (-1, 0),    # upper
    (-1, -1),   # upper left
)


def halfway_torso(torso: Pixel, waist: Pixel) -> Tuple[Optional[Pixel], Optional[float]]:
    """
    Midpoint between torso and waist, and its distance to the torso.

    Returns:
        (halfway_node, halfway_dist), or (None, None) if an anchor is missing
    """
    if torso == MISSING or waist == MISSING:
        return None, None

    node = Pixel(torso.row + int((waist.row - torso.row) / 2),
                 torso.col + int((waist.col - torso.col) / 2))
    dist = float(np.hypot(node.row - torso.row, node.col - torso.col))
    return node, dist


class LimbDetector:
    """Finds elbows by following the arm's inner edge and hands by tracing the outline."""

    def __init__(self, config: dict = None):
        """
        Initialize limb detector.

        Args:
            config: Optional config dict, uses PipelineConfig.SKELETON if None
        """
        self.config = config or PipelineConfig.SKELETON
        self.closest_pixel_skip = self.config['CLOSEST_PIXEL_SKIP']

    def find_elbow(self,
                   silhouette: SilhouetteIndex,
                   torso: Pixel,
                   shoulder: Pixel,
                   arm_width: int,
                   halfway_node: Optional[Pixel],
                   halfway_dist: Optional[float],
                   seed: int = 0) -> Detection:
        """
        Follow one side of the body down from the shoulder.

        Each row's expected arm pixel sits `arm_width` in from the body edge:
        right of the row's first pixel on the left side, left of the previous
        row's last pixel on the right side. Among expected pixels seen above
        the halfway row, the one whose distance to the shoulder is closest to
        `halfway_dist` is the elbow.

        Args:
            silhouette: Filled silhouette
            torso: Torso landmark, decides which side the shoulder is on
            shoulder: Shoulder landmark on the side being searched
            arm_width: Lateral offset from the body edge
            halfway_node: Midpoint between torso and waist
            halfway_dist: Expected upper arm length
            seed: Interior index of the shoulder run

        Returns:
            Detection whose seed is the index of the elbow pixel
        """
        if MISSING in (torso, shoulder) or halfway_node is None:
            return Detection.missing(seed)

        pixels = silhouette.interior
        rows, cols = pixels[:, 0], pixels[:, 1]
        n = len(pixels)

        i = silhouette.first_interior_index(shoulder.row, seed)
        if i >= n:
            return Detection.missing(seed)

        right_side = shoulder.col >= torso.col

        def expected_at(k):
            if right_side:
                return Pixel(int(rows[k]), int(cols[max(k - 1, 0)]) - arm_width)
            return Pixel(int(rows[k]), int(cols[k]) + arm_width)

        expected = expected_at(i)
        best, best_index = expected, seed
        closest = float('inf')

        i += 1
        while i < n and rows[i] <= halfway_node.row:
            current = Pixel(int(rows[i]), int(cols[i]))
            if current == expected:
                dist = np.hypot(current.row - shoulder.row, current.col - shoulder.col)
                gap = abs(halfway_dist - dist)
                if gap <= closest:
                    closest = gap
                    best, best_index = current, i
            if current.row != expected.row:
                expected = expected_at(i)
            i += 1

        return Detection(best, best_index)

    def find_hand(self,
                  silhouette: SilhouetteIndex,
                  waist: Pixel,
                  elbow: Pixel,
                  arm_width: int,
                  halfway_dist: Optional[float],
                  seed: int = 0) -> Detection:
        """
        Project the hand from the elbow along the forearm's outline direction.

        Args:
            silhouette: Filled silhouette
            waist: Waist landmark, decides which arm the elbow belongs to
            elbow: Elbow landmark
            arm_width: Lateral offset from the body edge
            halfway_dist: Expected forearm length
            seed: Interior index of the shoulder run

        Returns:
            Detection snapped onto the silhouette interior
        """
        if MISSING in (waist, elbow) or halfway_dist is None:
            return Detection.missing(seed)

        target_row = elbow.row - arm_width
        o = silhouette.first_outline_index(target_row)
        if o >= len(silhouette.outline):
            return Detection.missing(seed)

        # Right arm starts from the previous row's last outline pixel
        if elbow.col >= waist.col:
            o = max(o - 1, 0)

        average_angle = self.trace_outline(silhouette, silhouette.outline_pixel(o), halfway_dist / 2)

        goal = Pixel(int(elbow.row + halfway_dist * np.cos(average_angle)),
                     int(elbow.col + halfway_dist * np.sin(average_angle)))
        start = silhouette.first_interior_index(target_row, seed) + self.closest_pixel_skip

        return self.find_closest_pixel(silhouette, goal, int(elbow.row + halfway_dist), start)

    def trace_outline(self, silhouette: SilhouetteIndex, start: Pixel, max_steps: float) -> float:
        """
        Walk along outline pixels and return the mean step direction.

        A step moves to the first outline neighbour that is not the pixel just
        left; a step with no such neighbour still counts toward the mean.

        Returns:
            Average atan2(d_col, d_row) in radians
        """
        current, previous = start, None
        total_angle = 0.0
        steps = 0

        while steps <= max_steps:
            for d_row, d_col in NEIGHBOUR_OFFSETS:
                neighbour = Pixel(current.row + d_row, current.col + d_col)
                if neighbour != previous and silhouette.is_outline(neighbour):
                    previous, current = current, neighbour
                    total_angle += float(np.arctan2(d_col, d_row))
                    break
            steps += 1

        return total_angle / steps

    def find_closest_pixel(self,
                           silhouette: SilhouetteIndex,
                           goal: Pixel,
                           row_bound: int,
                           start: int = 0) -> Detection:
        """
        Snap a goal position onto the silhouette interior.

        Args:
            silhouette: Filled silhouette
            goal: Position being aimed for
            row_bound: Pixels below this row are not considered
            start: Interior index to start from

        Returns:
            The goal itself if it is interior, else the closest interior pixel
            (the later one on ties)
        """
        start = min(max(start, 0), len(silhouette))
        stop = silhouette.first_interior_index(row_bound + 1, start)
        candidates = silhouette.interior[start:stop]
        if len(candidates) == 0:
            return Detection.missing(start)

        dists = np.hypot(candidates[:, 0] - goal.row, candidates[:, 1] - goal.col)
        best = start + len(dists) - 1 - int(np.argmin(dists[::-1]))
        return Detection(silhouette.pixel(best), best)
