"""
Skeleton Fitting Module

Runs the landmark finders in a fixed order over one silhouette, handing each
finder the anchors and index seed produced by the earlier ones.

States: FRESH -> SEEDED -> HEAD_FOUND -> TORSO_FOUND -> TORSO_VALIDATED
-> COMPLETE, with FAILED as the sink.
"""

import numpy as np
from dataclasses import dataclass
from enum import Enum
from typing import Optional
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))
from config import PipelineConfig
from .body_detection import BodyDetector
from .limb_detection import LimbDetector, halfway_torso
from .models import Detection, LANDMARK_NAMES, MISSING, Pixel, Skeleton
from .silhouette import SilhouetteIndex


class FitState(Enum):
    FRESH = 'fresh'
    SEEDED = 'seeded'
    HEAD_FOUND = 'head_found'
    TORSO_FOUND = 'torso_found'
    TORSO_VALIDATED = 'torso_validated'
    COMPLETE = 'complete'
    FAILED = 'failed'


@dataclass
class SkeletonFit:
    """Outcome of fitting one silhouette."""
    skeleton: Skeleton
    state: FitState         # COMPLETE or FAILED
    stage: FitState         # furthest state reached before finishing
    failed: bool
    silhouette: Optional[SilhouetteIndex] = None


class SkeletonFitter:
    """Fits the 11-landmark skeleton and keeps the bad-skeleton flag."""

    def __init__(self, config: dict = None, silhouette_config: dict = None):
        """
        Initialize skeleton fitter.

        Args:
            config: Optional config dict, uses PipelineConfig.SKELETON if None
            silhouette_config: Optional config dict, uses PipelineConfig.SILHOUETTE if None
        """
        self.config = config or PipelineConfig.SKELETON
        self.silhouette_config = silhouette_config or PipelineConfig.SILHOUETTE
        self.body_detector = BodyDetector(self.config)
        self.limb_detector = LimbDetector(self.config)
        self._failure_flag = False

    @property
    def failure_flag(self) -> bool:
        """True once any fit since the last reset hit a guard."""
        return self._failure_flag

    def reset_failure_flag(self):
        self._failure_flag = False

    def fit(self, raster: np.ndarray) -> SkeletonFit:
        """
        Fit a skeleton onto a silhouette raster.

        Args:
            raster: (128, 64) raster of SilhouetteCodes, outlined or filled

        Returns:
            SkeletonFit; landmarks that could not be placed are MISSING
        """
        nodes = [MISSING] * len(LANDMARK_NAMES)
        stage = FitState.FRESH

        silhouette = SilhouetteIndex.build(raster, self.silhouette_config)
        if not silhouette.valid:
            return self._fail(nodes, stage, silhouette)
        stage = FitState.SEEDED

        try:
            head = self.body_detector.find_head(silhouette)
            if not head.found:
                return self._fail(nodes, stage, silhouette)
            nodes[0] = head.pixel
            stage = FitState.HEAD_FOUND

            torso = self.body_detector.find_torso(silhouette, head.pixel, head.seed)
            nodes[1] = torso.pixel
            stage = FitState.TORSO_FOUND

            # The torso is the early reject gate for the whole shape
            if not (torso.found and silhouette.in_bounds(torso.pixel)):
                return self._fail(nodes, stage, silhouette)
            stage = FitState.TORSO_VALIDATED

            missed = self._fit_remaining(silhouette, nodes, torso)
        except (IndexError, ValueError, ArithmeticError):
            return self._fail(nodes, stage, silhouette)

        if missed:
            self._failure_flag = True
        return SkeletonFit(Skeleton(*nodes), FitState.COMPLETE, FitState.COMPLETE, missed, silhouette)

    def _fit_remaining(self, silhouette: SilhouetteIndex, nodes: list, torso: Detection) -> bool:
        """Place waist, feet, shoulders, elbows and hands. Returns True if any missed."""
        body, limbs = self.body_detector, self.limb_detector
        missed = False

        def accept(index: int, detection: Detection) -> Pixel:
            nonlocal missed
            if detection.found and silhouette.in_bounds(detection.pixel):
                nodes[index] = detection.pixel
            else:
                nodes[index] = MISSING
                missed = True
            return nodes[index]

        waist_det = body.find_waist(silhouette, torso.pixel, torso.seed)
        waist = accept(2, waist_det)
        halfway_node, halfway_dist = halfway_torso(torso.pixel, waist)

        accept(3, body.find_foot(silhouette, waist, self.config['LEFT_FOOT_CORNER'], waist_det.seed))
        accept(4, body.find_foot(silhouette, waist, self.config['RIGHT_FOOT_CORNER'], waist_det.seed))

        left_sh, right_sh, arm_width = body.find_shoulders(silhouette, torso.pixel, torso.seed)
        left_shoulder = accept(5, left_sh)
        right_shoulder = accept(6, right_sh)
        shoulder_seed = left_sh.seed

        left_elbow = accept(7, limbs.find_elbow(silhouette, torso.pixel, left_shoulder, arm_width,
                                                halfway_node, halfway_dist, shoulder_seed))
        accept(8, limbs.find_hand(silhouette, waist, left_elbow, arm_width, halfway_dist, shoulder_seed))

        right_elbow = accept(9, limbs.find_elbow(silhouette, torso.pixel, right_shoulder, arm_width,
                                                 halfway_node, halfway_dist, shoulder_seed))
        accept(10, limbs.find_hand(silhouette, waist, right_elbow, arm_width, halfway_dist, shoulder_seed))

        return missed

    def _fail(self, nodes: list, stage: FitState, silhouette: SilhouetteIndex) -> SkeletonFit:
        self._failure_flag = True
        return SkeletonFit(Skeleton(*nodes), FitState.FAILED, stage, True, silhouette)
