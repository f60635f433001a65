"""
PeopleFinder Modules

This package contains the components of the geometric pedestrian classifier:
- silhouette: Fills and indexes a silhouette raster
- body_detection: Head, torso, waist, feet and shoulders
- limb_detection: Elbows and hands
- skeleton_fitting: Runs the finders in order and flags bad skeletons
- range_model: Per-landmark boxes learned from training skeletons
- classification: Pedestrian / Something / Noise verdicts
- contour_extraction: Blob to silhouette raster adapter
"""

from .models import Pixel, Skeleton, Detection, MISSING, LANDMARK_NAMES
from .silhouette import SilhouetteIndex
from .body_detection import BodyDetector
from .limb_detection import LimbDetector
from .skeleton_fitting import SkeletonFitter, SkeletonFit, FitState
from .range_model import RangeModel, RangeTrainer
from .classification import PedestrianClassifier, PEDESTRIAN, SOMETHING, NOISE
from .contour_extraction import ContourExtractor

__all__ = [
    'Pixel',
    'Skeleton',
    'Detection',
    'MISSING',
    'LANDMARK_NAMES',
    'SilhouetteIndex',
    'BodyDetector',
    'LimbDetector',
    'SkeletonFitter',
    'SkeletonFit',
    'FitState',
    'RangeModel',
    'RangeTrainer',
    'PedestrianClassifier',
    'PEDESTRIAN',
    'SOMETHING',
    'NOISE',
    'ContourExtractor'
]
