"""
Classification Module

Scores a skeleton by how many landmarks fall inside their trained boxes.
"""

from typing import List, Sequence
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))
from config import PipelineConfig
from .models import LANDMARK_NAMES, Skeleton
from .range_model import RangeModel


PEDESTRIAN = 'Pedestrian'
SOMETHING = 'Something'
NOISE = 'Noise'
VERDICTS = (PEDESTRIAN, SOMETHING, NOISE)


class PedestrianClassifier:
    """Maps a fitted skeleton to Pedestrian, Something or Noise."""

    def __init__(self, range_model: RangeModel = None, config: dict = None):
        """
        Initialize classifier.

        Args:
            range_model: Trained boxes, an untrained model if None
            config: Optional config dict, uses PipelineConfig.CLASSIFIER if None
        """
        self.range_model = range_model or RangeModel.untrained()
        self.config = config or PipelineConfig.CLASSIFIER
        self.pedestrian_score = self.config['PEDESTRIAN_SCORE']
        self.something_score = self.config['SOMETHING_SCORE']

    def score(self, skeleton: Skeleton) -> int:
        """Number of landmarks inside their box."""
        return sum(1 for i in range(len(LANDMARK_NAMES))
                   if self.range_model.contains(skeleton[i], i))

    def classify(self, skeleton: Skeleton) -> str:
        feature_score = self.score(skeleton)

        if feature_score >= self.pedestrian_score:
            return PEDESTRIAN
        if feature_score >= self.something_score:
            return SOMETHING
        return NOISE

    def classify_all(self, skeletons: Sequence[Skeleton]) -> List[str]:
        return [self.classify(s) for s in skeletons]
