import logging
from typing import Dict

from app.liver_data import FEATURE_NAMES, FEATURE_WEIGHTS, LOW_ADVERSE_FEATURES

logger = logging.getLogger(__name__)


class AbnormalityScorer:
    """
    Combines a normalized feature vector into a single risk score.

    Each feature contributes ``weight * directional(value)`` where the
    directional value is the normalized value itself for features that are
    adverse when high (enzymes, bilirubin, cholesterol, prothrombin time)
    and ``1 - value`` for features that are adverse when low (albumin,
    A/G ratio, platelets).

    The weights sum to 1.0 and each term lies in [0, 1], so the score is a
    convex combination bounded to [0, 1]. Age has weight 0 and never moves it.
    """

    def __init__(self, weights: Dict[str, float] = FEATURE_WEIGHTS):
        self.weights = weights

    def directional(self, name: str, value: float) -> float:
        if name in LOW_ADVERSE_FEATURES:
            return 1.0 - value
        return value

    def contributions(self, normalized: Dict[str, float]) -> Dict[str, float]:
        """Per-feature weighted terms, in feature table order."""
        return {
            name: self.weights[name] * self.directional(name, normalized[name])
            for name in FEATURE_NAMES
        }

    def score(self, normalized: Dict[str, float]) -> float:
        score = 0.0
        for term in self.contributions(normalized).values():
            score += term
        return score

# Global singleton instance
abnormality_scorer = AbnormalityScorer()
