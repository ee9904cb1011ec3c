import math
import logging

from app.config import (
    DECISION_THRESHOLD,
    CONFIDENCE_FLOOR,
    CONFIDENCE_SLOPE,
    CONFIDENCE_CEILING,
    RISK_LEVELS,
    RESULT_DECIMALS,
)
from app.models import PredictionResult

logger = logging.getLogger(__name__)


def round_half_up(value: float, decimals: int = RESULT_DECIMALS) -> float:
    """Rounds like the dashboard front end: Math.round(value * 100) / 100."""
    factor = 10 ** decimals
    return math.floor(value * factor + 0.5) / factor


class DecisionPolicy:
    """Turns a risk score into a prediction, a confidence figure and a risk tier."""

    def __init__(self, threshold: float = DECISION_THRESHOLD):
        self.threshold = threshold

    def classify(self, risk_score: float) -> str:
        return "positive" if risk_score >= self.threshold else "negative"

    def confidence(self, risk_score: float) -> float:
        """
        Fixed-floor heuristic: 0.95 plus 5% of the distance from the threshold,
        capped at 0.99. Not a posterior probability.
        """
        distance = abs(risk_score - self.threshold)
        return min(CONFIDENCE_FLOOR + distance * CONFIDENCE_SLOPE, CONFIDENCE_CEILING)

    def risk_level(self, risk_score: float) -> str:
        for level in RISK_LEVELS:
            if risk_score >= level["min"]:
                return level["label"]
        # Scores below every cutoff fall into the lowest tier
        return RISK_LEVELS[-1]["label"]

    def decide(self, risk_score: float) -> PredictionResult:
        # Tier and decision use the unrounded score; rounding is for display only
        return PredictionResult(
            prediction=self.classify(risk_score),
            confidence=round_half_up(self.confidence(risk_score)),
            risk_score=round_half_up(risk_score),
            risk_level=self.risk_level(risk_score),
        )

# Global singleton instance
decision_policy = DecisionPolicy()
