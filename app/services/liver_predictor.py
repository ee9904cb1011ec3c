import logging

from app.exceptions import InvalidPatientDataError
from app.models import PatientLabRecord, PredictionResult, ValidationResult
from app.services.input_validator import input_validator
from app.services.feature_normalizer import feature_normalizer
from app.services.risk_scorer import abnormality_scorer
from app.services.decision_policy import decision_policy

logger = logging.getLogger(__name__)


class LiverDiseasePredictor:
    """
    Weighted-rule approximation of the liver disease classifier.

    Pipeline: validate -> normalize -> score -> decide. The predictor holds no
    mutable state and performs no I/O, so a single instance can serve
    concurrent requests.

    ``score`` assumes the record already passed ``validate``; use ``predict``
    to get both steps with invalid records rejected.
    """

    def __init__(self, validator=input_validator, normalizer=feature_normalizer,
                 scorer=abnormality_scorer, policy=decision_policy):
        self.validator = validator
        self.normalizer = normalizer
        self.scorer = scorer
        self.policy = policy

    def validate(self, record: PatientLabRecord) -> ValidationResult:
        return self.validator.validate(record)

    def risk_score(self, record: PatientLabRecord) -> float:
        """Unrounded risk score in [0, 1]."""
        return self.scorer.score(self.normalizer.normalize(record))

    def score(self, record: PatientLabRecord) -> PredictionResult:
        return self.policy.decide(self.risk_score(record))

    def predict(self, record: PatientLabRecord) -> PredictionResult:
        validation = self.validate(record)
        if not validation.valid:
            raise InvalidPatientDataError(validation.errors)
        result = self.score(record)
        logger.info(f"Prediction: {result.prediction} (score {result.risk_score}, {result.risk_level} risk)")
        return result

# Global singleton instance
liver_predictor = LiverDiseasePredictor()
