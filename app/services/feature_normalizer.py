import logging
from typing import Dict

from app.liver_data import FEATURE_NAMES, REFERENCE_CEILINGS
from app.models import PatientLabRecord

logger = logging.getLogger(__name__)


class FeatureNormalizer:
    """
    Scales each raw lab value against its clinical reference ceiling.

    Values above the ceiling clamp to 1.0. There is no floor clamp: the input
    is expected to have passed validation, so values are non-negative.
    """

    def __init__(self, ceilings: Dict[str, float] = REFERENCE_CEILINGS):
        self.ceilings = ceilings

    def normalize(self, record: PatientLabRecord) -> Dict[str, float]:
        return {
            name: min(getattr(record, name) / self.ceilings[name], 1.0)
            for name in FEATURE_NAMES
        }

# Global singleton instance
feature_normalizer = FeatureNormalizer()
