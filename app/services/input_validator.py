import math
import logging
from typing import List

from app.liver_data import LAB_FEATURES
from app.models import PatientLabRecord, ValidationResult

logger = logging.getLogger(__name__)


class InputValidator:
    """
    Range-checks a raw lab record before it is scored.

    Every field is checked independently against its inclusive range and all
    violations are reported together, in feature table order. Non-finite
    values are always violations.
    """

    def validate(self, record: PatientLabRecord) -> ValidationResult:
        errors: List[str] = []
        for name, feature in LAB_FEATURES.items():
            value = getattr(record, name)
            low, high = feature["range"]
            if not math.isfinite(value) or value < low or value > high:
                errors.append(self.format_error(feature))

        if errors:
            logger.debug(f"Validation rejected record with {len(errors)} error(s)")
        return ValidationResult(valid=not errors, errors=errors)

    @staticmethod
    def format_error(feature: dict) -> str:
        low, high = feature["range"]
        unit = f" {feature['unit']}" if feature["unit"] else ""
        return f"{feature['label']} ({feature['alias']}) must be between {low:g} and {high:g}{unit}"

# Global singleton instance
input_validator = InputValidator()
