"""
Exception hierarchy for the scoring engine and the batch adapter.

Routers translate these into HTTP 400 responses via ``to_dict()``.
"""
from typing import Any, Dict, List, Optional


class LiverScreeningError(Exception):
    """Base exception for all liver screening errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class InvalidPatientDataError(LiverScreeningError):
    """A lab record failed range validation. Carries every violation."""

    def __init__(self, errors: List[str]):
        super().__init__(
            message=f"Invalid patient data: {', '.join(errors)}",
            code="VALIDATION_ERROR",
            details={"errors": list(errors)}
        )
        self.errors = list(errors)


class BatchFormatError(LiverScreeningError):
    """The batch input cannot be processed at all."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="BATCH_FORMAT_ERROR",
            details=details
        )


class ModelDataError(LiverScreeningError):
    """The model evaluation file is missing fields or cannot be read."""

    def __init__(
        self,
        message: str,
        source: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="MODEL_DATA_ERROR",
            details={"source": source, **(details or {})}
        )
        self.source = source


class MissingColumnsError(BatchFormatError):
    """Required CSV columns could not be matched to any header."""

    def __init__(self, missing: List[str]):
        super().__init__(
            message=f"Missing required columns: {', '.join(missing)}",
            details={"missing_columns": list(missing)}
        )
        self.missing = list(missing)
