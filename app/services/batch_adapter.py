import io
import math
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from app.exceptions import BatchFormatError, MissingColumnsError
from app.liver_data import CSV_COLUMN_ALIASES, FEATURE_NAMES, LAB_FEATURES, REQUIRED_CSV_FIELDS
from app.models import (
    BatchPredictionResponse,
    BatchRowError,
    BatchRowResult,
    PatientLabRecord,
    PredictionResult,
)
from app.services.liver_predictor import liver_predictor

logger = logging.getLogger(__name__)


@dataclass
class ScoredRow:
    """A CSV row that passed parsing and validation."""
    row: int
    name: str
    gender: str
    record: PatientLabRecord
    result: PredictionResult

    def to_result(self, patient_id: Optional[int] = None) -> BatchRowResult:
        return BatchRowResult(
            row=self.row,
            name=self.name,
            gender=self.gender,
            patient_id=patient_id,
            **self.result.model_dump(),
        )


@dataclass
class BatchOutcome:
    total_rows: int
    scored: List[ScoredRow] = field(default_factory=list)
    errors: List[BatchRowError] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.scored)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def results(self) -> List[PredictionResult]:
        return [s.result for s in self.scored]

    def to_response(self, patient_ids: Optional[Dict[int, int]] = None) -> BatchPredictionResponse:
        """Builds the API payload. ``patient_ids`` maps row number -> stored patient id."""
        patient_ids = patient_ids or {}
        return BatchPredictionResponse(
            total_rows=self.total_rows,
            success_count=self.success_count,
            error_count=self.error_count,
            results=[s.to_result(patient_ids.get(s.row)) for s in self.scored],
            errors=self.errors,
        )


class BatchAdapter:
    """
    Scores a CSV upload row by row.

    Header names are matched case-insensitively against a static alias table.
    A missing required column, or a row with more fields than the header,
    fails the whole batch before any row is scored;
    a bad row only produces a row-level error entry.
    """

    def __init__(self, predictor=liver_predictor):
        self.predictor = predictor

    def read_frame(self, csv_text: str) -> pd.DataFrame:
        """Parses the CSV text; the first non-blank line is the header."""
        if not csv_text or not csv_text.strip():
            raise BatchFormatError("CSV must contain header and at least one data row")

        surplus: List[List[str]] = []

        def keep_surplus(fields: List[str]) -> None:
            surplus.append(fields)
            return None

        try:
            # header=None so the header line fixes the column count and longer rows reach on_bad_lines
            raw = pd.read_csv(
                io.StringIO(csv_text.strip()),
                header=None,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                engine="python",
                on_bad_lines=keep_surplus,
            )
        except pd.errors.EmptyDataError:
            raise BatchFormatError("CSV must contain header and at least one data row")
        except pd.errors.ParserError as e:
            raise BatchFormatError(f"Malformed CSV: {e}")

        if raw.empty:
            raise BatchFormatError("CSV must contain header and at least one data row")
        header = [str(c) for c in raw.iloc[0]]
        if surplus:
            raise BatchFormatError(
                f"{len(surplus)} row(s) have more fields than the header ({len(header)} columns)",
                details={"expected_fields": len(header), "row_field_counts": [len(f) for f in surplus]},
            )

        frame = raw.iloc[1:].reset_index(drop=True)
        frame.columns = header
        return frame

    def resolve_columns(self, columns: List[Any]) -> Dict[str, int]:
        """Maps each known field to the position of the first header column that names it."""
        headers = [str(c).strip().lower() for c in columns]
        mapping = {}
        for field_name, aliases in CSV_COLUMN_ALIASES.items():
            for position, header in enumerate(headers):
                if header in aliases:
                    mapping[field_name] = position
                    break
        return mapping

    def parse_number(self, field_name: str, raw: Any) -> float:
        label = LAB_FEATURES[field_name]["label"]
        if not isinstance(raw, str) or not raw.strip():
            raise ValueError(f"{label} is missing")
        text = raw.strip()
        try:
            value = float(pd.to_numeric(text, errors="raise"))
        except (ValueError, TypeError):
            raise ValueError(f"{label} is not a valid number: '{text}'")
        if not math.isfinite(value):
            raise ValueError(f"{label} is not a finite number: '{text}'")
        return value

    def score_batch(self, csv_text: str) -> BatchOutcome:
        frame = self.read_frame(csv_text)

        columns = self.resolve_columns(list(frame.columns))
        missing = [f for f in REQUIRED_CSV_FIELDS if f not in columns]
        if missing:
            raise MissingColumnsError([LAB_FEATURES[f]["alias"] for f in missing])

        if frame.empty:
            raise BatchFormatError("CSV must contain header and at least one data row")

        outcome = BatchOutcome(total_rows=len(frame))
        for row_number, values in enumerate(frame.itertuples(index=False, name=None), start=1):
            name = self._row_name(values, columns, row_number)
            gender = self._row_gender(values, columns)

            parsed: Dict[str, float] = {}
            parse_errors: List[str] = []
            for field_name in FEATURE_NAMES:
                try:
                    parsed[field_name] = self.parse_number(field_name, values[columns[field_name]])
                except ValueError as e:
                    parse_errors.append(str(e))
            if parse_errors:
                outcome.errors.append(BatchRowError(row=row_number, name=name, error=", ".join(parse_errors)))
                continue

            record = PatientLabRecord(**parsed)
            validation = self.predictor.validate(record)
            if not validation.valid:
                outcome.errors.append(BatchRowError(row=row_number, name=name, error=", ".join(validation.errors)))
                continue

            outcome.scored.append(ScoredRow(
                row=row_number,
                name=name,
                gender=gender,
                record=record,
                result=self.predictor.score(record),
            ))

        logger.info(f"Batch processed: {outcome.success_count}/{outcome.total_rows} rows scored, {outcome.error_count} errors")
        return outcome

    def _row_name(self, values: Tuple[Any, ...], columns: Dict[str, int], row_number: int) -> str:
        raw = values[columns["name"]] if "name" in columns else None
        if isinstance(raw, str) and raw.strip():
            return raw.strip()
        return f"Patient {row_number}"

    def _row_gender(self, values: Tuple[Any, ...], columns: Dict[str, int]) -> str:
        raw = values[columns["gender"]] if "gender" in columns else None
        if isinstance(raw, str) and "f" in raw.lower():
            return "female"
        return "male"

# Global singleton instance
batch_adapter = BatchAdapter()
