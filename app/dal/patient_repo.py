import logging
from typing import List, Optional

from app.dal.database import db_manager
from app.liver_data import FEATURE_NAMES
from app.models import PatientLabRecord, PatientSummary, PredictionRecord, PredictionResult

logger = logging.getLogger(__name__)

_PATIENT_COLUMNS = ", ".join(["session_id", "name", "gender"] + FEATURE_NAMES)
_PATIENT_PLACEHOLDERS = ", ".join(["?"] * (3 + len(FEATURE_NAMES)))


class PatientRepository:
    """Patients and their predictions, scoped by browser session."""

    def __init__(self, db=db_manager):
        self.db = db

    def create_patient(self, session_id: str, name: str, gender: str, record: PatientLabRecord) -> int:
        values = [session_id, name, gender] + [getattr(record, f) for f in FEATURE_NAMES]
        with self.db.get_connection() as con:
            row = con.execute(f"""
                INSERT INTO patients (id, {_PATIENT_COLUMNS})
                VALUES (nextval('seq_patient_id'), {_PATIENT_PLACEHOLDERS})
                RETURNING id
            """, values).fetchone()
        return int(row[0])

    def get_patient(self, patient_id: int, session_id: str) -> Optional[PatientSummary]:
        with self.db.get_connection() as con:
            row = con.execute("""
                SELECT id, name, age, gender, created_at FROM patients
                WHERE id = ? AND session_id = ?
            """, [patient_id, session_id]).fetchone()
        if not row:
            return None
        return PatientSummary(id=row[0], name=row[1], age=row[2], gender=row[3], created_at=row[4])

    def list_patients(self, session_id: str) -> List[PatientSummary]:
        with self.db.get_connection() as con:
            rows = con.execute("""
                SELECT id, name, age, gender, created_at FROM patients
                WHERE session_id = ?
                ORDER BY created_at DESC, id DESC
            """, [session_id]).fetchall()
        return [PatientSummary(id=r[0], name=r[1], age=r[2], gender=r[3], created_at=r[4]) for r in rows]

    def add_prediction(self, patient_id: int, session_id: str, result: PredictionResult) -> int:
        with self.db.get_connection() as con:
            row = con.execute("""
                INSERT INTO predictions (id, patient_id, session_id, prediction, confidence, risk_score, notes)
                VALUES (nextval('seq_prediction_id'), ?, ?, ?, ?, ?, ?)
                RETURNING id
            """, [
                patient_id,
                session_id,
                result.prediction,
                result.confidence,
                result.risk_score,
                f"Risk Level: {result.risk_level}",
            ]).fetchone()
        return int(row[0])

    def list_predictions(self, session_id: str, patient_id: Optional[int] = None) -> List[PredictionRecord]:
        query = """
            SELECT id, patient_id, prediction, confidence, risk_score, notes, created_at
            FROM predictions WHERE session_id = ?
        """
        params = [session_id]
        if patient_id is not None:
            query += " AND patient_id = ?"
            params.append(patient_id)
        query += " ORDER BY created_at DESC, id DESC"

        with self.db.get_connection() as con:
            rows = con.execute(query, params).fetchall()
        return [
            PredictionRecord(
                id=r[0], patient_id=r[1], prediction=r[2], confidence=r[3],
                risk_score=r[4], notes=r[5], created_at=r[6]
            )
            for r in rows
        ]

    def clear_session(self, session_id: str) -> int:
        """Deletes every patient and prediction of a session. Returns the patient count removed."""
        with self.db.get_connection() as con:
            count = con.execute("SELECT COUNT(*) FROM patients WHERE session_id = ?", [session_id]).fetchone()[0]
            con.execute("DELETE FROM predictions WHERE session_id = ?", [session_id])
            con.execute("DELETE FROM patients WHERE session_id = ?", [session_id])
        logger.info(f"Cleared {count} patient(s) for session {session_id}")
        return int(count)

patient_repo = PatientRepository()
