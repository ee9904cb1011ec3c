import duckdb
import os
import logging
from contextlib import contextmanager

from app.config import DUCKDB_PATH

logger = logging.getLogger(__name__)

class DuckDBManager:
    def __init__(self, db_path: str = DUCKDB_PATH):
        self.db_path = db_path
        directory = os.path.dirname(db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        # Initialize or migrate schema
        self._init_schema()

    def _init_schema(self):
        """Initializes the database schema. Ids come from sequences, never from the app."""
        try:
            with self.get_connection() as con:
                con.execute("""
                    CREATE SEQUENCE IF NOT EXISTS seq_patient_id START 1;
                    CREATE SEQUENCE IF NOT EXISTS seq_prediction_id START 1;
                    CREATE SEQUENCE IF NOT EXISTS seq_evaluation_id START 1;

                    CREATE TABLE IF NOT EXISTS patients (
                        id INTEGER PRIMARY KEY,
                        session_id VARCHAR NOT NULL,
                        name VARCHAR NOT NULL,
                        age DOUBLE NOT NULL,
                        gender VARCHAR NOT NULL,
                        albumin DOUBLE NOT NULL,
                        alkaline_phosphatase DOUBLE NOT NULL,
                        alamine_aminotransferase DOUBLE NOT NULL,
                        aspartate_aminotransferase DOUBLE NOT NULL,
                        bilirubin DOUBLE NOT NULL,
                        cholesterol DOUBLE NOT NULL,
                        albumin_globulin_ratio DOUBLE NOT NULL,
                        platelets_count DOUBLE NOT NULL,
                        prothrombin_time DOUBLE NOT NULL,
                        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                    );

                    CREATE TABLE IF NOT EXISTS predictions (
                        id INTEGER PRIMARY KEY,
                        patient_id INTEGER NOT NULL,
                        session_id VARCHAR NOT NULL,
                        prediction VARCHAR NOT NULL,
                        confidence DOUBLE NOT NULL,
                        risk_score DOUBLE NOT NULL,
                        notes VARCHAR,
                        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                    );

                    CREATE TABLE IF NOT EXISTS model_evaluations (
                        id INTEGER PRIMARY KEY,
                        model_type VARCHAR NOT NULL,
                        dataset_name VARCHAR NOT NULL,
                        accuracy DOUBLE NOT NULL,
                        precision_score DOUBLE NOT NULL,
                        recall_score DOUBLE NOT NULL,
                        f1_score DOUBLE NOT NULL,
                        roc_auc DOUBLE NOT NULL DEFAULT 0,
                        confusion_matrix_json VARCHAR NOT NULL,
                        roc_curve_json VARCHAR NOT NULL,
                        pr_curve_json VARCHAR NOT NULL,
                        feature_importance_json VARCHAR NOT NULL,
                        metadata_json VARCHAR NOT NULL,
                        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                    );
                """)
                logger.info(f"Database schema initialized at {self.db_path}.")
        except Exception as e:
            logger.error(f"Failed to init schema: {e}")

    @contextmanager
    def get_connection(self):
        """Yields a DuckDB connection."""
        # One connection per operation keeps the file unlocked between requests
        con = duckdb.connect(self.db_path)
        try:
            yield con
        finally:
            con.close()

    def is_available(self) -> bool:
        try:
            with self.get_connection() as con:
                con.execute("SELECT 1").fetchone()
            return True
        except Exception as e:
            logger.warning(f"Database unavailable: {e}")
            return False

db_manager = DuckDBManager()
