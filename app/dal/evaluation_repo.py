import json
import logging
from typing import Any, Dict, Optional

from app.dal.database import db_manager

logger = logging.getLogger(__name__)


class EvaluationRepository:
    """Stored model evaluation snapshots. Curves and matrices are kept as JSON text."""

    def __init__(self, db=db_manager):
        self.db = db

    def insert_evaluation(self, evaluation: Dict[str, Any]) -> int:
        with self.db.get_connection() as con:
            row = con.execute("""
                INSERT INTO model_evaluations (
                    id, model_type, dataset_name, accuracy, precision_score, recall_score,
                    f1_score, roc_auc, confusion_matrix_json, roc_curve_json, pr_curve_json,
                    feature_importance_json, metadata_json
                )
                VALUES (nextval('seq_evaluation_id'), ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                RETURNING id
            """, [
                evaluation["model_type"],
                evaluation["dataset_name"],
                evaluation["accuracy"],
                evaluation["precision"],
                evaluation["recall"],
                evaluation["f1_score"],
                evaluation["roc_auc"],
                json.dumps(evaluation["confusion_matrix"]),
                json.dumps(evaluation["roc_curve"]),
                json.dumps(evaluation["precision_recall_curve"]),
                json.dumps(evaluation["feature_importance"]),
                json.dumps(evaluation["metadata"]),
            ]).fetchone()
        logger.info(f"Stored model evaluation {row[0]} ({evaluation['model_type']})")
        return int(row[0])

    def count(self) -> int:
        with self.db.get_connection() as con:
            return int(con.execute("SELECT COUNT(*) FROM model_evaluations").fetchone()[0])

    def get_latest(self) -> Optional[Dict[str, Any]]:
        with self.db.get_connection() as con:
            row = con.execute("""
                SELECT id, model_type, dataset_name, accuracy, precision_score, recall_score,
                       f1_score, roc_auc, confusion_matrix_json, roc_curve_json, pr_curve_json,
                       feature_importance_json, metadata_json, created_at
                FROM model_evaluations
                ORDER BY created_at DESC, id DESC
                LIMIT 1
            """).fetchone()
        if not row:
            return None
        return {
            "id": row[0],
            "model_type": row[1],
            "dataset_name": row[2],
            "accuracy": row[3],
            "precision": row[4],
            "recall": row[5],
            "f1_score": row[6],
            "roc_auc": row[7],
            "confusion_matrix": json.loads(row[8]),
            "roc_curve": json.loads(row[9]),
            "precision_recall_curve": json.loads(row[10]),
            "feature_importance": json.loads(row[11]),
            "metadata": json.loads(row[12]),
            "created_at": row[13],
        }

evaluation_repo = EvaluationRepository()
