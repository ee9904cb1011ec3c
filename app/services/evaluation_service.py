import json
import os
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import numpy as np

from app.config import MODEL_TYPE, DATASET_NAME, PR_CURVE_SAMPLE_STEP, MODEL_DATA_PATH
from app.dal.evaluation_repo import evaluation_repo
from app.exceptions import ModelDataError
from app.models import ModelEvaluationResponse

logger = logging.getLogger(__name__)


class EvaluationService:
    """
    Builds, stores and serves the model evaluation snapshot shown on the dashboard.

    The snapshot comes from an exported JSON file (metrics, ROC and PR curves,
    confusion matrix, feature importance). Missing summary metrics are derived
    from the confusion matrix, and a missing ROC AUC from the curve itself.
    """

    def __init__(self, repo=evaluation_repo):
        self.repo = repo

    def metrics_from_confusion_matrix(self, tn: int, fp: int, fn: int, tp: int) -> Dict[str, float]:
        total = tn + fp + fn + tp
        precision = tp / (tp + fp) if (tp + fp) else 0.0
        recall = tp / (tp + fn) if (tp + fn) else 0.0
        f1 = 2 * precision * recall / (precision + recall) if (precision + recall) else 0.0
        return {
            "accuracy": (tp + tn) / total if total else 0.0,
            "precision": precision,
            "recall": recall,
            "f1_score": f1,
        }

    def curve_auc(self, points: List[Dict[str, float]], x_key: str = "fpr", y_key: str = "tpr") -> float:
        """Area under a curve by the trapezoidal rule, after sorting on x."""
        if len(points) < 2:
            return 0.0
        x = np.array([p[x_key] for p in points], dtype=float)
        y = np.array([p[y_key] for p in points], dtype=float)
        order = np.argsort(x, kind="stable")
        return float(np.trapezoid(y[order], x[order]))

    def sample_points(self, points: List[Any], step: int = PR_CURVE_SAMPLE_STEP) -> List[Any]:
        return points[::step]

    def build_evaluation(self, model_data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            cm = model_data["confusion_matrix"]
            confusion = {
                "tn": int(cm["true_negative"]),
                "fp": int(cm["false_positive"]),
                "fn": int(cm["false_negative"]),
                "tp": int(cm["true_positive"]),
            }
        except (KeyError, TypeError, ValueError) as e:
            raise ModelDataError(f"Confusion matrix missing or malformed: {e}", source="confusion_matrix")

        derived = self.metrics_from_confusion_matrix(**confusion)
        reported = {k: v for k, v in (model_data.get("metrics") or {}).items() if v is not None}
        metrics = {**derived, **reported}

        roc = model_data.get("roc_curve") or {}
        roc_points = roc.get("points") or []
        roc_auc = roc.get("auc")
        if roc_auc is None:
            roc_auc = self.curve_auc(roc_points)

        pr_points = (model_data.get("precision_recall_curve") or {}).get("points") or []

        return {
            "model_type": model_data.get("model_type", MODEL_TYPE),
            "dataset_name": model_data.get("dataset_name", DATASET_NAME),
            "accuracy": float(metrics["accuracy"]),
            "precision": float(metrics["precision"]),
            "recall": float(metrics["recall"]),
            "f1_score": float(metrics["f1_score"]),
            "roc_auc": float(roc_auc),
            "confusion_matrix": confusion,
            "roc_curve": roc_points,
            "precision_recall_curve": self.sample_points(pr_points),
            "feature_importance": [
                {"name": str(f["feature"]).strip(), "importance": float(f["importance"])}
                for f in model_data.get("feature_importance") or []
            ],
            "metadata": {
                "testSetSize": sum(confusion.values()),
                "trainingDate": datetime.now(timezone.utc).isoformat(),
            },
        }

    def load_model_data(self, path: str = MODEL_DATA_PATH) -> Dict[str, Any]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ModelDataError(f"Cannot read model data: {e}", source=path)

    def seed_from_file(self, path: str = MODEL_DATA_PATH) -> int:
        evaluation = self.build_evaluation(self.load_model_data(path))
        evaluation_id = self.repo.insert_evaluation(evaluation)
        logger.info(
            f"Model evaluation seeded from {path}: accuracy {evaluation['accuracy'] * 100:.2f}%, "
            f"ROC-AUC {evaluation['roc_auc'] * 100:.2f}%, "
            f"PR curve points (sampled) {len(evaluation['precision_recall_curve'])}"
        )
        return evaluation_id

    def ensure_seeded(self, path: str = MODEL_DATA_PATH) -> Optional[int]:
        """Seeds the store once. Returns the new evaluation id, or None if nothing was done."""
        if self.repo.count() > 0:
            return None
        if not os.path.exists(path):
            logger.warning(f"No evaluation stored and no model data at {path}; dashboard metrics will be empty")
            return None
        return self.seed_from_file(path)

    def get_latest(self) -> Optional[ModelEvaluationResponse]:
        evaluation = self.repo.get_latest()
        if evaluation is None:
            return None

        cm = evaluation["confusion_matrix"]
        return ModelEvaluationResponse(
            id=evaluation["id"],
            model_type=evaluation["model_type"],
            dataset_name=evaluation["dataset_name"],
            accuracy=evaluation["accuracy"],
            precision=evaluation["precision"],
            recall=evaluation["recall"],
            f1_score=evaluation["f1_score"],
            roc_auc=evaluation["roc_auc"],
            confusion_matrix_tn=cm.get("tn", 0),
            confusion_matrix_fp=cm.get("fp", 0),
            confusion_matrix_fn=cm.get("fn", 0),
            confusion_matrix_tp=cm.get("tp", 0),
            roc_curve=evaluation["roc_curve"],
            precision_recall_curve=evaluation["precision_recall_curve"],
            feature_importance=evaluation["feature_importance"],
            metadata=evaluation["metadata"],
            created_at=evaluation["created_at"],
        )

# Global singleton instance
evaluation_service = EvaluationService()
