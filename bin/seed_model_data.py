import os
import sys
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Allow running as `python bin/seed_model_data.py` from the project root
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.config import MODEL_DATA_PATH, DUCKDB_PATH
from app.exceptions import ModelDataError
from app.services.evaluation_service import evaluation_service


def seed(path: str = MODEL_DATA_PATH):
    print(f"Seeding model evaluation from {path} into {DUCKDB_PATH}")
    try:
        evaluation_id = evaluation_service.seed_from_file(path)
    except ModelDataError as e:
        print(f"ERROR: {e.message}")
        sys.exit(1)

    latest = evaluation_service.get_latest()
    print(f"Model evaluation {evaluation_id} seeded successfully!")
    print(f"  - Accuracy: {latest.accuracy * 100:.2f}%")
    print(f"  - ROC-AUC: {latest.roc_auc * 100:.2f}%")
    print(f"  - PR Curve points (sampled): {len(latest.precision_recall_curve)}")

if __name__ == "__main__":
    seed(sys.argv[1] if len(sys.argv) > 1 else MODEL_DATA_PATH)
