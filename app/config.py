"""
Configuration settings for the Liver Risk Dashboard application.
Contains scoring parameters, clinical thresholds, and system constants.
"""
import os
from dotenv import load_dotenv

load_dotenv()


# --- Decision Policy Parameters ---

# Risk scores at or above this value are classified as "positive".
DECISION_THRESHOLD = 0.5

# Confidence is a fixed floor plus a small bonus for the distance between the
# risk score and the decision threshold. It is NOT a calibrated probability:
# consumers of the dashboard rely on it never dropping below the floor.
CONFIDENCE_FLOOR = 0.95
CONFIDENCE_SLOPE = 0.05
CONFIDENCE_CEILING = 0.99

# Risk tiers, checked top-down against the unrounded risk score.
RISK_LEVELS = [
    {"min": 0.66, "label": "high"},
    {"min": 0.33, "label": "medium"},
    {"min": 0.00, "label": "low"},
]

# Returned riskScore / confidence are rounded to this many decimal places.
RESULT_DECIMALS = 2


# --- Model Evaluation ---

MODEL_TYPE = "XGBoost"
DATASET_NAME = "Liver Patient Dataset (LPD)"

# Only every Nth point of the precision/recall curve is stored.
PR_CURVE_SAMPLE_STEP = 10


# --- Storage ---

DUCKDB_PATH = os.getenv("DUCKDB_PATH", "data/liver.duckdb")
MODEL_DATA_PATH = os.getenv("MODEL_DATA_PATH", "data/model_data.json")

# Seed the evaluation table from MODEL_DATA_PATH on startup when it is empty.
AUTO_SEED_MODEL_DATA = os.getenv("AUTO_SEED_MODEL_DATA", "1").lower() in ("1", "true", "yes")
