import os
import sys
import tempfile

# Ensure project root is in path
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, PROJECT_ROOT)

# Point storage at a throwaway database before the app is imported
TEST_DB_DIR = tempfile.mkdtemp(prefix="liver-tests-")
os.environ["DUCKDB_PATH"] = os.path.join(TEST_DB_DIR, "test.duckdb")
os.environ["MODEL_DATA_PATH"] = os.path.join(PROJECT_ROOT, "data", "model_data.json")
os.environ["AUTO_SEED_MODEL_DATA"] = "0"

import pytest
from fastapi.testclient import TestClient
from app.main import app
from app.models import PatientLabRecord

HEALTHY_PAYLOAD = {
    "age": 30,
    "albumin": 5.0,
    "alkalinePhosphatase": 40,
    "alamiNotransaminase": 15,
    "aspartateAminotransaminase": 18,
    "bilirubin": 0.4,
    "cholesterol": 150,
    "albuminGlobulinRatio": 1.8,
    "plateletsCount": 300,
    "prothrombinTime": 11,
}

HIGH_RISK_PAYLOAD = {
    "age": 65,
    "albumin": 2.8,
    "alkalinePhosphatase": 180,
    "alamiNotransaminase": 150,
    "aspartateAminotransaminase": 160,
    "bilirubin": 2.5,
    "cholesterol": 280,
    "albuminGlobulinRatio": 0.9,
    "plateletsCount": 120,
    "prothrombinTime": 15,
}

# Typical adult panel; sits just below the decision threshold
REFERENCE_PAYLOAD = {
    "age": 45,
    "albumin": 4.0,
    "alkalinePhosphatase": 70,
    "alamiNotransaminase": 30,
    "aspartateAminotransaminase": 35,
    "bilirubin": 0.8,
    "cholesterol": 180,
    "albuminGlobulinRatio": 1.3,
    "plateletsCount": 280,
    "prothrombinTime": 11,
}

@pytest.fixture
def client():
    """
    Test client for the FastAPI app. Each client carries its own session cookie.
    """
    return TestClient(app)

@pytest.fixture
def healthy_payload() -> dict:
    return dict(HEALTHY_PAYLOAD)

@pytest.fixture
def high_risk_payload() -> dict:
    return dict(HIGH_RISK_PAYLOAD)

@pytest.fixture
def healthy_record() -> PatientLabRecord:
    return PatientLabRecord(**HEALTHY_PAYLOAD)

@pytest.fixture
def high_risk_record() -> PatientLabRecord:
    return PatientLabRecord(**HIGH_RISK_PAYLOAD)

@pytest.fixture
def reference_record() -> PatientLabRecord:
    return PatientLabRecord(**REFERENCE_PAYLOAD)

@pytest.fixture
def midpoint_record() -> PatientLabRecord:
    """Every field at the middle of its accepted range."""
    return PatientLabRecord(
        age=75.5,
        albumin=5,
        alkaline_phosphatase=250,
        alamine_aminotransferase=250,
        aspartate_aminotransferase=250,
        bilirubin=10,
        cholesterol=200,
        albumin_globulin_ratio=2.5,
        platelets_count=500,
        prothrombin_time=25,
    )
