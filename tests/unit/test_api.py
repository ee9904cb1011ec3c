from unittest.mock import patch
from fastapi.testclient import TestClient

from app.main import app
from app.services.evaluation_service import evaluation_service

CSV_HEADER = "name,gender,age,albumin,alkaline phosphatase,alt,ast,bilirubin,cholesterol,a/g ratio,platelets,prothrombin time"
CSV_ROWS = [
    "Ana,female,30,5.0,40,15,18,0.4,150,1.8,300,11",
    "Budi,male,65,2.8,180,150,160,2.5,280,0.9,120,15",
    "Citra,female,50,abc,70,30,35,0.8,180,1.3,280,11",
]

def _patient(payload, name="Budi", gender="male"):
    return {"name": name, "gender": gender, **payload}

def test_health_check(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "OK"
    assert data["database_available"] is True

def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["name"] == "Liver Risk Dashboard"

def test_validate_endpoint(client, healthy_payload):
    response = client.post("/api/predictions/validate", json=healthy_payload)
    assert response.json() == {"valid": True, "errors": []}

    response = client.post("/api/predictions/validate", json={**healthy_payload, "albumin": -1, "age": 200})
    assert response.status_code == 200
    data = response.json()
    assert data["valid"] is False
    assert len(data["errors"]) == 2

def test_quick_prediction(client, high_risk_payload):
    response = client.post("/api/predictions/quick", json=high_risk_payload)
    assert response.status_code == 200
    assert response.json() == {
        "prediction": "positive",
        "confidence": 0.97,
        "riskScore": 0.85,
        "riskLevel": "high",
    }

def test_quick_prediction_rejects_out_of_range(client, healthy_payload):
    response = client.post("/api/predictions/quick", json={**healthy_payload, "albumin": -1, "bilirubin": 25})
    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["error"] == "VALIDATION_ERROR"
    assert detail["details"]["errors"] == [
        "Albumin (albumin) must be between 0 and 10 g/dL",
        "Bilirubin (bilirubin) must be between 0 and 20 mg/dL",
    ]

def test_missing_field_is_rejected_by_schema(client, healthy_payload):
    payload = {k: v for k, v in healthy_payload.items() if k != "prothrombinTime"}
    response = client.post("/api/predictions/quick", json=payload)
    assert response.status_code == 422

def test_create_prediction_persists_patient(client, high_risk_payload):
    response = client.post("/api/predictions", json=_patient(high_risk_payload))
    assert response.status_code == 200
    data = response.json()
    assert data["prediction"] == "positive"
    assert data["riskLevel"] == "high"
    assert data["patient"]["name"] == "Budi"
    assert data["patient"]["alamiNotransaminase"] == 150
    patient_id = data["patientId"]
    assert patient_id is not None

    patients = client.get("/api/patients").json()
    assert [p["id"] for p in patients] == [patient_id]

    predictions = client.get(f"/api/patients/{patient_id}/predictions").json()
    assert len(predictions) == 1
    assert predictions[0]["riskScore"] == 0.85
    assert predictions[0]["notes"] == "Risk Level: high"

    # Another browser session cannot see this patient
    other = TestClient(app)
    assert other.get("/api/patients").json() == []
    assert other.get(f"/api/patients/{patient_id}/predictions").status_code == 404

def test_create_prediction_rejects_bad_gender(client, high_risk_payload):
    response = client.post("/api/predictions", json=_patient(high_risk_payload, gender="other"))
    assert response.status_code == 422

def test_prediction_survives_storage_failure(client, healthy_payload):
    with patch("app.routers.predictions.patient_repo.create_patient", side_effect=RuntimeError("disk full")):
        response = client.post("/api/predictions", json=_patient(healthy_payload, name="Ana", gender="female"))
    assert response.status_code == 200
    data = response.json()
    assert data["patientId"] is None
    assert data["prediction"] == "negative"
    assert data["riskLevel"] == "low"

def test_batch_prediction(client):
    response = client.post("/api/predictions/batch", json={"csvData": "\n".join([CSV_HEADER] + CSV_ROWS)})
    assert response.status_code == 200
    data = response.json()
    assert data["totalRows"] == 3
    assert data["successCount"] == 2
    assert data["errorCount"] == 1
    assert [r["name"] for r in data["results"]] == ["Ana", "Budi"]
    assert all(r["patientId"] is not None for r in data["results"])
    assert data["errors"][0]["row"] == 3
    assert data["errors"][0]["name"] == "Citra"

    assert len(client.get("/api/patients").json()) == 2
    assert len(client.get("/api/predictions").json()) == 2

def test_batch_missing_columns(client):
    csv_text = "name,age,albumin\nAna,30,5.0"
    response = client.post("/api/predictions/batch", json={"csvData": csv_text})
    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["error"] == "BATCH_FORMAT_ERROR"
    assert "cholesterol" in detail["details"]["missing_columns"]
    assert client.get("/api/patients").json() == []

def test_batch_upload(client):
    content = ("\ufeff" + "\n".join([CSV_HEADER] + CSV_ROWS[:2])).encode("utf-8")
    files = {"file": ("panel.csv", content, "text/csv")}
    response = client.post("/api/predictions/batch/upload", files=files)
    assert response.status_code == 200
    data = response.json()
    assert data["successCount"] == 2
    assert data["results"][1]["riskLevel"] == "high"

def test_batch_upload_rejects_binary(client):
    files = {"file": ("panel.csv", b"\xff\xfe\x00\x81", "text/csv")}
    response = client.post("/api/predictions/batch/upload", files=files)
    assert response.status_code == 400

def test_clear_session(client, healthy_payload, high_risk_payload):
    client.post("/api/predictions", json=_patient(high_risk_payload))
    client.post("/api/predictions", json=_patient(healthy_payload, name="Ana", gender="female"))

    response = client.delete("/api/patients")
    assert response.status_code == 200
    assert response.json()["removed"] == 2
    assert client.get("/api/patients").json() == []
    assert client.get("/api/predictions").json() == []

def test_model_evaluation_latest(client):
    evaluation_service.seed_from_file()
    response = client.get("/api/model-evaluation/latest")
    assert response.status_code == 200
    data = response.json()
    assert data["modelType"] == "XGBoost"
    assert data["confusionMatrixTp"] == 4258
    assert data["metadata"]["testSetSize"] == 6000
    assert len(data["precisionRecallCurve"]) == 4

def test_model_evaluation_empty(client):
    with patch("app.routers.api.evaluation_service.get_latest", return_value=None):
        response = client.get("/api/model-evaluation/latest")
    assert response.status_code == 200
    assert response.json() is None

def test_batch_row_with_surplus_fields(client):
    csv_text = "\n".join([CSV_HEADER, CSV_ROWS[0] + ",999"])
    response = client.post("/api/predictions/batch", json={"csvData": csv_text})
    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "BATCH_FORMAT_ERROR"
    assert client.get("/api/patients").json() == []
