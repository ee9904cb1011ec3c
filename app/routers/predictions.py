import logging
from typing import List, Optional
from fastapi import APIRouter, UploadFile, File, HTTPException, Request

from app.exceptions import LiverScreeningError
from app.models import (
    BatchPredictionRequest,
    BatchPredictionResponse,
    PatientCreateRequest,
    PatientLabRecord,
    PatientPredictionResponse,
    PatientSummary,
    PredictionRecord,
    PredictionResult,
    ValidationResult,
)
from app.services.liver_predictor import liver_predictor
from app.services.batch_adapter import batch_adapter, BatchOutcome
from app.dal.patient_repo import patient_repo

router = APIRouter(prefix="/api", tags=["predictions"])

logger = logging.getLogger(__name__)

def get_session_id(request: Request) -> str:
    """Session id set by SessionMiddleware; falls back to the cookie."""
    session_id = getattr(request.state, "session_id", None) or request.cookies.get("session_id")
    if not session_id:
        raise HTTPException(status_code=400, detail="No session found - reload page")
    return session_id

def store_prediction(session_id: str, name: str, gender: str, record: PatientLabRecord, result: PredictionResult) -> Optional[int]:
    """Best-effort persistence. Returns the patient id, or None when the patient could not be stored."""
    try:
        patient_id = patient_repo.create_patient(session_id, name, gender, record)
    except Exception as e:
        logger.warning(f"[Prediction] Could not store patient '{name}', result is not persisted: {e}")
        return None

    try:
        patient_repo.add_prediction(patient_id, session_id, result)
    except Exception as e:
        logger.warning(f"[Prediction] Could not store prediction for patient {patient_id}: {e}")
    return patient_id

@router.post("/predictions/validate", response_model=ValidationResult)
async def validate_record(payload: PatientLabRecord):
    return liver_predictor.validate(payload)

@router.post("/predictions/quick", response_model=PredictionResult)
async def predict_quick(payload: PatientLabRecord):
    """Validate and score without saving anything."""
    try:
        return liver_predictor.predict(payload)
    except LiverScreeningError as e:
        raise HTTPException(status_code=400, detail=e.to_dict())

@router.post("/predictions", response_model=PatientPredictionResponse)
async def predict_for_patient(payload: PatientCreateRequest, request: Request):
    session_id = get_session_id(request)
    record = payload.lab_record()

    try:
        result = liver_predictor.predict(record)
    except LiverScreeningError as e:
        raise HTTPException(status_code=400, detail=e.to_dict())

    patient_id = store_prediction(session_id, payload.name, payload.gender, record, result)

    return PatientPredictionResponse(
        patient_id=patient_id,
        patient=payload,
        **result.model_dump(),
    )

def _store_batch(session_id: str, outcome: BatchOutcome) -> BatchPredictionResponse:
    patient_ids = {}
    for scored in outcome.scored:
        patient_id = store_prediction(session_id, scored.name, scored.gender, scored.record, scored.result)
        if patient_id is not None:
            patient_ids[scored.row] = patient_id
    return outcome.to_response(patient_ids)

@router.post("/predictions/batch", response_model=BatchPredictionResponse)
async def predict_from_csv(payload: BatchPredictionRequest, request: Request):
    session_id = get_session_id(request)
    try:
        outcome = batch_adapter.score_batch(payload.csv_data)
    except LiverScreeningError as e:
        raise HTTPException(status_code=400, detail=e.to_dict())
    return _store_batch(session_id, outcome)

@router.post("/predictions/batch/upload", response_model=BatchPredictionResponse)
async def predict_from_csv_file(request: Request, file: UploadFile = File(...)):
    session_id = get_session_id(request)
    content = await file.read()
    try:
        # utf-8-sig drops the BOM spreadsheet exports like to add
        csv_text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail=f"File {file.filename} is not UTF-8 text")

    try:
        outcome = batch_adapter.score_batch(csv_text)
    except LiverScreeningError as e:
        raise HTTPException(status_code=400, detail=e.to_dict())
    logger.info(f"CSV upload {file.filename}: {outcome.success_count} scored, {outcome.error_count} rejected")
    return _store_batch(session_id, outcome)

@router.get("/predictions", response_model=List[PredictionRecord])
async def get_all_predictions(request: Request):
    session_id = get_session_id(request)
    try:
        return patient_repo.list_predictions(session_id)
    except Exception as e:
        logger.error(f"Prediction list failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/patients", response_model=List[PatientSummary])
async def get_patients(request: Request):
    session_id = get_session_id(request)
    try:
        return patient_repo.list_patients(session_id)
    except Exception as e:
        logger.error(f"Patient list failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/patients/{patient_id}/predictions", response_model=List[PredictionRecord])
async def get_patient_predictions(patient_id: int, request: Request):
    session_id = get_session_id(request)
    try:
        patient = patient_repo.get_patient(patient_id, session_id)
        if patient is None:
            raise HTTPException(status_code=404, detail="Patient not found or access denied")
        return patient_repo.list_predictions(session_id, patient_id=patient_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Patient prediction fetch failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.delete("/patients")
async def clear_session_patients(request: Request):
    """Deletes all patients and predictions associated with the current session ID."""
    session_id = get_session_id(request)
    try:
        removed = patient_repo.clear_session(session_id)
        return {"status": "cleared", "removed": removed, "message": "All session patients deleted"}
    except Exception as e:
        logger.error(f"Clear session failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))
