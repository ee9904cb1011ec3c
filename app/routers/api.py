from fastapi import APIRouter
from app.models import HealthCheckResponse, ModelEvaluationResponse
from typing import Optional

router = APIRouter(prefix="/api")

from app.dal.database import db_manager
from app.services.evaluation_service import evaluation_service

@router.get("/health", response_model=HealthCheckResponse)
async def health_check():
    """Health check endpoint."""
    return HealthCheckResponse(
        status="OK",
        database_available=db_manager.is_available()
    )

@router.get("/model-evaluation/latest", response_model=Optional[ModelEvaluationResponse])
async def get_latest_model_evaluation():
    """Latest stored evaluation snapshot, or null when none has been seeded."""
    return evaluation_service.get_latest()
