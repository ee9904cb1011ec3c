from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # JSON uses camelCase, Python attributes stay snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthCheckResponse(BaseModel):
    status: str
    database_available: bool


class PatientLabRecord(BaseModel):
    """Raw liver panel for one patient. Immutable once constructed."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    age: float
    albumin: float
    alkaline_phosphatase: float = Field(alias="alkalinePhosphatase")
    alamine_aminotransferase: float = Field(alias="alamiNotransaminase")
    aspartate_aminotransferase: float = Field(alias="aspartateAminotransaminase")
    bilirubin: float
    cholesterol: float
    albumin_globulin_ratio: float = Field(alias="albuminGlobulinRatio")
    platelets_count: float = Field(alias="plateletsCount")
    prothrombin_time: float = Field(alias="prothrombinTime")


class PatientCreateRequest(PatientLabRecord):
    name: str = Field(min_length=1)
    gender: Literal["male", "female"]

    def lab_record(self) -> PatientLabRecord:
        return PatientLabRecord(**self.model_dump(exclude={"name", "gender"}))


class ValidationResult(BaseModel):
    valid: bool
    errors: List[str] = []


class PredictionResult(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    prediction: Literal["positive", "negative"]
    confidence: float
    risk_score: float
    risk_level: Literal["low", "medium", "high"]


class PatientPredictionResponse(PredictionResult):
    patient_id: Optional[int] = None
    patient: PatientCreateRequest


class PatientSummary(CamelModel):
    id: int
    name: str
    age: float
    gender: str
    created_at: Optional[datetime] = None


class PredictionRecord(CamelModel):
    id: int
    patient_id: int
    prediction: str
    confidence: float
    risk_score: float
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


# --- Batch (CSV) prediction ---

class BatchPredictionRequest(CamelModel):
    csv_data: str = Field(min_length=1)


class BatchRowResult(PredictionResult):
    row: int
    name: str
    gender: str
    patient_id: Optional[int] = None


class BatchRowError(CamelModel):
    row: int
    name: Optional[str] = None
    error: str


class BatchPredictionResponse(CamelModel):
    total_rows: int
    success_count: int
    error_count: int
    results: List[BatchRowResult]
    errors: List[BatchRowError]


# --- Model evaluation ---

class FeatureImportance(BaseModel):
    name: str
    importance: float


class ModelEvaluationResponse(CamelModel):
    id: int
    model_type: str
    dataset_name: str
    accuracy: float
    precision: float
    recall: float
    f1_score: float
    roc_auc: float
    confusion_matrix_tn: int
    confusion_matrix_fp: int
    confusion_matrix_fn: int
    confusion_matrix_tp: int
    roc_curve: List[dict]
    precision_recall_curve: List[dict]
    feature_importance: List[FeatureImportance]
    metadata: dict
    created_at: Optional[datetime] = None
