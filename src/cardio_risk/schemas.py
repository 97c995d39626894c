"""Pydantic data contracts shared by the transformer, gateway and history store.

Models that round-trip through persisted history or the front end use
camelCase aliases; the classifier's own schema is snake_case as the service
defines it.
"""

from datetime import datetime
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

RiskLevel = Literal["low", "medium", "high"]

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base for front-end facing models serialized with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())


class PredictionInput(CamelModel):
    """Patient data as collected by the assessment form."""

    age: int = Field(..., description="Patient age in years", examples=[60])
    gender: str = Field(
        ...,
        description="Patient gender: 'male', 'female' or 'other'",
        examples=["male"],
    )
    cholesterol: float = Field(
        ...,
        description="Total cholesterol in mg/dL",
        examples=[260.0],
    )
    blood_pressure_systolic: int = Field(..., alias="bloodPressureSystolic", examples=[150])
    blood_pressure_diastolic: int = Field(..., alias="bloodPressureDiastolic", examples=[95])
    bmi: float | None = Field(None, description="Body Mass Index", examples=[27.0])
    smoking: bool = False
    diabetes: bool = False
    family_history: bool = Field(False, alias="familyHistory")
    height: float | None = Field(None, description="Height in cm")
    weight: float | None = Field(None, description="Weight in kg")


class ServiceInput(BaseModel):
    """Numeric-coded feature vector expected by the classifier service."""

    age: int
    gender: int = Field(..., description="1 = female, 2 = male")
    height: float = Field(..., description="Height in cm")
    weight: float = Field(..., description="Weight in kg")
    ap_hi: int = Field(..., description="Systolic blood pressure")
    ap_lo: int = Field(..., description="Diastolic blood pressure")
    cholesterol: int = Field(..., ge=1, le=3, description="1 normal, 2 above normal, 3 well above")
    gluc: int = Field(..., ge=1, le=3, description="1 normal, 2 above normal, 3 well above")
    smoke: int = Field(..., ge=0, le=1)
    alco: int = Field(..., ge=0, le=1)
    active: int = Field(..., ge=0, le=1)
    bmi: float


class ServiceOutput(BaseModel):
    """Binary label returned by the classifier."""

    risk: Literal[0, 1]


class RiskFactor(BaseModel):
    """A single named contributor to the displayed risk."""

    name: str
    impact: int
    description: str


class PredictionResult(CamelModel):
    """An explained risk assessment. Immutable once created."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, protected_namespaces=())

    id: str
    user_id: str = Field(..., alias="userId")
    input: PredictionInput
    risk_score: int = Field(..., ge=0, le=100, alias="riskScore")
    risk_level: RiskLevel = Field(..., alias="riskLevel")
    recommendations: list[str]
    factors: list[RiskFactor]
    model_version: str = Field(..., alias="modelVersion")
    created_at: datetime = Field(..., alias="createdAt")


class HistoryFilters(CamelModel):
    """Query parameters for a history listing."""

    risk_level: Literal["low", "medium", "high", "all"] | None = Field(None, alias="riskLevel")
    page: int = Field(1, ge=1)
    limit: int | None = Field(None, ge=1, description="Page size; the store default when omitted")


class PaginatedResponse(CamelModel, Generic[T]):
    """One page of a filtered listing."""

    data: list[T]
    total: int
    page: int
    limit: int
    has_more: bool = Field(..., alias="hasMore")


class User(CamelModel):
    """Authenticated clinician profile."""

    id: str
    email: str
    name: str
    role: str
    created_at: datetime = Field(..., alias="createdAt")


class LoginResponse(BaseModel):
    token: str
    user: User


class FeatureImportance(BaseModel):
    feature: str
    importance: float


class MLMetrics(CamelModel):
    """Evaluation metrics of the deployed classifier."""

    accuracy: float
    precision: float
    recall: float
    f1_score: float = Field(..., alias="f1Score")
    confusion_matrix: list[list[int]] = Field(..., alias="confusionMatrix")
    feature_importance: list[FeatureImportance] = Field(..., alias="featureImportance")
    model_version: str = Field(..., alias="modelVersion")
    last_updated: datetime = Field(..., alias="lastUpdated")


class AccuracyPoint(BaseModel):
    date: str
    accuracy: float
    precision: float
    recall: float


class DatasetSample(BaseModel):
    age: int
    cholesterol: int
    risk: int
    gender: str


class UploadSummary(BaseModel):
    message: str
    processed: int


class ExportPayload(BaseModel):
    """Serialized history ready to be written or streamed."""

    content: bytes
    media_type: str
    filename: str
