from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, validator


class Severity(str, Enum):
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


class LiverDiseaseType(str, Enum):
    CIRRHOSIS = "cirrhosis"
    CHOLESTATIC = "cholestatic"
    NAFLD = "nafld"
    HEPATITIS = "hepatitis"
    POST_TRANSPLANT = "post_transplant"
    OTHER = "other"


class KidneyDiseaseStage(str, Enum):
    STAGE_1 = "Stage 1"
    STAGE_2 = "Stage 2"
    STAGE_3 = "Stage 3"
    STAGE_4 = "Stage 4"
    STAGE_5 = "Stage 5"
    ESRD = "ESRD"
    POST_TRANSPLANT = "Post-Transplant"
    OTHER = "other"


class HormoneField(str, Enum):
    FT3 = "FT3"
    FT4 = "FT4"
    T3 = "T3"
    T4 = "T4"


class HormoneBasis(str, Enum):
    """Which hormone pair a hyperthyroid assessment is based on."""
    FREE = "free"
    TOTAL = "total"


class ReferenceRange(BaseModel):
    low: float
    high: float
    units: str

    class Config:
        frozen = True


class Symptoms(BaseModel):
    headache: bool = False
    anxious_or_restless: bool = False

    class Config:
        frozen = True

    @property
    def count(self) -> int:
        return int(self.headache) + int(self.anxious_or_restless)


class PatientProfile(BaseModel):
    """Structured snapshot of one patient, supplied by the intake layer."""

    name: Optional[str] = None
    age: Optional[float] = Field(None, ge=0, le=120)
    weight_kg: Optional[float] = Field(None, gt=0)
    gender: Optional[str] = Field(None, description="male/female")

    current_tsh: Optional[float] = Field(None, ge=0, description="mIU/L")
    current_t3: Optional[float] = Field(None, ge=0, description="Total T3, ng/dL")
    current_t4: Optional[float] = Field(None, ge=0, description="Total T4, μg/dL")
    current_ft3: Optional[float] = Field(None, ge=0, description="Free T3, pg/mL")
    current_ft4: Optional[float] = Field(None, ge=0, description="Free T4, ng/dL")

    current_dose: Optional[float] = Field(None, ge=0, description="Current daily dose, mcg")
    has_hypothyroid_diagnosis: Optional[bool] = None

    is_pregnant: bool = False
    trimester: Optional[int] = Field(None, ge=1, le=3)
    has_high_risk_heart_disease: bool = False
    has_low_risk_heart_disease: bool = False
    has_osteoporosis: bool = False
    has_adrenal_insufficiency: bool = False
    has_gi_absorption_issues: bool = False
    on_estrogen_therapy: bool = False
    has_liver_disease: bool = False
    liver_disease_type: Optional[LiverDiseaseType] = None
    has_kidney_disease: bool = False
    kidney_disease_stage: Optional[KidneyDiseaseStage] = None
    symptoms: Symptoms = Symptoms()

    class Config:
        frozen = True

    @validator("gender")
    def normalize_gender(cls, v: Optional[str]):
        if v is not None:
            v = v.strip().lower()
            if len(v) == 0:
                return None
        return v

    @property
    def has_heart_disease(self) -> bool:
        return self.has_high_risk_heart_disease or self.has_low_risk_heart_disease


class SafetyLimits(BaseModel):
    """Dose bounds applied by the calculators. Overridable through settings."""

    minimum_dose: float = Field(25, gt=0)
    maximum_dose: float = Field(300, gt=0)
    elderly_max_dose: float = Field(50, gt=0)
    cardiac_maximum_dose: float = Field(100, gt=0)
    methimazole_minimum_dose: float = Field(5, gt=0)
    methimazole_maximum_dose: float = Field(40, gt=0)

    class Config:
        frozen = True

    @validator("maximum_dose")
    def maximum_above_minimum(cls, v: float, values: dict):
        minimum = values.get("minimum_dose")
        if minimum is not None and v < minimum:
            raise ValueError("maximum_dose must not be below minimum_dose")
        return v


class ThyroidAnalysis(BaseModel):
    condition: str
    summary: str
    recommendations: List[str] = []

    class Config:
        frozen = True


class DosageResult(BaseModel):
    dose: float
    nearest_tablet: Optional[float] = None
    severity: Optional[Severity] = None
    follow_up_weeks: Optional[int] = None
    alerts: List[str] = []
    medical_conditions_summary: Optional[str] = None
    requires_hormone_data: bool = False
    missing_hormone_fields: List[HormoneField] = []

    class Config:
        frozen = True

    @property
    def alert_message(self) -> Optional[str]:
        return "; ".join(self.alerts) if self.alerts else None
