from typing import Optional
from pydantic import BaseModel

from thyrodose.domain.models import DosageResult, ThyroidAnalysis


class TreatmentPlan(BaseModel):
    medication: str  # "Levothyroxine" | "Methimazole" | "No medication required"
    unit: str
    frequency: str
    condition: str
    result: DosageResult
    analysis: ThyroidAnalysis

    class Config:
        frozen = True

    @property
    def dose(self) -> float:
        return self.result.dose

    @property
    def reasoning(self) -> Optional[str]:
        return self.result.alert_message
