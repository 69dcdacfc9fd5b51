# shield_sleep/core/models/data_models.py

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


FEMALE = "female"


class SleepMetrics(BaseModel):
    """Self-reported sleep metrics for a single night"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total_sleep_hours: float = Field(..., ge=0.0, le=24.0, alias="totalSleepHours")
    sleep_efficiency_percent: float = Field(..., ge=0.0, le=100.0, alias="sleepEfficiencyPercent")
    rem_percent: float = Field(..., ge=0.0, le=100.0, alias="remPercent")
    age: int = Field(..., ge=1, le=120, strict=True)
    sex: str

    @field_validator('sex')
    @classmethod
    def validate_sex(cls, v):
        if not v.strip():
            raise ValueError('sex must not be blank')
        return v

    @property
    def is_female(self) -> bool:
        return self.sex.lower() == FEMALE


class ScoreResult(BaseModel):
    """Shield score output returned to API callers"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    score: int = Field(..., ge=0, le=100)
    bio_age_delta: Optional[str] = Field(None, alias="bioAgeDelta")
    alerts: Tuple[str, ...] = ()
    suggestions: Tuple[str, ...] = ()

    @classmethod
    def failure(cls, message: str) -> "ScoreResult":
        """Result shape used when a request could not be scored"""
        return cls(score=0, bio_age_delta=None, alerts=(message,), suggestions=())

    def to_response(self) -> dict:
        """Serialize with wire field names"""
        payload = self.model_dump(by_alias=True)
        payload['alerts'] = list(self.alerts)
        payload['suggestions'] = list(self.suggestions)
        return payload
