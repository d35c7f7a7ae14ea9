from pydantic import BaseModel, Field
from typing import Any, Literal, Optional


class GenerateRequest(BaseModel):
    model_id: str
    year: Optional[int] = None
    level: Optional[str] = None          # "3.2"; its parameter table wins over year defaults
    params: dict[str, Any] = {}
    seed: Optional[int] = None


class GenerateResponse(BaseModel):
    model_id: str
    year: int
    level: Optional[str] = None
    params: dict[str, Any]
    output: dict[str, Any]


class ModelListResponse(BaseModel):
    models: list[str]


class DefaultParamsResponse(BaseModel):
    model_id: str
    year: int
    params: dict[str, Any]


class AttemptRequest(BaseModel):
    question_id: str
    model_id: str
    level: str
    is_correct: bool
    time_spent_ms: int = Field(default=0, ge=0)
    hint_used: bool = False
    attempts_required: int = Field(default=1, ge=1)
    student_id: Optional[str] = None


class AttemptResponse(BaseModel):
    session_id: str
    record: dict
    streak_count: int
    current_level: str


class AdjustmentResponse(BaseModel):
    session_id: str
    recommended_level: str
    adjustment: Optional[dict] = None    # absent when adaptive mode is off


class ToggleRequest(BaseModel):
    enabled: bool


class SessionStateResponse(BaseModel):
    session_id: str
    adaptive_mode: bool
    confidence_mode: bool
    current_level: str
    streak_count: int


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    models: int
