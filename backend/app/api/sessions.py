import logging
from fastapi import APIRouter, HTTPException, Query
from typing import Optional

from app.generators.registry import UnknownModelError, get_generator
from app.models.engine import (
    AdjustmentResponse,
    AttemptRequest,
    AttemptResponse,
    SessionStateResponse,
    ToggleRequest,
)
from app.services.difficulty_levels import InvalidLevelError
from app.services.progression_tracker import get_progression_tracker
from app.services.telemetry import instrument

logger = logging.getLogger("mathengine.v1")
router = APIRouter(prefix="/api/v1/sessions", tags=["sessions-v1"])


def _state(session) -> SessionStateResponse:
    return SessionStateResponse(
        session_id=session.session_id,
        adaptive_mode=session.adaptive_mode,
        confidence_mode=session.confidence_mode,
        current_level=session.current_level.display_name,
        streak_count=session.streak_count,
    )


def _check_model(model_id: Optional[str]) -> None:
    if model_id is None:
        return
    try:
        get_generator(model_id)
    except UnknownModelError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{session_id}/attempts", response_model=AttemptResponse)
@instrument(route="/api/v1/sessions/attempts", version="v1")
async def record_attempt_v1(session_id: str, request: AttemptRequest):
    _check_model(request.model_id)
    tracker = get_progression_tracker()
    if request.student_id:
        tracker.get_session(session_id, request.student_id)
    try:
        rec = tracker.record_attempt(
            session_id,
            request.question_id,
            request.model_id,
            request.level,
            request.is_correct,
            time_spent_ms=request.time_spent_ms,
            hint_used=request.hint_used,
            attempts_required=request.attempts_required,
        )
    except InvalidLevelError as e:
        raise HTTPException(status_code=422, detail=str(e))
    session = tracker.get_session(session_id)
    return AttemptResponse(session_id=session_id, record=rec.to_dict(),
                           streak_count=session.streak_count,
                           current_level=session.current_level.display_name)


@router.get("/{session_id}/recommendation", response_model=AdjustmentResponse)
@instrument(route="/api/v1/sessions/recommendation", version="v1")
async def recommendation_v1(session_id: str, model_id: Optional[str] = Query(default=None)):
    _check_model(model_id)
    level, adjustment = get_progression_tracker().recommend(session_id, model_id)
    return AdjustmentResponse(session_id=session_id,
                              recommended_level=level.display_name,
                              adjustment=adjustment.to_dict() if adjustment else None)


@router.get("/{session_id}/stats")
@instrument(route="/api/v1/sessions/stats", version="v1")
async def stats_v1(session_id: str):
    return get_progression_tracker().session_stats(session_id)


@router.get("/{session_id}/export")
@instrument(route="/api/v1/sessions/export", version="v1")
async def export_v1(session_id: str):
    return get_progression_tracker().export_session_data(session_id)


@router.post("/{session_id}/confidence", response_model=SessionStateResponse)
@instrument(route="/api/v1/sessions/confidence", version="v1")
async def confidence_v1(session_id: str, request: ToggleRequest):
    return _state(get_progression_tracker().set_confidence_mode(session_id, request.enabled))


@router.post("/{session_id}/adaptive", response_model=SessionStateResponse)
@instrument(route="/api/v1/sessions/adaptive", version="v1")
async def adaptive_v1(session_id: str, request: ToggleRequest):
    return _state(get_progression_tracker().set_adaptive_mode(session_id, request.enabled))


@router.post("/{session_id}/reset", response_model=SessionStateResponse)
@instrument(route="/api/v1/sessions/reset", version="v1")
async def reset_v1(session_id: str):
    return _state(get_progression_tracker().reset_session(session_id))


@router.post("/cleanup")
@instrument(route="/api/v1/sessions/cleanup", version="v1")
async def cleanup_v1(max_age_hours: Optional[float] = Query(default=None, gt=0)):
    removed = get_progression_tracker().cleanup_old_sessions(max_age_hours)
    return {"removed": removed}
