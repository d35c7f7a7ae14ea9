"""
Progression tracker: the session-facing side of adaptive difficulty.

Owns session lifecycle (create on first use, reset, age-based cleanup) on top
of a SessionStore, appends PerformanceRecords under a per-session lock, and
asks the pure adaptive controller for recommendations against a snapshot.
"""
from __future__ import annotations

import logging
import time
from typing import Optional, Union

from app.core.config import get_settings
from app.services.adaptive_controller import DifficultyAdjustment, analyze_performance
from app.services.difficulty_levels import DifficultyLevel, parse_level
from app.services.session_store import PerformanceRecord, SessionStore, StudentSession, get_session_store
from app.services.telemetry import emit_event

logger = logging.getLogger(__name__)

LevelLike = Union[DifficultyLevel, str]


def _as_level(level: LevelLike) -> DifficultyLevel:
    return level if isinstance(level, DifficultyLevel) else parse_level(level)


def _model_key(model_id) -> str:
    return str(getattr(model_id, "value", model_id))


class ProgressionTracker:
    def __init__(self, store: Optional[SessionStore] = None):
        self.store = store or get_session_store()

    def _load(self, session_id: str, student_id: Optional[str] = None) -> StudentSession:
        session = self.store.get(session_id)
        if session is None:
            session = self.store.save(StudentSession(session_id=session_id, student_id=student_id))
            logger.info("[progression_tracker] created session %s", session_id)
        return session

    def get_session(self, session_id: str, student_id: Optional[str] = None) -> StudentSession:
        with self.store.lock(session_id):
            return self._load(session_id, student_id)

    def record_attempt(self, session_id: str, question_id: str, model_id: str, level: LevelLike,
                       is_correct: bool, time_spent_ms: int = 0, hint_used: bool = False,
                       attempts_required: int = 1) -> PerformanceRecord:
        rec = PerformanceRecord(
            question_id=str(question_id),
            model_id=_model_key(model_id),
            level=_as_level(level),
            is_correct=bool(is_correct),
            time_spent_ms=int(time_spent_ms),
            hint_used=bool(hint_used),
            attempts_required=int(attempts_required),
        )
        with self.store.lock(session_id):
            session = self._load(session_id)
            session.record(rec)
            self.store.save(session)
        return rec

    def analyze(self, session_id: str, model_id: Optional[str] = None) -> DifficultyAdjustment:
        """
        Full adjustment for a model (default: the session's current model).

        A lock result switches the session into confidence mode.
        """
        with self.store.lock(session_id):
            session = self._load(session_id)
            if session.confidence_mode:
                history = session.history_for(session.current_model)
            else:
                history = session.history_for(_model_key(model_id or session.current_model))
            adjustment = analyze_performance(session.current_level, history, session.confidence_mode)

            if adjustment.action == "lock":
                session.confidence_mode = True
                session.adaptive_mode = False
                self.store.save(session)
                logger.info("[progression_tracker.analyze] session %s locked at %s",
                            session_id, adjustment.from_level)

        emit_event("difficulty_adjustment", route="progression_tracker.analyze", version="v1",
                   session_id=session_id, model_id=_model_key(model_id or session.current_model),
                   level=adjustment.to_level.display_name, action=adjustment.action)
        return adjustment

    def recommend(self, session_id: str,
                  model_id: Optional[str] = None) -> tuple[DifficultyLevel, Optional[DifficultyAdjustment]]:
        """
        Level to serve next, plus the adjustment behind it.

        With adaptive and confidence mode both off the stored level is returned
        and no adjustment is made. Confidence mode still consults the
        controller, which holds the level until accuracy recovers.
        """
        session = self.get_session(session_id)
        if not session.adaptive_mode and not session.confidence_mode:
            return session.current_level, None
        adjustment = self.analyze(session_id, model_id)
        return adjustment.to_level, adjustment

    def recommended_level(self, session_id: str, model_id: Optional[str] = None) -> DifficultyLevel:
        return self.recommend(session_id, model_id)[0]

    def set_confidence_mode(self, session_id: str, enabled: bool) -> StudentSession:
        with self.store.lock(session_id):
            session = self._load(session_id)
            session.confidence_mode = bool(enabled)
            session.adaptive_mode = not enabled
            return self.store.save(session)

    def set_adaptive_mode(self, session_id: str, enabled: bool) -> StudentSession:
        with self.store.lock(session_id):
            session = self._load(session_id)
            session.adaptive_mode = bool(enabled)
            return self.store.save(session)

    def reset_session(self, session_id: str) -> StudentSession:
        with self.store.lock(session_id):
            session = self._load(session_id)
            session.clear()
            return self.store.save(session)

    def all_sessions(self) -> list[StudentSession]:
        return self.store.list_sessions()

    def cleanup_old_sessions(self, max_age_hours: Optional[float] = None) -> int:
        if max_age_hours is None:
            max_age_hours = get_settings().session_max_age_hours
        cutoff = time.time() - max_age_hours * 3600
        removed = 0
        for session in self.store.list_sessions():
            if session.start_time < cutoff:
                self.store.delete(session.session_id)
                removed += 1
        if removed:
            logger.info("[progression_tracker.cleanup_old_sessions] removed %d sessions", removed)
        return removed

    def session_stats(self, session_id: str) -> dict:
        s = self.get_session(session_id)
        return {
            "total_questions": s.total_questions,
            "correct_answers": s.correct_answers,
            "accuracy": s.accuracy,
            "current_streak": s.streak_count,
            "session_duration_ms": int((time.time() - s.start_time) * 1000),
            "current_level": s.current_level.display_name,
            "adaptive_mode": s.adaptive_mode,
            "confidence_mode": s.confidence_mode,
        }

    def export_session_data(self, session_id: str) -> dict:
        s = self.get_session(session_id)
        return {
            "session_info": {
                "session_id": s.session_id,
                "student_id": s.student_id,
                "start_time": s.start_time,
                "duration_ms": int((time.time() - s.start_time) * 1000),
                "current_level": s.current_level.display_name,
            },
            "performance": {
                "total_questions": s.total_questions,
                "correct_answers": s.correct_answers,
                "accuracy": s.accuracy,
                "current_streak": s.streak_count,
            },
            "history": [r.to_dict() for r in s.performance_history],
            "settings": {
                "adaptive_mode": s.adaptive_mode,
                "confidence_mode": s.confidence_mode,
            },
        }


_tracker: Optional[ProgressionTracker] = None


def get_progression_tracker() -> ProgressionTracker:
    global _tracker
    if _tracker is None:
        _tracker = ProgressionTracker()
    return _tracker
