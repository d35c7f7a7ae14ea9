from dataclasses import dataclass, field, asdict
from contextlib import contextmanager
from typing import Optional
import logging
import threading
import time

from app.services.difficulty_levels import DifficultyLevel, parse_level

logger = logging.getLogger(__name__)

DEFAULT_LEVEL = DifficultyLevel(3, 3)
DEFAULT_MODEL = "ADDITION"


@dataclass
class PerformanceRecord:
    question_id: str
    model_id: str
    level: DifficultyLevel
    is_correct: bool
    time_spent_ms: int = 0
    hint_used: bool = False
    attempts_required: int = 1
    timestamp: float = field(default_factory=time.time)

    def to_dict(self):
        d = asdict(self)
        d["level"] = self.level.display_name
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "PerformanceRecord":
        return cls(
            question_id=str(d["question_id"]),
            model_id=d["model_id"],
            level=parse_level(d["level"]),
            is_correct=bool(d["is_correct"]),
            time_spent_ms=int(d.get("time_spent_ms") or 0),
            hint_used=bool(d.get("hint_used", False)),
            attempts_required=int(d.get("attempts_required") or 1),
            timestamp=float(d.get("timestamp") or time.time()),
        )


@dataclass
class StudentSession:
    session_id: str
    student_id: Optional[str] = None
    current_level: DifficultyLevel = DEFAULT_LEVEL
    current_model: str = DEFAULT_MODEL
    performance_history: list = field(default_factory=list)
    streak_count: int = 0              # +n correct run, -n incorrect run
    adaptive_mode: bool = True
    confidence_mode: bool = False
    start_time: float = field(default_factory=time.time)
    total_questions: int = 0
    correct_answers: int = 0

    @property
    def accuracy(self) -> float:
        return self.correct_answers / self.total_questions if self.total_questions else 0.0

    def record(self, rec: PerformanceRecord) -> None:
        self.performance_history.append(rec)
        self.total_questions += 1
        self.current_model = rec.model_id
        self.current_level = rec.level
        if rec.is_correct:
            self.correct_answers += 1
            self.streak_count = max(0, self.streak_count) + 1
        else:
            self.streak_count = min(0, self.streak_count) - 1

    def history_for(self, model_id: Optional[str] = None) -> list:
        if model_id is None:
            return list(self.performance_history)
        return [r for r in self.performance_history if r.model_id == model_id]

    def clear(self) -> None:
        self.performance_history = []
        self.streak_count = 0
        self.total_questions = 0
        self.correct_answers = 0
        self.start_time = time.time()

    def to_dict(self):
        return {
            "session_id": self.session_id,
            "student_id": self.student_id,
            "current_level": self.current_level.display_name,
            "current_model": self.current_model,
            "performance_history": [r.to_dict() for r in self.performance_history],
            "streak_count": self.streak_count,
            "adaptive_mode": self.adaptive_mode,
            "confidence_mode": self.confidence_mode,
            "start_time": self.start_time,
            "total_questions": self.total_questions,
            "correct_answers": self.correct_answers,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "StudentSession":
        return cls(
            session_id=d["session_id"],
            student_id=d.get("student_id"),
            current_level=parse_level(d.get("current_level") or DEFAULT_LEVEL.display_name),
            current_model=d.get("current_model") or DEFAULT_MODEL,
            performance_history=[PerformanceRecord.from_dict(r) for r in d.get("performance_history") or []],
            streak_count=int(d.get("streak_count") or 0),
            adaptive_mode=bool(d.get("adaptive_mode", True)),
            confidence_mode=bool(d.get("confidence_mode", False)),
            start_time=float(d.get("start_time") or time.time()),
            total_questions=int(d.get("total_questions") or 0),
            correct_answers=int(d.get("correct_answers") or 0),
        )


class SessionStore:
    """
    Keyed StudentSession storage.

    lock(session_id) serialises read-modify-write cycles for one session;
    different sessions never share a lock.
    """

    def __init__(self):
        self._locks = {}
        self._locks_guard = threading.Lock()

    def get(self, session_id: str) -> Optional[StudentSession]:
        raise NotImplementedError

    def save(self, session: StudentSession) -> StudentSession:
        raise NotImplementedError

    def delete(self, session_id: str) -> None:
        raise NotImplementedError

    def list_sessions(self) -> list[StudentSession]:
        raise NotImplementedError

    @contextmanager
    def lock(self, session_id: str):
        with self._locks_guard:
            session_lock = self._locks.setdefault(session_id, threading.Lock())
        with session_lock:
            yield

    def forget_lock(self, session_id: str) -> None:
        with self._locks_guard:
            self._locks.pop(session_id, None)


class InMemorySessionStore(SessionStore):
    def __init__(self):
        super().__init__()
        self._data = {}
        self._guard = threading.Lock()

    def get(self, session_id: str) -> Optional[StudentSession]:
        with self._guard:
            return self._data.get(session_id)

    def save(self, session: StudentSession) -> StudentSession:
        with self._guard:
            self._data[session.session_id] = session
        return session

    def delete(self, session_id: str) -> None:
        with self._guard:
            self._data.pop(session_id, None)
        self.forget_lock(session_id)

    def list_sessions(self):
        with self._guard:
            return list(self._data.values())


class SupabaseSessionStore(SessionStore):
    def __init__(self, supabase_client):
        super().__init__()
        self.sb = supabase_client

    def get(self, session_id: str) -> Optional[StudentSession]:
        r = (
            self.sb.table("student_sessions")
            .select("*")
            .eq("session_id", session_id)
            .maybe_single()
            .execute()
        )
        data = getattr(r, "data", None)
        if not data:
            return None
        return StudentSession.from_dict(data)

    def save(self, session: StudentSession) -> StudentSession:
        payload = session.to_dict()
        payload["updated_at"] = time.time()
        (
            self.sb.table("student_sessions")
            .upsert(payload, on_conflict="session_id")
            .execute()
        )
        return session

    def delete(self, session_id: str) -> None:
        self.sb.table("student_sessions").delete().eq("session_id", session_id).execute()
        self.forget_lock(session_id)

    def list_sessions(self):
        r = self.sb.table("student_sessions").select("*").execute()
        rows = getattr(r, "data", None) or []
        return [StudentSession.from_dict(d) for d in rows]


SESSION_STORE = InMemorySessionStore()
_supabase_store: Optional[SupabaseSessionStore] = None


def get_session_store() -> SessionStore:
    global _supabase_store
    from app.core.config import get_settings

    if get_settings().session_store.lower() != "supabase":
        return SESSION_STORE
    if _supabase_store is not None:
        return _supabase_store

    # lazy import so the in-memory path never needs supabase credentials
    try:
        from app.services.supabase_client import get_supabase_client
        _supabase_store = SupabaseSessionStore(get_supabase_client())
        return _supabase_store
    except Exception as e:
        logger.error("[session_store.get_session_store] falling back to memory: %s", e)
        return SESSION_STORE
