import time
import json
import logging
import inspect
from typing import Optional
from functools import wraps

logger = logging.getLogger("mathengine.telemetry")


def emit_event(event: str, *, route: str, version: str, session_id: Optional[str] = None,
               model_id: Optional[str] = None, level: Optional[str] = None,
               action: Optional[str] = None, error_type: Optional[str] = None,
               latency_ms: Optional[int] = None, ok: Optional[bool] = None):
    payload = {
        "event": event,
        "route": route,
        "version": version,
        "session_id": session_id,
        "model_id": model_id,
        "level": level,
        "action": action,
        "error_type": error_type,
        "latency_ms": latency_ms,
        "ok": ok,
        "ts": time.time(),
    }
    # single-line JSON so log shippers can parse it
    logger.info("telemetry=%s", json.dumps(payload, separators=(",", ":")))

    from app.core.config import get_settings
    if not get_settings().enable_telemetry_db:
        return

    # best-effort persistence, never fails the caller
    try:
        from app.services.supabase_client import get_supabase_client
        sb = get_supabase_client()
        row = dict(payload)
        row.pop("ts")
        sb.table("telemetry_events").insert(row).execute()
    except Exception as e:
        logger.error(f"[telemetry.emit_event] {e}", exc_info=True)


def instrument(route: str, version: str):
    """Emit an api_call event with latency and outcome around a route handler."""
    def deco(fn):
        def _finish(t0, ok, err):
            dt = int((time.time() - t0) * 1000)
            emit_event("api_call", route=route, version=version, latency_ms=dt, ok=ok, error_type=err)

        if inspect.iscoroutinefunction(fn):
            @wraps(fn)
            async def wrapped_async(*args, **kwargs):
                t0 = time.time()
                ok, err = True, None
                try:
                    return await fn(*args, **kwargs)
                except Exception as e:
                    ok, err = False, e.__class__.__name__
                    raise
                finally:
                    _finish(t0, ok, err)
            return wrapped_async

        @wraps(fn)
        def wrapped(*args, **kwargs):
            t0 = time.time()
            ok, err = True, None
            try:
                return fn(*args, **kwargs)
            except Exception as e:
                ok, err = False, e.__class__.__name__
                raise
            finally:
                _finish(t0, ok, err)
        return wrapped
    return deco
