from supabase import create_client

from app.core.config import get_settings

_client = None


def get_supabase_client():
    """Shared client for the optional session and telemetry tables."""
    global _client
    if _client:
        return _client
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_service_key:
        raise RuntimeError("Supabase settings missing (SUPABASE_URL / SUPABASE_SERVICE_KEY)")
    _client = create_client(settings.supabase_url, settings.supabase_service_key)
    return _client
