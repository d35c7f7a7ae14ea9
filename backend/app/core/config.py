from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    # Application
    app_name: str = "Maths Question Engine"
    debug: bool = False
    log_level: str = "INFO"

    # Generation
    default_year: int = 4

    # Sessions: "memory" or "supabase"
    session_store: str = "memory"
    session_max_age_hours: float = 24

    # Supabase (only needed when session_store=supabase or telemetry db is on)
    supabase_url: Optional[str] = None
    supabase_service_key: Optional[str] = None
    enable_telemetry_db: bool = False

    # CORS
    frontend_url: str = "http://localhost:5173"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    return Settings()
