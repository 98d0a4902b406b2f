"""
Configuration helpers for the todo backend.

Values come from environment variables (optionally seeded from a local .env
file) so that services and repositories never fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_name: str
    app_env: str
    app_port: int
    database_url: str
    log_level: str
    cors_origins: tuple[str, ...]
    request_timeout_seconds: float
    password_time_cost: int
    password_memory_cost: int
    password_parallelism: int


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    load_dotenv()

    def _int(value: str | None, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _float(value: str | None, default: float = 0.0) -> float:
        try:
            return float(value)
        except (TypeError, ValueError):
            return default

    def _csv(value: str | None, default: str) -> tuple[str, ...]:
        raw = value if value is not None else default
        return tuple(item.strip() for item in raw.split(",") if item.strip())

    return Settings(
        app_name=os.getenv("APP_NAME", "ToDoApp(develop)"),
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        app_port=_int(os.getenv("APP_PORT", "8080"), 8080),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./todo.db"),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        cors_origins=_csv(os.getenv("CORS_ORIGINS"), "*"),
        request_timeout_seconds=_float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"), 30.0),
        password_time_cost=_int(os.getenv("PASSWORD_TIME_COST", "3"), 3),
        password_memory_cost=_int(os.getenv("PASSWORD_MEMORY_COST", "65536"), 65536),
        password_parallelism=_int(os.getenv("PASSWORD_PARALLELISM", "4"), 4),
    )
