"""
Configuration helpers for the Blog API.

Exposes a Settings object that reads environment variables (listening port,
snapshot/log paths, feature flags) so that routers/services do not fetch
os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    host: str
    port: int
    data_file: str
    log_file: str
    log_level: str
    restore_on_start: bool
    cascade_post_delete: bool
    strict_persistence: bool


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        host=os.getenv("BLOG_HOST", "0.0.0.0"),
        port=_int(os.getenv("BLOG_PORT", "7070"), 7070),
        data_file=os.getenv("BLOG_DATA_FILE", os.path.join("DB", "db.json")),
        log_file=os.getenv("BLOG_LOG_FILE", "server.log"),
        log_level=(os.getenv("BLOG_LOG_LEVEL") or "INFO").upper(),
        restore_on_start=_bool(os.getenv("BLOG_RESTORE_ON_START"), False),
        cascade_post_delete=_bool(os.getenv("BLOG_CASCADE_POST_DELETE"), False),
        strict_persistence=_bool(os.getenv("BLOG_STRICT_PERSISTENCE"), False),
    )
