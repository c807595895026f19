"""
Configuration helpers for the directory backend.

Exposes a Settings object read from environment variables so that
routers/services do not fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os

PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    public_base_url: str
    database_url: str
    admin_password: str
    session_ttl_seconds: int
    admin_session_ttl_seconds: int
    uploads_dir: str
    log_level: str
    max_logo_bytes: int
    max_image_bytes: int
    blocked_hosts: frozenset


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _csv(value: str | None) -> frozenset:
        return frozenset(x.strip().lower() for x in (value or "").split(",") if x.strip())

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        public_base_url=os.getenv("PUBLIC_BASE_URL", "https://cursorfor.xyz").rstrip("/"),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./saasdir.db"),
        admin_password=os.getenv("ADMIN_PASSWORD", ""),
        session_ttl_seconds=_int(os.getenv("SESSION_TTL_SECONDS", "604800"), 604800),
        admin_session_ttl_seconds=max(600, _int(os.getenv("ADMIN_SESSION_TTL_SECONDS", "43200"), 43200)),
        uploads_dir=os.getenv("UPLOADS_DIR") or os.path.join(PACKAGE_DIR, "web", "uploads"),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        max_logo_bytes=_int(os.getenv("MAX_LOGO_BYTES", str(5 * 1024 * 1024)), 5 * 1024 * 1024),
        max_image_bytes=_int(os.getenv("MAX_IMAGE_BYTES", str(10 * 1024 * 1024)), 10 * 1024 * 1024),
        blocked_hosts=_csv(os.getenv("BLOCKED_HOSTS")),
    )
