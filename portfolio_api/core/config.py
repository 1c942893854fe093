"""
Configuration helpers for the portfolio backend.

Routers and services receive a Settings object instead of reading os.environ
directly. A local .env file (if any) is loaded before the environment is read.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

from dotenv import load_dotenv

ROOT = Path(__file__).resolve().parents[2]

STORAGE_BACKENDS = ("file", "memory")


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    host: str
    port: int
    data_dir: Path
    static_dir: Path
    storage_backend: str
    cors_origin: str
    rate_limit_max: int
    rate_limit_window_seconds: int
    max_body_bytes: int
    static_max_age: int
    log_level: str
    trust_proxy: bool

    @property
    def is_prod(self) -> bool:
        return self.app_env in {"prod", "production"}


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    load_dotenv()

    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    def _path(value: str | None, default: Path) -> Path:
        if not value:
            return default
        return Path(value).expanduser().resolve()

    backend = (os.getenv("STORAGE_BACKEND") or "file").strip().lower()
    if backend not in STORAGE_BACKENDS:
        raise ValueError(f"STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)}, got {backend!r}")

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        host=os.getenv("HOST", "127.0.0.1"),
        port=_int(os.getenv("PORT", "3000"), 3000),
        data_dir=_path(os.getenv("DATA_DIR"), ROOT / "data"),
        static_dir=_path(os.getenv("STATIC_DIR"), ROOT / "public"),
        storage_backend=backend,
        cors_origin=os.getenv("CORS_ORIGIN", "https://yourdomain.com").rstrip("/"),
        rate_limit_max=_int(os.getenv("RATE_LIMIT_MAX", "100"), 100),
        rate_limit_window_seconds=_int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "900"), 900),
        max_body_bytes=_int(os.getenv("MAX_BODY_BYTES", str(10 * 1024 * 1024)), 10 * 1024 * 1024),
        static_max_age=_int(os.getenv("STATIC_MAX_AGE", "86400"), 86400),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        trust_proxy=_bool(os.getenv("TRUST_PROXY"), False),
    )
