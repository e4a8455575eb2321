"""Runtime configuration read from environment variables.

``main`` loads a ``.env`` file (if present) before ``load_settings`` is
called, so values there behave like exported variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import bcrypt

BASE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_ADMIN_PASSWORD = "admin123"


@dataclass(frozen=True)
class Settings:
    openai_api_key: Optional[str]
    perplexity_api_key: Optional[str]
    openai_vision_model: str
    perplexity_base_url: str
    analysis_dir: Path
    retention_seconds: int
    cleanup_interval_seconds: int
    app_env: str
    batch_size: int
    delay_between_requests: float
    delay_between_batches: float
    delay_between_jobs: float
    max_upload_files: int
    max_upload_bytes: int
    admin_username: str
    admin_password_hash: str
    session_secret: str
    session_max_age: int
    default_admin_password: bool = False

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


def _int_env(name: str, default: int, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name}={raw!r} is not an integer") from exc
    if value < minimum:
        raise RuntimeError(f"{name} must be >= {minimum}, got {value}")
    return value


def _resolve_analysis_dir() -> Path:
    env_dir = os.getenv("ANALYSIS_DIR")
    analysis_dir = Path(env_dir).expanduser() if env_dir and env_dir.strip() else BASE_DIR / "saved-analyses"

    if analysis_dir.exists() and not analysis_dir.is_dir():
        raise RuntimeError(
            f"ANALYSIS_DIR={str(analysis_dir)!r} points to a file, not a directory. "
            "Please set ANALYSIS_DIR to a directory path."
        )
    return analysis_dir


def load_settings() -> Settings:
    """Build a ``Settings`` snapshot from the current environment.

    Raises:
        RuntimeError: If a numeric variable is malformed or ANALYSIS_DIR is a file.
    """
    password_hash = os.getenv("ADMIN_PASSWORD_HASH") or bcrypt.hashpw(
        DEFAULT_ADMIN_PASSWORD.encode(), bcrypt.gensalt()
    ).decode()

    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        perplexity_api_key=os.getenv("PERPLEXITY_API_KEY") or None,
        openai_vision_model=os.getenv("OPENAI_VISION_MODEL", "gpt-4o"),
        perplexity_base_url=os.getenv("PERPLEXITY_BASE_URL", "https://api.perplexity.ai"),
        analysis_dir=_resolve_analysis_dir(),
        retention_seconds=_int_env("RETENTION_HOURS", 24, minimum=1) * 3600,
        cleanup_interval_seconds=_int_env("CLEANUP_INTERVAL_SECONDS", 3600, minimum=1),
        app_env=os.getenv("APP_ENV", "development").strip().lower(),
        batch_size=_int_env("BATCH_SIZE", 5, minimum=1),
        delay_between_requests=_int_env("DELAY_BETWEEN_REQUESTS_MS", 500) / 1000.0,
        delay_between_batches=_int_env("DELAY_BETWEEN_BATCHES_MS", 2000) / 1000.0,
        delay_between_jobs=_int_env("DELAY_BETWEEN_JOBS_MS", 1000) / 1000.0,
        max_upload_files=_int_env("MAX_UPLOAD_FILES", 50, minimum=1),
        max_upload_bytes=_int_env("MAX_UPLOAD_BYTES", 10 * 1024 * 1024, minimum=1),
        admin_username=os.getenv("ADMIN_USERNAME", "admin"),
        admin_password_hash=password_hash,
        session_secret=os.getenv("SESSION_SECRET", "change-this-session-secret"),
        session_max_age=24 * 60 * 60,
        default_admin_password=not os.getenv("ADMIN_PASSWORD_HASH"),
    )
