"""
config/settings.py
──────────────────────────────────────────────────────────────────────────────
Single source of truth for all tuneable parameters.

All values can be overridden via environment variables or a .env file placed
at the project root.  The frozen dataclass ensures settings are never mutated
at runtime.

Ingestion policy is explicit here rather than hidden in the pipeline:
  JOBS_API_PER_PAGE   → postings requested per page
  JOBS_API_MAX_PAGES  → pages fetched per ingestion run
  JOBS_API_TIMEOUT    → seconds before a hung fetch is abandoned
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

from jobscope.domain.exceptions import ConfigurationError

# Load .env from project root (two levels up from this file)
load_dotenv(Path(__file__).parent.parent.parent / ".env")


def _env(key: str, default: str) -> str:
    return os.getenv(key, default)


def _env_int(key: str, default: int) -> int:
    raw = os.getenv(key, str(default))
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}") from None


def _env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_list(key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(key)
    if not raw:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    """Immutable application settings loaded from environment variables."""

    # ── Jobs API (WeDataTools) ─────────────────────────────────────────────
    jobs_api_key: str = field(
        default_factory=lambda: _env("WEDATATOOLS_API_KEY", "")
    )
    jobs_api_url: str = field(
        default_factory=lambda: _env(
            "JOBS_API_URL", "https://api.wedatatools.com/v2/get-jobs"
        )
    )
    jobs_api_per_page: int = field(
        default_factory=lambda: _env_int("JOBS_API_PER_PAGE", 40)
    )
    jobs_api_max_pages: int = field(
        default_factory=lambda: _env_int("JOBS_API_MAX_PAGES", 1)
    )
    jobs_api_timeout: int = field(
        default_factory=lambda: _env_int("JOBS_API_TIMEOUT", 30)
    )
    jobs_api_retries: int = field(
        default_factory=lambda: _env_int("JOBS_API_RETRIES", 3)
    )

    # ── Database ───────────────────────────────────────────────────────────
    db_dsn: str = field(
        default_factory=lambda: _env("DB_DSN", "dbname=jobscope")
    )
    db_pool_min: int = field(
        default_factory=lambda: _env_int("DB_POOL_MIN", 1)
    )
    db_pool_max: int = field(
        default_factory=lambda: _env_int("DB_POOL_MAX", 10)
    )

    # ── Scheduling ─────────────────────────────────────────────────────────
    ingest_interval_seconds: int = field(
        default_factory=lambda: _env_int("INGEST_INTERVAL_SECONDS", 3600)
    )
    scheduler_enabled: bool = field(
        default_factory=lambda: _env_bool("SCHEDULER_ENABLED", False)
    )

    # ── HTTP API ───────────────────────────────────────────────────────────
    cors_origins: tuple[str, ...] = field(
        default_factory=lambda: _env_list("CORS_ORIGINS", ("*",))
    )
    category_detail_limit: int = field(
        default_factory=lambda: _env_int("CATEGORY_DETAIL_LIMIT", 20)
    )

    # ── User accounts ──────────────────────────────────────────────────────
    jwt_secret: str = field(default_factory=lambda: _env("JWT_SECRET", ""))
    jwt_ttl_seconds: int = field(
        default_factory=lambda: _env_int("JWT_TTL_SECONDS", 3600)
    )
    bcrypt_rounds: int = field(
        default_factory=lambda: _env_int("BCRYPT_ROUNDS", 10)
    )

    # ── Logging ────────────────────────────────────────────────────────────
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Returns a cached singleton Settings instance.

    Use this everywhere instead of instantiating Settings() directly —
    it guarantees a single object is shared across the entire process.
    """
    return Settings()
