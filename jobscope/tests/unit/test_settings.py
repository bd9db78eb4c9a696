"""
tests/unit/test_settings.py
──────────────────────────────────────────────────────────────────────────────
Unit tests for environment-driven Settings.
"""
from __future__ import annotations

import dataclasses

import pytest

from jobscope.config.settings import Settings
from jobscope.domain.exceptions import ConfigurationError


class TestSettings:
    def test_ingestion_policy_from_env(self, monkeypatch):
        monkeypatch.setenv("JOBS_API_PER_PAGE", "25")
        monkeypatch.setenv("JOBS_API_MAX_PAGES", "4")
        cfg = Settings()
        assert (cfg.jobs_api_per_page, cfg.jobs_api_max_pages) == (25, 4)

    def test_defaults(self, monkeypatch):
        for key in ("JOBS_API_PER_PAGE", "JOBS_API_MAX_PAGES", "INGEST_INTERVAL_SECONDS"):
            monkeypatch.delenv(key, raising=False)
        cfg = Settings()
        assert cfg.jobs_api_per_page == 40
        assert cfg.jobs_api_max_pages == 1
        assert cfg.ingest_interval_seconds == 3600

    @pytest.mark.parametrize("raw, expected", [
        ("true", True), ("1", True), ("YES", True), ("false", False), ("", False),
    ])
    def test_bool(self, monkeypatch, raw, expected):
        monkeypatch.setenv("SCHEDULER_ENABLED", raw)
        assert Settings().scheduler_enabled is expected

    def test_cors_list(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, https://jobs.example.com,")
        assert Settings().cors_origins == ("http://localhost:3000", "https://jobs.example.com")

    def test_bad_integer(self, monkeypatch):
        monkeypatch.setenv("JOBS_API_TIMEOUT", "thirty")
        with pytest.raises(ConfigurationError, match="JOBS_API_TIMEOUT"):
            Settings()

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            Settings().jobs_api_per_page = 1  # type: ignore[misc]

    def test_account_and_pool_defaults(self, monkeypatch):
        for key in ("JWT_SECRET", "JWT_TTL_SECONDS", "BCRYPT_ROUNDS", "DB_POOL_MIN", "DB_POOL_MAX"):
            monkeypatch.delenv(key, raising=False)
        cfg = Settings()
        assert cfg.jwt_secret == ""
        assert cfg.jwt_ttl_seconds == 3600
        assert cfg.bcrypt_rounds == 10
        assert (cfg.db_pool_min, cfg.db_pool_max) == (1, 10)
