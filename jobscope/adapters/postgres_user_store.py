"""
adapters/postgres_user_store.py
──────────────────────────────────────────────────────────────────────────────
Implements UserStorePort using psycopg2.

Database layout (created by ensure_schema()):
  Table : users
  Cols  : id (PK), full_name, email (UNIQUE NOT NULL), password_hash,
          created_at

Shares the PostgresPool of the job store (see services/container.py).
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import psycopg2
import psycopg2.errors

from jobscope.adapters.postgres_pool import PostgresPool
from jobscope.config.settings import Settings
from jobscope.domain.exceptions import DatabaseError, UserAlreadyExistsError
from jobscope.domain.models import User

logger = logging.getLogger(__name__)

_SCHEMA_SQL = """
    CREATE TABLE IF NOT EXISTS users (
        id            BIGSERIAL PRIMARY KEY,
        full_name     TEXT NOT NULL,
        email         TEXT NOT NULL UNIQUE,
        password_hash TEXT NOT NULL,
        created_at    TIMESTAMPTZ NOT NULL DEFAULT now()
    );
"""

_USER_COLS = "id, full_name, email, password_hash, created_at"


class PostgresUserStore:
    """psycopg2 implementation of UserStorePort."""

    def __init__(self, settings: Settings, pool: Optional[PostgresPool] = None) -> None:
        self._pool = pool or PostgresPool(settings)

    def ensure_schema(self) -> None:
        """Create the users table if missing."""
        try:
            self._pool.execute(_SCHEMA_SQL, ())
        except psycopg2.Error as exc:
            raise DatabaseError(f"ensure_schema failed: {exc}") from exc
        logger.info("PostgresUserStore schema ensured")

    def create_user(self, full_name: str, email: str, password_hash: str) -> User:
        sql = f"""
            INSERT INTO users (full_name, email, password_hash)
            VALUES (%s, %s, %s)
            RETURNING {_USER_COLS}
        """
        try:
            rows = self._pool.execute(sql, (full_name, email, password_hash))
        except psycopg2.errors.UniqueViolation as exc:
            raise UserAlreadyExistsError(f"User {email} already exists") from exc
        except psycopg2.Error as exc:
            raise DatabaseError(f"create_user failed: {exc}") from exc
        logger.info("User registered | id=%s", rows[0]["id"])
        return User.model_validate(dict(rows[0]))

    def get_by_email(self, email: str) -> Optional[User]:
        return self._fetch_one(f"SELECT {_USER_COLS} FROM users WHERE email = %s", (email,))

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._fetch_one(f"SELECT {_USER_COLS} FROM users WHERE id = %s", (user_id,))

    def _fetch_one(self, sql: str, params: Any) -> Optional[User]:
        try:
            rows = self._pool.execute(sql, params)
        except psycopg2.Error as exc:
            raise DatabaseError(f"user lookup failed: {exc}") from exc
        return User.model_validate(dict(rows[0])) if rows else None
