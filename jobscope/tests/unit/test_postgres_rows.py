"""
tests/unit/test_postgres_rows.py
──────────────────────────────────────────────────────────────────────────────
Unit tests for PostgresJobStore without a database.

Covers the pure row-mapping helpers and the error translation in the store,
with psycopg2.pool.ThreadedConnectionPool patched to hand out MagicMock
connections.
"""
from __future__ import annotations

import dataclasses
from datetime import datetime
from unittest.mock import MagicMock, call, patch

import psycopg2
import pytest
from psycopg2.pool import PoolError

from jobscope.adapters.postgres_job_store import (
    _UPSERT_SQL,
    _WRITE_COLS,
    PostgresJobStore,
    _like_pattern,
    _posting_to_row,
    _row_to_posting,
)
from jobscope.adapters.postgres_pool import PostgresPool
from jobscope.domain.exceptions import DatabaseError
from jobscope.domain.models import JobPosting


def _posting(**fields) -> JobPosting:
    data = {
        "url": "https://x/1",
        "job_title": "Engineer",
        "category": "Senior management",
        "sector": "Utilities",
        "noc_code": "00012",
        "naics_code": "22",
        "nocs_2021": ["00012"],
        "naics": ["22"],
        "post_date": "2024-05-01T09:00:00",
    }
    data.update(fields)
    return JobPosting.model_validate(data)


# ── Row mapping ────────────────────────────────────────────────────────────

class TestPostingToRow:
    def test_has_every_write_column(self):
        row = _posting_to_row(_posting())
        assert set(row) == set(_WRITE_COLS)

    def test_flattens_coordinates(self):
        row = _posting_to_row(_posting(
            location={"lat": 43.6, "lon": -79.4},
            derived_location="45.4,-75.7",
        ))
        assert (row["location_lat"], row["location_lon"]) == (43.6, -79.4)
        assert (row["derived_lat"], row["derived_lon"]) == (45.4, -75.7)

    def test_missing_coordinates_are_null(self):
        row = _posting_to_row(_posting())
        assert row["location_lat"] is None
        assert row["derived_lon"] is None

    def test_keeps_classification(self):
        row = _posting_to_row(_posting())
        assert row["category"] == "Senior management"
        assert row["nocs_2021"] == ["00012"]
        assert row["post_date"] == datetime(2024, 5, 1, 9, 0)


class TestRowToPosting:
    def test_rebuilds_coordinates(self):
        row = _posting_to_row(_posting(location={"lat": 43.6, "lon": -79.4}))
        posting = _row_to_posting(row)
        assert posting.location.lat == 43.6
        assert posting.derived_location is None
        assert posting.coordinates.lon == -79.4

    def test_round_trip_preserves_fields(self):
        original = _posting(skill_names=["Python", "SQL"])
        restored = _row_to_posting(_posting_to_row(original))
        assert restored == original

    def test_null_arrays_from_db(self):
        row = _posting_to_row(_posting())
        row.update(nocs_2021=None, skill_names=None, category=None)
        posting = _row_to_posting(row)
        assert posting.nocs_2021 == []
        assert posting.skill_names == []
        assert posting.category == "Other"


class TestLikePattern:
    def test_wraps_in_wildcards(self):
        assert _like_pattern("dev") == "%dev%"

    def test_empty_matches_all(self):
        assert _like_pattern("") == "%%"

    def test_escapes_wildcards(self):
        assert _like_pattern("100%_a\\b") == "%100\\%\\_a\\\\b%"


class TestUpsertSql:
    def test_conflict_on_url(self):
        assert "ON CONFLICT (url) DO UPDATE" in _UPSERT_SQL

    def test_created_at_not_overwritten(self):
        assert "created_at" not in _UPSERT_SQL
        assert "updated_at = now()" in _UPSERT_SQL


# ── Error translation ──────────────────────────────────────────────────────

@pytest.fixture
def mock_pool():
    with patch("jobscope.adapters.postgres_pool.ThreadedConnectionPool") as pool_cls:
        pool = pool_cls.return_value
        pool.closed = False
        pool.getconn.return_value = MagicMock()
        yield pool


@pytest.fixture
def mock_conn(mock_pool):
    return mock_pool.getconn.return_value


def _cursor(conn) -> MagicMock:
    return conn.cursor.return_value.__enter__.return_value


class TestStoreErrors:
    def test_connect_failure(self, settings):
        with patch(
            "jobscope.adapters.postgres_pool.ThreadedConnectionPool",
            side_effect=psycopg2.OperationalError("no server"),
        ):
            with pytest.raises(DatabaseError, match="Cannot connect"):
                PostgresJobStore(settings).count()

    def test_upsert_failure_names_url(self, settings, mock_conn):
        _cursor(mock_conn).execute.side_effect = psycopg2.IntegrityError("bad row")
        with pytest.raises(DatabaseError, match="https://x/1"):
            PostgresJobStore(settings).upsert_job(_posting())

    def test_reconnects_once(self, settings, mock_pool, mock_conn):
        cur = _cursor(mock_conn)
        cur.execute.side_effect = [psycopg2.OperationalError("gone"), None]
        cur.description = [("n",)]
        cur.fetchall.return_value = [{"n": 7}]
        assert PostgresJobStore(settings).count() == 7
        assert mock_pool.putconn.call_args_list == [
            call(mock_conn, close=True),
            call(mock_conn, close=False),
        ]

    def test_gives_up_after_second_operational_error(self, settings, mock_conn):
        _cursor(mock_conn).execute.side_effect = psycopg2.OperationalError("gone")
        with pytest.raises(DatabaseError, match="after reconnect"):
            PostgresJobStore(settings).count()

    def test_upsert_sends_row(self, settings, mock_conn):
        cur = _cursor(mock_conn)
        cur.description = None
        PostgresJobStore(settings).upsert_job(_posting())
        sql, params = cur.execute.call_args.args
        assert sql == _UPSERT_SQL
        assert params["url"] == "https://x/1"


# ── Connection pool ────────────────────────────────────────────────────────

class TestPostgresPool:
    def test_pool_sized_from_settings(self, settings):
        cfg = dataclasses.replace(settings, db_pool_min=2, db_pool_max=5)
        with patch("jobscope.adapters.postgres_pool.ThreadedConnectionPool") as pool_cls:
            pool_cls.return_value.closed = False
            PostgresPool(cfg).execute("SELECT 1", ())
        pool_cls.assert_called_once_with(2, 5, cfg.db_dsn)

    def test_pool_created_once(self, settings, mock_pool):
        pool = PostgresPool(settings)
        pool.execute("SELECT 1", ())
        pool.execute("SELECT 2", ())
        assert mock_pool.getconn.call_count == 2

    def test_connection_returned_after_failure(self, settings, mock_pool, mock_conn):
        _cursor(mock_conn).execute.side_effect = psycopg2.IntegrityError("bad row")
        with pytest.raises(psycopg2.IntegrityError):
            PostgresPool(settings).execute("INSERT", ())
        mock_pool.putconn.assert_called_once_with(mock_conn, close=False)

    def test_statement_inside_another_gets_its_own_connection(self, settings, mock_pool):
        outer, inner = MagicMock(), MagicMock()
        mock_pool.getconn.side_effect = [outer, inner]
        pool = PostgresPool(settings)

        _cursor(outer).execute.side_effect = lambda sql, params: pool.execute("SELECT 2", ())
        _cursor(outer).description = None
        _cursor(inner).description = None
        pool.execute("SELECT 1", ())

        assert mock_pool.putconn.call_args_list == [
            call(inner, close=False),
            call(outer, close=False),
        ]

    def test_exhausted_pool(self, settings, mock_pool):
        mock_pool.getconn.side_effect = PoolError("connection pool exhausted")
        with pytest.raises(DatabaseError, match="No database connection available"):
            PostgresPool(settings).execute("SELECT 1", ())

    def test_shared_by_stores(self, settings, mock_pool, mock_conn):
        _cursor(mock_conn).description = [("n",)]
        _cursor(mock_conn).fetchall.return_value = [{"n": 1}]
        shared = PostgresPool(settings)
        PostgresJobStore(settings, pool=shared).count()
        PostgresJobStore(settings, pool=shared).count()
        assert mock_pool.getconn.call_count == 2

    def test_close(self, settings, mock_pool):
        pool = PostgresPool(settings)
        pool.execute("SELECT 1", ())
        pool.close()
        mock_pool.closeall.assert_called_once_with()
