"""
adapters/postgres_job_store.py
──────────────────────────────────────────────────────────────────────────────
Implements JobStorePort using psycopg2.

Database layout (created by ensure_schema()):
  Table : job_postings
  Cols  : id (PK), url (UNIQUE NOT NULL), descriptive fields, lat/lon pairs
          for location and derived_location, wage fields, raw code arrays
          (TEXT[]), derived category / sector / noc_code / naics_code,
          skill_names, created_at, updated_at
  Index : url (unique), category, post_date DESC

Upsert semantics:
  INSERT ... ON CONFLICT (url) DO UPDATE overwrites every column except
  created_at; updated_at is refreshed on every write.

Connection management:
  Statements go through a shared PostgresPool (adapters/postgres_pool.py),
  so the API threadpool and the scheduler thread never share a connection.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import psycopg2

from jobscope.adapters.postgres_pool import PostgresPool
from jobscope.config.settings import Settings
from jobscope.domain.exceptions import DatabaseError
from jobscope.domain.models import CategoryGroup, Coordinates, JobPosting

logger = logging.getLogger(__name__)

_SCHEMA_SQL = """
    CREATE TABLE IF NOT EXISTS job_postings (
        id               BIGSERIAL PRIMARY KEY,
        url              TEXT NOT NULL UNIQUE,
        job_title        TEXT,
        employer         TEXT,
        excerpt          TEXT,
        content          TEXT,
        post_date        TIMESTAMPTZ,
        expiry_date      TIMESTAMPTZ,
        type             TEXT,
        duration         TEXT,
        location_lat     DOUBLE PRECISION,
        location_lon     DOUBLE PRECISION,
        derived_lat      DOUBLE PRECISION,
        derived_lon      DOUBLE PRECISION,
        region           TEXT,
        stateprov        TEXT,
        wage_value       DOUBLE PRECISION,
        wage_unit        TEXT,
        harmonized_wage  DOUBLE PRECISION,
        nocs_2021        TEXT[] NOT NULL DEFAULT '{}',
        major_group_2021 TEXT[] NOT NULL DEFAULT '{}',
        naics            TEXT[] NOT NULL DEFAULT '{}',
        sector           TEXT,
        category         TEXT NOT NULL DEFAULT 'Other',
        noc_code         TEXT,
        naics_code       TEXT,
        skill_names      TEXT[] NOT NULL DEFAULT '{}',
        created_at       TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at       TIMESTAMPTZ NOT NULL DEFAULT now()
    );
    CREATE INDEX IF NOT EXISTS job_postings_category_idx  ON job_postings (category);
    CREATE INDEX IF NOT EXISTS job_postings_post_date_idx ON job_postings (post_date DESC);
"""

# Columns written by upsert_job (must match _posting_to_row)
_WRITE_COLS = (
    "url",
    "job_title",
    "employer",
    "excerpt",
    "content",
    "post_date",
    "expiry_date",
    "type",
    "duration",
    "location_lat",
    "location_lon",
    "derived_lat",
    "derived_lon",
    "region",
    "stateprov",
    "wage_value",
    "wage_unit",
    "harmonized_wage",
    "nocs_2021",
    "major_group_2021",
    "naics",
    "sector",
    "category",
    "noc_code",
    "naics_code",
    "skill_names",
)
_SELECT_COLS = ", ".join(_WRITE_COLS + ("created_at", "updated_at"))

_UPSERT_SQL = """
    INSERT INTO job_postings ({cols})
    VALUES ({values})
    ON CONFLICT (url) DO UPDATE SET
        {updates},
        updated_at = now()
""".format(
    cols=", ".join(_WRITE_COLS),
    values=", ".join(f"%({c})s" for c in _WRITE_COLS),
    updates=",\n        ".join(f"{c} = EXCLUDED.{c}" for c in _WRITE_COLS if c != "url"),
)

_ORDER_NEWEST = "ORDER BY post_date DESC NULLS LAST, id DESC"

_SEARCH_WHERE = """
    WHERE job_title ILIKE %(pattern)s
       OR employer  ILIKE %(pattern)s
       OR excerpt   ILIKE %(pattern)s
"""


class PostgresJobStore:
    """psycopg2 implementation of JobStorePort.

    Injected into IngestionPipeline and JobQueryService via
    services/container.py.
    """

    def __init__(self, settings: Settings, pool: Optional[PostgresPool] = None) -> None:
        self._pool = pool or PostgresPool(settings)
        logger.debug("PostgresJobStore ready | dsn=%s", settings.db_dsn)

    # ── Schema ─────────────────────────────────────────────────────────────

    def ensure_schema(self) -> None:
        """Create the job_postings table and its indexes if missing."""
        try:
            self._execute(_SCHEMA_SQL, ())
        except psycopg2.Error as exc:
            raise DatabaseError(f"ensure_schema failed: {exc}") from exc
        logger.info("PostgresJobStore schema ensured")

    # ── JobStorePort: write path ───────────────────────────────────────────

    def upsert_job(self, posting: JobPosting) -> None:
        try:
            self._execute(_UPSERT_SQL, _posting_to_row(posting))
        except psycopg2.Error as exc:
            raise DatabaseError(f"upsert_job failed for {posting.url}: {exc}") from exc

    # ── JobStorePort: read paths ───────────────────────────────────────────

    def count(self) -> int:
        try:
            rows = self._execute("SELECT COUNT(*) AS n FROM job_postings", ())
        except psycopg2.Error as exc:
            raise DatabaseError(f"count failed: {exc}") from exc
        return int(rows[0]["n"]) if rows else 0

    def list_jobs(self, limit: Optional[int] = None) -> list[JobPosting]:
        sql = f"SELECT {_SELECT_COLS} FROM job_postings {_ORDER_NEWEST}"
        params: tuple = ()
        if limit is not None:
            sql += " LIMIT %s"
            params = (limit,)
        return self._fetch_postings(sql, params, "list_jobs")

    def category_groups(self) -> list[CategoryGroup]:
        sql = """
            SELECT category,
                   sector,
                   COUNT(*) AS count,
                   COALESCE(array_agg(DISTINCT noc_code)
                            FILTER (WHERE noc_code IS NOT NULL), '{}'::text[])   AS noc_codes,
                   COALESCE(array_agg(DISTINCT naics_code)
                            FILTER (WHERE naics_code IS NOT NULL), '{}'::text[]) AS naics_codes
            FROM   job_postings
            GROUP  BY category, sector
            ORDER  BY count DESC, category, sector
        """
        try:
            rows = self._execute(sql, ())
        except psycopg2.Error as exc:
            raise DatabaseError(f"category_groups failed: {exc}") from exc
        return [
            CategoryGroup(
                category=row["category"],
                sector=row["sector"],
                count=row["count"],
                noc_codes=list(row["noc_codes"] or []),
                naics_codes=list(row["naics_codes"] or []),
            )
            for row in rows
        ]

    def jobs_by_category(self, category: str, limit: int) -> list[JobPosting]:
        sql = f"""
            SELECT {_SELECT_COLS}
            FROM   job_postings
            WHERE  category = %s
            {_ORDER_NEWEST}
            LIMIT  %s
        """
        return self._fetch_postings(sql, (category, limit), "jobs_by_category")

    def search(
        self,
        query: str,
        offset: int,
        limit: int,
    ) -> tuple[list[JobPosting], int]:
        params = {"pattern": _like_pattern(query), "offset": offset, "limit": limit}
        page_sql = f"""
            SELECT {_SELECT_COLS}
            FROM   job_postings
            {_SEARCH_WHERE}
            {_ORDER_NEWEST}
            OFFSET %(offset)s
            LIMIT  %(limit)s
        """
        count_sql = f"SELECT COUNT(*) AS n FROM job_postings {_SEARCH_WHERE}"
        jobs = self._fetch_postings(page_sql, params, "search")
        try:
            rows = self._execute(count_sql, params)
        except psycopg2.Error as exc:
            raise DatabaseError(f"search count failed: {exc}") from exc
        return jobs, int(rows[0]["n"]) if rows else 0

    def jobs_with_coordinates(self) -> list[JobPosting]:
        sql = f"""
            SELECT {_SELECT_COLS}
            FROM   job_postings
            WHERE  (location_lat IS NOT NULL AND location_lon IS NOT NULL)
               OR  (derived_lat  IS NOT NULL AND derived_lon  IS NOT NULL)
            {_ORDER_NEWEST}
        """
        return self._fetch_postings(sql, (), "jobs_with_coordinates")

    # ── Connection helpers ─────────────────────────────────────────────────

    def _fetch_postings(self, sql: str, params: Any, op: str) -> list[JobPosting]:
        try:
            rows = self._execute(sql, params)
        except psycopg2.Error as exc:
            raise DatabaseError(f"{op} failed: {exc}") from exc
        return [_row_to_posting(row) for row in rows]

    def _execute(self, sql: str, params: Any) -> list[dict]:
        return self._pool.execute(sql, params)

    def close(self) -> None:
        self._pool.close()


# ── Row mapping ────────────────────────────────────────────────────────────

def _posting_to_row(posting: JobPosting) -> dict[str, Any]:
    row = posting.model_dump(
        include={c for c in _WRITE_COLS if c in JobPosting.model_fields}
    )
    loc = posting.location or Coordinates()
    derived = posting.derived_location or Coordinates()
    row.update(
        location_lat=loc.lat,
        location_lon=loc.lon,
        derived_lat=derived.lat,
        derived_lon=derived.lon,
    )
    return row


def _row_to_posting(row: dict) -> JobPosting:
    data = dict(row)
    lat, lon = data.pop("location_lat", None), data.pop("location_lon", None)
    d_lat, d_lon = data.pop("derived_lat", None), data.pop("derived_lon", None)
    if lat is not None or lon is not None:
        data["location"] = {"lat": lat, "lon": lon}
    if d_lat is not None or d_lon is not None:
        data["derived_location"] = {"lat": d_lat, "lon": d_lon}
    return JobPosting.model_validate(data)


def _like_pattern(query: str) -> str:
    """ILIKE pattern matching ``query`` literally anywhere in the text."""
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
