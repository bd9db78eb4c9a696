"""
ports/job_store_port.py
──────────────────────────────────────────────────────────────────────────────
Abstract interface for the persisted job posting store.

The port separates the write path used by ingestion:
  upsert_job          — insert-or-update keyed by posting URL
from the read paths used by the query service:
  list_jobs / category_groups / jobs_by_category / search /
  jobs_with_coordinates / count

Aggregation stays in the store (it owns the query engine); enrichment with
category metadata is done in pure Python (services/query.py), making it
trivially unit-testable with no database dependency.

Current implementation: PostgresJobStore (psycopg2)
"""
from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from jobscope.domain.models import CategoryGroup, JobPosting


@runtime_checkable
class JobStorePort(Protocol):
    """Contract for the job posting store."""

    def upsert_job(self, posting: JobPosting) -> None:
        """Insert the posting, or overwrite every field of the one with its URL.

        Raises:
            DatabaseError: On constraint or connection failure.
        """
        ...

    def count(self) -> int:
        """Number of stored postings."""
        ...

    def list_jobs(self, limit: Optional[int] = None) -> list[JobPosting]:
        """All postings, newest ``post_date`` first."""
        ...

    def category_groups(self) -> list[CategoryGroup]:
        """Postings grouped by (category, sector), largest group first.

        Each group carries the distinct non-null NOC and NAICS codes seen.
        """
        ...

    def jobs_by_category(self, category: str, limit: int) -> list[JobPosting]:
        """Up to ``limit`` postings of one category, newest first."""
        ...

    def search(
        self,
        query: str,
        offset: int,
        limit: int,
    ) -> tuple[list[JobPosting], int]:
        """Case-insensitive substring search over title, employer and excerpt.

        Returns:
            (page of postings newest first, total number of matches)
        """
        ...

    def jobs_with_coordinates(self) -> list[JobPosting]:
        """Postings that have a complete primary or derived location."""
        ...
