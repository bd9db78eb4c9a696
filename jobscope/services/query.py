"""
services/query.py
──────────────────────────────────────────────────────────────────────────────
Read-side façade over the job store: listing, category bubbles, category
detail, free-text search and the map view.

The store does the grouping and filtering; this module enriches the results
with category metadata (services/metadata.py) and shapes them into response
models.  It knows nothing about HTTP.

Relatedness:
  A category bubble is flagged ``is_related`` when at least one bubble of a
  different category shares its sector.  The rule is deterministic so the
  same store contents always render the same way.
"""
from __future__ import annotations

import logging
import math
from collections import defaultdict
from typing import Optional

from jobscope.config.classification import OTHER
from jobscope.domain.exceptions import CategoryNotFoundError
from jobscope.domain.models import (
    CategoryDetail,
    CategoryGroup,
    CategorySummary,
    JobPosting,
    JobSummary,
    MapPoint,
    Pagination,
    SearchPage,
)
from jobscope.ports.job_store_port import JobStorePort
from jobscope.services.metadata import metadata_for

logger = logging.getLogger(__name__)


class JobQueryService:
    """Query operations backing the API, CLI and dashboard.

    Args:
        store:        Any object satisfying JobStorePort.
        detail_limit: Default number of postings in a category detail.
    """

    def __init__(self, store: JobStorePort, detail_limit: int = 20) -> None:
        self._store = store
        self._detail_limit = detail_limit

    # ── Listing ────────────────────────────────────────────────────────────

    def list_jobs(self, limit: Optional[int] = None) -> list[JobPosting]:
        return self._store.list_jobs(limit=limit)

    # ── Categories ─────────────────────────────────────────────────────────

    def categories(self) -> list[CategorySummary]:
        """One bubble per (category, sector) group, largest first."""
        groups = sorted(self._store.category_groups(), key=lambda g: g.count, reverse=True)
        related = _related_keys(groups)

        summaries: list[CategorySummary] = []
        for idx, group in enumerate(groups, start=1):
            name = group.category or OTHER
            sector = group.sector or OTHER
            meta = metadata_for(name, sector)
            summaries.append(
                CategorySummary(
                    id=idx,
                    name=name,
                    count=group.count,
                    sector=sector,
                    description=meta.description,
                    skills=meta.skills,
                    salary=meta.salary,
                    median_salary=meta.median_salary,
                    noc_codes=[c for c in group.noc_codes if c],
                    naics_codes=[c for c in group.naics_codes if c],
                    is_related=(name, sector) in related,
                )
            )
        logger.debug("categories | groups=%d", len(summaries))
        return summaries

    def category_detail(self, name: str, limit: Optional[int] = None) -> CategoryDetail:
        """Metadata plus the newest postings of one category.

        Raises:
            CategoryNotFoundError: If no stored posting has this category.
        """
        if not name or not name.strip():
            raise CategoryNotFoundError("Category name is empty")

        jobs = self._store.jobs_by_category(name, limit or self._detail_limit)
        if not jobs:
            raise CategoryNotFoundError(f"Category not found or has no jobs: {name!r}")

        sector = jobs[0].sector or OTHER
        meta = metadata_for(name, sector)
        return CategoryDetail(
            name=name,
            count=len(jobs),
            sector=sector,
            description=meta.description,
            skills=meta.skills,
            salary=meta.salary,
            median_salary=meta.median_salary,
            noc_codes=_distinct(job.noc_code for job in jobs),
            naics_codes=_distinct(job.naics_code for job in jobs),
            jobs=[_to_job_summary(job) for job in jobs],
        )

    # ── Search ─────────────────────────────────────────────────────────────

    def search(self, query: Optional[str], page: int = 1, limit: int = 20) -> SearchPage:
        """Case-insensitive search over title, employer and excerpt.

        An empty query matches every posting.  ``page`` and ``limit`` are
        clamped to at least 1.
        """
        page = max(page, 1)
        limit = max(limit, 1)
        jobs, total = self._store.search((query or "").strip(), (page - 1) * limit, limit)
        return SearchPage(
            jobs=jobs,
            pagination=Pagination(total=total, page=page, pages=math.ceil(total / limit)),
        )

    # ── Map ────────────────────────────────────────────────────────────────

    def map_jobs(self) -> list[MapPoint]:
        """Postings with coordinates, preferring location over derived_location."""
        points: list[MapPoint] = []
        for job in self._store.jobs_with_coordinates():
            coords = job.coordinates
            if coords is None:
                continue
            points.append(
                MapPoint(
                    job_title=job.job_title,
                    employer=job.employer,
                    post_date=job.post_date,
                    url=job.url,
                    latitude=coords.lat,
                    longitude=coords.lon,
                    job_type=job_type_from_title(job.job_title),
                )
            )
        return points


# ── Helpers ────────────────────────────────────────────────────────────────

def job_type_from_title(title: Optional[str]) -> str:
    """FT / PT / Casual from wording in the title, else Other."""
    text = (title or "").lower()
    if "full time" in text:
        return "FT"
    if "part time" in text:
        return "PT"
    if "casual" in text:
        return "Casual"
    return "Other"


def _related_keys(groups: list[CategoryGroup]) -> set[tuple[str, str]]:
    by_sector: dict[str, set[str]] = defaultdict(set)
    for g in groups:
        by_sector[g.sector or OTHER].add(g.category or OTHER)
    return {
        (g.category or OTHER, g.sector or OTHER)
        for g in groups
        if len(by_sector[g.sector or OTHER]) > 1
    }


def _distinct(codes) -> list[str]:
    """Distinct non-empty values in first-seen order."""
    seen: dict[str, None] = {}
    for code in codes:
        if code:
            seen.setdefault(code, None)
    return list(seen)


def _to_job_summary(job: JobPosting) -> JobSummary:
    if job.region:
        location = f"{job.region}, {job.stateprov}" if job.stateprov else job.region
    else:
        location = job.stateprov
    return JobSummary(
        title=job.job_title,
        employer=job.employer,
        location=location,
        post_date=job.post_date,
        url=job.url,
        type=job.type,
    )
