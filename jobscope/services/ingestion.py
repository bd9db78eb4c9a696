"""
services/ingestion.py
──────────────────────────────────────────────────────────────────────────────
Ingestion pipeline: jobs API → code classifier → job store.

One run (ingest_all):
  1. Fetch pages 1..JOBS_API_MAX_PAGES of JOBS_API_PER_PAGE postings, newest
     first.  Paging stops early on a short page.  A fetch failure aborts the
     run and propagates to the trigger (scheduler or manual endpoint).
  2. For every posting: classify_posting() → JobPosting validation →
     store.upsert_job(), sequentially in fetch order.  A failure for one
     posting is logged and counted; the loop carries on.
  3. Log and return an IngestionSummary.

Runs are single-flight: a second trigger while a run is in progress raises
IngestionInProgressError instead of queueing.  Upserts are idempotent per URL,
so this only avoids duplicate work.
"""
from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Optional

from jobscope.config.classification import OTHER
from jobscope.config.settings import Settings
from jobscope.domain.exceptions import IngestionInProgressError
from jobscope.domain.models import IngestionSummary, JobPosting
from jobscope.ports.job_store_port import JobStorePort
from jobscope.ports.jobs_api_port import JobsAPIPort
from jobscope.services.classifier import classify_occupation, classify_sector

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """Fetch, classify and upsert job postings.

    Inject via services/container.py — do not instantiate directly in
    application code.

    Args:
        api:      Any object satisfying JobsAPIPort.
        store:    Any object satisfying JobStorePort.
        settings: Shared application settings (page size and page count).
    """

    def __init__(
        self,
        api: JobsAPIPort,
        store: JobStorePort,
        settings: Settings,
    ) -> None:
        self._api = api
        self._store = store
        self._per_page = max(settings.jobs_api_per_page, 1)
        self._max_pages = max(settings.jobs_api_max_pages, 1)
        self._run_lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._run_lock.locked()

    # ── Public API ─────────────────────────────────────────────────────────

    def fetch_page(self, page: int, per_page: Optional[int] = None) -> list[dict]:
        """Fetch one page and return the raw ``_source`` posting dicts.

        A body without ``hits`` is an empty page, not an error.
        """
        _, postings = self._fetch_hits(page, per_page or self._per_page)
        return postings

    def ingest_all(self) -> IngestionSummary:
        """Run one ingestion pass.

        Returns:
            IngestionSummary with fetched / upserted / failed / skipped counts.

        Raises:
            IngestionInProgressError: If another run holds the lock.
            FetchError:               If any page fetch fails.
        """
        if not self._run_lock.acquire(blocking=False):
            raise IngestionInProgressError("An ingestion run is already in progress")
        try:
            return self._run()
        finally:
            self._run_lock.release()

    # ── Internals ──────────────────────────────────────────────────────────

    def _run(self) -> IngestionSummary:
        summary = IngestionSummary()
        logger.info(
            "Ingestion started | per_page=%d max_pages=%d",
            self._per_page,
            self._max_pages,
        )

        for page in range(1, self._max_pages + 1):
            hits, postings = self._fetch_hits(page, self._per_page)
            summary.pages_fetched += 1
            summary.fetched += len(postings)

            for raw in postings:
                self._ingest_one(raw, summary)

            # Short page = last page.  Counted before malformed hits are dropped.
            if len(hits) < self._per_page:
                break

        summary.finished_at = datetime.now(timezone.utc)
        logger.info(
            "Ingestion finished | pages=%d fetched=%d upserted=%d failed=%d "
            "skipped=%d duration=%.2fs",
            summary.pages_fetched,
            summary.fetched,
            summary.upserted,
            summary.failed,
            summary.skipped,
            summary.duration_seconds,
        )
        return summary

    def _fetch_hits(self, page: int, per_page: int) -> tuple[list, list[dict]]:
        """Return ``(hits, postings)``: every raw hit and the usable ``_source`` dicts."""
        data = self._api.fetch_page(page, per_page)
        hits = data.get("hits") or []
        postings: list[dict] = []
        for hit in hits:
            source = hit.get("_source") if isinstance(hit, dict) else None
            if not isinstance(source, dict):
                logger.warning("Dropping hit without a _source object on page %d", page)
                continue
            postings.append(source)
        logger.debug("page=%d hits=%d usable=%d", page, len(hits), len(postings))
        return hits, postings

    def _ingest_one(self, raw: dict, summary: IngestionSummary) -> None:
        url = raw.get("url")
        if not url or not str(url).strip():
            logger.warning("Skipping posting without url: %r", raw.get("job_title"))
            summary.skipped += 1
            return

        doc = classify_posting(raw)
        try:
            posting = JobPosting.model_validate(doc)
            self._store.upsert_job(posting)
        except Exception:
            logger.exception("Error saving job %s", url)
            summary.failed += 1
            return

        summary.upserted += 1
        logger.debug(
            "Saved job: %s (Category: %s, Sector: %s)",
            posting.job_title,
            posting.category,
            posting.sector,
        )


# ── Pure function: classification of one raw posting ──────────────────────

def classify_posting(raw: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``raw`` with category, sector, noc_code, naics_code.

    The sector comes from the NAICS code; when that finds nothing the
    upstream ``sector`` string is kept, and "Other" is the last resort.

    Examples:
        >>> doc = classify_posting({"url": "u1", "nocs_2021": ["2171"], "naics": ["54"]})
        >>> doc["category"], doc["noc_code"], doc["naics_code"]
        ('Professional occupations in natural and applied sciences', '2171', '54')
    """
    noc_code = _first_code(raw.get("nocs_2021"))
    naics_code = _first_code(raw.get("naics"))

    sector = classify_sector(naics_code)
    if sector == OTHER:
        upstream = raw.get("sector")
        if isinstance(upstream, str) and upstream.strip():
            sector = upstream.strip()

    doc = dict(raw)
    doc.update(
        category=classify_occupation(noc_code),
        sector=sector,
        noc_code=noc_code,
        naics_code=naics_code,
    )
    return doc


def _first_code(value: Any) -> Optional[str]:
    """First element of a list, or the scalar itself, as a string."""
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return None
    text = str(value).strip()
    return text or None
