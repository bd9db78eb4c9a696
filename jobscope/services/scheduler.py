"""
services/scheduler.py
──────────────────────────────────────────────────────────────────────────────
Periodic ingestion trigger.

A daemon thread calls IngestionPipeline.ingest_all() every
INGEST_INTERVAL_SECONDS (hourly by default).  Errors from a run are logged and
discarded so the next tick still happens; a tick that lands while a manual
run is in progress is skipped.

Used by the FastAPI lifespan (SCHEDULER_ENABLED=true) and by
``jobscope schedule``.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from jobscope.domain.exceptions import IngestionInProgressError
from jobscope.domain.models import IngestionSummary
from jobscope.services.ingestion import IngestionPipeline

logger = logging.getLogger(__name__)


class IngestionScheduler:
    """Run ingestion on a fixed interval in a background thread.

    Args:
        pipeline:         The ingestion pipeline to trigger.
        interval_seconds: Seconds between the end of one tick and the next.
        run_immediately:  Tick once on start instead of waiting an interval.
    """

    def __init__(
        self,
        pipeline: IngestionPipeline,
        interval_seconds: int,
        run_immediately: bool = False,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._pipeline = pipeline
        self._interval = interval_seconds
        self._run_immediately = run_immediately
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._loop, name="ingestion-scheduler", daemon=True
        )
        self._thread.start()
        logger.info("Ingestion scheduler started | interval=%ds", self._interval)

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Ingestion scheduler stopped")

    def wait(self) -> None:
        """Block until stop() is called from another thread or a signal."""
        self._stop.wait()

    def run_once(self) -> Optional[IngestionSummary]:
        """One scheduled tick.  Never raises; returns None if the run failed."""
        logger.info("Scheduled job: fetching and saving jobs")
        try:
            summary = self._pipeline.ingest_all()
        except IngestionInProgressError:
            logger.info("Scheduled ingestion skipped: a run is already in progress")
            return None
        except Exception:
            logger.exception("Error updating job postings")
            return None
        logger.info("Job postings updated successfully")
        return summary

    def _loop(self) -> None:
        if self._run_immediately:
            self.run_once()
        while not self._stop.wait(self._interval):
            self.run_once()
