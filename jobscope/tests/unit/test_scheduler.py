"""
tests/unit/test_scheduler.py
──────────────────────────────────────────────────────────────────────────────
Unit tests for IngestionScheduler.

The pipeline is a MagicMock; thread tests use short intervals and Events so
they finish in milliseconds.
"""
from __future__ import annotations

import threading
from unittest.mock import MagicMock

import pytest

from jobscope.domain.exceptions import FetchError, IngestionInProgressError
from jobscope.domain.models import IngestionSummary
from jobscope.services.scheduler import IngestionScheduler


@pytest.fixture
def mock_pipeline():
    pipeline = MagicMock()
    pipeline.ingest_all.return_value = IngestionSummary(fetched=2, upserted=2)
    return pipeline


class TestRunOnce:
    def test_returns_summary(self, mock_pipeline):
        summary = IngestionScheduler(mock_pipeline, 60).run_once()
        assert summary.upserted == 2
        mock_pipeline.ingest_all.assert_called_once()

    def test_fetch_error_is_swallowed(self, mock_pipeline):
        mock_pipeline.ingest_all.side_effect = FetchError("upstream down")
        assert IngestionScheduler(mock_pipeline, 60).run_once() is None

    def test_in_progress_is_skipped(self, mock_pipeline):
        mock_pipeline.ingest_all.side_effect = IngestionInProgressError("busy")
        assert IngestionScheduler(mock_pipeline, 60).run_once() is None

    def test_next_tick_runs_after_a_failure(self, mock_pipeline):
        mock_pipeline.ingest_all.side_effect = [
            FetchError("upstream down"),
            IngestionSummary(upserted=1),
        ]
        scheduler = IngestionScheduler(mock_pipeline, 60)
        assert scheduler.run_once() is None
        assert scheduler.run_once().upserted == 1


class TestLifecycle:
    @pytest.mark.parametrize("interval", [0, -5])
    def test_interval_must_be_positive(self, mock_pipeline, interval):
        with pytest.raises(ValueError):
            IngestionScheduler(mock_pipeline, interval)

    def test_run_immediately(self, mock_pipeline):
        ran = threading.Event()
        mock_pipeline.ingest_all.side_effect = lambda: ran.set()

        scheduler = IngestionScheduler(mock_pipeline, 3600, run_immediately=True)
        scheduler.start()
        try:
            assert ran.wait(timeout=2)
        finally:
            scheduler.stop()
        assert not scheduler.is_running

    def test_waits_one_interval_by_default(self, mock_pipeline):
        scheduler = IngestionScheduler(mock_pipeline, 3600)
        scheduler.start()
        assert scheduler.is_running
        scheduler.stop()
        mock_pipeline.ingest_all.assert_not_called()

    def test_ticks_repeatedly(self, mock_pipeline):
        ticks = []
        done = threading.Event()

        def ingest():
            ticks.append(1)
            if len(ticks) >= 3:
                done.set()

        mock_pipeline.ingest_all.side_effect = ingest
        scheduler = IngestionScheduler(mock_pipeline, 0.01)
        scheduler.start()
        try:
            assert done.wait(timeout=2)
        finally:
            scheduler.stop()
        assert len(ticks) >= 3

    def test_start_twice_keeps_one_thread(self, mock_pipeline):
        scheduler = IngestionScheduler(mock_pipeline, 3600)
        scheduler.start()
        first = scheduler._thread
        scheduler.start()
        assert scheduler._thread is first
        scheduler.stop()

    def test_wait_returns_after_stop(self, mock_pipeline):
        scheduler = IngestionScheduler(mock_pipeline, 3600)
        scheduler.start()
        threading.Timer(0.05, scheduler.stop).start()
        scheduler.wait()  # returns once stop() fires
        mock_pipeline.ingest_all.assert_not_called()
