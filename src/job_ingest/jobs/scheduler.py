"""
Daily trigger and "run now" for the crawl orchestrator

One ingestion run at a time per process: a scheduled run and a manual
run_now() share a lock, and a second request while a run is in flight is
refused. Separate processes are not coordinated; their writes are idempotent
upserts, so an overlap only repeats work.
"""

import logging
import threading
from datetime import datetime, timedelta
from typing import Any

from job_ingest.jobs.crawl_orchestrator import CrawlOrchestrator

logger = logging.getLogger(__name__)


def seconds_until_next_run(now: datetime, hour: int) -> float:
    """Seconds from now until the next HH:00 (tomorrow if today's has passed)"""
    next_run = now.replace(hour=hour, minute=0, second=0, microsecond=0)
    if next_run <= now:
        next_run += timedelta(days=1)
    return (next_run - now).total_seconds()


class IngestionScheduler:
    def __init__(self, orchestrator: CrawlOrchestrator, run_hour: int = 9):
        self.orchestrator = orchestrator
        self.run_hour = run_hour

        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

        # status fields
        self.last_run_started_at: str | None = None
        self.last_run_finished_at: str | None = None
        self.last_run_report: dict[str, Any] | None = None
        self.last_error: str | None = None
        self.next_run_at: str | None = None

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    def run_once(self, trigger: str = "manual") -> dict[str, Any] | None:
        """
        Run daily ingestion in the calling thread

        Returns:
            The ingestion report, or None if another run is already in flight
        """
        if not self._lock.acquire(blocking=False):
            logger.warning("Ingestion already running, ignoring %s trigger", trigger)
            return None
        return self._run_locked(trigger)

    def _run_locked(self, trigger: str) -> dict[str, Any] | None:
        """Body of a run; the caller already holds the lock"""
        try:
            self.last_error = None
            self.last_run_started_at = datetime.now().isoformat()
            logger.info("Ingestion run starting (trigger=%s)", trigger)

            report = None
            try:
                report = self.orchestrator.run_daily_ingestion()
                self.last_run_report = report
            except Exception as e:
                self.last_error = str(e)
                logger.exception("Ingestion run failed")
            finally:
                self.last_run_finished_at = datetime.now().isoformat()
            return report
        finally:
            self._lock.release()

    def run_now(self) -> dict[str, Any]:
        """
        Start daily ingestion on a background thread and return immediately

        Returns:
            {"started": bool, "message": str}
        """
        if not self._lock.acquire(blocking=False):
            return {"started": False, "message": "Ingestion is already running in background"}

        self._thread = threading.Thread(
            target=self._run_locked, args=("run-now",), name="ingestion-run-now", daemon=True
        )
        self._thread.start()
        return {"started": True, "message": "Ingestion started in background"}

    def wait(self, timeout: float | None = None) -> None:
        """Block until the last run_now() thread finishes"""
        if self._thread is not None:
            self._thread.join(timeout)

    def run_forever(self) -> None:
        """Sleep until run_hour each day and run; returns after stop()"""
        logger.info("Scheduler started, daily run at %02d:00", self.run_hour)
        while not self._stop.is_set():
            now = datetime.now()
            delay = seconds_until_next_run(now, self.run_hour)
            self.next_run_at = (now + timedelta(seconds=delay)).isoformat()
            logger.info("Next ingestion run at %s", self.next_run_at)

            if self._stop.wait(delay):
                break
            self.run_once(trigger="daily")

        self.next_run_at = None
        logger.info("Scheduler stopped")

    def stop(self) -> None:
        self._stop.set()

    def status(self) -> dict[str, Any]:
        return {
            "run_hour": self.run_hour,
            "running": self.is_running,
            "last_run_started_at": self.last_run_started_at,
            "last_run_finished_at": self.last_run_finished_at,
            "last_run_report": self.last_run_report,
            "last_error": self.last_error,
            "next_run_at": self.next_run_at,
        }
