"""
runlens snapshot refresher

Polls the record store on a fixed interval and keeps the latest snapshot.
Each successful refresh swaps in a whole new snapshot; a failed one leaves
the previous snapshot in place and records the error.
"""

import asyncio
import logging
import signal
import sys
import threading
from datetime import datetime, timezone
from typing import Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from analytics.dashboard import Dashboard, Snapshot, build_dashboard
from analytics.ranking import DEFAULT_BEST_RUNS_LIMIT
from cloud.base import RecordStore
from core.config import Config, get_config
from core.errors import FetchError, SnapshotUnavailable

logger = logging.getLogger("runlens.daemon")

REFRESH_JOB_ID = "snapshot_refresh"

SnapshotListener = Callable[[Snapshot], None]


class SnapshotRefresher:
    """
    Owns the store and the current snapshot.

    The store is read in a worker thread so the event loop (API server or
    watch loop) stays responsive while a fetch is in flight. A lock around
    fetch-and-swap keeps manual and scheduled refreshes from overlapping.
    """

    def __init__(
        self,
        store: RecordStore,
        *,
        interval_seconds: int = 30,
        best_runs_limit: int = DEFAULT_BEST_RUNS_LIMIT,
        scheduler: Optional[AsyncIOScheduler] = None,
    ):
        self.store = store
        self.interval_seconds = int(interval_seconds)
        self.best_runs_limit = int(best_runs_limit)
        self.scheduler = scheduler or AsyncIOScheduler()

        self._snapshot: Optional[Snapshot] = None
        self._listeners: list[SnapshotListener] = []
        self._refresh_lock = threading.Lock()

        self.last_error: Optional[FetchError] = None
        self.last_attempt_at: Optional[datetime] = None
        self.refresh_count = 0
        self.failure_count = 0

    @classmethod
    def from_config(cls, store: RecordStore, config: Optional[Config] = None) -> "SnapshotRefresher":
        config = config or get_config()
        return cls(
            store,
            interval_seconds=config.refresh.interval_seconds,
            best_runs_limit=config.refresh.best_runs_limit,
        )

    @property
    def snapshot(self) -> Optional[Snapshot]:
        return self._snapshot

    def add_listener(self, listener: SnapshotListener) -> None:
        self._listeners.append(listener)

    # ==================== Refresh ====================

    def refresh(self) -> Snapshot:
        """
        Fetch both sources and replace the held snapshot.

        Raises ``FetchError`` unchanged; the current snapshot is untouched.
        Scheduled and manual refreshes run one at a time.
        """
        with self._refresh_lock:
            self.last_attempt_at = datetime.now(timezone.utc)
            try:
                record_rows = self.store.list_training_records()
                weekly_rows = self.store.list_weekly_stats()
            except FetchError as e:
                self.last_error = e
                self.failure_count += 1
                raise

            snapshot = Snapshot.from_rows(record_rows, weekly_rows, fetched_at=self.last_attempt_at)
            self._snapshot = snapshot
            self.last_error = None
            self.refresh_count += 1

        logger.info(
            "Snapshot refreshed: %d records, %d weekly rows",
            len(snapshot.records),
            len(snapshot.weekly),
        )
        if snapshot.defaulted_field_count:
            logger.info("%d malformed field(s) were defaulted during normalization", snapshot.defaulted_field_count)

        for listener in self._listeners:
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Snapshot listener %r failed", listener)

        return snapshot

    async def refresh_async(self) -> Snapshot:
        return await asyncio.to_thread(self.refresh)

    async def _job_refresh(self):
        """Scheduled refresh; a failure keeps the previous snapshot until the next tick"""
        try:
            await self.refresh_async()
        except FetchError as e:
            kept = self._snapshot.fetched_at.isoformat() if self._snapshot else "none"
            logger.warning(f"Scheduled refresh failed ({e}); keeping snapshot from {kept}")

    # ==================== Derivations ====================

    def dashboard(self, n: Optional[int] = None) -> Dashboard:
        """Build every derived view from the current snapshot"""
        snapshot = self._snapshot
        if snapshot is None:
            reason = f": {self.last_error}" if self.last_error else ""
            raise SnapshotUnavailable(f"No snapshot has been fetched yet{reason}")
        return build_dashboard(snapshot, self.best_runs_limit if n is None else n)

    def status(self) -> dict:
        snapshot = self._snapshot
        return {
            "store": self.store.name,
            "interval_seconds": self.interval_seconds,
            "has_snapshot": snapshot is not None,
            "snapshot_fetched_at": snapshot.fetched_at.isoformat() if snapshot else None,
            "record_count": len(snapshot.records) if snapshot else 0,
            "refresh_count": self.refresh_count,
            "failure_count": self.failure_count,
            "last_attempt_at": self.last_attempt_at.isoformat() if self.last_attempt_at else None,
            "last_error": str(self.last_error) if self.last_error else None,
        }

    # ==================== Lifecycle ====================

    def start(self, *, run_now: bool = True):
        """Register the polling job and start the scheduler (needs a running event loop)"""
        # next_run_time=None would add the job paused
        extra = {"next_run_time": datetime.now(timezone.utc)} if run_now else {}
        self.scheduler.add_job(
            self._job_refresh,
            IntervalTrigger(seconds=self.interval_seconds),
            id=REFRESH_JOB_ID,
            name="Snapshot Refresh",
            max_instances=1,
            coalesce=True,
            replace_existing=True,
            **extra,
        )
        self.scheduler.start()
        logger.info(f"Snapshot refresher started (every {self.interval_seconds}s from {self.store.name})")

    def stop(self):
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        logger.info("Snapshot refresher stopped")


# ==================== Watch loop ====================

def _log_dashboard_summary(refresher: SnapshotRefresher) -> SnapshotListener:
    def _listener(snapshot: Snapshot) -> None:
        view = build_dashboard(snapshot, refresher.best_runs_limit)
        top = view.best_runs[0] if view.best_runs else None
        logger.info(
            "Failure rate %.1f%% over %d runs; top run %s at %.1f%%",
            view.errors.rate,
            view.errors.total_count,
            top.pattern_name if top else "-",
            top.win_rate if top else 0.0,
        )
    return _listener


async def run_watch(refresher: SnapshotRefresher):
    """Run the refresher until interrupted"""
    refresher.add_listener(_log_dashboard_summary(refresher))

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, shutting down...")
        refresher.stop()
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    refresher.start()
    while True:
        await asyncio.sleep(1)
