"""runlens daemon package exports."""

from .refresher import REFRESH_JOB_ID, SnapshotRefresher, run_watch

__all__ = [
    "REFRESH_JOB_ID",
    "SnapshotRefresher",
    "run_watch",
]
