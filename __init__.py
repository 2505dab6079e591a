"""
runlens - Training-Run Analytics

Reads completed training runs from Supabase and derives:
- Best runs by win rate
- Failure rate and the failing runs behind it
- Weekly win-rate progression
- Configuration usage (assistants, models, strategies)
"""

__version__ = "0.1.0"
__author__ = "runlens"

from core.config import Config, get_config
from analytics.dashboard import Snapshot, build_dashboard
from daemon.refresher import SnapshotRefresher

__all__ = [
    "Config",
    "get_config",
    "Snapshot",
    "build_dashboard",
    "SnapshotRefresher",
]
