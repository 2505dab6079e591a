"""runlens core: configuration, logging, errors"""

from .config import Config, get_config, reload_config
from .errors import FetchError, RunlensError, SnapshotUnavailable, StoreConfigError
from .logging_setup import setup_logging

__all__ = [
    "Config",
    "get_config",
    "reload_config",
    "FetchError",
    "RunlensError",
    "SnapshotUnavailable",
    "StoreConfigError",
    "setup_logging",
]
