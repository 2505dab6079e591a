"""
Training-run analytics: pure derivations over a record snapshot.
"""

from .records import (
    TrainingRecord,
    WeeklyStat,
    normalize_record,
    normalize_records,
    normalize_weekly_stat,
    normalize_weekly_stats,
    parse_timestamp,
)
from .ranking import DEFAULT_BEST_RUNS_LIMIT, FALLBACK_BEST_RUNS, RankedRun, best_runs
from .failures import (
    ERROR_STATUS,
    FAILURE_WIN_RATE_THRESHOLD,
    HIGH_FAILURE_RATE_THRESHOLD,
    ErrorSummary,
    error_summary,
    is_failing,
    is_high_failure_rate,
    round_half_up,
)
from .weekly import WeeklyPoint, WeeklyProgression, weekly_progression
from .configuration import (
    DEFAULT_ASSISTANT_LABEL,
    DEFAULT_MODEL_NAME,
    DEFAULT_STRATEGY_NAME,
    ConfigurationSummary,
    configuration_summary,
)
from .synthesis import AssistantUsage, TrainingSynthesis, assistant_usage, training_synthesis
from .dashboard import Dashboard, Snapshot, build_dashboard

__all__ = [
    "TrainingRecord",
    "WeeklyStat",
    "normalize_record",
    "normalize_records",
    "normalize_weekly_stat",
    "normalize_weekly_stats",
    "parse_timestamp",
    "DEFAULT_BEST_RUNS_LIMIT",
    "FALLBACK_BEST_RUNS",
    "RankedRun",
    "best_runs",
    "ERROR_STATUS",
    "FAILURE_WIN_RATE_THRESHOLD",
    "HIGH_FAILURE_RATE_THRESHOLD",
    "ErrorSummary",
    "error_summary",
    "is_failing",
    "is_high_failure_rate",
    "round_half_up",
    "WeeklyPoint",
    "WeeklyProgression",
    "weekly_progression",
    "DEFAULT_ASSISTANT_LABEL",
    "DEFAULT_MODEL_NAME",
    "DEFAULT_STRATEGY_NAME",
    "ConfigurationSummary",
    "configuration_summary",
    "AssistantUsage",
    "TrainingSynthesis",
    "assistant_usage",
    "training_synthesis",
    "Dashboard",
    "Snapshot",
    "build_dashboard",
]
