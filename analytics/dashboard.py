"""
Snapshot type and one-shot dashboard assembly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from .configuration import ConfigurationSummary, configuration_summary
from .failures import ErrorSummary, error_summary
from .ranking import DEFAULT_BEST_RUNS_LIMIT, RankedRun, best_runs
from .records import TrainingRecord, WeeklyStat, normalize_records, normalize_weekly_stats
from .synthesis import AssistantUsage, TrainingSynthesis, assistant_usage, training_synthesis
from .weekly import WeeklyProgression, weekly_progression


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Snapshot:
    """Everything fetched from the store in one refresh. Replaced, never mutated."""

    records: tuple[TrainingRecord, ...] = field(default_factory=tuple)
    weekly: tuple[WeeklyStat, ...] = field(default_factory=tuple)
    fetched_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def from_rows(
        cls,
        record_rows: Optional[Iterable[Any]],
        weekly_rows: Optional[Iterable[Any]],
        *,
        fetched_at: Optional[datetime] = None,
    ) -> "Snapshot":
        return cls(
            records=tuple(normalize_records(record_rows)),
            weekly=tuple(normalize_weekly_stats(weekly_rows)),
            fetched_at=fetched_at or _utcnow(),
        )

    @property
    def defaulted_field_count(self) -> int:
        return sum(len(r.defaulted_fields) for r in self.records) + sum(
            len(w.defaulted_fields) for w in self.weekly
        )


@dataclass(frozen=True)
class Dashboard:
    best_runs: tuple[RankedRun, ...]
    errors: ErrorSummary
    weekly: WeeklyProgression
    configuration: ConfigurationSummary
    synthesis: TrainingSynthesis
    assistants: tuple[AssistantUsage, ...]
    snapshot_fetched_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "bestRuns": [r.to_dict() for r in self.best_runs],
            "errorSummary": self.errors.to_dict(),
            "weeklyProgression": self.weekly.to_dict(),
            "configurationSummary": self.configuration.to_dict(),
            "synthesis": self.synthesis.to_dict(),
            "assistants": [a.to_dict() for a in self.assistants],
            "snapshotFetchedAt": self.snapshot_fetched_at.isoformat(),
        }


def build_dashboard(snapshot: Snapshot, n: int = DEFAULT_BEST_RUNS_LIMIT) -> Dashboard:
    """Run every derivation once over ``snapshot``."""
    records = snapshot.records
    return Dashboard(
        best_runs=tuple(best_runs(records, n)),
        errors=error_summary(records),
        weekly=weekly_progression(snapshot.weekly),
        configuration=configuration_summary(records),
        synthesis=training_synthesis(records),
        assistants=tuple(assistant_usage(records)),
        snapshot_fetched_at=snapshot.fetched_at,
    )
