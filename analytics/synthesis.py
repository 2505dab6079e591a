"""
Snapshot-wide training synthesis and per-assistant usage.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Sequence

import pandas as pd

from .failures import round_half_up
from .records import TrainingRecord

EXCEPTIONAL_WIN_RATE = 70.0
WEAK_WIN_RATE = 50.0
TOP_PATTERN_LIMIT = 3
DEFAULT_TRAINING_LEVEL = "LEARNING"


@dataclass(frozen=True)
class PatternCount:
    name: str
    count: int


@dataclass(frozen=True)
class TrainingSynthesis:
    total_runs: int = 0
    avg_win_rate: float = 0.0
    avg_sharpe_ratio: float = 0.0
    exceptional_runs: int = 0
    weak_runs: int = 0
    weak_run_rate: float = 0.0
    top_patterns: tuple[PatternCount, ...] = field(default_factory=tuple)
    current_level: str = DEFAULT_TRAINING_LEVEL
    latest_win_rate: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalRuns": self.total_runs,
            "avgWinRate": self.avg_win_rate,
            "avgSharpeRatio": self.avg_sharpe_ratio,
            "exceptionalRuns": self.exceptional_runs,
            "weakRuns": self.weak_runs,
            "weakRunRate": self.weak_run_rate,
            "topPatterns": [{"name": p.name, "count": p.count} for p in self.top_patterns],
            "currentLevel": self.current_level,
            "latestWinRate": self.latest_win_rate,
        }


@dataclass(frozen=True)
class AssistantUsage:
    assistant_id: str
    runs: int
    avg_win_rate: float
    last_trained_at: Optional[datetime]

    def to_dict(self) -> dict[str, Any]:
        return {
            "assistantId": self.assistant_id,
            "runs": self.runs,
            "avgWinRate": self.avg_win_rate,
            "lastTrainedAt": self.last_trained_at.isoformat() if self.last_trained_at else None,
        }


def _records_frame(records: Sequence[TrainingRecord]) -> pd.DataFrame:
    frame = pd.DataFrame(
        {
            "assistant_id": [r.assistant_id for r in records],
            "win_rate": [r.win_rate for r in records],
            "sharpe_ratio": [r.sharpe_ratio for r in records],
            "best_pattern_name": [r.best_pattern_name for r in records],
            "is_best_run": [bool(r.is_best_run) for r in records],
            "training_date": [r.training_date for r in records],
        }
    )
    # Absent metrics count as 0 for averages, as the dashboard always did.
    frame["win_rate"] = pd.to_numeric(frame["win_rate"], errors="coerce").fillna(0.0)
    frame["sharpe_ratio"] = pd.to_numeric(frame["sharpe_ratio"], errors="coerce").fillna(0.0)
    return frame


def _top_patterns(frame: pd.DataFrame, limit: int = TOP_PATTERN_LIMIT) -> tuple[PatternCount, ...]:
    names = frame["best_pattern_name"].dropna()
    if names.empty:
        return ()
    # groupby(sort=False) keeps first-seen order; a stable sort keeps it among ties.
    counts = names.groupby(names, sort=False).size().sort_values(ascending=False, kind="stable")
    return tuple(PatternCount(name=str(name), count=int(count)) for name, count in counts.head(limit).items())


def training_synthesis(records: Sequence[TrainingRecord]) -> TrainingSynthesis:
    """Headline numbers for the training summary card."""
    if not records:
        return TrainingSynthesis()

    frame = _records_frame(records)
    total = len(frame)

    exceptional = int((frame["is_best_run"] | (frame["win_rate"] >= EXCEPTIONAL_WIN_RATE)).sum())
    weak = int((frame["win_rate"] < WEAK_WIN_RATE).sum())

    latest = records[0]
    return TrainingSynthesis(
        total_runs=total,
        avg_win_rate=round_half_up(float(frame["win_rate"].mean()), 2),
        avg_sharpe_ratio=round_half_up(float(frame["sharpe_ratio"].mean()), 2),
        exceptional_runs=exceptional,
        weak_runs=weak,
        weak_run_rate=round_half_up(weak / total * 100, 1),
        top_patterns=_top_patterns(frame),
        current_level=latest.training_level or DEFAULT_TRAINING_LEVEL,
        latest_win_rate=latest.win_rate,
    )


def _as_datetime(value: Any) -> Optional[datetime]:
    if value is None or pd.isna(value):
        return None
    return pd.Timestamp(value).to_pydatetime()


def assistant_usage(records: Sequence[TrainingRecord]) -> list[AssistantUsage]:
    """
    Runs, average win rate, and most recent training date per assistant.

    Assistants appear in first-seen order; with date-descending input the
    first record seen for an assistant is also its latest.
    """
    if not records:
        return []

    frame = _records_frame(records).dropna(subset=["assistant_id"])
    if frame.empty:
        return []

    grouped = frame.groupby("assistant_id", sort=False).agg(
        runs=("win_rate", "size"),
        avg_win_rate=("win_rate", "mean"),
        last_trained_at=("training_date", "first"),
    )

    return [
        AssistantUsage(
            assistant_id=str(assistant_id),
            runs=int(row["runs"]),
            avg_win_rate=round_half_up(float(row["avg_win_rate"]), 2),
            last_trained_at=_as_datetime(row["last_trained_at"]),
        )
        for assistant_id, row in grouped.iterrows()
    ]
