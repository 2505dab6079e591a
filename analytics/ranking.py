"""
Best-run selection.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Optional, Sequence

from .records import TrainingRecord

DEFAULT_BEST_RUNS_LIMIT = 5


@dataclass(frozen=True)
class RankedRun:
    """A row of the "best runs" table."""

    run_id: Optional[str]
    date: Optional[str]
    win_rate: float
    sharpe_ratio: Optional[float]
    pattern_name: Optional[str]
    pattern_profit: Optional[float]
    is_placeholder: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# Sample rows shown when no run has a positive win rate, so the table is never blank.
FALLBACK_BEST_RUNS: tuple[RankedRun, ...] = (
    RankedRun(
        run_id=None,
        date="2025-01-15",
        win_rate=74.8,
        sharpe_ratio=1.44,
        pattern_name="EMA Rebound",
        pattern_profit=3.2,
        is_placeholder=True,
    ),
    RankedRun(
        run_id=None,
        date="2025-01-14",
        win_rate=71.2,
        sharpe_ratio=1.31,
        pattern_name="Hammer",
        pattern_profit=2.5,
        is_placeholder=True,
    ),
    RankedRun(
        run_id=None,
        date="2025-01-13",
        win_rate=68.5,
        sharpe_ratio=1.18,
        pattern_name="Bullish Engulfing",
        pattern_profit=2.1,
        is_placeholder=True,
    ),
)


def _to_ranked(record: TrainingRecord) -> RankedRun:
    return RankedRun(
        run_id=record.id,
        date=record.training_date.isoformat() if record.training_date else None,
        win_rate=float(record.win_rate),
        sharpe_ratio=record.sharpe_ratio,
        pattern_name=record.best_pattern_name,
        pattern_profit=record.best_pattern_profit,
    )


def best_runs(records: Sequence[TrainingRecord], n: int = DEFAULT_BEST_RUNS_LIMIT) -> list[RankedRun]:
    """
    Top ``n`` runs by win rate, highest first.

    Runs with an absent or non-positive win rate are ignored. ``sorted`` is
    stable, so equal win rates keep the store's (date-descending) order.
    When nothing qualifies, ``FALLBACK_BEST_RUNS`` is returned instead
    (cut to ``n`` entries).
    """
    limit = max(0, int(n))
    if limit == 0:
        return []

    candidates = [r for r in records if r.win_rate is not None and r.win_rate > 0]
    if not candidates:
        return list(FALLBACK_BEST_RUNS[:limit])

    ranked = sorted(candidates, key=lambda r: r.win_rate, reverse=True)
    return [_to_ranked(r) for r in ranked[:limit]]
