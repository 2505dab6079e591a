"""
Failure classification and failure-rate rollup.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Sequence

from .records import TrainingRecord

FAILURE_WIN_RATE_THRESHOLD = 60.0
ERROR_STATUS = "error"
FAILING_DETAIL_LIMIT = 5
HIGH_FAILURE_RATE_THRESHOLD = 30.0


def round_half_up(value: float, places: int = 1) -> float:
    """Round like a person would (2.25 -> 2.3), not banker's rounding."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def is_failing(record: TrainingRecord) -> bool:
    """
    A run fails when its win rate is under the threshold or its status is
    exactly ``"error"``. An absent win rate counts as 0.
    """
    win_rate = record.win_rate if record.win_rate is not None else 0.0
    return win_rate < FAILURE_WIN_RATE_THRESHOLD or record.status == ERROR_STATUS


def is_high_failure_rate(rate: float, threshold: float = HIGH_FAILURE_RATE_THRESHOLD) -> bool:
    return rate > threshold


@dataclass(frozen=True)
class ErrorSummary:
    rate: float
    failing: tuple[TrainingRecord, ...] = field(default_factory=tuple)
    failing_count: int = 0
    total_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "rate": self.rate,
            "failing": [r.to_dict() for r in self.failing],
            "failingCount": self.failing_count,
            "totalCount": self.total_count,
        }


def error_summary(records: Sequence[TrainingRecord]) -> ErrorSummary:
    """Failure rate over the whole snapshot plus the first few failing runs, in input order."""
    failing = [r for r in records if is_failing(r)]
    total = len(records)

    rate = round_half_up(len(failing) / total * 100, 1) if total > 0 else 0.0

    return ErrorSummary(
        rate=rate,
        failing=tuple(failing[:FAILING_DETAIL_LIMIT]),
        failing_count=len(failing),
        total_count=total,
    )
