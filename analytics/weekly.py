"""
Weekly progression series.

The store's weekly view does the bucketing; this module only shapes those
rows for display and checks that they really arrive oldest-first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional, Sequence

from .records import WeeklyStat

logger = logging.getLogger("runlens.analytics.weekly")

WEEK_LABEL_FORMAT = "%d/%m"
MISSING_WEEK_LABEL = "N/A"


@dataclass(frozen=True)
class WeeklyPoint:
    week: str
    week_start: Optional[date]
    avg_win_rate: float
    total_runs: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "week": self.week,
            "weekStart": self.week_start.isoformat() if self.week_start else None,
            "avgWinRate": self.avg_win_rate,
            "totalRuns": self.total_runs,
        }


@dataclass(frozen=True)
class WeeklyProgression:
    points: tuple[WeeklyPoint, ...] = field(default_factory=tuple)
    ordering_violation: bool = False
    violations: tuple[int, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.points)

    def to_dict(self) -> dict[str, Any]:
        return {
            "points": [p.to_dict() for p in self.points],
            "orderingViolation": self.ordering_violation,
            "violations": list(self.violations),
        }


def format_week_label(week_start: Optional[date]) -> str:
    if week_start is None:
        return MISSING_WEEK_LABEL
    return week_start.strftime(WEEK_LABEL_FORMAT)


def find_ordering_violations(rows: Sequence[WeeklyStat]) -> list[int]:
    """
    Indices of rows whose week start is not strictly after the previous dated row.

    Rows without a week start cannot be placed and are skipped.
    """
    violations: list[int] = []
    previous: Optional[date] = None
    for idx, row in enumerate(rows):
        if row.week_start is None:
            continue
        if previous is not None and row.week_start <= previous:
            violations.append(idx)
        previous = row.week_start
    return violations


def weekly_progression(rows: Sequence[WeeklyStat]) -> WeeklyProgression:
    """One display point per input row, in input order; missing averages/counts become 0."""
    points = tuple(
        WeeklyPoint(
            week=format_week_label(row.week_start),
            week_start=row.week_start,
            avg_win_rate=row.avg_win_rate if row.avg_win_rate is not None else 0.0,
            total_runs=row.total_runs if row.total_runs is not None else 0,
        )
        for row in rows
    )

    violations = find_ordering_violations(rows)
    if violations:
        logger.warning(
            "Weekly stats are not in ascending week order (%d offending row(s), first at index %d); "
            "returning rows as received",
            len(violations),
            violations[0],
        )

    return WeeklyProgression(
        points=points,
        ordering_violation=bool(violations),
        violations=tuple(violations),
    )
