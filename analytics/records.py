"""
Training-run record types and field normalization.

Raw rows arrive from the record store as loosely-typed mappings (JSON from
PostgREST, fixtures in tests). ``normalize_record`` turns each one into a
frozen ``TrainingRecord`` in which every numeric field is a finite number or
``None`` and every text field is a non-empty string or ``None``. Nothing in
here raises on bad input: a malformed value is replaced by ``None``, its field
name is kept in ``defaulted_fields``, and a DEBUG line is logged.
"""

from __future__ import annotations

import logging
import math
import numbers
from dataclasses import asdict, dataclass
from datetime import date, datetime, time, timezone
from typing import Any, Callable, Iterable, Mapping, Optional

logger = logging.getLogger("runlens.analytics.records")


WIN_RATE_MIN = 0.0
WIN_RATE_MAX = 100.0

# Column names tried in order for each canonical field.
_FIELD_ALIASES = {
    "training_date": ["training_date", "created_at"],
    "source": ["source", "trigger_source"],
    "week_start": ["week_start", "week"],
    "avg_win_rate": ["avg_win_rate", "average_win_rate"],
    "total_runs": ["total_runs", "run_count"],
}

_TIMESTAMP_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M:%S.%f", "%Y-%m-%d")


@dataclass(frozen=True)
class TrainingRecord:
    """One completed training run, after normalization."""

    id: Optional[str] = None
    training_date: Optional[datetime] = None

    win_rate: Optional[float] = None
    sharpe_ratio: Optional[float] = None
    avg_profit_per_trade: Optional[float] = None
    avg_rr_ratio: Optional[float] = None
    max_consecutive_wins: Optional[int] = None
    max_consecutive_losses: Optional[int] = None
    improvement_rate: Optional[float] = None

    best_pattern_name: Optional[str] = None
    best_pattern_profit: Optional[float] = None
    worst_pattern_name: Optional[str] = None
    worst_pattern_loss: Optional[float] = None

    assistant_id: Optional[str] = None
    model_version: Optional[str] = None
    strategy_version: Optional[str] = None
    training_level: Optional[str] = None
    source: Optional[str] = None

    status: Optional[str] = None
    notes: Optional[str] = None
    is_best_run: bool = False

    total_trades_analyzed: Optional[int] = None
    profitable_patterns: Optional[int] = None
    patterns_analyzed: Optional[int] = None

    defaulted_fields: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["training_date"] = self.training_date.isoformat() if self.training_date else None
        d["defaulted_fields"] = list(self.defaulted_fields)
        return d


@dataclass(frozen=True)
class WeeklyStat:
    """One pre-aggregated calendar-week bucket."""

    week_start: Optional[date] = None
    avg_win_rate: Optional[float] = None
    total_runs: Optional[int] = None
    defaulted_fields: tuple[str, ...] = ()


# =============================================================================
# Coercion helpers
#
# Each helper returns the coerced value, None when the raw value is absent,
# and raises ValueError/TypeError when the raw value is present but unusable.
# =============================================================================

def _as_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise TypeError("boolean is not a number")
    if isinstance(value, numbers.Real):
        number = float(value)
    elif isinstance(value, str):
        if value == "":
            return None
        number = float(value.strip())
    else:
        raise TypeError(f"unsupported numeric type {type(value).__name__}")

    if not math.isfinite(number):
        raise ValueError("non-finite number")
    return number


def _as_win_rate(value: Any) -> Optional[float]:
    number = _as_float(value)
    if number is None:
        return None
    if number < WIN_RATE_MIN or number > WIN_RATE_MAX:
        raise ValueError(f"win rate {number} outside [0, 100]")
    return number


def _as_count(value: Any) -> Optional[int]:
    number = _as_float(value)
    if number is None:
        return None
    if number < 0 or not number.is_integer():
        raise ValueError(f"count {number} is not a non-negative integer")
    return int(number)


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise TypeError(f"expected text, got {type(value).__name__}")
    # No trimming: distinct counting downstream is whitespace-sensitive.
    return value if value != "" else None


def _as_identifier(value: Any) -> Optional[str]:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return _as_text(value)


def _as_flag(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if not isinstance(value, bool):
        raise TypeError(f"expected bool, got {type(value).__name__}")
    return value


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a store timestamp into an aware UTC datetime.

    Accepts datetime, date, and ISO-8601 strings (including a trailing ``Z``).
    Naive values are assumed to be UTC.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        parsed = _parse_timestamp_text(value)
    else:
        raise TypeError(f"unsupported timestamp type {type(value).__name__}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _parse_timestamp_text(value: str) -> datetime:
    normalized = value.strip()
    if not normalized:
        raise ValueError("empty timestamp")

    candidates = [normalized]
    if normalized.endswith("Z"):
        candidates.append(normalized[:-1] + "+00:00")

    for candidate in candidates:
        try:
            return datetime.fromisoformat(candidate)
        except ValueError:
            pass

    for fmt in _TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(normalized, fmt)
        except ValueError:
            continue

    raise ValueError(f"unparseable timestamp {value!r}")


def _as_week_start(value: Any) -> Optional[date]:
    # The calendar date as written; converting to UTC first can shift it back a day.
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return _parse_timestamp_text(value).date()
    raise TypeError(f"unsupported week type {type(value).__name__}")


def _lookup(raw: Mapping[str, Any], name: str) -> Any:
    for candidate in _FIELD_ALIASES.get(name, [name]):
        if candidate in raw and raw[candidate] is not None:
            return raw[candidate]
    return None


class _FieldReader:
    """Reads canonical fields off a raw row, remembering which ones were malformed."""

    def __init__(self, raw: Mapping[str, Any]):
        self.raw = raw
        self.defaulted: list[str] = []

    def read(self, name: str, coerce: Callable[[Any], Any]) -> Any:
        value = _lookup(self.raw, name)
        try:
            return coerce(value)
        except (TypeError, ValueError, OverflowError) as exc:
            self.defaulted.append(name)
            logger.debug("Field %s=%r treated as absent: %s", name, value, exc)
            return None


# =============================================================================
# Public API
# =============================================================================

_TEXT_FIELDS = (
    "best_pattern_name",
    "worst_pattern_name",
    "assistant_id",
    "model_version",
    "strategy_version",
    "training_level",
    "source",
    "status",
    "notes",
)
_FLOAT_FIELDS = (
    "sharpe_ratio",
    "avg_profit_per_trade",
    "avg_rr_ratio",
    "improvement_rate",
    "best_pattern_profit",
    "worst_pattern_loss",
)
_COUNT_FIELDS = (
    "max_consecutive_wins",
    "max_consecutive_losses",
    "total_trades_analyzed",
    "profitable_patterns",
    "patterns_analyzed",
)


def normalize_record(raw: Any) -> TrainingRecord:
    """Coerce one raw store row into a ``TrainingRecord``. Never raises."""
    if not isinstance(raw, Mapping):
        logger.debug("Training row of type %s is not a mapping; using empty record", type(raw).__name__)
        return TrainingRecord(defaulted_fields=("<row>",))

    reader = _FieldReader(raw)
    values: dict[str, Any] = {
        "id": reader.read("id", _as_identifier),
        "training_date": reader.read("training_date", parse_timestamp),
        "win_rate": reader.read("win_rate", _as_win_rate),
    }
    for name in _FLOAT_FIELDS:
        values[name] = reader.read(name, _as_float)
    for name in _COUNT_FIELDS:
        values[name] = reader.read(name, _as_count)
    for name in _TEXT_FIELDS:
        values[name] = reader.read(name, _as_text)
    values["is_best_run"] = bool(reader.read("is_best_run", _as_flag))

    if reader.defaulted:
        logger.debug(
            "Training record %s: %d malformed field(s) defaulted: %s",
            values["id"],
            len(reader.defaulted),
            ", ".join(reader.defaulted),
        )

    return TrainingRecord(defaulted_fields=tuple(reader.defaulted), **values)


def normalize_records(rows: Optional[Iterable[Any]]) -> list[TrainingRecord]:
    """Normalize a sequence of raw rows, keeping store order."""
    if rows is None:
        return []
    return [normalize_record(row) for row in rows]


def normalize_weekly_stat(raw: Any) -> WeeklyStat:
    """Coerce one raw weekly-view row into a ``WeeklyStat``. Never raises."""
    if not isinstance(raw, Mapping):
        logger.debug("Weekly row of type %s is not a mapping; using empty bucket", type(raw).__name__)
        return WeeklyStat(defaulted_fields=("<row>",))

    reader = _FieldReader(raw)
    stat = WeeklyStat(
        week_start=reader.read("week_start", _as_week_start),
        avg_win_rate=reader.read("avg_win_rate", _as_win_rate),
        total_runs=reader.read("total_runs", _as_count),
        defaulted_fields=tuple(reader.defaulted),
    )
    return stat


def normalize_weekly_stats(rows: Optional[Iterable[Any]]) -> list[WeeklyStat]:
    if rows is None:
        return []
    return [normalize_weekly_stat(row) for row in rows]
