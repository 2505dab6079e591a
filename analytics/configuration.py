"""
Configuration usage across training runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

from .records import TrainingRecord

DEFAULT_ASSISTANT_LABEL = "undefined"
DEFAULT_MODEL_NAME = "gpt-4-turbo"
DEFAULT_STRATEGY_NAME = "MWD v2.0"


@dataclass(frozen=True)
class CurrentConfiguration:
    assistant: str = DEFAULT_ASSISTANT_LABEL
    model: str = DEFAULT_MODEL_NAME
    strategy: str = DEFAULT_STRATEGY_NAME


@dataclass(frozen=True)
class DistinctCounts:
    assistants: int = 0
    strategies: int = 0
    models: int = 0


@dataclass(frozen=True)
class ConfigurationSummary:
    current: CurrentConfiguration
    distinct_counts: DistinctCounts

    def to_dict(self) -> dict[str, Any]:
        return {
            "current": {
                "assistant": self.current.assistant,
                "model": self.current.model,
                "strategy": self.current.strategy,
            },
            "distinctCounts": {
                "assistants": self.distinct_counts.assistants,
                "strategies": self.distinct_counts.strategies,
                "models": self.distinct_counts.models,
            },
        }


def _distinct(values: Iterable[Optional[str]]) -> int:
    # Exact string identity: "GPT-4" and "gpt-4 " are different models here.
    return len({v for v in values if v})


def configuration_summary(records: Sequence[TrainingRecord]) -> ConfigurationSummary:
    """Distinct assistants/strategies/models plus the latest run's configuration."""
    counts = DistinctCounts(
        assistants=_distinct(r.assistant_id for r in records),
        strategies=_distinct(r.strategy_version for r in records),
        models=_distinct(r.model_version for r in records),
    )

    if not records:
        return ConfigurationSummary(current=CurrentConfiguration(), distinct_counts=counts)

    latest = records[0]
    current = CurrentConfiguration(
        assistant=latest.assistant_id or DEFAULT_ASSISTANT_LABEL,
        model=latest.model_version or DEFAULT_MODEL_NAME,
        strategy=latest.strategy_version or DEFAULT_STRATEGY_NAME,
    )
    return ConfigurationSummary(current=current, distinct_counts=counts)
