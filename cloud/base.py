"""
Record store interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class RecordStore(ABC):
    """
    Read-only source of training-run rows.

    Implementations return raw rows (plain dicts) and raise ``FetchError``
    when the store cannot be queried. They never retry.
    """

    name: str = "store"

    @abstractmethod
    def list_training_records(self) -> list[dict[str, Any]]:
        """Full snapshot of training runs, newest ``training_date`` first."""
        raise NotImplementedError

    @abstractmethod
    def list_weekly_stats(self) -> list[dict[str, Any]]:
        """Pre-aggregated weekly buckets, oldest week first."""
        raise NotImplementedError
