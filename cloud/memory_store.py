"""
In-process record store backed by lists of rows.
"""

from __future__ import annotations

import copy
from typing import Any, Iterable, Optional

from core.errors import FetchError

from .base import RecordStore


class MemoryStore(RecordStore):
    """
    Serves fixed rows in the order given.

    Set ``fail_with`` to make every fetch raise, which is how tests simulate
    an unreachable store.
    """

    name = "memory"

    def __init__(
        self,
        training_rows: Optional[Iterable[dict[str, Any]]] = None,
        weekly_rows: Optional[Iterable[dict[str, Any]]] = None,
        *,
        fail_with: Optional[str] = None,
    ):
        self.training_rows = list(training_rows or [])
        self.weekly_rows = list(weekly_rows or [])
        self.fail_with = fail_with
        self.fetch_count = 0

    def _check(self) -> None:
        self.fetch_count += 1
        if self.fail_with:
            raise FetchError(self.fail_with, source=self.name)

    def list_training_records(self) -> list[dict[str, Any]]:
        self._check()
        return copy.deepcopy(self.training_rows)

    def list_weekly_stats(self) -> list[dict[str, Any]]:
        self._check()
        return copy.deepcopy(self.weekly_rows)
