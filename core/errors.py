"""
Exception types shared across runlens packages.
"""

from __future__ import annotations

from typing import Optional


class RunlensError(Exception):
    """Base class for runlens errors."""


class FetchError(RunlensError):
    """
    A store query failed (network, auth, or query error).

    Raised by record store adapters and propagated to the caller unchanged.
    The original exception, when there is one, is kept as ``__cause__``.
    """

    def __init__(self, message: str, *, source: Optional[str] = None):
        super().__init__(message)
        self.source = source

    def __str__(self) -> str:
        base = super().__str__()
        if self.source:
            return f"{self.source}: {base}"
        return base


class StoreConfigError(FetchError):
    """The record store has no credentials, so nothing can be fetched."""


class SnapshotUnavailable(RunlensError):
    """No refresh has succeeded yet, so there is nothing to derive from."""
