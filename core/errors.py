"""Error taxonomy for the loot rate pipeline.

Every failure the pipeline can recover from derives from
:class:`LootRateError`.  Callers recover at the smallest granularity
possible (a tier listing, a single loot table, a single item name) and
substitute an empty or sentinel value; nothing here is meant to reach the
interactive session loop.
"""

from __future__ import annotations

from typing import Optional


class LootRateError(Exception):
    """Base class for recoverable pipeline errors."""


class NetworkFailure(LootRateError):
    """A remote listing or definition could not be retrieved."""

    def __init__(self, url: str, reason: str, status: Optional[int] = None):
        self.url = url
        self.reason = reason
        self.status = status
        detail = f"HTTP {status}: {reason}" if status is not None else reason
        super().__init__(f"GET {url} failed ({detail})")


class MalformedDocument(LootRateError):
    """A loot table document does not match the tagged tuple format."""

    def __init__(self, message: str, position: Optional[int] = None):
        self.position = position
        if position is not None:
            message = f"{message} at offset {position}"
        super().__init__(message)


class UnknownKey(LootRateError):
    """A tier key typed by the user matches no discovered tier."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Unknown tier key: {key!r}")


__all__ = ["LootRateError", "NetworkFailure", "MalformedDocument", "UnknownKey"]
