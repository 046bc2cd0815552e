"""Tagged result type for fallible pipeline steps."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar
import logging

from core.errors import LootRateError

log = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a value or the :class:`LootRateError` that prevented it.

    Substituting a default is always an explicit call to :meth:`unwrap_or`
    so the recovery policy stays visible where it is applied.
    """

    value: Optional[T] = None
    error: Optional[LootRateError] = None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: LootRateError) -> "Outcome[T]":
        return cls(error=error)

    @classmethod
    def capture(cls, fn: Callable[[], T]) -> "Outcome[T]":
        """Run ``fn`` and wrap its result, capturing pipeline errors only."""
        try:
            return cls.success(fn())
        except LootRateError as e:
            return cls.failure(e)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap_or(self, default: T, context: str = "") -> T:
        if self.error is None:
            return self.value  # type: ignore[return-value]
        log.warning("%s: %s; using fallback", context or "step failed", self.error)
        return default


__all__ = ["Outcome"]
