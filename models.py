"""
Data model for Loot Rate Viewer.

Defines the loot spec variants found in loot table documents, the
weighted entries built from them and the percentage-annotated rows shown to
the user.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True)
class Tier:
    """A difficulty tier as discovered remotely plus its display key."""

    name: str  # raw directory name, e.g. "tier-0"
    key: str   # normalized key typed by the user, e.g. "T1"

    def __str__(self):
        return self.key


@dataclass(frozen=True)
class Item:
    """A single concrete item."""

    item_id: str


@dataclass(frozen=True)
class ItemWithQuantity:
    """A concrete item dropped in a ``low``..``high`` stack."""

    item_id: str
    low: int
    high: int


@dataclass(frozen=True)
class LootTableReference:
    """A nested loot table; never expanded."""

    table_id: str


@dataclass(frozen=True)
class Empty:
    """The "nothing drops" outcome."""


LootSpec = Union[Item, ItemWithQuantity, LootTableReference, Empty]


@dataclass(frozen=True)
class LootEntry:
    """One weighted outcome of a loot table."""

    weight: float
    spec: LootSpec


@dataclass(frozen=True)
class RateEntry:
    """A loot entry annotated with its drop percentage and display name."""

    weight: float
    percentage: float
    display_name: str

    def as_tuple(self) -> Tuple[float, float, str]:
        return (self.weight, self.percentage, self.display_name)


# (file name, rate rows) in listing order
FileRates = Tuple[str, Tuple[RateEntry, ...]]


__all__ = [
    "Tier",
    "Item",
    "ItemWithQuantity",
    "LootTableReference",
    "Empty",
    "LootSpec",
    "LootEntry",
    "RateEntry",
    "FileRates",
]
