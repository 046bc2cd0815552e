"""Display name resolution for loot specs."""

from __future__ import annotations

import logging
import re
from typing import Optional

from core.outcome import Outcome
from datasources.fetcher import DefinitionFetcher
from models import Empty, Item, ItemWithQuantity, LootSpec, LootTableReference

log = logging.getLogger(__name__)

UNKNOWN_LABEL = "unknown"
BUNDLE_LABEL = "bundle"
NONE_LABEL = "none"

# first quoted literal on a single line
_QUOTED = re.compile(r'"(.*?)"')


def extract_display_name(document: bytes | str) -> Optional[str]:
    """Return the first quoted string literal of an item definition."""
    if isinstance(document, bytes):
        document = document.decode("utf-8", errors="replace")
    m = _QUOTED.search(document)
    return m.group(1) if m else None


class NameResolver:
    """Maps a loot spec to the human readable name shown in rate tables."""

    def __init__(
        self,
        fetcher: Optional[DefinitionFetcher] = None,
        unknown: str = UNKNOWN_LABEL,
        bundle: str = BUNDLE_LABEL,
        none: str = NONE_LABEL,
    ):
        self.fetcher = fetcher or DefinitionFetcher()
        self.unknown = unknown
        self.bundle = bundle
        self.none = none

    @classmethod
    def from_config(cls, fetcher: DefinitionFetcher, labels: dict | None) -> "NameResolver":
        labels = labels or {}
        return cls(
            fetcher,
            unknown=labels.get("unknown", UNKNOWN_LABEL),
            bundle=labels.get("bundle", BUNDLE_LABEL),
            none=labels.get("none", NONE_LABEL),
        )

    def resolve_name(self, spec: LootSpec) -> str:
        if isinstance(spec, LootTableReference):
            return self.bundle
        if isinstance(spec, Empty):
            return self.none
        if isinstance(spec, (Item, ItemWithQuantity)):
            name = self._item_name(spec.item_id)
            if isinstance(spec, ItemWithQuantity):
                return f"{name} ({spec.low} ~ {spec.high})"
            return name
        log.warning("Unsupported loot spec %r", spec)
        return self.unknown

    def _item_name(self, item_id: str) -> str:
        try:
            fetched = Outcome.capture(lambda: self.fetcher.fetch_item(item_id))
        except Exception as e:
            log.error("Name lookup for %s crashed: %r", item_id, e)
            return self.unknown
        document = fetched.unwrap_or(b"", context=f"item {item_id}")
        name = extract_display_name(document)
        if name is None:
            if fetched.ok:
                log.debug("No quoted name in definition of %s", item_id)
            return self.unknown
        return name


__all__ = ["NameResolver", "extract_display_name", "UNKNOWN_LABEL", "BUNDLE_LABEL", "NONE_LABEL"]
