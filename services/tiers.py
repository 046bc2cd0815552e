"""Tier discovery and display key normalization."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from core.outcome import Outcome
from datasources.asset_url import AssetUrls
from datasources.listing import DirectoryLister, EntryFilter, directory_entries
from models import Tier

log = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "T"


def normalize_tier_key(name: str, prefix: str = DEFAULT_KEY_PREFIX) -> str:
    """``tier-0`` -> ``T1``; names without a numeric suffix are kept as is."""
    if "-" not in name:
        return name
    suffix = name.split("-")[1]
    try:
        return f"{prefix}{int(suffix) + 1}"
    except ValueError:
        return name


def build_tiers(names: Iterable[str], prefix: str = DEFAULT_KEY_PREFIX) -> List[Tier]:
    """Pair raw tier names with their keys, keeping the key mapping one-to-one.

    When two different raw names normalize to the same key the later one is
    dropped and logged.
    """
    tiers: List[Tier] = []
    by_key: dict[str, str] = {}
    for name in names:
        key = normalize_tier_key(name, prefix)
        owner = by_key.get(key)
        if owner is not None:
            if owner != name:
                log.warning(
                    "Tier %r maps to key %r already used by %r; ignoring it", name, key, owner
                )
            continue
        by_key[key] = name
        tiers.append(Tier(name=name, key=key))
    return tiers


def discover_tiers(
    lister: DirectoryLister,
    urls: AssetUrls,
    entry_filter: Optional[EntryFilter] = None,
    prefix: str = DEFAULT_KEY_PREFIX,
) -> List[Tier]:
    """List the tier directories of the dungeon loot tables.

    An unreachable listing yields no tiers.
    """
    entry_filter = entry_filter or directory_entries()
    names = Outcome.capture(lambda: lister.list(urls.tiers(), entry_filter)).unwrap_or(
        [], context="tier discovery"
    )
    tiers = build_tiers(names, prefix)
    log.info("Discovered %d tiers: %s", len(tiers), ", ".join(t.key for t in tiers))
    return tiers


__all__ = ["normalize_tier_key", "build_tiers", "discover_tiers", "DEFAULT_KEY_PREFIX"]
