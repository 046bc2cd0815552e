"""Drop rate computation for a single loot table."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import logging
from typing import List, Optional, Sequence

from core.outcome import Outcome
from datasources.fetcher import DefinitionFetcher
from models import LootEntry, RateEntry
from services.loot_parser import try_parse_loot_table
from services.names import NameResolver

log = logging.getLogger(__name__)

DEFAULT_NAME_WORKERS = 8


def percentages(entries: Sequence[LootEntry]) -> List[float]:
    """Weight share of every entry, in percent.

    A table whose weights sum to zero reports every entry as 0%.
    """
    total = sum(e.weight for e in entries)
    if total <= 0:
        if entries:
            log.warning("Loot table with %d entries has zero total weight", len(entries))
        return [0.0 for _ in entries]
    return [e.weight / total * 100.0 for e in entries]


class RateComputer:
    """Turns loot entries into named, percentage-annotated rows.

    Names are resolved on a dedicated thread pool so that file level workers
    waiting on their names never starve the pool they are waiting on.
    """

    def __init__(
        self,
        resolver: NameResolver,
        fetcher: Optional[DefinitionFetcher] = None,
        max_workers: int = DEFAULT_NAME_WORKERS,
    ):
        self.resolver = resolver
        self.fetcher = fetcher or resolver.fetcher
        self._pool = ThreadPoolExecutor(
            max_workers=max(1, int(max_workers)), thread_name_prefix="names"
        )

    def compute_rates(self, entries: Sequence[LootEntry]) -> List[RateEntry]:
        pcts = percentages(entries)
        # map() yields in submission order regardless of completion order
        names = list(self._pool.map(lambda e: self.resolver.resolve_name(e.spec), entries))
        return [
            RateEntry(e.weight, pct, name)
            for e, pct, name in zip(entries, pcts, names)
        ]

    def compute_file(self, tier: str, filename: str) -> List[RateEntry]:
        """Fetch, parse and rate one loot table file of ``tier``.

        A table that cannot be fetched or parsed yields no rows.
        """
        context = f"{tier}/{filename}"
        raw = Outcome.capture(lambda: self.fetcher.fetch_table(tier, filename))
        document = raw.unwrap_or(b"", context=f"fetch {context}")
        if not raw.ok:
            return []
        entries = try_parse_loot_table(document).unwrap_or([], context=f"parse {context}")
        rows = self.compute_rates(entries)
        log.debug("Rated %s: %d entries", context, len(rows))
        return rows

    def close(self) -> None:
        self._pool.shutdown(wait=False)


__all__ = ["RateComputer", "percentages", "DEFAULT_NAME_WORKERS"]
