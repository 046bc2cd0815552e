"""Memoizing listing and rate pipeline.

Each tier gets exactly one background listing job, started by
:meth:`PipelineCache.start_prefetch`.  Queries join that job the first time
a tier is asked for and reuse its file list afterwards.  Rate tables are
computed per file on a worker pool and published per tier, once.

Only the request path writes into the caches.  Background jobs and pool
workers return their results through futures and never touch cache state.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
import logging
import threading
from typing import Dict, Iterable, Optional, Sequence, Tuple

from core.errors import UnknownKey
from core.outcome import Outcome
from datasources.asset_url import AssetUrls
from datasources.listing import DirectoryLister, EntryFilter, files_with_suffix
from models import FileRates, RateEntry, Tier
from services.rates import RateComputer

log = logging.getLogger(__name__)

DEFAULT_FILE_WORKERS = 4
DEFAULT_LISTING_WORKERS = 8
TABLE_SUFFIX = ".ron"


class ListingState(Enum):
    NOT_STARTED = "not_started"
    IN_FLIGHT = "in_flight"
    READY = "ready"


@dataclass
class _Listing:
    tier: Tier
    job: Optional["Future[Outcome[Tuple[str, ...]]]"] = None
    files: Optional[Tuple[str, ...]] = None

    @property
    def state(self) -> ListingState:
        if self.files is not None:
            return ListingState.READY
        if self.job is not None:
            return ListingState.IN_FLIGHT
        return ListingState.NOT_STARTED


@dataclass
class PipelineStats:
    tiers: int = 0
    listings_ready: int = 0
    files_rated: int = 0
    tiers_rated: int = 0
    rate_hits: int = 0
    rate_misses: int = 0
    unknown_keys: int = 0


@dataclass
class _Counters:
    rate_hits: int = 0
    rate_misses: int = 0
    unknown_keys: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class PipelineCache:
    """Owns the listing and rate caches for one session."""

    def __init__(
        self,
        lister: DirectoryLister,
        computer: RateComputer,
        urls: Optional[AssetUrls] = None,
        table_filter: Optional[EntryFilter] = None,
        file_workers: int = DEFAULT_FILE_WORKERS,
        listing_workers: int = DEFAULT_LISTING_WORKERS,
    ):
        self.lister = lister
        self.computer = computer
        self.urls = urls or AssetUrls()
        self.table_filter = table_filter or files_with_suffix(TABLE_SUFFIX)
        self._listing_pool = ThreadPoolExecutor(
            max_workers=max(1, int(listing_workers)), thread_name_prefix="listing"
        )
        self._file_pool = ThreadPoolExecutor(
            max_workers=max(1, int(file_workers)), thread_name_prefix="tables"
        )
        self._listings: Dict[str, _Listing] = {}
        self._file_rates: Dict[Tuple[str, str], Tuple[RateEntry, ...]] = {}
        self._tier_rates: Dict[str, Tuple[FileRates, ...]] = {}
        self._publish = threading.Lock()
        self._counters = _Counters()

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    def start_prefetch(self, tiers: Iterable[Tier]) -> None:
        """Launch one listing job per tier; tiers seen before are skipped."""
        for tier in tiers:
            listing = self._listings.get(tier.key)
            if listing is not None:
                if listing.tier != tier:
                    log.warning(
                        "Tier key %r already bound to %r; ignoring %r",
                        tier.key, listing.tier.name, tier.name,
                    )
                continue
            listing = _Listing(tier)
            listing.job = self._listing_pool.submit(self._list_files, tier)
            self._listings[tier.key] = listing
            log.debug("Prefetch started for %s (%s)", tier.key, tier.name)

    def _list_files(self, tier: Tier) -> Outcome[Tuple[str, ...]]:
        url = self.urls.tier_listing(tier.name)
        return Outcome.capture(lambda: tuple(self.lister.list(url, self.table_filter)))

    def listing_state(self, key: str) -> ListingState:
        listing = self._listings.get(key)
        return listing.state if listing is not None else ListingState.NOT_STARTED

    def keys(self) -> list[str]:
        """Recognized tier keys in discovery order."""
        return list(self._listings)

    def resolve_files(self, key: str) -> Tuple[Optional[Tier], Tuple[str, ...]]:
        """Return the tier and its loot table files for a user typed key.

        Waits for the tier's listing job on first use.  Unknown keys and
        failed listings both come back as an empty file list.
        """
        listing = self._listings.get(key)
        if listing is None:
            with self._counters.lock:
                self._counters.unknown_keys += 1
            log.info("%s", UnknownKey(key))
            return None, ()
        if listing.files is not None:
            return listing.tier, listing.files

        try:
            outcome = listing.job.result()
        except Exception as e:
            log.exception("Listing job for %s crashed: %s", listing.tier.name, e)
            outcome = Outcome.success(())
        files = outcome.unwrap_or((), context=f"listing {listing.tier.name}")

        with self._publish:
            if listing.files is None:
                listing.files = files
                listing.job = None
                log.info("Tier %s: %d loot tables", listing.tier.key, len(files))
            return listing.tier, listing.files

    # ------------------------------------------------------------------
    # Rates
    # ------------------------------------------------------------------

    def _rate_file(self, tier: Tier, filename: str) -> Tuple[RateEntry, ...]:
        try:
            return tuple(self.computer.compute_file(tier.name, filename))
        except Exception as e:
            log.error("Rating %s/%s failed: %r", tier.name, filename, e)
            return ()

    def resolve_rates(
        self, tier: Optional[Tier], files: Sequence[str]
    ) -> Tuple[FileRates, ...]:
        """Rate tables of ``files`` in listing order, computed once per tier.

        Two callers racing on the same cold tier may both compute it; the
        first published result wins and is returned to both.
        """
        if tier is None:
            return ()
        cached = self._tier_rates.get(tier.name)
        if cached is not None:
            with self._counters.lock:
                self._counters.rate_hits += 1
            log.debug("Rate cache hit for %s", tier.name)
            return cached

        with self._counters.lock:
            self._counters.rate_misses += 1
        missing = [f for f in dict.fromkeys(files) if (tier.name, f) not in self._file_rates]
        futures = [self._file_pool.submit(self._rate_file, tier, f) for f in missing]
        computed = [fut.result() for fut in futures]

        with self._publish:
            for filename, rows in zip(missing, computed):
                self._file_rates.setdefault((tier.name, filename), rows)
            result = tuple((f, self._file_rates[(tier.name, f)]) for f in files)
            published = self._tier_rates.setdefault(tier.name, result)
        log.info("Rated tier %s: %d files", tier.key, len(published))
        return published

    def query(self, key: str) -> Tuple[Optional[Tier], Tuple[FileRates, ...]]:
        tier, files = self.resolve_files(key)
        return tier, self.resolve_rates(tier, files)

    # ------------------------------------------------------------------

    def stats(self) -> PipelineStats:
        with self._counters.lock:
            hits, misses, unknown = (
                self._counters.rate_hits,
                self._counters.rate_misses,
                self._counters.unknown_keys,
            )
        return PipelineStats(
            tiers=len(self._listings),
            listings_ready=sum(1 for l in self._listings.values() if l.files is not None),
            files_rated=len(self._file_rates),
            tiers_rated=len(self._tier_rates),
            rate_hits=hits,
            rate_misses=misses,
            unknown_keys=unknown,
        )

    def close(self) -> None:
        """Release the worker pools without cancelling queued work."""
        self._listing_pool.shutdown(wait=False)
        self._file_pool.shutdown(wait=False)
        self.computer.close()


__all__ = ["PipelineCache", "PipelineStats", "ListingState", "TABLE_SUFFIX"]
