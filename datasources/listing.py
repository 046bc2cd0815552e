"""Directory listing scraper for the remote asset repository.

The repository browser renders each directory as an HTML page of anchors.
An :class:`EntryFilter` picks the anchors of interest with a CSS selector
and the entry name is the last path segment of the anchor's ``href``.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import List, Optional

from bs4 import BeautifulSoup

from datasources.fetcher import DefinitionFetcher

log = logging.getLogger(__name__)

NAVIGATION_SELECTOR = 'a[class="js-navigation-open Link--primary"]'


@dataclass(frozen=True)
class EntryFilter:
    selector: str
    label: str = ""

    def __str__(self):
        return self.label or self.selector


def directory_entries(selector: Optional[str] = None) -> EntryFilter:
    """Every navigation entry of a listing page (subdirectories included)."""
    return EntryFilter(selector or NAVIGATION_SELECTOR, "directory entries")


def files_with_suffix(suffix: str) -> EntryFilter:
    """Entries whose title ends with ``suffix``, e.g. ``.ron``."""
    return EntryFilter(f'a[title$="{suffix}"]', f"*{suffix}")


def entry_name(href: Optional[str]) -> Optional[str]:
    """``/org/repo/tree/main/dungeon/tier-0`` -> ``tier-0``.

    Anchors without a ``/`` in their href carry no entry name.
    """
    if not href or "/" not in href:
        return None
    name = href.rsplit("/", 1)[1]
    return name or None


def parse_listing(html: str, entry_filter: EntryFilter) -> List[str]:
    soup = BeautifulSoup(html, "html.parser")
    names: List[str] = []
    for a in soup.select(entry_filter.selector):
        name = entry_name(a.get("href"))
        if name is not None:
            names.append(name)
    return names


class DirectoryLister:
    """Lists entry names of a remote directory page, in page order."""

    def __init__(self, fetcher: Optional[DefinitionFetcher] = None):
        self.fetcher = fetcher or DefinitionFetcher()

    def list(self, url: str, entry_filter: EntryFilter) -> List[str]:
        html = self.fetcher.fetch_text(url)
        names = parse_listing(html, entry_filter)
        log.debug("Listing %s (%s): %d entries", url, entry_filter, len(names))
        return names


__all__ = [
    "DirectoryLister",
    "EntryFilter",
    "directory_entries",
    "files_with_suffix",
    "entry_name",
    "parse_listing",
]
