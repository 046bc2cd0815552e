"""Raw document retrieval for loot tables and item definitions."""

from __future__ import annotations

import logging
from typing import Callable, Optional

import requests

from core.errors import NetworkFailure
from datasources.asset_url import AssetUrls
from datasources.http import get_shared_session

log = logging.getLogger(__name__)


class DefinitionFetcher:
    """Plain GET retrieval of remote asset documents.

    Stateless apart from its configuration; safe to share between worker
    threads because every thread gets its own :class:`requests.Session`.
    """

    def __init__(
        self,
        urls: Optional[AssetUrls] = None,
        timeout: Optional[float] = None,
        session_factory: Callable[[], requests.Session] = get_shared_session,
    ):
        self.urls = urls or AssetUrls()
        self.timeout = timeout
        self._session_factory = session_factory

    def fetch(self, url: str) -> bytes:
        log.debug("GET %s", url)
        try:
            r = self._session_factory().get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise NetworkFailure(url, f"{type(e).__name__}: {e}") from e
        status = getattr(r, "status_code", 200)
        if status != 200:
            raise NetworkFailure(url, getattr(r, "reason", "") or "unexpected status", status)
        return getattr(r, "content", b"") or b""

    def fetch_text(self, url: str) -> str:
        return self.fetch(url).decode("utf-8", errors="replace")

    def fetch_table(self, tier: str, filename: str) -> bytes:
        return self.fetch(self.urls.table(tier, filename))

    def fetch_item(self, item_id: str) -> bytes:
        return self.fetch(self.urls.item(item_id))


__all__ = ["DefinitionFetcher"]
