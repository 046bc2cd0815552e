"""Network-free stand-ins shared by the pipeline tests."""

import threading

from core.errors import NetworkFailure
from datasources.asset_url import AssetUrls


class FakeFetcher:
    """Serves documents from a dict keyed by URL and counts every request."""

    def __init__(self, docs=None, urls=None):
        self.docs = dict(docs or {})
        self.urls = urls or AssetUrls(
            listing_url="https://list.test/dungeon/",
            raw_url="https://raw.test/dungeon/",
            assets_url="https://assets.test/",
        )
        self.calls = []
        self._lock = threading.Lock()

    def fetch(self, url):
        with self._lock:
            self.calls.append(url)
        if url not in self.docs:
            raise NetworkFailure(url, "not found", 404)
        doc = self.docs[url]
        return doc.encode() if isinstance(doc, str) else doc

    def fetch_text(self, url):
        return self.fetch(url).decode()

    def fetch_table(self, tier, filename):
        return self.fetch(self.urls.table(tier, filename))

    def fetch_item(self, item_id):
        return self.fetch(self.urls.item(item_id))

    def count(self, prefix=""):
        return sum(1 for u in self.calls if u.startswith(prefix))


class FakeLister:
    """Returns canned listings per URL; unknown URLs fail like the network would."""

    def __init__(self, listings, gate=None):
        self.listings = listings
        self.gate = gate
        self.calls = []
        self._lock = threading.Lock()

    def list(self, url, entry_filter):
        if self.gate is not None:
            self.gate.wait(5)
        with self._lock:
            self.calls.append(url)
        if url not in self.listings:
            raise NetworkFailure(url, "unreachable")
        return list(self.listings[url])
