from __future__ import annotations

from dataclasses import dataclass

DEFAULT_LISTING_URL = (
    "https://github.com/EvanMeek/veloren-wecw-assets/tree/main/common/loot_tables/dungeon/"
)
DEFAULT_RAW_URL = (
    "https://raw.githubusercontent.com/EvanMeek/veloren-wecw-assets/main/common/loot_tables/dungeon/"
)
DEFAULT_ASSETS_URL = "https://raw.githubusercontent.com/EvanMeek/veloren-wecw-assets/main/"

ITEM_SUFFIX = ".ron"


def _slash(url: str) -> str:
    return url if url.endswith("/") else url + "/"


@dataclass(frozen=True)
class AssetUrls:
    """Builds every remote URL the pipeline requests."""

    listing_url: str = DEFAULT_LISTING_URL
    raw_url: str = DEFAULT_RAW_URL
    assets_url: str = DEFAULT_ASSETS_URL

    @classmethod
    def from_config(cls, source: dict | None) -> "AssetUrls":
        source = source or {}
        return cls(
            listing_url=_slash(source.get("listing_url") or DEFAULT_LISTING_URL),
            raw_url=_slash(source.get("raw_url") or DEFAULT_RAW_URL),
            assets_url=_slash(source.get("assets_url") or DEFAULT_ASSETS_URL),
        )

    def tiers(self) -> str:
        return _slash(self.listing_url)

    def tier_listing(self, tier: str) -> str:
        return f"{_slash(self.listing_url)}{tier}"

    def table(self, tier: str, filename: str) -> str:
        return f"{_slash(self.raw_url)}{tier}/{filename}"

    def item(self, item_id: str) -> str:
        """``common.items.weapons.sword`` -> ``<assets>/common/items/weapons/sword.ron``"""
        return f"{_slash(self.assets_url)}{item_id.replace('.', '/')}{ITEM_SUFFIX}"


__all__ = [
    "AssetUrls",
    "DEFAULT_LISTING_URL",
    "DEFAULT_RAW_URL",
    "DEFAULT_ASSETS_URL",
]
