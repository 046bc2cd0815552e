"""Remote asset access for Loot Rate Viewer."""

# Delay bs4/requests imports until a client is actually requested
__all__ = ["DirectoryLister", "DefinitionFetcher", "AssetUrls"]

def __getattr__(name):  # pragma: no cover - simple lazy loader
    if name in __all__:
        from .asset_url import AssetUrls
        from .fetcher import DefinitionFetcher
        from .listing import DirectoryLister
        globals().update({
            "AssetUrls": AssetUrls,
            "DefinitionFetcher": DefinitionFetcher,
            "DirectoryLister": DirectoryLister,
        })
        return globals()[name]
    raise AttributeError(name)
