from .data_models import TileRecord, PreCacheResult, DownloadProgress
from .downloader import MapDownloader
from .tile_cache import OfflineTileCache, TileBlobStrategy, StaticMapStrategy, MapCacheStrategy, create_tile_cache

__all__ = [
    "TileRecord",
    "PreCacheResult",
    "DownloadProgress",
    "MapDownloader",
    "OfflineTileCache",
    "TileBlobStrategy",
    "StaticMapStrategy",
    "MapCacheStrategy",
    "create_tile_cache"
]
