# windowseat/maps/tile_cache.py
"""
Offline map cache for a flight.

Two storage strategies are available: individual XYZ tiles covering the
route's buffered bounding box, or a handful of pre-rendered static map
images. Both write to a BlobStore and both are best effort: a failed tile
is counted, never raised.
"""
import json
import logging
import time
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..constants import APIConstants, MapConstants
from ..storage.backends import BlobStore
from ..utils.coordinates import CoordinateCalculations
from ..utils.formatting import format_bytes
from ..utils.tiles import TileCalculations, TileCoord
from .data_models import DownloadProgress, PreCacheResult, TileRecord
from .downloader import MapDownloader

ProgressCallback = Callable[[DownloadProgress], None]

TILE_PREFIX = 'tiles/'
FLIGHT_INDEX_PREFIX = 'flight_tiles/'
TILE_REFS_PREFIX = 'tile_refs/'
STATIC_MAP_PREFIX = 'maps/'


class MapCacheStrategy(ABC):
    name = 'base'

    @abstractmethod
    def pre_cache(self, route: Sequence, flight_id: str, on_progress: Optional[ProgressCallback] = None,
                  zoom_levels: Sequence[int] = MapConstants.DEFAULT_ZOOM_LEVELS,
                  buffer_meters: float = MapConstants.DEFAULT_BUFFER_METERS) -> PreCacheResult:
        pass

    @abstractmethod
    def get_cached_tile(self, z: int, x: int, y: int) -> Optional[bytes]:
        pass

    @abstractmethod
    def clear_for_flight(self, flight_id: str) -> None:
        pass

    @abstractmethod
    def clear_all(self) -> None:
        pass

    @abstractmethod
    def has_offline_maps(self, flight_id: str) -> bool:
        pass

    @abstractmethod
    def cache_size(self, flight_id: Optional[str] = None) -> int:
        pass


class TileBlobStrategy(MapCacheStrategy):
    """
    Stores every tile once under ``tiles/{z}/{x}/{y}``. Each flight keeps an
    index of the tiles it uses (``flight_tiles/<flight>/{z}/{x}/{y}``) and a
    reference under ``tile_refs/{z}/{x}/{y}/<flight>``, so removing one
    flight leaves tiles shared with other flights in place.
    """
    name = 'tiles'

    def __init__(self, blob_store: BlobStore, downloader: Optional[MapDownloader] = None,
                 url_template: str = MapConstants.DEFAULT_TILE_URL,
                 subdomains: Sequence[str] = MapConstants.TILE_SUBDOMAINS,
                 batch_size: int = MapConstants.BATCH_SIZE):
        self.blob_store = blob_store
        self.downloader = downloader or MapDownloader()
        self.url_template = url_template
        self.subdomains = subdomains
        self.batch_size = max(1, batch_size)

    def _fetch_tile(self, tile: TileCoord) -> int:
        """Stores one tile and returns its size. Tiles already cached are not fetched again."""
        existing = self.blob_store.get(TILE_PREFIX + tile.key)
        if existing is not None:
            return len(existing)

        url = TileCalculations.get_tile_url(self.url_template, tile.x, tile.y, tile.z, self.subdomains)
        data = self.downloader.fetch(url)
        self.blob_store.put(TILE_PREFIX + tile.key, data)
        return len(data)

    def _index_tile(self, tile: TileCoord, flight_id: str, size_bytes: int) -> None:
        record = TileRecord(key=tile.key, flight_id=flight_id, size_bytes=size_bytes, stored_at=time.time())
        self.blob_store.put(f"{FLIGHT_INDEX_PREFIX}{flight_id}/{tile.key}",
                            json.dumps(record.to_meta()).encode('utf-8'))
        self.blob_store.put(f"{TILE_REFS_PREFIX}{tile.key}/{flight_id}", b'')

    def pre_cache(self, route, flight_id, on_progress=None,
                  zoom_levels=MapConstants.DEFAULT_ZOOM_LEVELS,
                  buffer_meters=MapConstants.DEFAULT_BUFFER_METERS) -> PreCacheResult:
        tiles = TileCalculations.get_tiles_for_route(route, buffer_meters, zoom_levels)
        if not tiles:
            logging.info(f"No tiles to cache for {flight_id}")
            return PreCacheResult(success=True, strategy=self.name)

        total = len(tiles)
        estimated = TileCalculations.estimate_download_size(tiles)
        logging.info(f"Caching {total} tiles for {flight_id} (~{format_bytes(estimated)})")
        if on_progress:
            on_progress(DownloadProgress(status='preparing', total=total, current=0, estimated_bytes=estimated))

        downloaded = failed = bytes_downloaded = 0
        errors: List[str] = []

        with ThreadPoolExecutor(max_workers=self.batch_size) as executor:
            for start in range(0, total, self.batch_size):
                batch = tiles[start:start + self.batch_size]
                futures = [(tile, executor.submit(self._fetch_tile, tile)) for tile in batch]

                for tile, future in futures:
                    try:
                        size = future.result()
                        self._index_tile(tile, flight_id, size)
                    except Exception as e:
                        failed += 1
                        errors.append(f"{tile.key}: {e}")
                        logging.debug(f"Tile {tile.key} failed: {e}")
                        continue
                    downloaded += 1
                    bytes_downloaded += size

                if on_progress:
                    on_progress(DownloadProgress(
                        status='downloading',
                        total=total,
                        current=min(start + len(batch), total),
                        downloaded=downloaded,
                        failed=failed,
                        bytes_downloaded=bytes_downloaded,
                        estimated_bytes=estimated,
                    ))

        logging.info(f"Cached {downloaded}/{total} tiles for {flight_id} "
                     f"({format_bytes(bytes_downloaded)}, {failed} failed)")
        return PreCacheResult(
            success=failed == 0,
            tiles_downloaded=downloaded,
            tiles_failed=failed,
            bytes_downloaded=bytes_downloaded,
            strategy=self.name,
            errors=errors,
        )

    def get_cached_tile(self, z, x, y):
        try:
            return self.blob_store.get(TILE_PREFIX + TileCalculations.get_tile_key(z, x, y))
        except Exception as e:
            logging.warning(f"Tile lookup {z}/{x}/{y} failed: {e}")
            return None

    def get_flight_tiles(self, flight_id: str) -> List[TileRecord]:
        prefix = f"{FLIGHT_INDEX_PREFIX}{flight_id}/"
        records = []
        for key in self.blob_store.list_keys(prefix):
            raw = self.blob_store.get(key)
            if raw is None:
                continue
            try:
                records.append(TileRecord.from_meta(json.loads(raw.decode('utf-8'))))
            except (ValueError, KeyError) as e:
                logging.warning(f"Skipping unreadable tile index entry {key}: {e}")
        return records

    def clear_for_flight(self, flight_id):
        prefix = f"{FLIGHT_INDEX_PREFIX}{flight_id}/"
        removed = 0
        for index_key in self.blob_store.list_keys(prefix):
            tile_key = index_key[len(prefix):]
            self.blob_store.delete(index_key)
            self.blob_store.delete(f"{TILE_REFS_PREFIX}{tile_key}/{flight_id}")
            if not self.blob_store.list_keys(f"{TILE_REFS_PREFIX}{tile_key}/"):
                self.blob_store.delete(TILE_PREFIX + tile_key)
                removed += 1
        logging.info(f"Cleared map tiles for {flight_id} ({removed} tiles removed)")

    def clear_all(self):
        for prefix in (TILE_PREFIX, FLIGHT_INDEX_PREFIX, TILE_REFS_PREFIX):
            self.blob_store.delete_prefix(prefix)
        logging.info("Cleared all cached map tiles")

    def has_offline_maps(self, flight_id):
        try:
            return bool(self.blob_store.list_keys(f"{FLIGHT_INDEX_PREFIX}{flight_id}/"))
        except Exception as e:
            logging.warning(f"Offline map check for {flight_id} failed: {e}")
            return False

    def cache_size(self, flight_id=None):
        if flight_id is None:
            return self.blob_store.total_size(TILE_PREFIX)
        return sum(r.size_bytes for r in self.get_flight_tiles(flight_id))


class StaticMapStrategy(MapCacheStrategy):
    """Stores three rendered maps of the route (overview, regional, detail) per flight."""
    name = 'static'

    def __init__(self, blob_store: BlobStore, downloader: Optional[MapDownloader] = None,
                 map_sizes: Optional[Dict[str, Dict[str, int]]] = None,
                 base_url: str = APIConstants.STATIC_MAP_URL):
        self.blob_store = blob_store
        self.downloader = downloader or MapDownloader()
        self.map_sizes = map_sizes or MapConstants.STATIC_MAP_SIZES
        self.base_url = base_url

    def build_static_map_url(self, center: Tuple[float, float], zoom: int, width: int, height: int,
                             origin, destination) -> str:
        params = [
            f"center={center[0]:.5f},{center[1]:.5f}",
            f"zoom={zoom}",
            f"size={width}x{height}",
            "maptype=mapnik",
            f"markers={origin.latitude},{origin.longitude},lightblue",
            f"markers={destination.latitude},{destination.longitude},lightblue",
        ]
        return f"{self.base_url}?{'&'.join(params)}"

    @staticmethod
    def _map_key(flight_id: str, name: str) -> str:
        return f"{STATIC_MAP_PREFIX}{flight_id}/{name}.png"

    @staticmethod
    def _metadata_key(flight_id: str) -> str:
        return f"{STATIC_MAP_PREFIX}{flight_id}/metadata.json"

    def pre_cache(self, route, flight_id, on_progress=None,
                  zoom_levels=MapConstants.DEFAULT_ZOOM_LEVELS,
                  buffer_meters=MapConstants.DEFAULT_BUFFER_METERS) -> PreCacheResult:
        # zoom_levels and buffer_meters do not apply; each map has a fixed zoom
        if len(route) < 2:
            logging.warning(f"Route for {flight_id} is too short for static maps")
            return PreCacheResult(success=False, strategy=self.name, errors=['route has fewer than 2 points'])

        origin, destination = route[0], route[-1]
        center = CoordinateCalculations.route_center(route)
        bounds = TileCalculations.get_route_bounds(route, 0)
        total = len(self.map_sizes)
        if on_progress:
            on_progress(DownloadProgress(status='preparing', total=total, current=0))

        downloaded = failed = bytes_downloaded = 0
        errors: List[str] = []
        maps_meta = []
        for i, (name, size) in enumerate(self.map_sizes.items()):
            url = self.build_static_map_url(center, size['zoom'], size['width'], size['height'],
                                            origin, destination)
            key = self._map_key(flight_id, name)
            try:
                data = self.downloader.fetch(url)
                self.blob_store.put(key, data)
                downloaded += 1
                bytes_downloaded += len(data)
                maps_meta.append({'name': name, 'key': key, 'success': True, 'error': None})
            except Exception as e:
                failed += 1
                errors.append(f"{name}: {e}")
                maps_meta.append({'name': name, 'key': key, 'success': False, 'error': str(e)})
                logging.warning(f"Static map '{name}' for {flight_id} failed: {e}")

            if on_progress:
                on_progress(DownloadProgress(status='downloading', total=total, current=i + 1,
                                             downloaded=downloaded, failed=failed,
                                             bytes_downloaded=bytes_downloaded))

        metadata = {
            'flight_id': flight_id,
            'downloaded_at': datetime.now(timezone.utc).isoformat(),
            'origin': {'latitude': origin.latitude, 'longitude': origin.longitude},
            'destination': {'latitude': destination.latitude, 'longitude': destination.longitude},
            'bounds': bounds,
            'center': {'latitude': center[0], 'longitude': center[1]},
            'maps': maps_meta,
        }
        self.blob_store.put(self._metadata_key(flight_id), json.dumps(metadata).encode('utf-8'))

        logging.info(f"Stored {downloaded}/{total} static maps for {flight_id}")
        return PreCacheResult(
            success=downloaded > 0,
            tiles_downloaded=downloaded,
            tiles_failed=failed,
            bytes_downloaded=bytes_downloaded,
            strategy=self.name,
            errors=errors,
        )

    def get_static_map(self, flight_id: str, name: str) -> Optional[bytes]:
        try:
            return self.blob_store.get(self._map_key(flight_id, name))
        except Exception as e:
            logging.warning(f"Static map lookup {flight_id}/{name} failed: {e}")
            return None

    def get_static_map_metadata(self, flight_id: str) -> Optional[dict]:
        try:
            raw = self.blob_store.get(self._metadata_key(flight_id))
            return json.loads(raw.decode('utf-8')) if raw is not None else None
        except Exception as e:
            logging.warning(f"Static map metadata for {flight_id} is unreadable: {e}")
            return None

    def get_cached_tile(self, z, x, y):
        return None

    def clear_for_flight(self, flight_id):
        self.blob_store.delete_prefix(f"{STATIC_MAP_PREFIX}{flight_id}/")
        logging.info(f"Cleared static maps for {flight_id}")

    def clear_all(self):
        self.blob_store.delete_prefix(STATIC_MAP_PREFIX)
        logging.info("Cleared all static maps")

    def has_offline_maps(self, flight_id):
        metadata = self.get_static_map_metadata(flight_id)
        if not metadata:
            return False
        return any(m.get('success') for m in metadata.get('maps', []))

    def cache_size(self, flight_id=None):
        if flight_id is None:
            return self.blob_store.total_size(STATIC_MAP_PREFIX)
        return self.blob_store.total_size(f"{STATIC_MAP_PREFIX}{flight_id}/")


class OfflineTileCache:
    """Front end over a map cache strategy; the strategy decides what gets stored."""

    def __init__(self, strategy: MapCacheStrategy):
        self.strategy = strategy

    @property
    def strategy_name(self) -> str:
        return self.strategy.name

    def pre_cache(self, route: Sequence, flight_id: str, on_progress: Optional[ProgressCallback] = None,
                  zoom_levels: Sequence[int] = MapConstants.DEFAULT_ZOOM_LEVELS,
                  buffer_meters: float = MapConstants.DEFAULT_BUFFER_METERS) -> PreCacheResult:
        return self.strategy.pre_cache(route, flight_id, on_progress=on_progress,
                                       zoom_levels=zoom_levels, buffer_meters=buffer_meters)

    def get_cached_tile(self, z: int, x: int, y: int) -> Optional[bytes]:
        return self.strategy.get_cached_tile(z, x, y)

    def clear_for_flight(self, flight_id: str) -> None:
        self.strategy.clear_for_flight(flight_id)

    def clear_all(self) -> None:
        self.strategy.clear_all()

    def has_offline_maps(self, flight_id: str) -> bool:
        return self.strategy.has_offline_maps(flight_id)

    def cache_size(self, flight_id: Optional[str] = None) -> int:
        return self.strategy.cache_size(flight_id)

    def estimate(self, route: Sequence,
                 zoom_levels: Sequence[int] = MapConstants.DEFAULT_ZOOM_LEVELS,
                 buffer_meters: float = MapConstants.DEFAULT_BUFFER_METERS) -> Dict[str, object]:
        """Tile count and expected download size before committing to a download."""
        estimate = TileCalculations.estimate_tile_count(route, buffer_meters, zoom_levels)
        estimate['formatted'] = format_bytes(estimate['estimated_bytes'])
        return estimate


def create_tile_cache(blob_store: BlobStore, strategy: str = 'tiles',
                      downloader: Optional[MapDownloader] = None,
                      url_template: str = MapConstants.DEFAULT_TILE_URL,
                      batch_size: int = MapConstants.BATCH_SIZE) -> OfflineTileCache:
    if strategy == 'tiles':
        return OfflineTileCache(TileBlobStrategy(blob_store, downloader, url_template=url_template,
                                                 batch_size=batch_size))
    if strategy == 'static':
        return OfflineTileCache(StaticMapStrategy(blob_store, downloader))
    raise ValueError(f"Unknown map cache strategy: {strategy}")
