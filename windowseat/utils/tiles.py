# windowseat/utils/tiles.py
"""
Slippy-map (XYZ) tile arithmetic for the offline map cache.
"""
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..constants import MapConstants


@dataclass(frozen=True)
class TileCoord:
    x: int
    y: int
    z: int

    @property
    def key(self) -> str:
        return TileCalculations.get_tile_key(self.z, self.x, self.y)


class TileCalculations:
    """Static helpers converting between coordinates, tiles and tile keys."""

    @staticmethod
    def lat_lng_to_tile(lat: float, lng: float, zoom: int) -> TileCoord:
        """Tile containing a coordinate, clamped into the valid range."""
        n = 2 ** zoom
        x = math.floor((lng + 180) / 360 * n)
        lat_rad = math.radians(lat)
        y = math.floor((1 - math.log(math.tan(lat_rad) + 1 / math.cos(lat_rad)) / math.pi) / 2 * n)
        return TileCoord(x=max(0, min(n - 1, x)), y=max(0, min(n - 1, y)), z=zoom)

    @staticmethod
    def tile_to_lat_lng(x: int, y: int, z: int) -> Dict[str, float]:
        """Top-left corner of a tile."""
        n = 2 ** z
        lng = x / n * 360 - 180
        lat = math.degrees(math.atan(math.sinh(math.pi * (1 - 2 * y / n))))
        return {'latitude': lat, 'longitude': lng}

    @staticmethod
    def get_tile_bounds(x: int, y: int, z: int) -> Dict[str, float]:
        nw = TileCalculations.tile_to_lat_lng(x, y, z)
        se = TileCalculations.tile_to_lat_lng(x + 1, y + 1, z)
        return {
            'north': nw['latitude'],
            'south': se['latitude'],
            'east': se['longitude'],
            'west': nw['longitude'],
        }

    @staticmethod
    def get_tiles_for_bounds(north: float, south: float, east: float, west: float, zoom: int) -> List[TileCoord]:
        """
        All tiles covering a bounding box. A box whose east edge lies west
        of its west edge crosses the date line and wraps around.
        """
        n = 2 ** zoom
        if east < west:
            east += 360

        nw_tile = TileCalculations.lat_lng_to_tile(north, west, zoom)
        # lat_lng_to_tile clamps x, so compute the unclamped east column here
        se_tile = TileCalculations.lat_lng_to_tile(south, min(east, 180), zoom)
        max_x = se_tile.x if east <= 180 else math.floor((east + 180) / 360 * n)

        tiles = []
        for x in range(nw_tile.x, max_x + 1):
            for y in range(nw_tile.y, se_tile.y + 1):
                tiles.append(TileCoord(x=x % n, y=max(0, min(n - 1, y)), z=zoom))
        return tiles

    @staticmethod
    def get_route_bounds(route: Sequence, buffer_meters: float) -> Dict[str, float]:
        """Bounding box of the route grown by ``buffer_meters`` on every side."""
        if not route:
            return {'north': 0.0, 'south': 0.0, 'east': 0.0, 'west': 0.0}

        lats = [p.latitude for p in route]
        lngs = [p.longitude for p in route]
        min_lat, max_lat = min(lats), max(lats)
        min_lng, max_lng = min(lngs), max(lngs)

        # 1 degree of latitude is ~111 km; longitude shrinks with cos(lat)
        lat_buffer = buffer_meters / 111000
        avg_lat = (min_lat + max_lat) / 2
        lng_buffer = buffer_meters / (111000 * math.cos(math.radians(avg_lat)))

        return {
            'north': min(85.0, max_lat + lat_buffer),
            'south': max(-85.0, min_lat - lat_buffer),
            'east': min(180.0, max_lng + lng_buffer),
            'west': max(-180.0, min_lng - lng_buffer),
        }

    @staticmethod
    def get_tiles_for_route(route: Sequence,
                            buffer_meters: float = MapConstants.DEFAULT_BUFFER_METERS,
                            zoom_levels: Sequence[int] = MapConstants.DEFAULT_ZOOM_LEVELS) -> List[TileCoord]:
        if not route:
            return []

        bounds = TileCalculations.get_route_bounds(route, buffer_meters)
        seen = set()
        all_tiles = []
        for zoom in zoom_levels:
            for tile in TileCalculations.get_tiles_for_bounds(
                    bounds['north'], bounds['south'], bounds['east'], bounds['west'], zoom):
                if tile.key not in seen:
                    seen.add(tile.key)
                    all_tiles.append(tile)
        return all_tiles

    @staticmethod
    def estimate_tile_size(zoom: int) -> int:
        return MapConstants.AVERAGE_TILE_SIZES.get(zoom, MapConstants.DEFAULT_TILE_SIZE)

    @staticmethod
    def estimate_download_size(tiles: Sequence[TileCoord]) -> int:
        return sum(TileCalculations.estimate_tile_size(t.z) for t in tiles)

    @staticmethod
    def estimate_tile_count(route: Sequence,
                            buffer_meters: float = MapConstants.DEFAULT_BUFFER_METERS,
                            zoom_levels: Sequence[int] = MapConstants.DEFAULT_ZOOM_LEVELS) -> Dict[str, int]:
        tiles = TileCalculations.get_tiles_for_route(route, buffer_meters, zoom_levels)
        return {
            'count': len(tiles),
            'estimated_bytes': TileCalculations.estimate_download_size(tiles),
        }

    @staticmethod
    def get_tile_url(url_template: str, x: int, y: int, z: int,
                     subdomains: Sequence[str] = MapConstants.TILE_SUBDOMAINS) -> str:
        subdomain = subdomains[abs(x + y) % len(subdomains)]
        return (url_template
                .replace('{s}', subdomain)
                .replace('{x}', str(x))
                .replace('{y}', str(y))
                .replace('{z}', str(z)))

    @staticmethod
    def get_tile_key(z: int, x: int, y: int) -> str:
        return f"{z}/{x}/{y}"

    @staticmethod
    def parse_tile_key(key: str) -> Optional[TileCoord]:
        parts = key.split('/')
        if len(parts) != 3:
            return None
        try:
            z, x, y = (int(p) for p in parts)
        except ValueError:
            return None
        return TileCoord(x=x, y=y, z=z)

    @staticmethod
    def calculate_fit_zoom(route: Sequence, map_width: int = 800, map_height: int = 600, padding: int = 50) -> int:
        """Largest zoom at which the whole route fits in a map of the given size."""
        if not route:
            return 4

        bounds = TileCalculations.get_route_bounds(route, 0)
        lat_range = bounds['north'] - bounds['south']
        lng_range = bounds['east'] - bounds['west']
        effective_width = map_width - 2 * padding
        effective_height = map_height - 2 * padding
        center_lat = (bounds['north'] + bounds['south']) / 2

        candidates = []
        if lat_range > 0:
            candidates.append(math.log2(effective_height / (lat_range * 256 / 180)))
        if lng_range > 0:
            candidates.append(math.log2(
                effective_width / (lng_range * 256 / 360 * math.cos(math.radians(center_lat)))))
        if not candidates:
            return 18

        return max(1, min(18, math.floor(min(candidates))))
