# windowseat/utils/coordinates.py
"""
Provides the spherical geometry used across the pipeline: distances,
bearings and positions along a great circle or along a recorded route.

Route arguments are sequences of objects exposing ``latitude`` and
``longitude`` attributes (RoutePoint, Checkpoint).
"""
import numpy as np
from typing import Optional, Sequence, Tuple

EARTH_RADIUS_M = 6371000

COMPASS_POINTS = ['N', 'NE', 'E', 'SE', 'S', 'SW', 'W', 'NW']


class CoordinateCalculations:
    """A collection of static methods for coordinate-based calculations."""

    @staticmethod
    def distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        """Calculates the Haversine distance between two points in meters."""
        d_lat = np.radians(lat2 - lat1)
        d_lon = np.radians(lon2 - lon1)
        a = np.sin(d_lat / 2)**2 + np.cos(np.radians(lat1)) * np.cos(np.radians(lat2)) * np.sin(d_lon / 2)**2
        c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
        return float(EARTH_RADIUS_M * c)

    @staticmethod
    def bearing_deg(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        """Initial bearing from point 1 to point 2, in degrees [0, 360)."""
        phi1, phi2 = np.radians(lat1), np.radians(lat2)
        d_lon = np.radians(lon2 - lon1)
        y = np.sin(d_lon) * np.cos(phi2)
        x = np.cos(phi1) * np.sin(phi2) - np.sin(phi1) * np.cos(phi2) * np.cos(d_lon)
        return float((np.degrees(np.arctan2(y, x)) + 360) % 360)

    @staticmethod
    def bearing_to_compass(bearing: float) -> str:
        index = int(round((bearing % 360) / 45)) % 8
        return COMPASS_POINTS[index]

    @staticmethod
    def route_distance_m(route: Sequence) -> float:
        """Total length of a route as the sum of its pairwise haversine legs."""
        if len(route) < 2:
            return 0.0
        return float(np.sum(CoordinateCalculations.segment_distances_m(route)))

    @staticmethod
    def segment_distances_m(route: Sequence) -> np.ndarray:
        """Vectorised haversine distance of every consecutive pair of points."""
        if len(route) < 2:
            return np.zeros(0)
        lats = np.radians(np.array([p.latitude for p in route], dtype=float))
        lons = np.radians(np.array([p.longitude for p in route], dtype=float))
        d_lat = np.diff(lats)
        d_lon = np.diff(lons)
        a = np.sin(d_lat / 2)**2 + np.cos(lats[:-1]) * np.cos(lats[1:]) * np.sin(d_lon / 2)**2
        c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
        return EARTH_RADIUS_M * c

    @staticmethod
    def interpolate_great_circle(lat1: float, lon1: float, lat2: float, lon2: float, fraction: float) -> Tuple[float, float]:
        """
        Returns the point at ``fraction`` (0..1) of the way along the great
        circle between two points.
        """
        phi1, lam1 = np.radians(lat1), np.radians(lon1)
        phi2, lam2 = np.radians(lat2), np.radians(lon2)

        a = np.sin((phi2 - phi1) / 2)**2 + np.cos(phi1) * np.cos(phi2) * np.sin((lam2 - lam1) / 2)**2
        delta = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
        if delta == 0:
            return float(lat1), float(lon1)

        A = np.sin((1 - fraction) * delta) / np.sin(delta)
        B = np.sin(fraction * delta) / np.sin(delta)
        x = A * np.cos(phi1) * np.cos(lam1) + B * np.cos(phi2) * np.cos(lam2)
        y = A * np.cos(phi1) * np.sin(lam1) + B * np.cos(phi2) * np.sin(lam2)
        z = A * np.sin(phi1) + B * np.sin(phi2)

        lat = np.degrees(np.arctan2(z, np.sqrt(x**2 + y**2)))
        lon = np.degrees(np.arctan2(y, x))
        return float(lat), float(lon)

    @staticmethod
    def interpolate_position(route: Sequence, progress: float) -> Optional[Tuple[float, float]]:
        """
        Position at ``progress`` (clamped to [0, 1]) of the route's length,
        interpolated linearly inside the segment that contains it.
        """
        if not route:
            return None
        progress = min(1.0, max(0.0, progress))
        if len(route) == 1 or progress == 0:
            return route[0].latitude, route[0].longitude
        if progress == 1:
            return route[-1].latitude, route[-1].longitude

        segments = CoordinateCalculations.segment_distances_m(route)
        total = float(np.sum(segments))
        if total == 0:
            return route[0].latitude, route[0].longitude

        target = total * progress
        cumulative = np.concatenate(([0.0], np.cumsum(segments)))
        i = int(np.searchsorted(cumulative, target, side='right')) - 1
        i = min(max(i, 0), len(segments) - 1)

        seg_len = segments[i]
        t = 0.0 if seg_len == 0 else (target - cumulative[i]) / seg_len
        start, end = route[i], route[i + 1]
        lat = start.latitude + (end.latitude - start.latitude) * t
        lon = start.longitude + (end.longitude - start.longitude) * t
        return float(lat), float(lon)

    @staticmethod
    def destination_point(lat: float, lon: float, distance_m: float, bearing_deg: float) -> Tuple[float, float]:
        """Calculates a new coordinate point from a start point, distance, and bearing."""
        lat_rad = np.radians(lat)
        lon_rad = np.radians(lon)
        bearing_rad = np.radians(bearing_deg)
        angular = distance_m / EARTH_RADIUS_M

        lat2_rad = np.arcsin(np.sin(lat_rad) * np.cos(angular) +
                             np.cos(lat_rad) * np.sin(angular) * np.cos(bearing_rad))
        lon2_rad = lon_rad + np.arctan2(np.sin(bearing_rad) * np.sin(angular) * np.cos(lat_rad),
                                       np.cos(angular) - np.sin(lat_rad) * np.sin(lat2_rad))
        lon2 = (np.degrees(lon2_rad) + 540) % 360 - 180
        return float(np.degrees(lat2_rad)), float(lon2)

    @staticmethod
    def route_center(route: Sequence) -> Optional[Tuple[float, float]]:
        """Mean position of the route points."""
        if not route:
            return None
        lats = np.array([p.latitude for p in route], dtype=float)
        lons = np.array([p.longitude for p in route], dtype=float)
        return float(np.mean(lats)), float(np.mean(lons))
