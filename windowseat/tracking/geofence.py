# windowseat/tracking/geofence.py
"""
Geofence checks against a flight's checkpoints. No I/O.
"""
import logging
import math
from typing import Iterable, List, MutableSet, Optional, Tuple

from ..route.data_models import Checkpoint
from ..utils.coordinates import CoordinateCalculations


def _checkpoint_distance(lat: float, lon: float, checkpoint) -> Optional[float]:
    """Distance to a checkpoint, or None when the entry is unusable."""
    try:
        cp_lat = float(checkpoint.latitude)
        cp_lon = float(checkpoint.longitude)
    except (AttributeError, TypeError, ValueError):
        return None
    if not (math.isfinite(cp_lat) and math.isfinite(cp_lon)):
        return None
    return CoordinateCalculations.distance_m(lat, lon, cp_lat, cp_lon)


def is_within_geofence(lat: float, lon: float, checkpoint: Checkpoint) -> bool:
    radius = getattr(checkpoint, 'radius_meters', None)
    if not isinstance(radius, (int, float)) or radius <= 0:
        return False
    distance = _checkpoint_distance(lat, lon, checkpoint)
    return distance is not None and distance <= radius


def check_geofences(lat: float, lon: float, checkpoints: Iterable[Checkpoint],
                    triggered: MutableSet[str]) -> List[Checkpoint]:
    """
    Checkpoints entered at this position that have not fired before.

    Every returned checkpoint's id is added to ``triggered``, so a checkpoint
    fires at most once per triggered set. Results keep checkpoint order.
    """
    if not (isinstance(lat, (int, float)) and isinstance(lon, (int, float))
            and math.isfinite(lat) and math.isfinite(lon)):
        return []

    entered = []
    for checkpoint in checkpoints or []:
        cp_id = getattr(checkpoint, 'id', None)
        index = getattr(checkpoint, 'index', None)
        if not isinstance(cp_id, str) or not cp_id or cp_id in triggered:
            continue
        if not isinstance(index, int) or isinstance(index, bool):
            continue
        if is_within_geofence(lat, lon, checkpoint):
            triggered.add(cp_id)
            entered.append(checkpoint)
            logging.debug(f"Entered geofence of {cp_id}")

    return sorted(entered, key=lambda c: c.index)


def find_nearby_checkpoints(lat: float, lon: float, checkpoints: Iterable[Checkpoint],
                            max_radius: float = 10000) -> List[Tuple[Checkpoint, float]]:
    """(checkpoint, distance) pairs within ``max_radius`` meters, nearest first."""
    nearby = []
    for checkpoint in checkpoints or []:
        distance = _checkpoint_distance(lat, lon, checkpoint)
        if distance is not None and distance <= max_radius:
            nearby.append((checkpoint, distance))
    nearby.sort(key=lambda pair: pair[1])
    return nearby
