# windowseat/route/checkpoints.py
"""
Turns a raw flight route into a bounded list of narration checkpoints and
answers simple progress questions about a position along that route.

Checkpoints are spaced ``max(total / (n + 1), min_spacing)`` apart along
the route. The first point is always the departure checkpoint and the last
point is always the arrival checkpoint. Ids are derived from the index, so
rebuilding the same route yields the same checkpoints.
"""
import logging
import math
from typing import Iterable, List, Optional, Sequence, Tuple

from ..constants import FlightConstants
from ..utils.coordinates import CoordinateCalculations
from .data_models import Checkpoint, CheckpointKind, FlightDuration, RoutePoint


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def densify_route(route: Sequence[RoutePoint], max_segment_m: float) -> List[RoutePoint]:
    """
    Inserts great-circle points into every leg longer than ``max_segment_m``.
    Altitude is interpolated linearly; it stays unset when either end of
    the leg has none.
    """
    if len(route) < 2 or max_segment_m <= 0:
        return list(route)

    dense = [route[0]]
    for prev, cur in zip(route, route[1:]):
        leg = CoordinateCalculations.distance_m(prev.latitude, prev.longitude, cur.latitude, cur.longitude)
        if leg > max_segment_m:
            steps = int(math.ceil(leg / max_segment_m))
            for k in range(1, steps):
                fraction = k / steps
                lat, lon = CoordinateCalculations.interpolate_great_circle(
                    prev.latitude, prev.longitude, cur.latitude, cur.longitude, fraction)
                altitude = None
                if prev.altitude is not None and cur.altitude is not None:
                    altitude = prev.altitude + (cur.altitude - prev.altitude) * fraction
                dense.append(RoutePoint(latitude=lat, longitude=lon, altitude=altitude))
        dense.append(cur)
    return dense


def _default_name(kind: CheckpointKind, index: int) -> str:
    if kind == CheckpointKind.DEPARTURE:
        return 'Departure'
    if kind == CheckpointKind.ARRIVAL:
        return 'Arrival'
    return f"Waypoint {index}"


def _make_checkpoint(point: RoutePoint, index: int, kind: CheckpointKind, radius: float) -> Checkpoint:
    return Checkpoint(
        id=f"checkpoint_{index}",
        index=index,
        name=point.name or _default_name(kind, index),
        latitude=point.latitude,
        longitude=point.longitude,
        altitude=point.altitude if point.altitude is not None else FlightConstants.DEFAULT_CRUISE_ALTITUDE_M,
        radius_meters=radius,
        kind=kind,
    )


def build_checkpoints(route: Sequence[RoutePoint],
                      num_checkpoints: int = 20,
                      min_spacing_meters: float = 50000,
                      geofence_radius_meters: float = 10000) -> List[Checkpoint]:
    """
    Builds at most ``num_checkpoints`` checkpoints (never fewer than the
    departure/arrival pair) from a route of two or more points.

    Raises:
        ValueError: ``num_checkpoints`` is below 2 or the geofence radius
            is not positive.
    """
    if num_checkpoints < 2:
        raise ValueError(f"num_checkpoints must be at least 2, got {num_checkpoints}")
    if geofence_radius_meters <= 0:
        raise ValueError(f"geofence_radius_meters must be positive, got {geofence_radius_meters}")
    if not route or len(route) < 2:
        return []

    total = CoordinateCalculations.route_distance_m(route)
    spacing = max(total / (num_checkpoints + 1), min_spacing_meters)

    # Sparse routes (a bare origin/destination pair) have nowhere to put
    # waypoints, so subdivide them finely enough for every slot to land.
    if total >= spacing and num_checkpoints > 2:
        route = densify_route(route, spacing / max(8, 2 * num_checkpoints))

    checkpoints = [_make_checkpoint(route[0], 0, CheckpointKind.DEPARTURE, geofence_radius_meters)]

    segments = CoordinateCalculations.segment_distances_m(route)
    accumulated = 0.0
    last_emitted = 0.0
    for i in range(1, len(route) - 1):
        if len(checkpoints) >= num_checkpoints - 1:
            break
        accumulated += segments[i - 1]
        if accumulated - last_emitted >= spacing:
            checkpoints.append(
                _make_checkpoint(route[i], len(checkpoints), CheckpointKind.WAYPOINT, geofence_radius_meters))
            last_emitted = accumulated

    checkpoints.append(
        _make_checkpoint(route[-1], len(checkpoints), CheckpointKind.ARRIVAL, geofence_radius_meters))

    logging.info(f"Built {len(checkpoints)} checkpoints over {total / 1000:.0f} km (spacing {spacing / 1000:.1f} km)")
    return checkpoints


def estimate_flight_duration(route: Sequence[RoutePoint],
                             average_speed_knots: float = FlightConstants.AVERAGE_SPEED_KNOTS) -> Optional[FlightDuration]:
    if not route or len(route) < 2:
        return None

    distance_nm = CoordinateCalculations.route_distance_m(route) / FlightConstants.METERS_PER_NM
    hours = distance_nm / average_speed_knots
    return FlightDuration(
        hours=int(math.floor(hours)),
        minutes=_round_half_up((hours % 1) * 60),
        total_minutes=_round_half_up(hours * 60),
    )


def format_duration(duration: Optional[FlightDuration]) -> str:
    if not duration:
        return 'Unknown'
    return f"{duration.hours}h {duration.minutes}m"


def get_route_progress(lat: float, lon: float, route: Sequence[RoutePoint]) -> float:
    """
    Approximate fraction (0..1) of the route already flown, judged by the
    leg whose nearer end is closest to the position.
    """
    if not route or len(route) < 2:
        return 0.0

    segments = CoordinateCalculations.segment_distances_m(route)
    total = float(segments.sum())
    if total == 0:
        return 0.0

    best_distance = math.inf
    best_progress = 0.0
    accumulated = 0.0
    for i, seg_len in enumerate(segments):
        start, end = route[i], route[i + 1]
        to_start = CoordinateCalculations.distance_m(lat, lon, start.latitude, start.longitude)
        to_end = CoordinateCalculations.distance_m(lat, lon, end.latitude, end.longitude)
        within = to_start / (to_start + to_end) if (to_start + to_end) > 0 else 0.0
        nearest = min(to_start, to_end)
        if nearest < best_distance:
            best_distance = nearest
            best_progress = (accumulated + within * seg_len) / total
        accumulated += seg_len

    return max(0.0, min(1.0, best_progress))


def get_next_checkpoint(lat: float, lon: float, checkpoints: Iterable[Checkpoint],
                        triggered: Optional[set] = None) -> Optional[Tuple[Checkpoint, float]]:
    """Closest checkpoint not yet triggered, with its distance in meters."""
    triggered = triggered or set()
    closest = None
    closest_distance = math.inf
    for checkpoint in checkpoints:
        if checkpoint.id in triggered:
            continue
        distance = CoordinateCalculations.distance_m(lat, lon, checkpoint.latitude, checkpoint.longitude)
        if distance < closest_distance:
            closest, closest_distance = checkpoint, distance
    if closest is None:
        return None
    return closest, closest_distance


def get_eta_to_checkpoint(distance_m: float, speed_mps: Optional[float]) -> Optional[str]:
    if not speed_mps or speed_mps <= 0:
        return None

    minutes = _round_half_up(distance_m / speed_mps / 60)
    if minutes < 1:
        return 'Less than 1 min'
    if minutes < 60:
        return f"{minutes} min"
    return f"{minutes // 60}h {minutes % 60}m"
