from .geofence import check_geofences, is_within_geofence, find_nearby_checkpoints
from .core import TrackingSession, TrackingState, PositionSample

__all__ = [
    "check_geofences",
    "is_within_geofence",
    "find_nearby_checkpoints",
    "TrackingSession",
    "TrackingState",
    "PositionSample"
]
