from .data_models import (
    RoutePoint, Checkpoint, CheckpointKind, LandmarkInfo, NearbyFeature,
    Airport, FlightRoute, FlightDuration, FlightPack, PackSummary, AudioAssignment
)
from .checkpoints import (
    build_checkpoints, densify_route, estimate_flight_duration, format_duration,
    get_route_progress, get_next_checkpoint, get_eta_to_checkpoint
)
from .flight_data import FlightDataService, normalize_flight_number

__all__ = [
    "RoutePoint",
    "Checkpoint",
    "CheckpointKind",
    "LandmarkInfo",
    "NearbyFeature",
    "Airport",
    "FlightRoute",
    "FlightDuration",
    "FlightPack",
    "PackSummary",
    "AudioAssignment",
    "build_checkpoints",
    "densify_route",
    "estimate_flight_duration",
    "format_duration",
    "get_route_progress",
    "get_next_checkpoint",
    "get_eta_to_checkpoint",
    "FlightDataService",
    "normalize_flight_number"
]
