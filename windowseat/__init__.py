from .config import WindowSeatConfig
from .core import FlightPackDownloader
from .exceptions import WindowSeatError, ConfigurationError, ProviderError, FlightPackError, StorageError
from .tracking import TrackingSession, PositionSample, check_geofences

__all__ = [
    "WindowSeatConfig",
    "FlightPackDownloader",
    "WindowSeatError",
    "ConfigurationError",
    "ProviderError",
    "FlightPackError",
    "StorageError",
    "TrackingSession",
    "PositionSample",
    "check_geofences"
]
