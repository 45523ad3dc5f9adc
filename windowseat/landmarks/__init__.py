from .core import LandmarkEnricher
from .osm_data_handler import NominatimGeocoder, OverpassPOIClient, RateLimiter, build_osm_session

__all__ = [
    "LandmarkEnricher",
    "NominatimGeocoder",
    "OverpassPOIClient",
    "RateLimiter",
    "build_osm_session"
]
