from .api import APIConstants, MapConstants, FlightConstants
from .airports import AIRPORTS, DEMO_FLIGHTS, DEFAULT_DEMO_ROUTE

__all__ = [
    "APIConstants",
    "MapConstants",
    "FlightConstants",
    "AIRPORTS",
    "DEMO_FLIGHTS",
    "DEFAULT_DEMO_ROUTE"
]
