# windowseat/route/flight_data.py
"""
Flight route source.

Looks flights up on FlightAware AeroAPI when a key is configured and falls
back to a deterministic great-circle demo route otherwise (or when the
lookup fails), so a pack can always be built.
"""
import logging
import math
import re
from typing import Dict, List, Optional

import requests

from ..config import is_api_key_configured
from ..constants import APIConstants, FlightConstants, AIRPORTS, DEMO_FLIGHTS, DEFAULT_DEMO_ROUTE
from ..exceptions import ProviderError
from ..utils.coordinates import CoordinateCalculations
from ..utils.retry import with_retry, is_retryable_status
from .checkpoints import estimate_flight_duration
from .data_models import Airport, FlightRoute, RoutePoint

AIRPORT_PAIR_PATTERN = re.compile(r'^([A-Z]{3})-([A-Z]{3})$')
AIRLINE_CODE_PATTERN = re.compile(r'^([A-Z]{2,3})')

# Track points kept from an AeroAPI track
MAX_TRACK_SAMPLES = 50


def normalize_flight_number(flight_number: str) -> str:
    return re.sub(r'\s+', '', flight_number or '').upper()


class FlightDataService:
    """Resolves a flight number into a FlightRoute."""

    def __init__(self, api_key: Optional[str] = None, session: Optional[requests.Session] = None,
                 timeout: int = 30):
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def is_configured(self) -> bool:
        return is_api_key_configured(self.api_key)

    def get_flight_route(self, flight_number: str) -> FlightRoute:
        if not self.is_configured():
            logging.info("Flight data API not configured, using demo route")
            return self.get_demo_route(flight_number)

        try:
            return self.fetch_from_aeroapi(flight_number)
        except (ProviderError, requests.exceptions.RequestException, ValueError, KeyError) as e:
            logging.warning(f"Failed to fetch flight data for {flight_number}: {e}. Using demo route.")
            return self.get_demo_route(flight_number)

    def fetch_from_aeroapi(self, flight_number: str) -> FlightRoute:
        normalized = normalize_flight_number(flight_number)
        info = self._aeroapi_request(f"/flights/{normalized}")
        flights = info.get('flights') or []
        if not flights:
            raise ProviderError(f"Flight {normalized} not found", status=404, no_retry=True)

        flight = flights[0]
        track_points = []
        if flight.get('fa_flight_id'):
            try:
                track = self._aeroapi_request(f"/flights/{flight['fa_flight_id']}/track")
                track_points = track.get('positions') or []
            except (ProviderError, requests.exceptions.RequestException) as e:
                logging.info(f"Track for {normalized} not available ({e}), using filed endpoints only")

        route = self.build_route(flight, track_points)
        return FlightRoute(
            flight_number=normalized,
            airline=flight.get('operator') or self.extract_airline(normalized),
            origin=self._airport_from_aeroapi(flight.get('origin') or {}),
            destination=self._airport_from_aeroapi(flight.get('destination') or {}),
            route=route,
            estimated_duration=estimate_flight_duration(route),
            using_demo_data=False,
        )

    def _aeroapi_request(self, endpoint: str) -> Dict:
        def attempt(_attempt: int) -> Dict:
            response = self.session.get(
                f"{APIConstants.AEROAPI_BASE_URL}{endpoint}",
                headers={'x-apikey': self.api_key},
                timeout=self.timeout,
            )
            if not response.ok:
                try:
                    detail = response.json().get('detail')
                except ValueError:
                    detail = None
                raise ProviderError(detail or f"AeroAPI error: {response.status_code}",
                                    status=response.status_code)
            return response.json()

        return with_retry(
            attempt,
            should_retry=lambda e, _n: not getattr(e, 'no_retry', False) and (
                is_retryable_status(getattr(e, 'status', None))
                or isinstance(e, requests.exceptions.RequestException)),
        )

    @staticmethod
    def _airport_from_aeroapi(data: Dict) -> Airport:
        code = data.get('code_iata') or data.get('code') or 'XXX'
        return Airport(
            code=code,
            name=data.get('name') or code,
            city=data.get('city'),
            latitude=data.get('latitude'),
            longitude=data.get('longitude'),
        )

    @staticmethod
    def build_route(flight: Dict, track_points: List[Dict]) -> List[RoutePoint]:
        """Origin, a sample of at most ~50 track positions, then destination."""
        route = []
        origin = flight.get('origin') or {}
        destination = flight.get('destination') or {}

        if origin.get('latitude') is not None and origin.get('longitude') is not None:
            route.append(RoutePoint(
                latitude=origin['latitude'],
                longitude=origin['longitude'],
                altitude=0,
                name=origin.get('name') or origin.get('code'),
            ))

        if track_points:
            step = max(1, len(track_points) // MAX_TRACK_SAMPLES)
            for point in track_points[::step]:
                altitude_ft = point.get('altitude_ft')
                route.append(RoutePoint(
                    latitude=point['latitude'],
                    longitude=point['longitude'],
                    altitude=altitude_ft / FlightConstants.METERS_TO_FEET if altitude_ft else None,
                    groundspeed=point.get('groundspeed'),
                    timestamp=point.get('timestamp'),
                ))

        if destination.get('latitude') is not None and destination.get('longitude') is not None:
            route.append(RoutePoint(
                latitude=destination['latitude'],
                longitude=destination['longitude'],
                altitude=0,
                name=destination.get('name') or destination.get('code'),
            ))
        return route

    @staticmethod
    def extract_airline(flight_number: str) -> Optional[str]:
        match = AIRLINE_CODE_PATTERN.match(flight_number)
        return match.group(1) if match else None

    def get_airport_info(self, code: str) -> Airport:
        code = code.upper()
        if self.is_configured():
            try:
                data = self._aeroapi_request(f"/airports/{code}")
                return Airport(
                    code=data.get('code_iata') or data.get('code_icao') or code,
                    name=data.get('name') or code,
                    city=data.get('city'),
                    latitude=data.get('latitude'),
                    longitude=data.get('longitude'),
                )
            except (ProviderError, requests.exceptions.RequestException, ValueError) as e:
                logging.warning(f"Failed to fetch airport {code}: {e}")
        return self.get_demo_airport(code)

    @staticmethod
    def get_demo_airport(code: str) -> Airport:
        entry = AIRPORTS.get(code.upper())
        if not entry:
            return Airport(code=code.upper(), name=code.upper())
        return Airport(code=code.upper(), name=entry['name'], city=entry['city'],
                       latitude=entry['latitude'], longitude=entry['longitude'])

    def get_demo_route(self, flight_number: str) -> FlightRoute:
        """
        Deterministic demo route: a known demo flight, an airport pair such
        as 'LHR-JFK', or the default London to New York crossing.
        """
        normalized = normalize_flight_number(flight_number)

        if normalized in DEMO_FLIGHTS:
            origin_code, destination_code, airline = DEMO_FLIGHTS[normalized]
        else:
            match = AIRPORT_PAIR_PATTERN.match(normalized)
            if match and match.group(1) in AIRPORTS and match.group(2) in AIRPORTS:
                origin_code, destination_code = match.group(1), match.group(2)
                airline = 'Demo Route'
            else:
                origin_code, destination_code = DEFAULT_DEMO_ROUTE
                airline = 'Demo Airline'

        origin = self.get_demo_airport(origin_code)
        destination = self.get_demo_airport(destination_code)
        route = self.generate_great_circle_route(origin, destination)
        return FlightRoute(
            flight_number=normalized,
            airline=airline,
            origin=origin,
            destination=destination,
            route=route,
            estimated_duration=estimate_flight_duration(route),
            using_demo_data=True,
        )

    @staticmethod
    def generate_great_circle_route(origin: Airport, destination: Airport,
                                    num_points: int = FlightConstants.DEMO_ROUTE_POINTS) -> List[RoutePoint]:
        route = [RoutePoint(latitude=origin.latitude, longitude=origin.longitude, altitude=0, name=origin.name)]
        for i in range(1, num_points - 1):
            fraction = i / (num_points - 1)
            lat, lon = CoordinateCalculations.interpolate_great_circle(
                origin.latitude, origin.longitude, destination.latitude, destination.longitude, fraction)
            # Cruise altitude with a gentle hump mid-route
            altitude = FlightConstants.DEFAULT_CRUISE_ALTITUDE_M + math.sin(fraction * math.pi) * 500
            route.append(RoutePoint(latitude=lat, longitude=lon, altitude=altitude))
        route.append(RoutePoint(latitude=destination.latitude, longitude=destination.longitude,
                                altitude=0, name=destination.name))
        return route
