# windowseat/landmarks/osm_data_handler.py
"""
Handles all interactions with the OpenStreetMap Nominatim and Overpass APIs.

Both clients share a cached HTTP session so re-downloading the same flight
does not hit the public endpoints again, and both degrade to "nothing
found" rather than raising when the service stays unavailable.
"""
import logging
import time
from typing import Callable, Dict, List, Optional

import requests
import requests_cache

from ..constants import APIConstants
from ..exceptions import ProviderError
from ..utils.retry import with_retry
from .utils.scoring import POIScoring, POIQueryBuilder


def build_osm_session(cache_enabled: bool = True, cache_name: str = 'osm_cache') -> requests.Session:
    """Cached session for OSM lookups; a plain session when caching is off."""
    if cache_enabled:
        session = requests_cache.CachedSession(
            cache_name,
            backend='sqlite',
            expire_after=86400  # Cache requests for 24 hours
        )
    else:
        session = requests.Session()
    logging.info(f"OSM session initialized. Cache enabled: {cache_enabled}")
    return session


class RateLimiter:
    """Spaces successive calls at least ``delay_ms`` apart."""

    def __init__(self, delay_ms: int, clock: Callable[[], float] = time.monotonic,
                 sleep: Callable[[float], None] = time.sleep):
        self.delay_ms = delay_ms
        self.clock = clock
        self.sleep = sleep
        self._last_call: Optional[float] = None

    def wait(self) -> None:
        now = self.clock()
        if self._last_call is not None:
            elapsed_ms = (now - self._last_call) * 1000
            if elapsed_ms < self.delay_ms:
                self.sleep((self.delay_ms - elapsed_ms) / 1000)
        self._last_call = self.clock()


class NominatimGeocoder:
    """Reverse geocoder backed by Nominatim (one request per second policy)."""

    def __init__(self, session: Optional[requests.Session] = None,
                 user_agent: str = APIConstants.DEFAULT_USER_AGENT,
                 timeout: int = 25,
                 rate_limiter: Optional[RateLimiter] = None,
                 retry_sleep: Callable[[float], None] = time.sleep):
        self.session = session or build_osm_session()
        self.user_agent = user_agent
        self.timeout = timeout
        self.retry_sleep = retry_sleep
        self.rate_limiter = rate_limiter or RateLimiter(1100)

    def reverse_geocode(self, lat: float, lon: float) -> Optional[Dict]:
        """
        Returns the Nominatim JSON result for a coordinate, or None when the
        lookup fails after retries.
        """
        params = {
            'lat': lat,
            'lon': lon,
            'format': 'json',
            'zoom': 10,
            'addressdetails': 1,
        }

        def attempt(_attempt: int) -> Dict:
            self.rate_limiter.wait()
            response = self.session.get(
                APIConstants.NOMINATIM_URL,
                params=params,
                headers={'User-Agent': self.user_agent},
                timeout=self.timeout,
            )
            if not response.ok:
                raise ProviderError(f"Nominatim API error: {response.status_code}", status=response.status_code)
            return response.json()

        try:
            data = with_retry(attempt, sleep=self.retry_sleep)
        except (ProviderError, requests.exceptions.RequestException, ValueError) as e:
            logging.warning(f"Reverse geocoding failed for ({lat:.4f}, {lon:.4f}): {e}")
            return None

        # Nominatim answers open water with {"error": "Unable to geocode"}
        if not data or 'error' in data:
            return None
        return data


class OverpassPOIClient:
    """Finds named scenic features around a point with the Overpass API."""

    def __init__(self, session: Optional[requests.Session] = None, timeout: int = 25,
                 retry_sleep: Callable[[float], None] = time.sleep):
        self.session = session or build_osm_session()
        self.timeout = timeout
        self.retry_sleep = retry_sleep

    def query_pois(self, lat: float, lon: float, radius_m: float) -> List[Dict]:
        """
        Returns named POI elements sorted by relevance, or an empty list if
        the request fails.
        """
        query = POIQueryBuilder.build_query(lat, lon, radius_m)

        def attempt(_attempt: int) -> Dict:
            logging.debug(f"Sending Overpass API query for ({lat:.4f}, {lon:.4f})...")
            response = self.session.post(APIConstants.OVERPASS_URL, data={'data': query}, timeout=self.timeout)
            if not response.ok:
                raise ProviderError(f"Overpass API error: {response.status_code}", status=response.status_code)
            return response.json()

        try:
            data = with_retry(attempt, sleep=self.retry_sleep)
        except (ProviderError, requests.exceptions.RequestException, ValueError) as e:
            logging.warning(f"POI query failed for ({lat:.4f}, {lon:.4f}): {e}")
            return []

        elements = data.get('elements', [])
        logging.debug(f"Received {len(elements)} elements from Overpass API.")
        return POIScoring.rank(elements)
