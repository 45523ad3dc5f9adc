# windowseat/maps/downloader.py
"""
HTTP fetcher for map tiles and static map images.
"""
import logging
import threading
import time
from typing import Callable, Optional

import requests

from ..constants import APIConstants, MapConstants
from ..exceptions import ProviderError
from ..utils.retry import with_retry


class MapDownloader:
    """
    Downloads image bytes with a timeout, retrying transient failures.

    Tile batches call ``fetch`` from worker threads. Unless a session is
    passed in, every thread gets its own from ``session_factory``.
    """

    def __init__(self, session: Optional[requests.Session] = None,
                 timeout: int = MapConstants.DOWNLOAD_TIMEOUT_S,
                 user_agent: str = APIConstants.DEFAULT_USER_AGENT,
                 max_retries: int = 2,
                 retry_sleep: Callable[[float], None] = time.sleep,
                 session_factory: Callable[[], requests.Session] = requests.Session):
        self._shared_session = session
        self._session_factory = session_factory
        self._local = threading.local()
        self.timeout = timeout
        self.user_agent = user_agent
        self.max_retries = max_retries
        self.retry_sleep = retry_sleep

    @property
    def session(self) -> requests.Session:
        if self._shared_session is not None:
            return self._shared_session
        session = getattr(self._local, 'session', None)
        if session is None:
            session = self._session_factory()
            self._local.session = session
        return session

    def fetch(self, url: str) -> bytes:
        session = self.session

        def attempt(_n: int) -> bytes:
            response = session.get(url, headers={'User-Agent': self.user_agent}, timeout=self.timeout)
            if not response.ok:
                raise ProviderError(f"HTTP {response.status_code} for {url}", status=response.status_code)
            return response.content

        data = with_retry(attempt, max_retries=self.max_retries, sleep=self.retry_sleep)
        logging.debug(f"Downloaded {len(data)} bytes from {url}")
        return data
