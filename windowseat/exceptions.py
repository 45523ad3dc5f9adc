# windowseat/exceptions.py
from typing import Optional


class WindowSeatError(Exception):
    """Base exception for all Window Seat errors."""
    pass


class ConfigurationError(WindowSeatError):
    """Raised when a collaborator is used without the credentials it needs."""
    pass


class ProviderError(WindowSeatError):
    """Raised when an external HTTP service answers with an error."""
    def __init__(self, message: str, status: Optional[int] = None, no_retry: bool = False):
        """
        Args:
            status: HTTP status code, if the failure came with a response.
            no_retry: Marks failures that retrying can never fix (e.g. 401).
        """
        self.status = status
        self.no_retry = no_retry or status == 401
        super().__init__(message)


class FlightPackError(WindowSeatError):
    """Raised when a flight pack cannot be built at all."""
    def __init__(self, message: str, flight_id: str):
        self.flight_id = flight_id
        super().__init__(message)


class StorageError(WindowSeatError):
    """Raised for blob storage failures."""
    pass
