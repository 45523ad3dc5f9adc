from .coordinates import CoordinateCalculations
from .tiles import TileCalculations, TileCoord
from .retry import with_retry, calculate_delay, is_retryable_error, is_retryable_status, RetryConfig, RetryEvent
from .formatting import format_bytes

__all__ = [
    "CoordinateCalculations",
    "TileCalculations",
    "TileCoord",
    "with_retry",
    "calculate_delay",
    "is_retryable_error",
    "is_retryable_status",
    "RetryConfig",
    "RetryEvent",
    "format_bytes"
]
