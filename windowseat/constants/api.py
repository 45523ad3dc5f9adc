# windowseat/constants/api.py

class APIConstants:
    """Endpoints and request defaults for every external service."""

    NOMINATIM_URL = "https://nominatim.openstreetmap.org/reverse"
    OVERPASS_URL = "https://overpass-api.de/api/interpreter"
    AEROAPI_BASE_URL = "https://aeroapi.flightaware.com/aeroapi"
    ANTHROPIC_API_URL = "https://api.anthropic.com/v1/messages"
    ANTHROPIC_VERSION = "2023-06-01"
    ELEVENLABS_API_URL = "https://api.elevenlabs.io/v1"
    STATIC_MAP_URL = "https://staticmap.openstreetmap.de/staticmap.php"

    DEFAULT_USER_AGENT = "WindowSeat/1.0"
    PLACEHOLDER_KEY_PREFIX = "YOUR_"

    # Statuses worth another attempt
    RETRYABLE_STATUS_CODES = (408, 429, 500, 502, 503, 504)


class MapConstants:
    """Tile server and static map defaults."""

    DEFAULT_TILE_URL = "https://{s}.basemaps.cartocdn.com/dark_all/{z}/{x}/{y}.png"
    TILE_SUBDOMAINS = ("a", "b", "c")
    DEFAULT_ZOOM_LEVELS = (4, 5, 6, 7)
    HIGH_DETAIL_ZOOM_LEVELS = (4, 5, 6, 7, 8)
    DEFAULT_BUFFER_METERS = 100000
    BATCH_SIZE = 10
    DOWNLOAD_TIMEOUT_S = 30

    STATIC_MAP_SIZES = {
        "overview": {"width": 800, "height": 600, "zoom": 4},
        "regional": {"width": 800, "height": 600, "zoom": 6},
        "detail": {"width": 800, "height": 600, "zoom": 8},
    }

    # Rough average tile sizes in bytes, by zoom level
    AVERAGE_TILE_SIZES = {4: 15000, 5: 18000, 6: 20000, 7: 22000, 8: 25000}
    DEFAULT_TILE_SIZE = 20000


class FlightConstants:
    """Physical defaults used when building checkpoints."""

    DEFAULT_CRUISE_ALTITUDE_M = 10668  # ~35,000 ft
    METERS_TO_FEET = 3.28084
    METERS_PER_NM = 1852
    AVERAGE_SPEED_KNOTS = 450
    DEMO_ROUTE_POINTS = 25
