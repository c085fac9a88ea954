"""
Centralized constants for skycast.

Display limits, timing values and provider settings used across modules.
"""


class Display:
    """Terminal display limits."""
    # Below this width nothing is drawn
    MIN_TERM_WIDTH = 50

    # Used when the terminal does not report a width
    DEFAULT_TERM_WIDTH = 80

    # Delay between animation frames
    DEFAULT_FRAME_DELAY_MS = 500


class Timeouts:
    """Timeout values in seconds."""
    HTTP_REQUEST = 10.0


class Retries:
    """Retry policy for provider requests."""
    COUNT = 2
    DELAY = 0.5
    BACKOFF = 2.0


class Cache:
    """On-disk cache of provider responses."""
    FILENAME = "weather-cache.json"

    # Entries older than this are refetched
    TTL_SECONDS = 30 * 60


class Provider:
    """OpenWeatherMap current-conditions endpoint."""
    BASE_URL = "https://api.openweathermap.org/data/2.5/weather"
    API_KEY_ENV = "WEATHER_API_KEY"
    USER_AGENT = "skycast"


class Units:
    """Unit systems accepted by the provider."""
    METRIC = "metric"
    IMPERIAL = "imperial"
    AUTO = "auto"
    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"

    ALL = (AUTO, CELSIUS, FAHRENHEIT, METRIC, IMPERIAL)


# Shorthands for the renderer
MIN_TERM_WIDTH = Display.MIN_TERM_WIDTH
DEFAULT_TERM_WIDTH = Display.DEFAULT_TERM_WIDTH
DEFAULT_FRAME_DELAY_MS = Display.DEFAULT_FRAME_DELAY_MS
