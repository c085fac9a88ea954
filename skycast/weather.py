"""
Weather provider client.

Fetches current conditions from OpenWeatherMap and reduces the payload to a
WeatherSnapshot: the condition code and sun times the scene selector needs,
plus the few readings printed under the art.

Temperatures are reported in the unit the user asked for. With no preference
("auto"), the unit follows the location's country: Fahrenheit for the few
countries that use it, Celsius everywhere else.
"""

import json
import logging
import os
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from .constants import Provider, Retries, Timeouts, Units
from .error_codes import (
    API_KEY_INVALID,
    API_KEY_MISSING,
    INTERNAL_ERROR,
    INVALID_INPUT,
    LOCATION_NOT_FOUND,
    NETWORK_ERROR,
    RATE_LIMIT,
    WeatherError,
)
from .utils.error_handling import ErrorCategory, handle_error, with_error_handling

logger = logging.getLogger(__name__)

FAHRENHEIT_COUNTRIES = frozenset({'US', 'USA', 'BS', 'BZ', 'KY', 'PW'})

# HTTP status -> error code
_STATUS_ERRORS = {
    401: API_KEY_INVALID,
    404: LOCATION_NOT_FOUND,
    429: RATE_LIMIT,
}

MPS_TO_MPH = 2.236936


def format_clock(timestamp: float) -> str:
    """Local wall-clock time (HH:MM) of an epoch timestamp."""
    return datetime.fromtimestamp(timestamp).strftime('%H:%M')


def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 9 / 5 + 32


def regional_units(country: Optional[str]) -> str:
    """Preferred temperature unit for a country code."""
    if country and country.upper() in FAHRENHEIT_COUNTRIES:
        return Units.FAHRENHEIT
    return Units.CELSIUS


@dataclass
class WeatherSnapshot:
    """Current conditions at one location."""
    city: str
    country: str
    condition_code: int
    condition: str
    description: str
    temperature: float
    feels_like: float
    humidity: int
    wind_speed: float
    observed_at: float
    sunrise: Optional[float] = None
    sunset: Optional[float] = None
    units: str = Units.CELSIUS

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], units: str = Units.CELSIUS) -> 'WeatherSnapshot':
        """
        Build a snapshot from a /weather response body.

        Raises WeatherError(INTERNAL_ERROR) when required fields are missing.
        """
        try:
            weather = payload['weather'][0]
            main = payload['main']
            sys_info = payload.get('sys') or {}
            wind = payload.get('wind') or {}
            return cls(
                city=payload.get('name', ''),
                country=sys_info.get('country', ''),
                condition_code=int(weather['id']),
                condition=weather.get('main', ''),
                description=weather.get('description', ''),
                temperature=float(main['temp']),
                feels_like=float(main.get('feels_like', main['temp'])),
                humidity=int(main.get('humidity', 0)),
                wind_speed=float(wind.get('speed', 0.0)),
                observed_at=float(payload['dt']),
                sunrise=sys_info.get('sunrise'),
                sunset=sys_info.get('sunset'),
                units=units,
            )
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise WeatherError(INTERNAL_ERROR, f"unexpected provider response ({e})")

    def to_fahrenheit(self) -> 'WeatherSnapshot':
        """Convert a metric snapshot to Fahrenheit and mph."""
        if self.units == Units.FAHRENHEIT:
            return self
        return WeatherSnapshot(
            city=self.city,
            country=self.country,
            condition_code=self.condition_code,
            condition=self.condition,
            description=self.description,
            temperature=celsius_to_fahrenheit(self.temperature),
            feels_like=celsius_to_fahrenheit(self.feels_like),
            humidity=self.humidity,
            wind_speed=self.wind_speed * MPS_TO_MPH,
            observed_at=self.observed_at,
            sunrise=self.sunrise,
            sunset=self.sunset,
            units=Units.FAHRENHEIT,
        )

    @property
    def location(self) -> str:
        return f"{self.city}, {self.country}" if self.country else self.city

    def summary(self) -> str:
        """
        One line for display under the scene.

        Sun times are appended only when the provider reported both.
        """
        degree = "°F" if self.units == Units.FAHRENHEIT else "°C"
        speed = "mph" if self.units == Units.FAHRENHEIT else "m/s"
        line = (
            f"{self.location}: {self.description or self.condition}, "
            f"{self.temperature:.0f}{degree} (feels like {self.feels_like:.0f}{degree}), "
            f"humidity {self.humidity}%, wind {self.wind_speed:.1f} {speed}"
        )
        if self.sunrise and self.sunset:
            line += f", sunrise {format_clock(self.sunrise)}, sunset {format_clock(self.sunset)}"
        return line


class WeatherClient:
    """
    Thin client for the OpenWeatherMap current weather endpoint.

    Network failures are retried with backoff. Every failure surfaces as a
    WeatherError carrying the matching error code. With a cache attached,
    fresh cached snapshots are returned without a request.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = Provider.BASE_URL,
        timeout: float = Timeouts.HTTP_REQUEST,
        cache=None,
    ):
        """
        Args:
            api_key: Provider key (defaults to $WEATHER_API_KEY)
            base_url: Endpoint URL
            timeout: Per-request timeout in seconds
            cache: Optional WeatherCache consulted before each request
        """
        self.api_key = api_key or os.environ.get(Provider.API_KEY_ENV)
        self.base_url = base_url
        self.timeout = timeout
        self.cache = cache

    def current(self, location: str, units: Optional[str] = None) -> WeatherSnapshot:
        """
        Fetch current conditions for a location ("City" or "City,CC").

        Args:
            location: Place name
            units: celsius, fahrenheit, or None for the regional default
        """
        if not self.api_key:
            raise WeatherError(API_KEY_MISSING)
        if not location or not location.strip():
            raise WeatherError(INVALID_INPUT, "location is empty")
        location = location.strip()

        if self.cache is not None:
            cached = self.cache.get(location, units)
            if cached is not None:
                return cached

        api_units = Units.IMPERIAL if units == Units.FAHRENHEIT else Units.METRIC
        payload = self._get({'q': location, 'units': api_units})
        snapshot = WeatherSnapshot.from_payload(
            payload,
            units=Units.FAHRENHEIT if api_units == Units.IMPERIAL else Units.CELSIUS,
        )

        if units is None and regional_units(snapshot.country) == Units.FAHRENHEIT:
            snapshot = snapshot.to_fahrenheit()

        if self.cache is not None:
            self.cache.set(location, units, snapshot)
        return snapshot

    def _build_url(self, params: Dict[str, str]) -> str:
        query = dict(params, appid=self.api_key)
        return f"{self.base_url}?{urllib.parse.urlencode(query)}"

    def _get(self, params: Dict[str, str]) -> Dict[str, Any]:
        location = params.get('q', '')
        logger.debug(f"GET {self.base_url} q={location!r} units={params.get('units')}")
        try:
            status, body = self._fetch(self._build_url(params))
        except (urllib.error.URLError, TimeoutError, OSError) as e:
            raise WeatherError(NETWORK_ERROR, str(getattr(e, 'reason', e)))

        if status != 200:
            logger.debug(f"Provider answered {status} for {location!r}")
            error_code = _STATUS_ERRORS.get(status, INTERNAL_ERROR)
            raise WeatherError(error_code, location, status_code=status)

        try:
            return json.loads(body)
        except ValueError as e:
            handle_error(e, "parse_weather", ErrorCategory.PROVIDER)
            raise WeatherError(INTERNAL_ERROR, "provider returned invalid JSON")

    @with_error_handling(
        category=ErrorCategory.NETWORK,
        operation="fetch_weather",
        reraise=True,
        retry_count=Retries.COUNT,
        retry_delay=Retries.DELAY,
        retry_backoff=Retries.BACKOFF,
        retry_exceptions=(urllib.error.URLError, TimeoutError, ConnectionError),
    )
    def _fetch(self, url: str) -> Tuple[int, str]:
        """GET a URL. HTTP error statuses are returned, not raised, so they are never retried."""
        request = urllib.request.Request(
            url,
            headers={'Accept': 'application/json', 'User-Agent': Provider.USER_AGENT},
            method='GET',
        )
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                return response.status, response.read().decode('utf-8')
        except urllib.error.HTTPError as e:
            body = e.read().decode('utf-8', 'replace') if e.fp else ''
            return e.code, body
