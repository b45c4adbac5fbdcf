"""
Weather ability — current conditions from OpenWeatherMap.

One GET per call against /data/2.5/weather with units=metric.
No retry: every failure is mapped to a WeatherError subclass
carrying the message shown to the user.
"""

import logging
from typing import Optional

import requests

import config
from models import WeatherReading

log = logging.getLogger(__name__)

WEATHER_PATH = "/data/2.5/weather"


class WeatherError(Exception):
    """Base error for provider failures."""

    message = "Failed to fetch weather data. Try again later."


class NotFound(WeatherError):
    """The provider has no city matching the query (HTTP 404)."""

    message = "City not found! Try another city."


class Unauthorized(WeatherError):
    """The provider rejected the API key (HTTP 401)."""

    message = "Invalid API key."


class Unreachable(WeatherError):
    """Transport failure or any other non-2xx response."""


class Unknown(WeatherError):
    """The response could not be parsed into a reading."""


def fetch_current_weather(
    city: str,
    api_key: Optional[str] = None,
    session: Optional[requests.Session] = None,
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
) -> WeatherReading:
    """Get current weather for a city. Exactly one round trip."""
    api_key = config.OPENWEATHER_API_KEY if api_key is None else api_key
    url = (base_url or config.OPENWEATHER_URL).rstrip("/") + WEATHER_PATH
    http = session or requests
    if not api_key:
        log.warning("OPENWEATHER_API_KEY is empty; the provider will reject the request")

    try:
        resp = http.get(
            url,
            params={"q": city, "appid": api_key, "units": "metric"},
            timeout=config.WEATHER_TIMEOUT if timeout is None else timeout,
        )
    except requests.RequestException as e:
        log.warning(f"Weather request for {city!r} failed: {e}")
        raise Unreachable(str(e)) from e

    status = resp.status_code
    if status == 404:
        raise NotFound(city)
    if status == 401:
        raise Unauthorized(f"HTTP 401 for {city!r}")
    if not 200 <= status < 300:
        log.warning(f"Weather request for {city!r} returned HTTP {status}")
        raise Unreachable(f"HTTP {status}")

    try:
        reading = WeatherReading.from_payload(resp.json())
    except (ValueError, KeyError, IndexError, TypeError) as e:
        log.warning(f"Malformed weather payload for {city!r}: {e!r}")
        raise Unknown(repr(e)) from e

    log.info(f"Weather for {reading.location}: {reading.celsius}°C, {reading.condition}")
    return reading
