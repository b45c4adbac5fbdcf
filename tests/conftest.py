"""Pytest configuration and fixtures for the weather lookup tests."""

from __future__ import annotations

import threading
from typing import Any, Callable
from unittest.mock import MagicMock

import pytest

from models import WeatherReading


def make_payload(temp: float = 20, **overrides: Any) -> dict[str, Any]:
    """Build an OpenWeatherMap current-weather payload."""
    payload: dict[str, Any] = {
        "name": "Paris",
        "sys": {"country": "FR"},
        "weather": [{"main": "Clouds", "description": "broken clouds", "icon": "04d"}],
        "main": {"temp": temp, "humidity": 81},
        "wind": {"speed": 3.6},
    }
    payload.update(overrides)
    return payload


def create_mock_response(
    status: int = 200,
    json_data: dict[str, Any] | None = None,
) -> MagicMock:
    """Create a mock requests.Response."""
    response = MagicMock()
    response.status_code = status
    response.json.return_value = json_data if json_data is not None else {}
    return response


@pytest.fixture
def payload() -> dict[str, Any]:
    return make_payload()


@pytest.fixture
def reading() -> WeatherReading:
    return WeatherReading.from_payload(make_payload())


@pytest.fixture
def mock_session() -> MagicMock:
    """Create a mock requests.Session."""
    import requests

    return MagicMock(spec=requests.Session)


class FakeFetch:
    """Records every call; returns a reading or raises the configured error."""

    def __init__(self, result: WeatherReading | Exception) -> None:
        self.result = result
        self.calls: list[str] = []

    def __call__(self, city: str) -> WeatherReading:
        self.calls.append(city)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


class BlockingFetch(FakeFetch):
    """A fetch that stays in flight until release() is called."""

    def __init__(self, result: WeatherReading | Exception) -> None:
        super().__init__(result)
        self.started = threading.Event()
        self._release = threading.Event()

    def __call__(self, city: str) -> WeatherReading:
        self.started.set()
        self._release.wait(timeout=5)
        return super().__call__(city)

    def release(self) -> None:
        self._release.set()


@pytest.fixture
def fake_fetch(reading: WeatherReading) -> FakeFetch:
    return FakeFetch(reading)


@pytest.fixture
def navigations() -> list:
    return []


@pytest.fixture
def navigate(navigations: list) -> Callable:
    return navigations.append
