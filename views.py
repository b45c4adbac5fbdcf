"""
Views — the city entry screen and the weather result screen.

Both are independent of the surface that displays them. A view never
touches session storage or the network layer directly: it asks for a
transition through the ``navigate`` callback it was built with, and the
result view gets its fetch function injected.

Result view lifecycle:
  - activate(city) runs once per navigation into the view
  - deactivate() marks any in-flight fetch as stale
  - a stale fetch result is discarded on arrival
"""

from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from abilities.weather import WeatherError, Unknown, fetch_current_weather
from models import ViewState, WeatherReading

log = logging.getLogger(__name__)

# Logical routes
ENTRY = "/"
RESULTS = "/weather"

EMPTY_CITY_MESSAGE = "Please enter a city name."


@dataclass(frozen=True)
class Transition:
    route: str
    city: Optional[str] = None  # carried only on ENTRY → RESULTS


Navigate = Callable[[Transition], None]
Fetch = Callable[[str], WeatherReading]


class EntryView:
    def __init__(self, navigate: Navigate):
        self._navigate = navigate
        self.error = ""

    def submit(self, raw_input: Optional[str]) -> bool:
        """Validate the input and request the result view. Returns True on success."""
        city = (raw_input or "").strip()
        if not city:
            self.error = EMPTY_CITY_MESSAGE
            return False
        self.error = ""
        self._navigate(Transition(RESULTS, city=city))
        return True


class ResultView:
    def __init__(self, navigate: Navigate, fetch: Optional[Fetch] = None):
        self._navigate = navigate
        self._fetch = fetch or fetch_current_weather
        self.state: Optional[ViewState] = None
        self.city: Optional[str] = None
        self.reading: Optional[WeatherReading] = None
        self.error = ""
        self._activation = 0
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    async def activate(self, city: Optional[str]) -> Optional[ViewState]:
        """
        Run the activation sequence for the given pending city.

        Never raises: every provider failure ends in ViewState.ERROR.
        If the view is deactivated (or activated again) before the fetch
        completes, the result is dropped, the view state is left alone
        and None is returned.
        """
        self._activation += 1
        token = self._activation
        self._active = True
        self.city = city

        if not city:
            self.state = ViewState.REDIRECTING
            self._navigate(Transition(ENTRY))
            return self.state

        self.state = ViewState.LOADING
        self.reading = None
        self.error = ""

        try:
            reading = await asyncio.to_thread(self._fetch, city)
        except WeatherError as e:
            return self._fail(token, e)
        except Exception as e:
            log.exception(f"Unexpected error fetching weather for {city!r}")
            return self._fail(token, Unknown(repr(e)))

        if not self._is_current(token):
            log.debug(f"Discarding stale reading for {city!r}")
            return None
        self.reading = reading
        self.state = ViewState.SUCCESS
        return self.state

    def deactivate(self):
        self._active = False

    def go_back(self):
        self._navigate(Transition(ENTRY))

    # ── Helpers ─────────────────────────────────────────────────

    def _is_current(self, token: int) -> bool:
        return self._active and token == self._activation

    def _fail(self, token: int, error: WeatherError) -> Optional[ViewState]:
        if not self._is_current(token):
            log.debug(f"Discarding stale {type(error).__name__}")
            return None
        log.info(f"Weather lookup for {self.city!r} failed: {type(error).__name__}")
        self.error = error.message
        self.state = ViewState.ERROR
        return self.state

    def to_dict(self) -> dict:
        return {
            "state": self.state.value if self.state else None,
            "city": self.city,
            "reading": self.reading.to_dict() if self.reading else None,
            "error": self.error or None,
        }
