"""
Data models for weather readings and view state.
"""

from __future__ import annotations
from dataclasses import dataclass, asdict
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional

ICON_URL = "https://openweathermap.org/img/wn/{icon}@2x.png"


def round_display(value: float) -> float:
    """One decimal, halves rounded away from zero (0.25 -> 0.3)."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 9 / 5 + 32


class ViewState(str, Enum):
    REDIRECTING = "redirecting"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class WeatherReading:
    name: str
    country: str
    condition: str          # weather[0].main, e.g. "Clouds"
    description: str        # weather[0].description, e.g. "broken clouds"
    temp_c: float
    humidity: float         # percent
    wind_speed: float       # m/s with units=metric
    icon: str = ""

    @classmethod
    def from_payload(cls, data: dict) -> WeatherReading:
        """
        Build a reading from an OpenWeatherMap current-weather payload.
        Raises KeyError, IndexError, TypeError or ValueError when a
        required field is missing or not numeric.
        """
        weather = data["weather"][0]
        return cls(
            name=str(data["name"]),
            country=str(data["sys"]["country"]),
            condition=str(weather["main"]),
            description=str(weather["description"]),
            temp_c=float(data["main"]["temp"]),
            humidity=float(data["main"]["humidity"]),
            wind_speed=float(data["wind"]["speed"]),
            icon=str(weather.get("icon") or ""),
        )

    # ── Derived fields (pure, recomputed from the reading) ──────

    @property
    def celsius(self) -> float:
        return round_display(self.temp_c)

    @property
    def fahrenheit(self) -> float:
        return round_display(celsius_to_fahrenheit(self.temp_c))

    @property
    def location(self) -> str:
        return f"{self.name}, {self.country}" if self.country else self.name

    @property
    def icon_url(self) -> Optional[str]:
        return ICON_URL.format(icon=self.icon) if self.icon else None

    def to_dict(self) -> dict:
        d = asdict(self)
        d["celsius"] = self.celsius
        d["fahrenheit"] = self.fahrenheit
        d["icon_url"] = self.icon_url
        return d
