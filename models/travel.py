"""Trip planning models: destinations, forecasts, activities and plans."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional, Tuple

from models.look import StyledLook
from models.taxonomy import FashionStyle

RAINY_PRECIPITATION_THRESHOLD = 60

_MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_day(value: date) -> str:
    """Short locale-independent date label such as ``5 Jul``."""

    return f"{value.day} {_MONTH_ABBREVIATIONS[value.month - 1]}"


class TemperatureBand(str, Enum):
    COLD = "cold"
    MILD = "mild"
    WARM = "warm"
    HOT = "hot"


@dataclass(frozen=True)
class GeoLocation:
    """Geocoded destination."""

    name: str
    country: str
    latitude: float
    longitude: float
    admin1: Optional[str] = None

    @property
    def display_name(self) -> str:
        parts = [self.name]
        if self.admin1 and self.admin1.strip():
            parts.append(self.admin1)
        parts.append(self.country)
        return ", ".join(parts)


@dataclass(frozen=True)
class DailyForecast:
    """Forecast for one calendar day."""

    date: date
    min_temperature: float
    max_temperature: float
    precipitation_probability: int = 0

    @property
    def average_temperature(self) -> float:
        return (self.min_temperature + self.max_temperature) / 2.0

    @property
    def is_rainy(self) -> bool:
        return self.precipitation_probability >= RAINY_PRECIPITATION_THRESHOLD

    @property
    def summary(self) -> str:
        return (
            f"{format_day(self.date)}: {self.min_temperature:.1f}°C / {self.max_temperature:.1f}°C, "
            f"rain {self.precipitation_probability}%"
        )


@dataclass(frozen=True)
class TravelActivity:
    """Something planned for the trip with the styles it calls for, preferred first."""

    name: str
    style_hints: Tuple[FashionStyle, ...] = ()


@dataclass(frozen=True)
class DailyPackingSuggestion:
    """The outfit and advice for one day of a trip.

    ``look`` is ``None`` only when the closet cannot provide two pieces.
    """

    date: date
    display_date: str
    forecast_summary: str
    activity_name: str
    look: Optional[StyledLook]
    context_highlights: Tuple[str, ...] = ()
    contingency: Optional[str] = None


@dataclass(frozen=True)
class TravelPlan:
    """Day-by-day packing plan for a trip."""

    location: GeoLocation
    start_date: date
    end_date: date
    forecasts: Tuple[DailyForecast, ...]
    activities: Tuple[str, ...]
    packing_suggestions: Tuple[DailyPackingSuggestion, ...]
    climate_notes: Tuple[str, ...] = ()
    shopping_tips: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()
    id: int = field(default_factory=lambda: int(time.time() * 1000))

    @property
    def look_ids(self) -> List[str]:
        return [suggestion.look.id for suggestion in self.packing_suggestions if suggestion.look]


__all__ = [
    "RAINY_PRECIPITATION_THRESHOLD",
    "TemperatureBand",
    "GeoLocation",
    "DailyForecast",
    "TravelActivity",
    "DailyPackingSuggestion",
    "TravelPlan",
    "format_day",
]
