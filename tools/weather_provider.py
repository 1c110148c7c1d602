"""Weather and geocoding provider abstractions and implementations."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

import requests
from pydantic import BaseModel, ValidationError

from models.travel import DailyForecast, GeoLocation
from tools.observability import instrument_call

LOGGER = logging.getLogger(__name__)


class WeatherFetchError(RuntimeError):
    """Raised when a forecast cannot be obtained for a planning request."""


class _GeoResult(BaseModel):
    name: str
    country: str = ""
    admin1: Optional[str] = None
    latitude: float
    longitude: float


class _GeocodingResponse(BaseModel):
    results: List[_GeoResult] = []


class _DailySeries(BaseModel):
    time: List[date]
    temperature_2m_min: List[Optional[float]]
    temperature_2m_max: List[Optional[float]]
    precipitation_probability_max: List[Optional[float]] = []


class _ForecastResponse(BaseModel):
    daily: _DailySeries


class WeatherProvider(ABC):
    """Abstract weather and geocoding collaborator."""

    @abstractmethod
    def search_destination(self, query: str) -> List[GeoLocation]:
        """Return destinations matching ``query``; ``[]`` means no matches."""

    @abstractmethod
    def fetch_forecast(self, location: GeoLocation, start_date: date, end_date: date) -> List[DailyForecast]:
        """Return one forecast per day or raise :class:`WeatherFetchError`."""


class OpenMeteoWeatherProvider(WeatherProvider):
    """Open-Meteo geocoding and daily forecast client with schema validation."""

    def __init__(
        self,
        geocoding_url: str = "https://geocoding-api.open-meteo.com/v1/search",
        forecast_url: str = "https://api.open-meteo.com/v1/forecast",
        timeout_seconds: float = 5.0,
        language: str = "en",
        max_results: int = 5,
    ) -> None:
        self.geocoding_url = geocoding_url
        self.forecast_url = forecast_url
        self.timeout_seconds = timeout_seconds
        self.language = language
        self.max_results = max_results

    @instrument_call("weather.search_destination")
    def search_destination(self, query: str) -> List[GeoLocation]:
        if not query or not query.strip():
            return []

        params = {
            "name": query.strip(),
            "count": self.max_results,
            "language": self.language,
            "format": "json",
        }
        try:
            response = requests.get(self.geocoding_url, params=params, timeout=self.timeout_seconds)
            response.raise_for_status()
            parsed = _GeocodingResponse.model_validate(response.json())
        except (requests.Timeout, requests.RequestException) as exc:
            LOGGER.warning("Geocoding API unreachable", exc_info=exc)
            return []
        except (ValidationError, ValueError) as exc:
            LOGGER.warning("Geocoding payload schema validation failed", exc_info=exc)
            return []

        return [
            GeoLocation(
                name=result.name,
                country=result.country,
                admin1=result.admin1,
                latitude=result.latitude,
                longitude=result.longitude,
            )
            for result in parsed.results
        ]

    @instrument_call("weather.fetch_forecast")
    def fetch_forecast(self, location: GeoLocation, start_date: date, end_date: date) -> List[DailyForecast]:
        if end_date < start_date:
            raise ValueError("end_date cannot precede start_date")

        params = {
            "latitude": location.latitude,
            "longitude": location.longitude,
            "daily": "temperature_2m_max,temperature_2m_min,precipitation_probability_max",
            "timezone": "auto",
            "start_date": start_date.isoformat(),
            "end_date": end_date.isoformat(),
        }
        LOGGER.info("Fetching daily forecast", extra={"days": (end_date - start_date).days + 1})
        try:
            response = requests.get(self.forecast_url, params=params, timeout=self.timeout_seconds)
            response.raise_for_status()
            parsed = _ForecastResponse.model_validate(response.json())
        except (requests.Timeout, requests.RequestException) as exc:
            LOGGER.error("Weather API unreachable", exc_info=exc)
            raise WeatherFetchError(f"Weather request failed: {exc}") from exc
        except (ValidationError, ValueError) as exc:
            LOGGER.error("Weather payload schema validation failed", exc_info=exc)
            raise WeatherFetchError("Weather response could not be parsed") from exc

        forecasts = list(self._to_forecasts(parsed.daily))
        if not forecasts:
            raise WeatherFetchError("Weather response contained no daily data")
        return forecasts

    @staticmethod
    def _to_forecasts(daily: _DailySeries) -> Iterable[DailyForecast]:
        for index, day in enumerate(daily.time):
            minimum = daily.temperature_2m_min[index] if index < len(daily.temperature_2m_min) else None
            maximum = daily.temperature_2m_max[index] if index < len(daily.temperature_2m_max) else None
            if minimum is None or maximum is None:
                LOGGER.warning("Skipping forecast day without temperatures", extra={"day": day.isoformat()})
                continue
            rain = None
            if index < len(daily.precipitation_probability_max):
                rain = daily.precipitation_probability_max[index]
            yield DailyForecast(
                date=day,
                min_temperature=minimum,
                max_temperature=maximum,
                precipitation_probability=int(round(rain or 0)),
            )


class MockWeatherProvider(WeatherProvider):
    """Offline deterministic provider for tests and local runs."""

    def __init__(
        self,
        forecasts: Iterable[DailyForecast] | None = None,
        locations: Iterable[GeoLocation] | None = None,
        default_min: float = 12.0,
        default_max: float = 18.0,
        default_precipitation: int = 10,
        error: Exception | None = None,
    ) -> None:
        self.forecasts: Dict[date, DailyForecast] = {forecast.date: forecast for forecast in forecasts or []}
        self.locations = list(locations or [])
        self.default_min = default_min
        self.default_max = default_max
        self.default_precipitation = default_precipitation
        self.error = error
        self.forecast_calls = 0

    def search_destination(self, query: str) -> List[GeoLocation]:
        if not query or not query.strip():
            return []
        needle = query.strip().lower()
        return [location for location in self.locations if needle in location.name.lower()]

    def fetch_forecast(self, location: GeoLocation, start_date: date, end_date: date) -> List[DailyForecast]:
        self.forecast_calls += 1
        if self.error is not None:
            raise WeatherFetchError(str(self.error)) from self.error
        LOGGER.info("Returning mock forecast", extra={"start": str(start_date), "end": str(end_date)})
        results: List[DailyForecast] = []
        current = start_date
        while current <= end_date:
            results.append(
                self.forecasts.get(current)
                or DailyForecast(
                    date=current,
                    min_temperature=self.default_min,
                    max_temperature=self.default_max,
                    precipitation_probability=self.default_precipitation,
                )
            )
            current += timedelta(days=1)
        return results


__all__ = ["WeatherFetchError", "WeatherProvider", "OpenMeteoWeatherProvider", "MockWeatherProvider"]
