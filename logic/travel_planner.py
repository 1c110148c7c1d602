"""Weather-aware multi-day packing planner built on the look generator.

A trip goes through ``search destination -> select location -> pick date
range -> select activities -> generate plan -> confirm/discard``. This module
owns the "generate plan" step: it fetches one forecast per day, assigns a look
to every day from per-style pools and turns wardrobe gaps into shopping tips.
Only the forecast fetch suspends; everything after it is synchronous and
local to a single call.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections import deque
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Deque, Dict, Iterator, List, Optional, Sequence, Tuple

from logic.outfit_builder import generate_looks, rebuild_look
from models.closet_item import ClassifiedItem
from models.look import StyledLook, look_identity
from models.style_profile import PersonalStyleProfile
from models.taxonomy import Category, FashionStyle, style_info
from models.travel import (
    DailyForecast,
    DailyPackingSuggestion,
    GeoLocation,
    TemperatureBand,
    TravelActivity,
    TravelPlan,
    format_day,
)
from stylist_app.logging_config import get_logger, log_event, operation_context
from tools.weather_provider import WeatherFetchError, WeatherProvider

LOGGER = get_logger(__name__)

DEFAULT_POOL_MULTIPLIER = 2
HOT_DAY_AVERAGE = 26.0
COLD_NIGHT_MINIMUM = 10.0

DEFAULT_ACTIVITY = TravelActivity("daily activity", (FashionStyle.CASUAL, FashionStyle.SMART_CASUAL))

ACTIVITY_PRESETS: Dict[str, TravelActivity] = {
    "swim": TravelActivity("Beach & pool", (FashionStyle.SPORTY, FashionStyle.CASUAL)),
    "hike": TravelActivity("Hiking", (FashionStyle.SPORTY, FashionStyle.BOHO)),
    "city": TravelActivity("City sightseeing", (FashionStyle.SMART_CASUAL, FashionStyle.CASUAL)),
    "evening": TravelActivity("Evening out", (FashionStyle.GLAMOUR, FashionStyle.ROMANTIC)),
}

_ACTIVITY_KEYWORDS: Tuple[Tuple[Tuple[str, ...], Tuple[FashionStyle, ...]], ...] = (
    (("plaż", "basen", "swim", "kąpiel", "beach", "pool"), (FashionStyle.SPORTY, FashionStyle.CASUAL)),
    (("gór", "szlak", "hike", "trek", "mountain"), (FashionStyle.SPORTY, FashionStyle.BOHO)),
    (("wiecz", "kolac", "party", "noc", "evening", "dinner"), (FashionStyle.GLAMOUR, FashionStyle.ROMANTIC)),
    (("biznes", "konfer", "spotkanie", "praca", "business", "conference", "meeting"), (FashionStyle.CLASSIC, FashionStyle.SMART_CASUAL)),
)

BAND_DEFAULT_STYLES: Dict[TemperatureBand, FashionStyle] = {
    TemperatureBand.HOT: FashionStyle.BOHO,
    TemperatureBand.WARM: FashionStyle.CASUAL,
    TemperatureBand.MILD: FashionStyle.SMART_CASUAL,
    TemperatureBand.COLD: FashionStyle.CLASSIC,
}

_BAND_HIGHLIGHTS: Dict[TemperatureBand, str] = {
    TemperatureBand.HOT: "Light, breathable pieces for high temperatures",
    TemperatureBand.WARM: "Comfort for warm days",
    TemperatureBand.MILD: "Layers for changeable weather",
    TemperatureBand.COLD: "Warm layers for chilly moments",
}

RAIN_HIGHLIGHT = "Protection from possible showers"
RAIN_NOTE = "Frequent showers are possible during the trip: keep a raincoat and waterproof shoes at hand."
HEAT_NOTE = "Very warm days are expected: choose breathable fabrics and light colours."
COLD_NIGHT_NOTE = "Nights may be chilly: add a light warm layer to the suitcase."
SPARE_BASICS_TIP = "Consider packing a few extra basics so you have backup outfits."
EMPTY_CLOSET_TIP = "Add at least two closet items so an outfit can be prepared for every day."

LookPools = Dict[FashionStyle, Deque[StyledLook]]


@dataclass(frozen=True)
class PackingResult:
    """Per-day suggestions plus the tips and warnings gathered while assigning them."""

    suggestions: List[DailyPackingSuggestion]
    shopping_tips: List[str]
    warnings: List[str]
    initial_pool_size: int


def date_range(start_date: date, end_date: date) -> Iterator[date]:
    current = start_date
    while current <= end_date:
        yield current
        current += timedelta(days=1)


def format_date_range(start_date: date, end_date: date) -> str:
    return f"{format_day(start_date)} - {format_day(end_date)}"


def temperature_band(forecast: DailyForecast) -> TemperatureBand:
    average = forecast.average_temperature
    if average < 8:
        return TemperatureBand.COLD
    if average < 16:
        return TemperatureBand.MILD
    if average < 23:
        return TemperatureBand.WARM
    return TemperatureBand.HOT


def infer_activity_styles(name: str) -> List[FashionStyle]:
    """Guess style hints for a free-text activity name."""

    lower = (name or "").lower()
    for keywords, styles in _ACTIVITY_KEYWORDS:
        if any(keyword in lower for keyword in keywords):
            return list(styles)
    return [FashionStyle.CASUAL]


def custom_activity(name: str) -> TravelActivity:
    return TravelActivity(name=name.strip(), style_hints=tuple(infer_activity_styles(name)))


def normalize_activities(activities: Sequence[TravelActivity]) -> List[TravelActivity]:
    """Default activity when none is given; ``casual`` for activities without hints."""

    if not activities:
        return [DEFAULT_ACTIVITY]
    return [
        activity if activity.style_hints else TravelActivity(activity.name, (FashionStyle.CASUAL,))
        for activity in activities
    ]


async def search_destination_async(provider: WeatherProvider, query: str) -> List[GeoLocation]:
    """Run a destination lookup without blocking the event loop."""

    return await asyncio.to_thread(provider.search_destination, query)


async def fetch_trip_forecasts(
    provider: WeatherProvider, location: GeoLocation, start_date: date, end_date: date
) -> List[DailyForecast]:
    """Fetch and align one forecast per date, raising :class:`WeatherFetchError` otherwise.

    The blocking provider runs in a worker thread so the awaiting task can be
    cancelled; a cancelled or failed fetch returns nothing to the caller.
    """

    if end_date < start_date:
        raise ValueError("end_date cannot precede start_date")
    try:
        raw = await asyncio.to_thread(provider.fetch_forecast, location, start_date, end_date)
    except WeatherFetchError:
        raise
    except Exception as exc:  # noqa: BLE001
        raise WeatherFetchError(f"Forecast unavailable: {exc}") from exc

    by_date = {forecast.date: forecast for forecast in raw or [] if start_date <= forecast.date <= end_date}
    if not by_date:
        raise WeatherFetchError("Forecast unavailable: no data for the requested range")
    missing = [day for day in date_range(start_date, end_date) if day not in by_date]
    if missing:
        raise WeatherFetchError(
            "Forecast unavailable for " + ", ".join(day.isoformat() for day in missing)
        )
    return [by_date[day] for day in date_range(start_date, end_date)]


def build_look_pools(
    activities: Sequence[TravelActivity],
    closet_items: Sequence[ClassifiedItem],
    profile: PersonalStyleProfile | None,
    day_count: int,
    rng: random.Random,
    pool_multiplier: int = DEFAULT_POOL_MULTIPLIER,
) -> LookPools:
    """Pre-generate non-empty look queues for every hinted style, in first-hint order."""

    styles: List[FashionStyle] = []
    for activity in activities:
        for style in activity.style_hints:
            if style not in styles:
                styles.append(style)
    if not styles:
        styles = [FashionStyle.CASUAL]

    pools: LookPools = {}
    for style in styles:
        looks = generate_looks(closet_items, style, profile, limit=day_count * pool_multiplier, rng=rng)
        if looks:
            pools[style] = deque(looks)
    return pools


def select_style_for_activity(
    activity: TravelActivity, pools: LookPools, band: TemperatureBand
) -> FashionStyle:
    """First hint with looks left, then any style with looks left, then the band default."""

    for style in activity.style_hints or (FashionStyle.CASUAL,):
        if pools.get(style):
            return style
    for style, pool in pools.items():
        if pool:
            return style
    return BAND_DEFAULT_STYLES[band]


def take_look(style: FashionStyle, pools: LookPools, used_ids: set) -> Optional[StyledLook]:
    """Pop the next unused look of ``style``; exhausted pools are removed."""

    pool = pools.get(style)
    while pool:
        look = pool.popleft()
        if look.id not in used_ids:
            if not pool:
                pools.pop(style, None)
            return look
    pools.pop(style, None)
    return None


def create_fallback_look(
    closet_items: Sequence[ClassifiedItem],
    style: FashionStyle,
    profile: PersonalStyleProfile | None,
    day: date,
) -> Optional[StyledLook]:
    """Minimal look straight from the closet, ignoring style tags.

    Prefers dress + shoes, then top + bottom + shoes, then any first three
    items. ``None`` when fewer than two pieces are available.
    """

    if not closet_items:
        return None

    def first(category: Category) -> Optional[ClassifiedItem]:
        return next((item for item in closet_items if item.category == category), None)

    dress, top, bottom = first(Category.DRESSES), first(Category.TOPS), first(Category.BOTTOMS)
    shoes, outerwear, accessory = first(Category.SHOES), first(Category.OUTERWEAR), first(Category.ACCESSORIES)

    if dress and shoes:
        pieces = [dress, shoes]
    elif top and bottom and shoes:
        pieces = [top, bottom, shoes]
    else:
        pieces = list(closet_items[:3])
        outerwear = accessory = None
    pieces.extend(extra for extra in (outerwear, accessory) if extra is not None)

    if len(pieces) < 2:
        return None
    return rebuild_look(pieces, style, profile, look_id=f"{look_identity(pieces)}#{day.isoformat()}")


def build_context_highlights(activity: TravelActivity, band: TemperatureBand, rainy: bool) -> List[str]:
    highlights = [f"Activity: {activity.name}", _BAND_HIGHLIGHTS[band]]
    if rainy:
        highlights.append(RAIN_HIGHLIGHT)
    return list(dict.fromkeys(highlights))


def build_contingency(band: TemperatureBand, rainy: bool) -> Optional[str]:
    if rainy and band in (TemperatureBand.COLD, TemperatureBand.MILD):
        return "Just in case, pack a light rain jacket and shoes with good grip for rain protection."
    if rainy:
        return "Add a quick-drying rain layer to the suitcase for rain protection."
    if band == TemperatureBand.HOT:
        return "A thin cover-up or scarf will help on cooler evenings."
    if band == TemperatureBand.COLD:
        return "A spare warm sweatshirt or turtleneck will help when temperatures drop at night."
    return None


def build_climate_notes(forecasts: Sequence[DailyForecast]) -> List[str]:
    """Trip-level notes about rain, heat and cold nights."""

    notes: List[str] = []
    if any(forecast.is_rainy for forecast in forecasts):
        notes.append(RAIN_NOTE)
    if any(forecast.average_temperature >= HOT_DAY_AVERAGE for forecast in forecasts):
        notes.append(HEAT_NOTE)
    if any(forecast.min_temperature <= COLD_NIGHT_MINIMUM for forecast in forecasts):
        notes.append(COLD_NIGHT_NOTE)
    return notes


def _add_tip(tips: List[str], tip: str) -> None:
    if tip not in tips:
        tips.append(tip)


def build_packing_suggestions(
    forecasts: Sequence[DailyForecast],
    activities: Sequence[TravelActivity],
    closet_items: Sequence[ClassifiedItem],
    profile: PersonalStyleProfile | None = None,
    rng: random.Random | None = None,
    pool_multiplier: int = DEFAULT_POOL_MULTIPLIER,
) -> PackingResult:
    """Assign one look per forecast day; every generated look is used at most once."""

    rng = rng or random.Random()
    normalized = normalize_activities(activities)
    pools = build_look_pools(normalized, closet_items, profile, len(forecasts), rng, pool_multiplier)
    initial_pool_size = sum(len(pool) for pool in pools.values())

    suggestions: List[DailyPackingSuggestion] = []
    tips: List[str] = []
    warnings: List[str] = []
    used_ids: set = set()

    for index, forecast in enumerate(forecasts):
        band = temperature_band(forecast)
        rainy = forecast.is_rainy
        activity = normalized[index % len(normalized)]
        display_date = format_day(forecast.date)

        style = select_style_for_activity(activity, pools, band)
        look = take_look(style, pools, used_ids)
        while look is None and pools:
            style = select_style_for_activity(activity, pools, band)
            look = take_look(style, pools, used_ids)
        if look is None:
            look = create_fallback_look(closet_items, style, profile, forecast.date)
            if look is not None:
                _add_tip(
                    tips,
                    f"Add more {style_info(style).title.lower()} pieces so complete outfits "
                    f"can be prepared for {activity.name}.",
                )
                LOGGER.warning("Using fallback look for %s (%s)", forecast.date.isoformat(), style.value)
            else:
                _add_tip(tips, EMPTY_CLOSET_TIP)
                warnings.append(f"No outfit could be prepared for {display_date}.")
                LOGGER.warning("No outfit available for %s", forecast.date.isoformat())
        if look is not None:
            used_ids.add(look.id)

        if rainy:
            _add_tip(tips, f"Rain is forecast on {display_date}: pack a rain layer.")

        suggestions.append(
            DailyPackingSuggestion(
                date=forecast.date,
                display_date=display_date,
                forecast_summary=(
                    f"{forecast.min_temperature:.1f}°C / {forecast.max_temperature:.1f}°C"
                    f" • Rain: {forecast.precipitation_probability}%"
                ),
                activity_name=activity.name,
                look=look,
                context_highlights=tuple(build_context_highlights(activity, band, rainy)),
                contingency=build_contingency(band, rainy),
            )
        )

    if initial_pool_size < len(forecasts):
        _add_tip(tips, SPARE_BASICS_TIP)

    return PackingResult(
        suggestions=suggestions, shopping_tips=tips, warnings=warnings, initial_pool_size=initial_pool_size
    )


async def prepare_travel_plan(
    location: GeoLocation,
    start_date: date,
    end_date: date,
    activities: Sequence[TravelActivity],
    closet_items: Sequence[ClassifiedItem],
    profile: PersonalStyleProfile | None,
    provider: WeatherProvider,
    rng: random.Random | None = None,
    pool_multiplier: int = DEFAULT_POOL_MULTIPLIER,
) -> TravelPlan:
    """Build a day-by-day packing plan for a trip.

    Raises :class:`WeatherFetchError` when the forecast cannot be obtained;
    every other shortfall ends up in shopping tips or warnings.
    """

    with operation_context("planner:prepare_travel_plan") as correlation_id:
        log_event(
            LOGGER,
            level=logging.INFO,
            event="travel_plan_started",
            correlation_id=correlation_id,
            location=location.display_name,
            start=start_date.isoformat(),
            end=end_date.isoformat(),
            activity_count=len(activities),
            closet_size=len(closet_items),
        )
        try:
            forecasts = await fetch_trip_forecasts(provider, location, start_date, end_date)
        except WeatherFetchError as exc:
            log_event(
                LOGGER,
                level=logging.ERROR,
                event="travel_plan_forecast_unavailable",
                correlation_id=correlation_id,
                reason=str(exc),
            )
            raise

        normalized = normalize_activities(activities)
        packing = build_packing_suggestions(
            forecasts, normalized, closet_items, profile, rng=rng, pool_multiplier=pool_multiplier
        )
        plan = TravelPlan(
            location=location,
            start_date=start_date,
            end_date=end_date,
            forecasts=tuple(forecasts),
            activities=tuple(activity.name for activity in normalized),
            packing_suggestions=tuple(packing.suggestions),
            climate_notes=tuple(build_climate_notes(forecasts)),
            shopping_tips=tuple(packing.shopping_tips),
            warnings=tuple(packing.warnings),
        )
        log_event(
            LOGGER,
            level=logging.INFO,
            event="travel_plan_completed",
            correlation_id=correlation_id,
            days=len(plan.packing_suggestions),
            pooled_looks=packing.initial_pool_size,
            shopping_tips=len(plan.shopping_tips),
            warnings=len(plan.warnings),
        )
        return plan


__all__ = [
    "ACTIVITY_PRESETS",
    "BAND_DEFAULT_STYLES",
    "DEFAULT_ACTIVITY",
    "PackingResult",
    "build_climate_notes",
    "build_context_highlights",
    "build_contingency",
    "build_look_pools",
    "build_packing_suggestions",
    "create_fallback_look",
    "custom_activity",
    "date_range",
    "fetch_trip_forecasts",
    "search_destination_async",
    "format_date_range",
    "infer_activity_styles",
    "normalize_activities",
    "prepare_travel_plan",
    "select_style_for_activity",
    "take_look",
    "temperature_band",
]
