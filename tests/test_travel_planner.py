"""Weather-aware travel packing planner coverage."""
from __future__ import annotations

import asyncio
import random
import sys
import threading
from datetime import date, timedelta
from pathlib import Path
from typing import List

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.travel_planner import (
    ACTIVITY_PRESETS,
    EMPTY_CLOSET_TIP,
    HEAT_NOTE,
    COLD_NIGHT_NOTE,
    RAIN_NOTE,
    SPARE_BASICS_TIP,
    build_climate_notes,
    build_contingency,
    build_packing_suggestions,
    format_date_range,
    infer_activity_styles,
    normalize_activities,
    prepare_travel_plan,
    select_style_for_activity,
    temperature_band,
)
from models.closet_item import ClassifiedItem
from models.taxonomy import Category, FashionStyle
from models.travel import DailyForecast, GeoLocation, TemperatureBand, TravelActivity
from tools.weather_provider import MockWeatherProvider, WeatherFetchError, WeatherProvider

LISBON = GeoLocation(name="Lisbon", country="Portugal", latitude=38.72, longitude=-9.14)
START = date(2025, 7, 5)


def _item(item_id: str, category: Category, styles=(FashionStyle.CASUAL, FashionStyle.SMART_CASUAL)):
    return ClassifiedItem(
        id=item_id, source_ref=f"content://closet/{item_id}.jpg", category=category, styles=tuple(styles)
    )


def _full_closet() -> List[ClassifiedItem]:
    return [
        _item("t1", Category.TOPS),
        _item("t2", Category.TOPS),
        _item("t3", Category.TOPS),
        _item("b1", Category.BOTTOMS),
        _item("b2", Category.BOTTOMS),
        _item("s1", Category.SHOES),
        _item("s2", Category.SHOES),
    ]


def _forecast(offset: int, low: float, high: float, rain: int = 10) -> DailyForecast:
    return DailyForecast(
        date=START + timedelta(days=offset), min_temperature=low, max_temperature=high, precipitation_probability=rain
    )


def _plan(provider: WeatherProvider, days: int, closet, activities=(), seed: int = 7):
    return asyncio.run(
        prepare_travel_plan(
            LISBON,
            START,
            START + timedelta(days=days - 1),
            list(activities),
            closet,
            None,
            provider,
            rng=random.Random(seed),
        )
    )


@pytest.mark.parametrize(
    "low, high, band",
    [
        (0.0, 6.0, TemperatureBand.COLD),
        (6.0, 10.0, TemperatureBand.MILD),
        (12.0, 19.0, TemperatureBand.MILD),
        (14.0, 18.0, TemperatureBand.WARM),
        (20.0, 25.0, TemperatureBand.WARM),
        (20.0, 26.0, TemperatureBand.HOT),
    ],
)
def test_temperature_bands(low: float, high: float, band: TemperatureBand) -> None:
    assert temperature_band(_forecast(0, low, high)) == band


def test_five_day_plan_has_one_unique_look_per_day() -> None:
    plan = _plan(MockWeatherProvider(), 5, _full_closet())

    assert [suggestion.date for suggestion in plan.packing_suggestions] == [
        START + timedelta(days=offset) for offset in range(5)
    ]
    assert all(suggestion.look is not None for suggestion in plan.packing_suggestions)
    assert len(set(plan.look_ids)) == 5
    assert plan.warnings == ()
    assert plan.activities == ("daily activity",)
    assert plan.packing_suggestions[0].display_date == "5 Jul"
    assert plan.packing_suggestions[0].forecast_summary == "12.0°C / 18.0°C • Rain: 10%"


def test_identical_seed_reproduces_plan() -> None:
    first = _plan(MockWeatherProvider(), 4, _full_closet(), seed=11)
    second = _plan(MockWeatherProvider(), 4, _full_closet(), seed=11)

    assert first.look_ids == second.look_ids


def test_rainy_cold_day_gets_rain_contingency_and_tip() -> None:
    provider = MockWeatherProvider(forecasts=[_forecast(0, 2.0, 6.0, rain=80)])

    plan = _plan(provider, 1, _full_closet())
    day = plan.packing_suggestions[0]

    assert day.contingency is not None and "rain" in day.contingency
    assert "Protection from possible showers" in day.context_highlights
    assert day.context_highlights[0] == "Activity: daily activity"
    assert "Rain is forecast on 5 Jul: pack a rain layer." in plan.shopping_tips
    assert RAIN_NOTE in plan.climate_notes
    assert COLD_NIGHT_NOTE in plan.climate_notes


def test_contingency_rules() -> None:
    assert "rain" in build_contingency(TemperatureBand.MILD, True)
    assert "rain" in build_contingency(TemperatureBand.HOT, True)
    assert "cover-up" in build_contingency(TemperatureBand.HOT, False)
    assert "warm" in build_contingency(TemperatureBand.COLD, False)
    assert build_contingency(TemperatureBand.WARM, False) is None


def test_climate_notes_thresholds() -> None:
    assert build_climate_notes([_forecast(0, 22.0, 30.0)]) == [HEAT_NOTE]
    assert build_climate_notes([_forecast(0, 10.0, 20.0)]) == [COLD_NIGHT_NOTE]
    assert build_climate_notes([_forecast(0, 11.0, 20.0)]) == []


def test_empty_closet_keeps_one_entry_per_day_with_warnings() -> None:
    plan = _plan(MockWeatherProvider(), 3, [])

    assert len(plan.packing_suggestions) == 3
    assert all(suggestion.look is None for suggestion in plan.packing_suggestions)
    assert len(plan.warnings) == 3
    assert plan.shopping_tips == (EMPTY_CLOSET_TIP, SPARE_BASICS_TIP)


def test_fallback_look_is_built_from_raw_items() -> None:
    closet = [
        _item("d1", Category.DRESSES, styles=(FashionStyle.CLASSIC,)),
        _item("s1", Category.SHOES, styles=(FashionStyle.CLASSIC,)),
    ]
    hiking = ACTIVITY_PRESETS["hike"]

    plan = _plan(MockWeatherProvider(), 2, closet, activities=[hiking])

    for suggestion in plan.packing_suggestions:
        assert suggestion.look is not None
        assert set(suggestion.look.piece_ids) == {"d1", "s1"}
        # mild default weather selects the band default style
        assert suggestion.look.style == FashionStyle.SMART_CASUAL
    assert len(set(plan.look_ids)) == 2
    assert any(tip.startswith("Add more smart casual pieces") for tip in plan.shopping_tips)
    assert plan.shopping_tips[-1] == SPARE_BASICS_TIP


def test_pure_packing_builder_consumes_each_look_once() -> None:
    forecasts = [_forecast(offset, 15.0, 25.0) for offset in range(3)]

    result = build_packing_suggestions(forecasts, [], _full_closet(), rng=random.Random(2), pool_multiplier=1)

    assert result.initial_pool_size == 6
    ids = [suggestion.look.id for suggestion in result.suggestions]
    assert len(set(ids)) == 3
    assert result.shopping_tips == []
    assert result.warnings == []


def test_activities_rotate_across_days() -> None:
    activities = [ACTIVITY_PRESETS["city"], ACTIVITY_PRESETS["evening"]]

    plan = _plan(MockWeatherProvider(), 3, _full_closet(), activities=activities)

    assert [suggestion.activity_name for suggestion in plan.packing_suggestions] == [
        "City sightseeing",
        "Evening out",
        "City sightseeing",
    ]


def test_style_selection_prefers_hints_then_any_pool_then_band() -> None:
    activity = TravelActivity("Hiking", (FashionStyle.SPORTY, FashionStyle.BOHO))

    assert select_style_for_activity(activity, {}, TemperatureBand.HOT) == FashionStyle.BOHO
    assert select_style_for_activity(activity, {}, TemperatureBand.COLD) == FashionStyle.CLASSIC
    assert select_style_for_activity(activity, {FashionStyle.ROCK: [object()]}, TemperatureBand.COLD) == (
        FashionStyle.ROCK
    )
    assert select_style_for_activity(
        activity, {FashionStyle.ROCK: [object()], FashionStyle.BOHO: [object()]}, TemperatureBand.COLD
    ) == FashionStyle.BOHO


def test_normalize_activities_defaults() -> None:
    assert normalize_activities([])[0].style_hints == (FashionStyle.CASUAL, FashionStyle.SMART_CASUAL)
    assert normalize_activities([TravelActivity("Museum")])[0].style_hints == (FashionStyle.CASUAL,)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Plaża i basen", [FashionStyle.SPORTY, FashionStyle.CASUAL]),
        ("Mountain trek", [FashionStyle.SPORTY, FashionStyle.BOHO]),
        ("Dinner party", [FashionStyle.GLAMOUR, FashionStyle.ROMANTIC]),
        ("Conference", [FashionStyle.CLASSIC, FashionStyle.SMART_CASUAL]),
        ("Museum", [FashionStyle.CASUAL]),
    ],
)
def test_infer_activity_styles(name: str, expected: List[FashionStyle]) -> None:
    assert infer_activity_styles(name) == expected


def test_format_date_range() -> None:
    assert format_date_range(date(2025, 7, 5), date(2025, 7, 9)) == "5 Jul - 9 Jul"


def test_forecast_failure_raises_weather_fetch_error() -> None:
    provider = MockWeatherProvider(error=RuntimeError("service down"))

    with pytest.raises(WeatherFetchError):
        _plan(provider, 3, _full_closet())
    assert provider.forecast_calls == 1


def test_incomplete_forecast_raises() -> None:
    class GappyProvider(MockWeatherProvider):
        def fetch_forecast(self, location, start_date, end_date):
            return super().fetch_forecast(location, start_date, end_date)[:-1]

    with pytest.raises(WeatherFetchError):
        _plan(GappyProvider(), 3, _full_closet())


def test_cancellation_leaves_no_plan() -> None:
    class BlockingProvider(MockWeatherProvider):
        def __init__(self) -> None:
            super().__init__()
            self.started = threading.Event()
            self.release = threading.Event()

        def fetch_forecast(self, location, start_date, end_date):
            self.started.set()
            self.release.wait(timeout=5)
            return super().fetch_forecast(location, start_date, end_date)

    provider = BlockingProvider()

    async def scenario() -> None:
        task = asyncio.create_task(
            prepare_travel_plan(LISBON, START, START + timedelta(days=2), [], _full_closet(), None, provider)
        )
        while not provider.started.is_set():
            await asyncio.sleep(0.01)
        task.cancel()
        try:
            with pytest.raises(asyncio.CancelledError):
                await task
        finally:
            provider.release.set()

    asyncio.run(scenario())
