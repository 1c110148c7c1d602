"""
Application facade, configuration and logging tests for the DressUp stylist.
"""

import asyncio
import json
import logging
import sys
from datetime import date, timedelta
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models.taxonomy import FashionStyle
from models.travel import GeoLocation, TravelActivity
from stylist_app.app import StylistApp, resolve_activity
from stylist_app.config import DEFAULT_FORECAST_URL, StylistConfig
from stylist_app.logging_config import (
    CORRELATION_ID,
    JsonFormatter,
    log_event,
    operation_context,
    redact_for_log,
)
from tools.closet_store import JSONClosetStore
from tools.weather_provider import MockWeatherProvider, WeatherFetchError

LISBON = GeoLocation(name="Lisbon", country="Portugal", latitude=38.72, longitude=-9.14)
CLOSET_REFS = [
    "content://closet/biala-koszula-basic.jpg",
    "content://closet/t-shirt-basic.jpg",
    "content://closet/jeans-denim.jpg",
    "content://closet/sneakers-basic.jpg",
]


@pytest.fixture()
def stylist(tmp_path: Path) -> StylistApp:
    config = StylistConfig(store_path=str(tmp_path / "dressup.json"))
    return StylistApp(
        config=config,
        provider=MockWeatherProvider(locations=[LISBON]),
        store=JSONClosetStore(config.store_path),
    )


def test_config_reads_yaml_and_env_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_file = tmp_path / "staging.yaml"
    config_file.write_text(
        "# staging\nlook_limit: 8\nforecast_language: 'pl'\nweather_timeout_seconds: nonsense\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("APP_ENV", "staging")
    monkeypatch.setenv("STYLIST_CONFIG_DIR", str(tmp_path))
    monkeypatch.setenv("POOL_MULTIPLIER", "3")
    monkeypatch.delenv("APP_CONFIG_PATH", raising=False)
    monkeypatch.delenv("LOOK_LIMIT", raising=False)
    monkeypatch.delenv("FORECAST_LANGUAGE", raising=False)
    monkeypatch.delenv("WEATHER_TIMEOUT_SECONDS", raising=False)
    monkeypatch.delenv("FORECAST_URL", raising=False)

    config = StylistConfig.from_env()

    assert config.environment == "staging"
    assert config.look_limit == 8
    assert config.forecast_language == "pl"
    assert config.pool_multiplier == 3
    assert config.weather_timeout_seconds == 5.0
    assert config.forecast_url == DEFAULT_FORECAST_URL


def test_redaction_masks_references_and_locations() -> None:
    scrubbed = redact_for_log(
        {
            "selfie_ref": "content://selfies/me.jpg",
            "location": "Lisbon",
            "note": "mail me at someone@example.com",
            "nested": [{"ref": "https://cdn.example.com/a.jpg"}],
            "count": 3,
        }
    )

    assert scrubbed["selfie_ref"] == "[redacted]"
    assert scrubbed["location"] == "[redacted]"
    assert scrubbed["note"] == "mail me at [redacted-email]"
    assert scrubbed["nested"] == [{"ref": "[redacted-url]"}]
    assert scrubbed["count"] == 3


def test_json_formatter_includes_correlation_and_redacts_fields() -> None:
    logger = logging.getLogger("tests.json_formatter")
    records = []

    class _Capture(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            records.append(record)

    handler = _Capture()
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    try:
        with operation_context("test:op", correlation_id="corr-123"):
            log_event(logger, logging.INFO, "something_happened", source_ref="content://x", days=3)
        assert CORRELATION_ID.get() != "corr-123"
    finally:
        logger.removeHandler(handler)

    payload = json.loads(JsonFormatter().format(records[0]))
    assert payload["event"] == "something_happened"
    assert payload["correlation_id"] == "corr-123"
    assert payload["source_ref"] == "[redacted]"
    assert payload["days"] == 3


def test_closet_flow_classifies_stores_and_generates(stylist: StylistApp) -> None:
    added = stylist.add_items(CLOSET_REFS)
    again = stylist.add_items(CLOSET_REFS[:1])

    assert len(added) == 4
    assert again == []
    looks = stylist.generate_looks("casual", seed=3)
    assert looks
    assert all(look.style == FashionStyle.CASUAL for look in looks)


def test_invalid_requests_raise_value_error(stylist: StylistApp) -> None:
    with pytest.raises(ValueError):
        stylist.classify([])
    with pytest.raises(ValueError):
        stylist.generate_looks("disco")
    with pytest.raises(ValueError):
        stylist.analyze_selfie("")


def test_profile_is_persisted_and_used_for_looks(stylist: StylistApp) -> None:
    stylist.add_items(CLOSET_REFS)
    profile = stylist.analyze_selfie("content://selfies/me.jpg")

    assert stylist.profile() == profile
    looks = stylist.generate_looks(FashionStyle.CASUAL, seed=1)
    assert any(highlight.startswith("Eyes ") for highlight in looks[0].highlights)

    stylist.clear_profile()
    assert stylist.profile() is None


def test_trip_is_only_kept_after_confirmation(stylist: StylistApp) -> None:
    stylist.add_items(CLOSET_REFS)
    start = date(2025, 7, 5)

    plan = asyncio.run(stylist.plan_trip(LISBON, start, start + timedelta(days=2), ["city", "Beach day"], seed=4))

    assert stylist.pending_plan is plan
    assert stylist.confirmed_trips == []
    assert stylist.confirm_trip() is plan
    assert stylist.confirmed_trips == [plan]
    assert stylist.pending_plan is None
    with pytest.raises(ValueError):
        stylist.confirm_trip()

    asyncio.run(stylist.plan_trip(LISBON, start, start, seed=4))
    stylist.discard_trip()
    assert stylist.pending_plan is None
    assert stylist.confirmed_trips == [plan]


def test_trip_request_validation_and_weather_failure(stylist: StylistApp) -> None:
    start = date(2025, 7, 5)
    with pytest.raises(ValueError, match="Invalid travel request"):
        asyncio.run(stylist.plan_trip(LISBON, start, start - timedelta(days=1)))

    stylist.provider = MockWeatherProvider(error=RuntimeError("offline"))
    with pytest.raises(WeatherFetchError):
        asyncio.run(stylist.plan_trip(LISBON, start, start + timedelta(days=1)))
    assert stylist.pending_plan is None


def test_destination_search_runs_off_the_event_loop(stylist: StylistApp) -> None:
    assert asyncio.run(stylist.search_destinations("lis")) == [LISBON]
    assert asyncio.run(stylist.search_destinations("")) == []


def test_calendar_assignment_saves_look(stylist: StylistApp) -> None:
    stylist.add_items(CLOSET_REFS)
    look = stylist.generate_looks("casual", seed=2)[0]

    stylist.assign_look_to_date(date(2025, 7, 5), look)

    assert stylist.calendar() == {date(2025, 7, 5): look}
    assert [saved.id for saved in stylist.saved_looks()] == [look.id]
    stylist.remove_calendar_entry(date(2025, 7, 5))
    assert stylist.calendar() == {}


def test_resolve_activity_uses_presets_and_inference() -> None:
    assert resolve_activity("swim").name == "Beach & pool"
    assert resolve_activity("Mountain hike").style_hints == (FashionStyle.SPORTY, FashionStyle.BOHO)
    custom = TravelActivity("Gallery", (FashionStyle.MINIMALIST,))
    assert resolve_activity(custom) is custom
