"""Timing and event logs emitted around instrumented provider calls."""

import logging
import sys
from datetime import date
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models.travel import GeoLocation
from tools.observability import describe_arguments, instrument_call

LISBON = GeoLocation(name="Lisbon", country="Portugal", latitude=38.72, longitude=-9.14)


class _Provider:
    @instrument_call("test.forecast")
    def forecast(self, location: GeoLocation, start_date: date, days: int = 1) -> list:
        return [start_date] * days

    @instrument_call("test.broken")
    def broken(self, query: str) -> list:
        raise RuntimeError("offline")


def _events(caplog: pytest.LogCaptureFixture) -> list:
    return [record for record in caplog.records if getattr(record, "call", "").startswith("test.")]


def test_successful_call_logs_start_and_completion(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO):
        result = _Provider().forecast(LISBON, date(2025, 7, 5), days=3)

    assert len(result) == 3
    started, completed = _events(caplog)
    assert started.event == "call_started"
    assert started.arguments == {"location": "[redacted]", "start_date": "2025-07-05", "days": 3}
    assert completed.event == "call_completed"
    assert completed.result_count == 3
    assert completed.duration_ms >= 0
    assert started.correlation_id == completed.correlation_id


def test_failed_call_is_logged_and_reraised(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO):
        with pytest.raises(RuntimeError, match="offline"):
            _Provider().broken("Lisbon")

    started, failed = _events(caplog)
    assert started.arguments == {"query": "Lisbon"}
    assert failed.event == "call_failed"
    assert failed.levelno == logging.ERROR
    assert failed.error == "RuntimeError"


def test_arguments_are_truncated_and_summarised() -> None:
    def many(a, b, c, d, e, f, g, h=None):
        return None

    described = describe_arguments(many, (1, 2, 3, 4, 5, 6, 7), {"h": object()})

    assert list(described) == ["a", "b", "c", "d", "e", "f", "truncated"]
    assert describe_arguments(many, (), {"h": LISBON}) == {"h": "GeoLocation"}
