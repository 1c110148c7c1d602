"""HTTP surface tests using FastAPI's TestClient."""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models.travel import GeoLocation
from server.api import create_app
from stylist_app.app import StylistApp
from stylist_app.config import StylistConfig
from tools.closet_store import JSONClosetStore
from tools.weather_provider import MockWeatherProvider

LISBON = GeoLocation(name="Lisbon", country="Portugal", latitude=38.72, longitude=-9.14)
TRIP = {
    "location": {"name": "Lisbon", "country": "Portugal", "latitude": 38.72, "longitude": -9.14},
    "start_date": "2025-07-05",
    "end_date": "2025-07-07",
    "activities": [{"name": "city"}, {"name": "Gallery", "style_hints": ["minimalist"]}],
    "seed": 5,
}


def _client(tmp_path: Path, provider: MockWeatherProvider | None = None) -> TestClient:
    config = StylistConfig(store_path=str(tmp_path / "dressup.json"), environment="test")
    stylist = StylistApp(
        config=config,
        provider=provider or MockWeatherProvider(locations=[LISBON]),
        store=JSONClosetStore(config.store_path),
    )
    return TestClient(create_app(stylist))


@pytest.fixture()
def client(tmp_path: Path) -> TestClient:
    return _client(tmp_path)


def test_healthz(client: TestClient) -> None:
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "dressup-stylist", "environment": "test"}


def test_classify_returns_items(client: TestClient) -> None:
    response = client.post("/items/classify", json={"source_refs": ["content://closet/blue-koszula.jpg"]})

    assert response.status_code == 200
    item = response.json()["items"][0]
    assert item["category"] == "tops"
    assert item["styles"] == ["classic"]
    assert item["color_tags"] == ["Baby blue"]


def test_classify_rejects_empty_payload(client: TestClient) -> None:
    assert client.post("/items/classify", json={"source_refs": []}).status_code == 422


def test_stored_items_feed_look_generation(client: TestClient) -> None:
    refs = [
        "content://closet/t-shirt-basic.jpg",
        "content://closet/jeans-denim.jpg",
        "content://closet/sneakers-basic.jpg",
    ]
    client.post("/items/classify", params={"store": "true"}, json={"source_refs": refs})

    response = client.post("/looks/generate", json={"style": "casual", "seed": 1})

    assert response.status_code == 200
    body = response.json()
    assert body["style"] == "casual"
    assert len(body["looks"]) == 1
    assert len(body["looks"][0]["pieces"]) == 3


def test_unknown_style_is_rejected(client: TestClient) -> None:
    assert client.post("/looks/generate", json={"style": "disco"}).status_code == 422


def test_profile_analysis(client: TestClient) -> None:
    response = client.post("/profile/analyze", json={"selfie_ref": "a"})

    assert response.status_code == 200
    assert response.json()["palette"]["name"] == "Warm autumn"


def test_destinations(client: TestClient) -> None:
    response = client.get("/destinations", params={"q": "Lis"})

    assert response.json()["results"][0]["display_name"] == "Lisbon, Portugal"


def test_travel_plan_has_one_day_per_date(client: TestClient) -> None:
    response = client.post("/travel/plan", json=TRIP)

    assert response.status_code == 200
    body = response.json()
    assert [day["date"] for day in body["days"]] == ["2025-07-05", "2025-07-06", "2025-07-07"]
    assert body["activities"] == ["City sightseeing", "Gallery"]


def test_travel_plan_rejects_reversed_dates(client: TestClient) -> None:
    payload = dict(TRIP, start_date="2025-07-08")

    assert client.post("/travel/plan", json=payload).status_code == 422


def test_forecast_failure_maps_to_bad_gateway(tmp_path: Path) -> None:
    client = _client(tmp_path, MockWeatherProvider(error=RuntimeError("offline")))

    response = client.post("/travel/plan", json=TRIP)

    assert response.status_code == 502
