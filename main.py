"""Simple entrypoint to run the DressUp stylist engine locally with offline weather."""

import asyncio
from datetime import date, timedelta

from models.taxonomy import FashionStyle
from models.travel import GeoLocation
from stylist_app.app import StylistApp
from stylist_app.config import StylistConfig
from stylist_app.logging_config import configure_logging
from tools.weather_provider import MockWeatherProvider

SAMPLE_CLOSET = [
    "content://closet/biala-koszula-basic.jpg",
    "content://closet/jeans-denim-prosty.jpg",
    "content://closet/sneakers-białe.jpg",
    "content://closet/czarna-sukienka-satynowa.jpg",
    "content://closet/szpilki-czarne.jpg",
    "content://closet/marynarka-granatowa.jpg",
]


def main() -> None:
    configure_logging("WARNING")
    config = StylistConfig.from_env()
    lisbon = GeoLocation(name="Lisbon", country="Portugal", latitude=38.72, longitude=-9.14)
    app = StylistApp(config=config, provider=MockWeatherProvider(locations=[lisbon], default_max=24.0))

    app.add_items(SAMPLE_CLOSET)
    profile = app.analyze_selfie("content://selfies/me.jpg")
    print(f"Palette: {profile.palette.name} ({', '.join(profile.keyword_summary)})")

    for look in app.generate_looks(FashionStyle.CASUAL, seed=7):
        print(f"[{look.style.value}] {look.narrative}")

    start = date.today() + timedelta(days=1)
    plan = asyncio.run(app.plan_trip(lisbon, start, start + timedelta(days=2), ["city", "evening"], seed=7))
    for day in plan.packing_suggestions:
        print(f"{day.display_date} {day.forecast_summary} {day.activity_name}: {day.look.narrative if day.look else '-'}")
    for tip in plan.shopping_tips:
        print(f"Tip: {tip}")
    app.discard_trip()


if __name__ == "__main__":
    main()
