"""FastAPI server exposing the stylist engine over HTTP."""

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from logic.validation import ActivityInput, ClassifyRequest, GenerateLooksRequest, TravelPlanRequest
from models.closet_item import ClassifiedItem
from models.look import StyledLook
from models.style_profile import PersonalStyleProfile
from models.travel import GeoLocation, TravelActivity, TravelPlan
from stylist_app.app import StylistApp
from stylist_app.logging_config import configure_logging
from tools.weather_provider import WeatherFetchError


class SelfieRequest(BaseModel):
    """Request payload for deriving a colour profile."""

    selfie_ref: str = Field(..., min_length=1, description="Opaque selfie reference, e.g. a content URI")


def item_payload(item: ClassifiedItem) -> Dict[str, Any]:
    return {
        "id": item.id,
        "source_ref": item.source_ref,
        "category": item.category.value,
        "styles": [style.value for style in item.styles],
        "notes": item.notes,
        "color_tags": list(item.color_tags),
    }


def look_payload(look: StyledLook) -> Dict[str, Any]:
    return {
        "id": look.id,
        "style": look.style.value,
        "pieces": [item_payload(piece) for piece in look.pieces],
        "narrative": look.narrative,
        "highlights": list(look.highlights),
        "advantages": list(look.advantages),
    }


def profile_payload(profile: PersonalStyleProfile) -> Dict[str, Any]:
    return {
        "palette": {
            "name": profile.palette.name,
            "description": profile.palette.description,
            "colors": list(profile.palette.colors),
            "suggestions": list(profile.palette.suggestions),
        },
        "eye_color": profile.eye_color,
        "hair_tone": profile.hair_tone,
        "skin_tone": profile.skin_tone,
        "face_shape": profile.face_shape,
        "keywords": profile.keyword_summary,
    }


def location_payload(location: GeoLocation) -> Dict[str, Any]:
    return {
        "name": location.name,
        "country": location.country,
        "admin1": location.admin1,
        "latitude": location.latitude,
        "longitude": location.longitude,
        "display_name": location.display_name,
    }


def plan_payload(plan: TravelPlan) -> Dict[str, Any]:
    return {
        "id": plan.id,
        "location": location_payload(plan.location),
        "start_date": plan.start_date.isoformat(),
        "end_date": plan.end_date.isoformat(),
        "activities": list(plan.activities),
        "days": [
            {
                "date": suggestion.date.isoformat(),
                "display_date": suggestion.display_date,
                "forecast": suggestion.forecast_summary,
                "activity": suggestion.activity_name,
                "look": look_payload(suggestion.look) if suggestion.look else None,
                "highlights": list(suggestion.context_highlights),
                "contingency": suggestion.contingency,
            }
            for suggestion in plan.packing_suggestions
        ],
        "climate_notes": list(plan.climate_notes),
        "shopping_tips": list(plan.shopping_tips),
        "warnings": list(plan.warnings),
    }


def _activity(entry: ActivityInput) -> TravelActivity | str:
    if entry.style_hints:
        return TravelActivity(entry.name, tuple(entry.style_hints))
    return entry.name


def create_app(stylist: Optional[StylistApp] = None) -> FastAPI:
    """Build the HTTP app around ``stylist`` (a default-configured one when omitted)."""

    stylist = stylist or StylistApp()
    api = FastAPI(title="DressUp Stylist", version="0.1.0")

    @api.get("/healthz")
    async def healthcheck() -> dict:
        """Lightweight readiness probe."""

        return {
            "status": "ok",
            "service": "dressup-stylist",
            "environment": stylist.config.environment or "local",
        }

    @api.post("/items/classify")
    async def classify_items(request: ClassifyRequest, store: bool = False) -> dict:
        """Classify image references; ``store=true`` also adds new ones to the closet."""

        if store:
            items = stylist.add_items(request.source_refs, request.labels)
        else:
            items = stylist.classify(request.source_refs, request.labels)
        return {"items": [item_payload(item) for item in items]}

    @api.post("/looks/generate")
    async def generate(request: GenerateLooksRequest) -> dict:
        looks = stylist.generate_looks(
            request.style, limit=request.limit, use_profile=request.use_profile, seed=request.seed
        )
        return {"style": request.style.value, "looks": [look_payload(look) for look in looks]}

    @api.post("/profile/analyze")
    async def analyze(request: SelfieRequest) -> dict:
        return profile_payload(stylist.analyze_selfie(request.selfie_ref))

    @api.get("/destinations")
    async def destinations(q: str = "") -> dict:
        results: List[GeoLocation] = await stylist.search_destinations(q)
        return {"results": [location_payload(location) for location in results]}

    @api.post("/travel/plan")
    async def plan_trip(request: TravelPlanRequest) -> dict:
        """Prepare a packing plan; a failed forecast fetch maps to 502."""

        location = GeoLocation(
            name=request.location.name,
            country=request.location.country,
            latitude=request.location.latitude,
            longitude=request.location.longitude,
            admin1=request.location.admin1,
        )
        try:
            plan = await stylist.plan_trip(
                location,
                request.start_date,
                request.end_date,
                [_activity(entry) for entry in request.activities],
                seed=request.seed,
            )
        except WeatherFetchError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return plan_payload(plan)

    return api


def get_app() -> FastAPI:
    """Expose the FastAPI instance for ASGI servers."""

    configure_logging()
    return create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:get_app", factory=True, host="0.0.0.0", port=int("8080"), reload=False)
