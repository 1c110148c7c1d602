"""Application facade wiring the stylist core to its provider and store."""

from __future__ import annotations

import logging
import random
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from pydantic import ValidationError

from logic.color_profile import analyze_selfie
from logic.garment_classifier import MimeTypeLookup, classify_item
from logic.outfit_builder import generate_looks, replace_piece
from logic.shopping_advisor import ShoppingReview, ShoppingScope, evaluate_purchase
from logic.travel_planner import (
    ACTIVITY_PRESETS,
    custom_activity,
    prepare_travel_plan,
    search_destination_async,
)
from logic.validation import (
    AnalyzeSelfieRequest,
    ClassifyRequest,
    GenerateLooksRequest,
    TravelPlanRequest,
    validation_failure,
)
from models.closet_item import ClassifiedItem
from models.look import StyledLook
from models.style_profile import PersonalStyleProfile
from models.taxonomy import FashionStyle
from models.travel import GeoLocation, TravelActivity, TravelPlan
from stylist_app.config import StylistConfig
from stylist_app.logging_config import get_logger, log_event, operation_context
from tools.closet_store import ClosetStore, JSONClosetStore
from tools.weather_provider import OpenMeteoWeatherProvider, WeatherProvider

LOGGER = get_logger(__name__)


def _invalid(message: str, exc: ValidationError) -> ValueError:
    failure = validation_failure(message, exc)
    details = "; ".join(f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in failure["details"])
    return ValueError(f"{failure['message']}: {details}")


def resolve_activity(activity: TravelActivity | str) -> TravelActivity:
    """Preset key (``swim``, ``hike``, ``city``, ``evening``) or a custom activity name."""

    if isinstance(activity, TravelActivity):
        return activity
    key = activity.strip().lower()
    return ACTIVITY_PRESETS.get(key) or custom_activity(activity)


class StylistApp:
    """Wires the classifier, look generator, colour profile and travel planner together.

    The closet, saved looks, profile and calendar live in the store; trip plans
    are kept in memory and only once confirmed.
    """

    def __init__(
        self,
        config: StylistConfig | None = None,
        provider: WeatherProvider | None = None,
        store: ClosetStore | None = None,
        mime_type_lookup: MimeTypeLookup | None = None,
    ) -> None:
        self.config = config or StylistConfig.from_env()
        self.provider = provider or OpenMeteoWeatherProvider(
            geocoding_url=self.config.geocoding_url,
            forecast_url=self.config.forecast_url,
            timeout_seconds=self.config.weather_timeout_seconds,
            language=self.config.forecast_language,
        )
        self.store = store or JSONClosetStore(self.config.store_path)
        self.mime_type_lookup = mime_type_lookup
        self.pending_plan: Optional[TravelPlan] = None
        self.confirmed_trips: List[TravelPlan] = []

    # Closet

    def classify(self, source_refs: Sequence[str], labels: Mapping[str, str] | None = None) -> List[ClassifiedItem]:
        """Classify references without storing them."""

        try:
            request = ClassifyRequest.model_validate({"source_refs": list(source_refs), "labels": dict(labels or {})})
        except ValidationError as exc:
            raise _invalid("Invalid classification request", exc) from exc
        return [
            classify_item(ref, label=request.labels.get(ref), mime_type_lookup=self.mime_type_lookup)
            for ref in request.source_refs
        ]

    def add_items(self, source_refs: Sequence[str], labels: Mapping[str, str] | None = None) -> List[ClassifiedItem]:
        """Classify and store new items; references already in the closet are skipped."""

        with operation_context("app:add_items") as correlation_id:
            items = self.classify(source_refs, labels)
            added = self.store.add_items(items)
            log_event(
                LOGGER,
                logging.INFO,
                "closet_items_added",
                correlation_id=correlation_id,
                requested=len(items),
                added=len(added),
            )
            return added

    def closet(self) -> List[ClassifiedItem]:
        return self.store.load_items()

    def update_item(self, item: ClassifiedItem) -> bool:
        return self.store.replace_item(item)

    def remove_items(self, source_refs: Iterable[str]) -> int:
        return self.store.remove_items_by_source(source_refs)

    # Looks

    def generate_looks(
        self,
        style: FashionStyle | str,
        limit: int | None = None,
        use_profile: bool = True,
        seed: int | None = None,
    ) -> List[StyledLook]:
        try:
            request = GenerateLooksRequest.model_validate(
                {"style": style, "limit": limit or self.config.look_limit, "use_profile": use_profile, "seed": seed}
            )
        except ValidationError as exc:
            raise _invalid("Invalid look request", exc) from exc

        profile = self.store.load_profile() if request.use_profile else None
        rng = random.Random(request.seed) if request.seed is not None else None
        with operation_context("app:generate_looks") as correlation_id:
            looks = generate_looks(self.closet(), request.style, profile, limit=request.limit, rng=rng)
            log_event(
                LOGGER,
                logging.INFO,
                "looks_generated",
                correlation_id=correlation_id,
                style=request.style.value,
                count=len(looks),
                personalised=profile is not None,
            )
            return looks

    def saved_looks(self) -> List[StyledLook]:
        return self.store.load_looks()

    def save_looks(self, looks: Iterable[StyledLook]) -> List[StyledLook]:
        """Add or update looks by id, keeping the stored order."""

        merged: Dict[str, StyledLook] = {look.id: look for look in self.store.load_looks()}
        for look in looks:
            merged[look.id] = look
        self.store.save_looks(merged.values())
        return list(merged.values())

    def swap_look_piece(self, look: StyledLook, index: int, replacement: ClassifiedItem) -> StyledLook:
        """Replace one piece of a look and persist the edit under the same id."""

        updated = replace_piece(look, index, replacement, self.store.load_profile())
        self.save_looks([updated])
        return updated

    # Profile

    def analyze_selfie(self, selfie_ref: str) -> PersonalStyleProfile:
        try:
            request = AnalyzeSelfieRequest.model_validate({"selfie_ref": selfie_ref})
        except ValidationError as exc:
            raise _invalid("Invalid selfie reference", exc) from exc
        profile = analyze_selfie(request.selfie_ref)
        self.store.save_profile(profile)
        log_event(LOGGER, logging.INFO, "profile_updated", palette=profile.palette.name)
        return profile

    def profile(self) -> Optional[PersonalStyleProfile]:
        return self.store.load_profile()

    def clear_profile(self) -> None:
        self.store.save_profile(None)

    # Shopping

    def review_purchase(
        self, source_refs: Sequence[str], scope: ShoppingScope = ShoppingScope.ITEM
    ) -> Optional[ShoppingReview]:
        return evaluate_purchase(source_refs, self.closet(), scope, mime_type_lookup=self.mime_type_lookup)

    # Travel

    async def search_destinations(self, query: str) -> List[GeoLocation]:
        return await search_destination_async(self.provider, query)

    async def plan_trip(
        self,
        location: GeoLocation,
        start_date: date,
        end_date: date,
        activities: Sequence[TravelActivity | str] = (),
        seed: int | None = None,
    ) -> TravelPlan:
        """Prepare a plan and hold it as pending until confirmed or discarded.

        Raises ``ValueError`` for an invalid request and
        :class:`~tools.weather_provider.WeatherFetchError` when the forecast
        is unavailable.
        """

        resolved = [resolve_activity(activity) for activity in activities]
        try:
            TravelPlanRequest.model_validate(
                {
                    "location": {
                        "name": location.name,
                        "country": location.country,
                        "admin1": location.admin1,
                        "latitude": location.latitude,
                        "longitude": location.longitude,
                    },
                    "start_date": start_date,
                    "end_date": end_date,
                    "activities": [
                        {"name": activity.name, "style_hints": list(activity.style_hints)} for activity in resolved
                    ],
                    "seed": seed,
                }
            )
        except ValidationError as exc:
            raise _invalid("Invalid travel request", exc) from exc

        self.pending_plan = None
        plan = await prepare_travel_plan(
            location,
            start_date,
            end_date,
            resolved,
            self.closet(),
            self.store.load_profile(),
            self.provider,
            rng=random.Random(seed) if seed is not None else None,
            pool_multiplier=self.config.pool_multiplier,
        )
        self.pending_plan = plan
        return plan

    def confirm_trip(self) -> TravelPlan:
        if self.pending_plan is None:
            raise ValueError("No prepared travel plan to confirm")
        plan, self.pending_plan = self.pending_plan, None
        self.confirmed_trips.insert(0, plan)
        LOGGER.info("Confirmed travel plan %s with %s days", plan.id, len(plan.packing_suggestions))
        return plan

    def discard_trip(self) -> None:
        self.pending_plan = None

    # Calendar

    def calendar(self) -> Dict[date, StyledLook]:
        looks = {look.id: look for look in self.store.load_looks()}
        return {day: looks[look_id] for day, look_id in self.store.load_calendar().items() if look_id in looks}

    def assign_look_to_date(self, day: date, look: StyledLook) -> None:
        """Pin a look to a day; the look is saved first if it is new."""

        if look.id not in {saved.id for saved in self.store.load_looks()}:
            self.save_looks([look])
        assignments = self.store.load_calendar()
        assignments[day] = look.id
        self.store.save_calendar(assignments)

    def remove_calendar_entry(self, day: date) -> None:
        assignments = self.store.load_calendar()
        if assignments.pop(day, None) is not None:
            self.store.save_calendar(assignments)


__all__ = ["StylistApp", "resolve_activity"]
