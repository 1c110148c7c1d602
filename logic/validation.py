"""Pydantic schemas and helpers for validating facade and HTTP payloads."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from models.taxonomy import FashionStyle, parse_style

MAX_TRIP_DAYS = 16


class ClassifyRequest(BaseModel):
    """Image references (URIs or paths) to classify, with optional labels."""

    source_refs: List[str] = Field(min_length=1)
    labels: Dict[str, str] = {}

    @field_validator("source_refs")
    @classmethod
    def _strip_refs(cls, refs: List[str]) -> List[str]:
        cleaned = [ref.strip() for ref in refs if ref and ref.strip()]
        if not cleaned:
            raise ValueError("at least one non-blank source reference is required")
        return cleaned


class GenerateLooksRequest(BaseModel):
    """Input contract for look generation over the stored closet."""

    style: FashionStyle
    limit: int = Field(default=5, ge=1, le=50)
    use_profile: bool = True
    seed: Optional[int] = None

    @field_validator("style", mode="before")
    @classmethod
    def _parse_style(cls, value: Any) -> Any:
        if isinstance(value, str):
            parsed = parse_style(value)
            if parsed is None:
                raise ValueError(f"unknown style: {value}")
            return parsed
        return value


class AnalyzeSelfieRequest(BaseModel):
    selfie_ref: str = Field(min_length=1)


class ActivityInput(BaseModel):
    """A trip activity: a preset key, or a free-text name with optional hints."""

    name: str = Field(min_length=1)
    style_hints: List[FashionStyle] = []

    @field_validator("style_hints", mode="before")
    @classmethod
    def _parse_hints(cls, value: Any) -> Any:
        if isinstance(value, list):
            parsed = [parse_style(item) if isinstance(item, str) else item for item in value]
            return [item for item in parsed if item is not None]
        return value


class LocationInput(BaseModel):
    name: str = Field(min_length=1)
    country: str = ""
    admin1: Optional[str] = None
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class TravelPlanRequest(BaseModel):
    """Input contract for trip planning."""

    location: LocationInput
    start_date: date
    end_date: date
    activities: List[ActivityInput] = []
    seed: Optional[int] = None

    @model_validator(mode="after")
    def _validate_range(self) -> "TravelPlanRequest":
        if self.end_date < self.start_date:
            raise ValueError("end_date cannot precede start_date")
        if (self.end_date - self.start_date).days + 1 > MAX_TRIP_DAYS:
            raise ValueError(f"trips are limited to {MAX_TRIP_DAYS} days of forecast")
        return self


class ValidationResult(BaseModel):
    """Wrapper returned to callers when validation fails."""

    status: Literal["invalid"] = "invalid"
    message: str
    details: List[Dict[str, Any]]


def validation_failure(message: str, exc: ValidationError) -> Dict[str, Any]:
    """Translate Pydantic errors into a consistent review payload."""

    details = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]
    return ValidationResult(message=message, details=details).model_dump()


__all__ = [
    "MAX_TRIP_DAYS",
    "ClassifyRequest",
    "GenerateLooksRequest",
    "AnalyzeSelfieRequest",
    "ActivityInput",
    "LocationInput",
    "TravelPlanRequest",
    "ValidationResult",
    "validation_failure",
]
