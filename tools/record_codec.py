"""Flat JSON-compatible records for closet items, looks, profiles and the calendar.

Decoding is lenient field by field: unknown categories become ``unknown``,
unknown style names are dropped, missing lists fall back to the model
defaults and null or non-string text fields become their default or ``str()``
of the value. A record whose identifying field cannot be resolved is skipped
and logged. Keys written by older camelCase documents (``uri``, ``colorTags``,
``pieceIds``, ``selfieUri``, ``eyeColor``) are still accepted, as are palette
colours stored as packed ARGB integers.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator

from models.closet_item import ClassifiedItem
from models.look import MIN_LOOK_PIECES, StyledLook
from models.style_profile import PersonalPalette, PersonalStyleProfile
from models.taxonomy import FashionStyle, parse_category, parse_style, parse_styles

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


def _as_string_list(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [str(entry) for entry in value if entry is not None]


def _as_text(value: Any, default: Optional[str] = "") -> Optional[str]:
    if value is None:
        return default
    return value if isinstance(value, str) else str(value)


def _as_identifier(value: Any) -> Any:
    # Numeric ids are kept; null, lists and objects still fail validation.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def argb_to_hex(value: int) -> str:
    """``#RRGGBB`` for a packed ARGB int, also when shifted into the high 32 bits."""

    if -(1 << 31) <= value <= 0xFFFFFFFF:
        packed = value & 0xFFFFFFFF
    else:
        packed = (value & 0xFFFFFFFFFFFFFFFF) >> 32
    return f"#{packed & 0xFFFFFF:06X}"


class ItemRecord(BaseModel):
    id: str = Field(min_length=1)
    source_ref: str = Field(default="", validation_alias=AliasChoices("source_ref", "uri"))
    category: str = "unknown"
    styles: List[str] = []
    notes: Optional[str] = None
    color_tags: List[str] = Field(default=[], validation_alias=AliasChoices("color_tags", "colorTags"))

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, value: Any) -> Any:
        return _as_identifier(value)

    @field_validator("source_ref", mode="before")
    @classmethod
    def _source_ref(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("notes", mode="before")
    @classmethod
    def _notes(cls, value: Any) -> Optional[str]:
        text = _as_text(value, None)
        return text if text and text.strip() else None

    @field_validator("styles", "color_tags", mode="before")
    @classmethod
    def _lists(cls, value: Any) -> List[str]:
        return _as_string_list(value)

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, value: Any) -> str:
        return str(value or "unknown")


class LookRecord(BaseModel):
    id: str = Field(min_length=1)
    style: FashionStyle
    piece_ids: List[str] = Field(default=[], validation_alias=AliasChoices("piece_ids", "pieceIds"))
    narrative: str = ""
    highlights: List[str] = []
    advantages: List[str] = []

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, value: Any) -> Any:
        return _as_identifier(value)

    @field_validator("style", mode="before")
    @classmethod
    def _style(cls, value: Any) -> Any:
        style = parse_style(value)
        if style is None:
            raise ValueError(f"unknown style: {value!r}")
        return style

    @field_validator("narrative", mode="before")
    @classmethod
    def _narrative(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("piece_ids", "highlights", "advantages", mode="before")
    @classmethod
    def _lists(cls, value: Any) -> List[str]:
        return _as_string_list(value)


class PaletteRecord(BaseModel):
    name: str
    description: str = ""
    colors: List[str]
    suggestions: List[str] = []

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("colors", mode="before")
    @classmethod
    def _packed_colors(cls, value: Any) -> Any:
        if not isinstance(value, (list, tuple)):
            return value
        return [
            argb_to_hex(color) if isinstance(color, int) and not isinstance(color, bool) else color
            for color in value
        ]

    @field_validator("colors")
    @classmethod
    def _hex_colors(cls, colors: List[str]) -> List[str]:
        for color in colors:
            if not _HEX_COLOR.match(color):
                raise ValueError(f"palette colour must be #RRGGBB, got {color!r}")
        return colors

    @field_validator("suggestions", mode="before")
    @classmethod
    def _suggestions(cls, value: Any) -> List[str]:
        return _as_string_list(value)


class ProfileRecord(BaseModel):
    selfie_ref: str = Field(default="", validation_alias=AliasChoices("selfie_ref", "selfieUri"))
    palette: PaletteRecord
    eye_color: str = Field(default="", validation_alias=AliasChoices("eye_color", "eyeColor"))
    hair_tone: str = Field(default="", validation_alias=AliasChoices("hair_tone", "hairTone"))
    skin_tone: str = Field(default="", validation_alias=AliasChoices("skin_tone", "skinTone"))
    face_shape: str = Field(default="", validation_alias=AliasChoices("face_shape", "faceShape"))

    @field_validator("selfie_ref", "eye_color", "hair_tone", "skin_tone", "face_shape", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return _as_text(value)


@dataclass(frozen=True)
class StoredLook:
    """A persisted look that still refers to its pieces by id."""

    id: str
    style: FashionStyle
    piece_ids: Tuple[str, ...]
    narrative: str
    highlights: Tuple[str, ...] = ()
    advantages: Tuple[str, ...] = ()


def encode_item(item: ClassifiedItem) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "id": item.id,
        "source_ref": item.source_ref,
        "category": item.category.value,
        "styles": [style.value for style in item.styles],
        "color_tags": list(item.color_tags),
    }
    if item.notes:
        record["notes"] = item.notes
    return record


def encode_look(look: StyledLook) -> Dict[str, Any]:
    return {
        "id": look.id,
        "style": look.style.value,
        "piece_ids": list(look.piece_ids),
        "narrative": look.narrative,
        "highlights": list(look.highlights),
        "advantages": list(look.advantages),
    }


def encode_profile(profile: PersonalStyleProfile) -> Dict[str, Any]:
    return {
        "selfie_ref": profile.selfie_ref,
        "eye_color": profile.eye_color,
        "hair_tone": profile.hair_tone,
        "skin_tone": profile.skin_tone,
        "face_shape": profile.face_shape,
        "palette": {
            "name": profile.palette.name,
            "description": profile.palette.description,
            "colors": list(profile.palette.colors),
            "suggestions": list(profile.palette.suggestions),
        },
    }


def encode_calendar(assignments: Mapping[date, str]) -> Dict[str, str]:
    return {day.isoformat(): look_id for day, look_id in sorted(assignments.items())}


def _records(raw: Any, kind: str) -> List[Any]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        logger.warning("Expected a list of %s records, got %s", kind, type(raw).__name__)
        return []
    return raw


def decode_items(raw: Any) -> List[ClassifiedItem]:
    items: List[ClassifiedItem] = []
    for index, entry in enumerate(_records(raw, "item")):
        try:
            record = ItemRecord.model_validate(entry)
        except ValidationError as exc:
            logger.warning("Skipping unreadable closet item #%s: %s", index, exc.errors())
            continue
        items.append(
            ClassifiedItem(
                id=record.id,
                source_ref=record.source_ref,
                category=parse_category(record.category),
                styles=tuple(parse_styles(record.styles)),
                notes=record.notes,
                color_tags=tuple(record.color_tags),
            )
        )
    return items


def decode_looks(raw: Any) -> List[StoredLook]:
    looks: List[StoredLook] = []
    for index, entry in enumerate(_records(raw, "look")):
        try:
            record = LookRecord.model_validate(entry)
        except ValidationError as exc:
            logger.warning("Skipping unreadable look #%s: %s", index, exc.errors())
            continue
        looks.append(
            StoredLook(
                id=record.id,
                style=record.style,
                piece_ids=tuple(record.piece_ids),
                narrative=record.narrative,
                highlights=tuple(record.highlights),
                advantages=tuple(record.advantages),
            )
        )
    return looks


def decode_profile(raw: Any) -> Optional[PersonalStyleProfile]:
    if raw is None:
        return None
    try:
        record = ProfileRecord.model_validate(raw)
    except ValidationError as exc:
        logger.warning("Discarding unreadable personal profile: %s", exc.errors())
        return None
    return PersonalStyleProfile(
        selfie_ref=record.selfie_ref,
        palette=PersonalPalette(
            name=record.palette.name,
            description=record.palette.description,
            colors=tuple(color.upper() for color in record.palette.colors),
            suggestions=tuple(record.palette.suggestions),
        ),
        eye_color=record.eye_color,
        hair_tone=record.hair_tone,
        skin_tone=record.skin_tone,
        face_shape=record.face_shape,
    )


def decode_calendar(raw: Any) -> Dict[date, str]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        logger.warning("Expected a calendar mapping, got %s", type(raw).__name__)
        return {}
    assignments: Dict[date, str] = {}
    for key, look_id in raw.items():
        if not isinstance(look_id, str) or not look_id.strip():
            logger.warning("Skipping calendar entry %s without a look id", key)
            continue
        try:
            day = date.fromisoformat(str(key))
        except ValueError:
            logger.warning("Skipping calendar entry with invalid date %r", key)
            continue
        assignments[day] = look_id
    return assignments


def rebuild_looks(closet: Sequence[ClassifiedItem], stored: Iterable[StoredLook]) -> List[StyledLook]:
    """Resolve stored looks against the closet; looks with missing pieces are dropped."""

    by_id = {item.id: item for item in closet}
    looks: List[StyledLook] = []
    for entry in stored:
        missing = [piece_id for piece_id in entry.piece_ids if piece_id not in by_id]
        if missing or len(entry.piece_ids) < MIN_LOOK_PIECES:
            logger.warning(
                "Dropping look %s: %s of %s pieces unavailable",
                entry.id,
                len(missing),
                len(entry.piece_ids),
            )
            continue
        looks.append(
            StyledLook(
                id=entry.id,
                style=entry.style,
                pieces=tuple(by_id[piece_id] for piece_id in entry.piece_ids),
                narrative=entry.narrative,
                highlights=entry.highlights,
                advantages=entry.advantages,
            )
        )
    return looks


def rebuild_calendar(assignments: Mapping[date, str], looks: Iterable[StyledLook]) -> Dict[date, str]:
    """Keep only calendar entries that still point at a known look."""

    known = {look.id for look in looks}
    kept = {day: look_id for day, look_id in assignments.items() if look_id in known}
    if len(kept) != len(assignments):
        logger.warning("Dropped %s calendar entries for unknown looks", len(assignments) - len(kept))
    return kept


__all__ = [
    "StoredLook",
    "argb_to_hex",
    "encode_item",
    "encode_look",
    "encode_profile",
    "encode_calendar",
    "decode_items",
    "decode_looks",
    "decode_profile",
    "decode_calendar",
    "rebuild_looks",
    "rebuild_calendar",
]
