"""Classified closet item model."""

from __future__ import annotations

import dataclasses
import uuid
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Tuple

from models.knowledge_base import NEUTRAL_COLOR, fallback_styles
from models.taxonomy import Category, FashionStyle, parse_category, parse_styles


def new_item_id() -> str:
    """Fresh unique identifier for a closet item."""

    return str(uuid.uuid4())


def _clean_colors(values: Iterable[Any]) -> Tuple[str, ...]:
    cleaned = []
    for value in values or ():
        text = str(value).strip()
        if text and text not in cleaned:
            cleaned.append(text)
    return tuple(cleaned)


@dataclass(frozen=True)
class ClassifiedItem:
    """A photographed garment after classification.

    ``styles`` and ``color_tags`` are never empty: missing styles fall back to
    the category defaults and missing colours to ``Neutral``.
    """

    source_ref: str
    category: Category
    styles: Tuple[FashionStyle, ...]
    notes: Optional[str] = None
    color_tags: Tuple[str, ...] = (NEUTRAL_COLOR,)
    id: str = field(default_factory=new_item_id)

    def __post_init__(self) -> None:
        category = parse_category(self.category)
        styles = tuple(parse_styles(self.styles)) or tuple(fallback_styles(category))
        colors = _clean_colors(self.color_tags) or (NEUTRAL_COLOR,)
        notes = self.notes.strip() if isinstance(self.notes, str) else None
        object.__setattr__(self, "category", category)
        object.__setattr__(self, "styles", styles)
        object.__setattr__(self, "color_tags", colors)
        object.__setattr__(self, "notes", notes or None)
        object.__setattr__(self, "source_ref", str(self.source_ref))

    @property
    def display_name(self) -> str:
        """Notes when present, otherwise the category name."""

        return self.notes or self.category.value

    def replace_piece(self, **changes: Any) -> "ClassifiedItem":
        """Return an edited copy that keeps this item's id."""

        changes.pop("id", None)
        return dataclasses.replace(self, **changes)


__all__ = ["ClassifiedItem", "new_item_id"]
