"""Canonical garment categories and aesthetic styles.

This module centralises the closed sets the engine works with. Declaration
order matters: category detection walks :class:`Category` in order and style
fallbacks take the leading entries of :class:`FashionStyle`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)


class Category(str, Enum):
    """Garment type."""

    TOPS = "tops"
    BOTTOMS = "bottoms"
    DRESSES = "dresses"
    OUTERWEAR = "outerwear"
    SHOES = "shoes"
    ACCESSORIES = "accessories"
    UNKNOWN = "unknown"


class FashionStyle(str, Enum):
    """Aesthetic style a garment or look belongs to."""

    CLASSIC = "classic"
    SMART_CASUAL = "smart_casual"
    CASUAL = "casual"
    MINIMALIST = "minimalist"
    SPORTY = "sporty"
    BOHO = "boho"
    GLAMOUR = "glamour"
    ROMANTIC = "romantic"
    STREETWEAR = "streetwear"
    ROCK = "rock"


@dataclass(frozen=True)
class StyleInfo:
    """Display metadata for a style."""

    title: str
    description: str
    tone: str


_STYLE_INFO: Dict[FashionStyle, StyleInfo] = {
    FashionStyle.CLASSIC: StyleInfo(
        title="Classic",
        description="Timeless cuts, tailored lines and a restrained palette.",
        tone="elegance and timeless lines",
    ),
    FashionStyle.SMART_CASUAL: StyleInfo(
        title="Smart casual",
        description="Relaxed tailoring that works from the office to dinner.",
        tone="easy elegance made for a meeting",
    ),
    FashionStyle.CASUAL: StyleInfo(
        title="Casual",
        description="Comfortable everyday basics.",
        tone="everyday comfort",
    ),
    FashionStyle.MINIMALIST: StyleInfo(
        title="Minimalist",
        description="Clean forms, few details and calm neutrals.",
        tone="clean forms and a calm palette",
    ),
    FashionStyle.SPORTY: StyleInfo(
        title="Sporty",
        description="Athleisure pieces built for movement.",
        tone="athleisure energy",
    ),
    FashionStyle.BOHO: StyleInfo(
        title="Boho",
        description="Flowing fabrics, fringes, embroidery and lace.",
        tone="artistic ease",
    ),
    FashionStyle.GLAMOUR: StyleInfo(
        title="Glamour",
        description="Satin, shine and evening silhouettes.",
        tone="evening sparkle",
    ),
    FashionStyle.ROMANTIC: StyleInfo(
        title="Romantic",
        description="Florals, ruffles, pleats and soft pastels.",
        tone="subtle romance",
    ),
    FashionStyle.STREETWEAR: StyleInfo(
        title="Streetwear",
        description="Oversized hoodies, cargo pants and sneakers.",
        tone="urban character",
    ),
    FashionStyle.ROCK: StyleInfo(
        title="Rock",
        description="Leather, studs and black.",
        tone="edgy self-confidence",
    ),
}


def style_info(style: FashionStyle) -> StyleInfo:
    """Return title, description and narrative tone for a style."""

    return _STYLE_INFO[style]


def parse_category(value: object) -> Category:
    """Resolve a stored category, falling back to :attr:`Category.UNKNOWN`."""

    if isinstance(value, Category):
        return value
    key = str(value or "").strip().lower()
    try:
        return Category(key)
    except ValueError:
        logger.debug("Unknown category '%s', using unknown", value)
        return Category.UNKNOWN


def parse_style(value: object) -> Optional[FashionStyle]:
    """Resolve a style name or value; ``None`` when it is not part of the taxonomy."""

    if isinstance(value, FashionStyle):
        return value
    key = str(value or "").strip().lower().replace(" ", "_").replace("-", "_")
    try:
        return FashionStyle(key)
    except ValueError:
        return None


def parse_styles(values: Iterable[object]) -> List[FashionStyle]:
    """Resolve and de-duplicate style names, silently dropping unknown ones."""

    resolved: List[FashionStyle] = []
    for value in values:
        style = parse_style(value)
        if style is not None and style not in resolved:
            resolved.append(style)
    return resolved


__all__ = [
    "Category",
    "FashionStyle",
    "StyleInfo",
    "style_info",
    "parse_category",
    "parse_style",
    "parse_styles",
]
