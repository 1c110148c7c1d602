"""Combinatorial look assembly with highlight and advantage explanations."""
from __future__ import annotations

import logging
import random
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from models.closet_item import ClassifiedItem
from models.knowledge_base import NEUTRAL_COLOR, narrative
from models.look import MAX_LOOK_PIECES, MIN_LOOK_PIECES, StyledLook, look_identity
from models.style_profile import PersonalStyleProfile
from models.taxonomy import Category, FashionStyle

logger = logging.getLogger(__name__)

DEFAULT_LOOK_LIMIT = 5
MAX_HIGHLIGHTS = 4
MAX_ADVANTAGES = 4
OUTFIT_CATEGORIES = (
    Category.TOPS,
    Category.BOTTOMS,
    Category.DRESSES,
    Category.OUTERWEAR,
    Category.SHOES,
    Category.ACCESSORIES,
)


def available_styles(items: Iterable[ClassifiedItem]) -> List[FashionStyle]:
    """Distinct styles across the closet in first-seen order."""

    styles: List[FashionStyle] = []
    for item in items:
        for style in item.styles:
            if style not in styles:
                styles.append(style)
    return styles


def group_by_category(items: Iterable[ClassifiedItem]) -> Dict[Category, List[ClassifiedItem]]:
    grouped: Dict[Category, List[ClassifiedItem]] = {category: [] for category in OUTFIT_CATEGORIES}
    for item in items:
        if item.category in grouped:
            grouped[item.category].append(item)
    return grouped


def _pick(options: Sequence[ClassifiedItem], rng: random.Random) -> Optional[ClassifiedItem]:
    return options[rng.randrange(len(options))] if options else None


def _augment(
    base: List[ClassifiedItem], grouped: Dict[Category, List[ClassifiedItem]], rng: random.Random
) -> List[ClassifiedItem]:
    combo = list(base)
    for category in (Category.OUTERWEAR, Category.ACCESSORIES):
        extra = _pick(grouped[category], rng)
        if extra is not None:
            combo.append(extra)
    return combo


def build_combinations(
    grouped: Dict[Category, List[ClassifiedItem]], rng: random.Random
) -> List[List[ClassifiedItem]]:
    """Dress + shoes combos first, then top + bottom + shoes combos."""

    combinations: List[List[ClassifiedItem]] = []
    for dress in grouped[Category.DRESSES]:
        for shoe in grouped[Category.SHOES]:
            combinations.append(_augment([dress, shoe], grouped, rng))
    for top in grouped[Category.TOPS]:
        for bottom in grouped[Category.BOTTOMS]:
            for shoe in grouped[Category.SHOES]:
                combinations.append(_augment([top, bottom, shoe], grouped, rng))
    return combinations


def _dedupe(combinations: Iterable[List[ClassifiedItem]]) -> List[List[ClassifiedItem]]:
    seen = set()
    unique: List[List[ClassifiedItem]] = []
    for combo in combinations:
        key = look_identity(combo)
        if key in seen:
            continue
        seen.add(key)
        unique.append(combo)
    return unique


def generate_looks(
    items: Sequence[ClassifiedItem],
    target_style: FashionStyle,
    profile: PersonalStyleProfile | None = None,
    limit: int = DEFAULT_LOOK_LIMIT,
    rng: random.Random | None = None,
) -> List[StyledLook]:
    """Assemble up to ``limit`` looks whose pieces all carry ``target_style``.

    Returns an empty list when the closet is empty, nothing matches the style
    or the categories cannot form a dress + shoes or top + bottom + shoes base.
    All random draws in a call come from ``rng``.
    """

    rng = rng or random.Random()
    style_items = [item for item in items if target_style in item.styles]
    if not style_items:
        logger.info("No closet items carry style %s", target_style.value)
        return []

    grouped = group_by_category(style_items)
    combinations = build_combinations(grouped, rng)
    if not combinations:
        logger.info(
            "Insufficient category coverage for %s: %s",
            target_style.value,
            {category.value: len(values) for category, values in grouped.items()},
        )
        return []

    unique = _dedupe(combinations)
    rng.shuffle(unique)
    looks = [_build_look(combo, target_style, profile) for combo in unique[: max(limit, 0)]]
    logger.info(
        "Generated %s looks for %s from %s combinations (%s unique)",
        len(looks),
        target_style.value,
        len(combinations),
        len(unique),
    )
    return looks


def rebuild_look(
    pieces: Sequence[ClassifiedItem],
    style: FashionStyle,
    profile: PersonalStyleProfile | None = None,
    look_id: str | None = None,
) -> StyledLook:
    """Re-derive narrative and highlights for explicit pieces, keeping ``look_id`` if given.

    Raises ``ValueError`` unless there are 2 to 5 distinct pieces.
    """

    if not MIN_LOOK_PIECES <= len(pieces) <= MAX_LOOK_PIECES:
        raise ValueError(f"A look needs {MIN_LOOK_PIECES} to {MAX_LOOK_PIECES} pieces, got {len(pieces)}")
    if len({piece.id for piece in pieces}) != len(pieces):
        raise ValueError("A look cannot repeat a piece")
    return _build_look(list(pieces), style, profile, look_id=look_id)


def replace_piece(
    look: StyledLook,
    index: int,
    replacement: ClassifiedItem,
    profile: PersonalStyleProfile | None = None,
) -> StyledLook:
    """Swap the piece at ``index`` and rebuild the look under the same id."""

    pieces = list(look.pieces)
    if not 0 <= index < len(pieces):
        raise IndexError(f"Look {look.id} has no piece at index {index}")
    if any(piece.id == replacement.id for position, piece in enumerate(pieces) if position != index):
        raise ValueError(f"Item {replacement.id} is already part of look {look.id}")
    pieces[index] = replacement
    logger.info("Replaced piece %s in look %s", index, look.id)
    return rebuild_look(pieces, look.style, profile, look_id=look.id)


def alternatives_for_piece(piece: ClassifiedItem, closet: Iterable[ClassifiedItem]) -> List[ClassifiedItem]:
    """Closet items that could stand in for ``piece`` (same category)."""

    return [item for item in closet if item.category == piece.category]


def _build_look(
    pieces: List[ClassifiedItem],
    style: FashionStyle,
    profile: PersonalStyleProfile | None,
    look_id: str | None = None,
) -> StyledLook:
    names = [piece.notes for piece in pieces if piece.notes]
    if not names:
        names = [piece.category.value.lower() for piece in pieces]
    highlights, advantages = describe_highlights(pieces, profile)
    return StyledLook(
        id=look_id or look_identity(pieces),
        style=style,
        pieces=tuple(pieces),
        narrative=narrative(style, names),
        highlights=tuple(highlights),
        advantages=tuple(advantages),
    )


def _pretty_case(value: str) -> str:
    return value[:1].upper() + value[1:] if value[:1].islower() else value


def _clean(values: Iterable[str], cap: int) -> List[str]:
    cleaned: List[str] = []
    for value in values:
        if value and value.strip() and value not in cleaned:
            cleaned.append(value)
    return cleaned[:cap]


def describe_highlights(
    pieces: Sequence[ClassifiedItem], profile: PersonalStyleProfile | None
) -> Tuple[List[str], List[str]]:
    """Return ``(highlights, advantages)`` for a set of pieces."""

    highlights: List[str] = []
    advantages: List[str] = []

    all_colors = [color for piece in pieces for color in piece.color_tags] or [NEUTRAL_COLOR]
    distinct_colors = list(dict.fromkeys(all_colors))
    highlights.append(f"Colors: {' · '.join(distinct_colors[:3])}")

    top = next((p for p in pieces if p.category in (Category.TOPS, Category.DRESSES)), None)
    shoes = next((p for p in pieces if p.category == Category.SHOES), None)
    top_color = top.color_tags[0] if top and top.color_tags else None
    shoe_color = shoes.color_tags[0] if shoes and shoes.color_tags else None
    if top_color and top_color.strip() and shoe_color and shoe_color.strip():
        highlights.append(f"Top {_pretty_case(top_color)} × shoes {_pretty_case(shoe_color)}")

    if profile is not None:
        highlights.append(f"Eyes {profile.eye_color}")
        highlights.append(f"Hair {profile.hair_tone}")
        advantages.append(f"Brings out {profile.eye_color} eyes")
        advantages.append(f"Works with {profile.hair_tone} hair")
        advantages.append(f"Balances a {profile.face_shape} face shape")
        advantages.append(f"Consistent with the {profile.palette.name} palette")
        advantages.append(profile.palette.suggestions[0] if profile.palette.suggestions else "")
    else:
        advantages.append("Versatile for many occasions")

    advantages.append(f"Color accent: {distinct_colors[0]}")
    return _clean(highlights, MAX_HIGHLIGHTS), _clean(advantages, MAX_ADVANTAGES)


__all__ = [
    "DEFAULT_LOOK_LIMIT",
    "available_styles",
    "group_by_category",
    "build_combinations",
    "generate_looks",
    "rebuild_look",
    "replace_piece",
    "alternatives_for_piece",
    "describe_highlights",
]
