"""Purchase review: how well prospective pieces fit the existing closet."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple, TypeVar

from logic.garment_classifier import MimeTypeLookup, classify_items
from models.closet_item import ClassifiedItem
from models.taxonomy import Category, style_info

logger = logging.getLogger(__name__)

MAX_PAIRINGS = 5

T = TypeVar("T")


class ShoppingScope(str, Enum):
    ITEM = "item"
    OUTFIT = "outfit"


@dataclass(frozen=True)
class ShoppingReview:
    title: str
    positives: Tuple[str, ...]
    negatives: Tuple[str, ...]
    pairings: Tuple[str, ...]
    preview_refs: Tuple[str, ...]


def _distinct(values: Iterable[T]) -> List[T]:
    return list(dict.fromkeys(values))


def evaluate_purchase(
    source_refs: Sequence[str],
    closet: Sequence[ClassifiedItem],
    scope: ShoppingScope = ShoppingScope.ITEM,
    mime_type_lookup: MimeTypeLookup | None = None,
) -> Optional[ShoppingReview]:
    """Classify candidate purchases and compare them against ``closet``.

    Returns ``None`` when there is nothing to review.
    """

    refs = [ref for ref in source_refs if ref and ref.strip()]
    if not refs:
        return None
    analyzed = classify_items(refs, mime_type_lookup=mime_type_lookup)

    styles = _distinct(style for item in analyzed for style in item.styles)
    colors = _distinct(color for item in analyzed for color in item.color_tags)
    categories = [item.category for item in analyzed]
    style_titles = [style_info(style).title for style in styles]

    positives: List[str] = []
    negatives: List[str] = []
    pairings: List[str] = []

    if style_titles:
        positives.append(f"Fits the {' · '.join(style_titles)} style")
    if colors:
        positives.append(f"Colours: {' · '.join(colors)}")
    if scope == ShoppingScope.OUTFIT:
        positives.append(f"A ready outfit of {len(categories)} pieces")

    if len(colors) <= 1:
        negatives.append("A monotone colour scheme: consider a contrasting accent")
    if scope == ShoppingScope.OUTFIT:
        if not any(category in (Category.TOPS, Category.DRESSES) for category in categories):
            negatives.append("Missing a top to complete the outfit")
        if not any(category in (Category.BOTTOMS, Category.DRESSES) for category in categories):
            negatives.append("Missing bottoms to complete the outfit")
        if Category.SHOES not in categories:
            negatives.append("Missing shoes to complete the outfit")

    style_set, color_set = set(styles), set(colors)
    matching = [
        item
        for item in closet
        if style_set.intersection(item.styles) or color_set.intersection(item.color_tags)
    ]
    matching = list({item.id: item for item in matching}.values())
    if not matching:
        negatives.append("Nothing in your closet pairs with this yet")
        pairings.append("No pairings found in your closet")
    else:
        for item in matching[:MAX_PAIRINGS]:
            pairings.append(f"Pairs with {item.display_name} ({item.category.value})")

    primary = analyzed[0]
    if scope == ShoppingScope.ITEM:
        title = f"Review: {primary.display_name}"
    else:
        title = f"Outfit review: {style_titles[0] if style_titles else 'outfit'}"

    logger.info(
        "Reviewed %s candidate pieces (%s) against %s closet items, %s pairings",
        len(analyzed),
        scope.value,
        len(closet),
        len(matching),
    )
    return ShoppingReview(
        title=title,
        positives=tuple(_distinct(positives)),
        negatives=tuple(_distinct(negatives)),
        pairings=tuple(_distinct(pairings)),
        preview_refs=tuple(refs),
    )


__all__ = ["ShoppingScope", "ShoppingReview", "evaluate_purchase", "MAX_PAIRINGS"]
