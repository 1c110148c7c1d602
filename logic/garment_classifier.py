"""Turn photographed garment references into classified closet items."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional
from urllib.parse import unquote, urlsplit

from models.closet_item import ClassifiedItem
from models.knowledge_base import detect_category, detect_color_tags, detect_styles

logger = logging.getLogger(__name__)

MimeTypeLookup = Callable[[str], Optional[str]]


def _last_path_segment(source_ref: str) -> str:
    path = urlsplit(source_ref).path or source_ref
    segments = [segment for segment in path.split("/") if segment]
    return unquote(segments[-1]) if segments else ""


def resolve_label(source_ref: str, mime_type_lookup: MimeTypeLookup | None = None) -> str:
    """Best-effort label for a source reference.

    Uses the last path segment, then the declared MIME type, then ``""``.
    Never raises.
    """

    last = _last_path_segment(source_ref or "")
    if last.strip():
        return last
    if mime_type_lookup is None:
        return ""
    try:
        return mime_type_lookup(source_ref) or ""
    except Exception as exc:  # noqa: BLE001
        logger.warning("MIME type lookup failed, using empty label: %s", exc)
        return ""


def prettify_label(label: str) -> str:
    """Human-friendly display label: no path, no extension, spaces, capitalised."""

    name = (label or "").rsplit("/", 1)[-1]
    if "." in name:
        name = name.rsplit(".", 1)[0]
    name = name.replace("_", " ").replace("-", " ").strip()
    if name and name[0].islower():
        name = name[0].upper() + name[1:]
    return name


def classify_item(
    source_ref: str,
    label: str | None = None,
    mime_type_lookup: MimeTypeLookup | None = None,
) -> ClassifiedItem:
    """Classify a garment from its reference and (optionally pre-resolved) label."""

    raw_label = label if label is not None else resolve_label(source_ref, mime_type_lookup)
    category = detect_category(raw_label)
    styles = detect_styles(raw_label, category)
    colors = detect_color_tags(raw_label)
    pretty = prettify_label(raw_label)
    item = ClassifiedItem(
        source_ref=source_ref,
        category=category,
        styles=tuple(styles),
        notes=pretty or None,
        color_tags=tuple(colors),
    )
    logger.debug(
        "Classified item %s as %s with styles=%s colors=%s",
        item.id,
        category.value,
        [style.value for style in styles],
        colors,
    )
    return item


def classify_items(
    source_refs: Iterable[str], mime_type_lookup: MimeTypeLookup | None = None
) -> List[ClassifiedItem]:
    """Classify a batch of references preserving order."""

    items = [classify_item(ref, mime_type_lookup=mime_type_lookup) for ref in source_refs]
    logger.info("Classified %s items", len(items))
    return items


__all__ = ["resolve_label", "prettify_label", "classify_item", "classify_items", "MimeTypeLookup"]
