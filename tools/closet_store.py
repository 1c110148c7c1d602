"""Closet storage abstraction and a single-file JSON implementation."""
from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from models.closet_item import ClassifiedItem
from models.look import StyledLook
from models.style_profile import PersonalStyleProfile
from tools.record_codec import (
    decode_calendar,
    decode_items,
    decode_looks,
    decode_profile,
    encode_calendar,
    encode_item,
    encode_look,
    encode_profile,
    rebuild_calendar,
    rebuild_looks,
)

logger = logging.getLogger(__name__)

CLOSET_KEY = "closet_items"
LOOKS_KEY = "styled_looks"
PROFILE_KEY = "personal_profile"
CALENDAR_KEY = "look_calendar"


class ClosetStore:
    """Persistence interface for the closet, saved looks, profile and calendar."""

    def load_items(self) -> List[ClassifiedItem]:
        raise NotImplementedError

    def save_items(self, items: Iterable[ClassifiedItem]) -> None:
        raise NotImplementedError

    def load_looks(self) -> List[StyledLook]:
        raise NotImplementedError

    def save_looks(self, looks: Iterable[StyledLook]) -> None:
        raise NotImplementedError

    def load_profile(self) -> Optional[PersonalStyleProfile]:
        raise NotImplementedError

    def save_profile(self, profile: Optional[PersonalStyleProfile]) -> None:
        raise NotImplementedError

    def load_calendar(self) -> Dict[date, str]:
        raise NotImplementedError

    def save_calendar(self, assignments: Mapping[date, str]) -> None:
        raise NotImplementedError

    def add_items(self, items: Iterable[ClassifiedItem]) -> List[ClassifiedItem]:
        """Append items whose ``source_ref`` is not stored yet; returns the ones added."""

        current = self.load_items()
        known_refs = {item.source_ref for item in current}
        added: List[ClassifiedItem] = []
        for item in items:
            if item.source_ref in known_refs:
                logger.info("Skipping duplicate closet item %s", item.id)
                continue
            known_refs.add(item.source_ref)
            added.append(item)
        if added:
            self.save_items(current + added)
        return added

    def replace_item(self, item: ClassifiedItem) -> bool:
        """Swap the stored item with the same id; saved looks pick up the edit."""

        current = self.load_items()
        if not any(existing.id == item.id for existing in current):
            return False
        looks = self.load_looks()
        self.save_items([item if existing.id == item.id else existing for existing in current])
        self.save_looks(
            StyledLook(
                id=look.id,
                style=look.style,
                pieces=tuple(item if piece.id == item.id else piece for piece in look.pieces),
                narrative=look.narrative,
                highlights=look.highlights,
                advantages=look.advantages,
            )
            for look in looks
        )
        return True

    def remove_items_by_source(self, source_refs: Iterable[str]) -> int:
        """Delete items by reference along with the looks and calendar days using them."""

        refs = set(source_refs)
        current = self.load_items()
        kept = [item for item in current if item.source_ref not in refs]
        removed_ids = {item.id for item in current if item.source_ref in refs}
        if not removed_ids:
            return 0
        looks = [look for look in self.load_looks() if not removed_ids.intersection(look.piece_ids)]
        calendar = rebuild_calendar(self.load_calendar(), looks)
        self.save_items(kept)
        self.save_looks(looks)
        self.save_calendar(calendar)
        logger.info("Removed %s closet items", len(removed_ids))
        return len(removed_ids)


class JSONClosetStore(ClosetStore):
    """Stores every collection under its own key of one JSON document.

    A key is removed when its collection is saved empty. A missing or corrupt
    document reads as empty collections.
    """

    def __init__(self, path: str | Path = "data/dressup_state.json") -> None:
        self.path = Path(path)
        if self.path.parent and not self.path.parent.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            document = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as exc:
            logger.warning("Closet document %s unreadable, starting empty: %s", self.path, exc)
            return {}
        if not isinstance(document, dict):
            logger.warning("Closet document %s is not an object, starting empty", self.path)
            return {}
        return document

    def _write(self, document: Dict[str, Any]) -> None:
        self.path.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")

    def _save_key(self, key: str, value: Any) -> None:
        document = self._read()
        if value:
            document[key] = value
        else:
            document.pop(key, None)
        self._write(document)

    def load_items(self) -> List[ClassifiedItem]:
        return decode_items(self._read().get(CLOSET_KEY))

    def save_items(self, items: Iterable[ClassifiedItem]) -> None:
        self._save_key(CLOSET_KEY, [encode_item(item) for item in items])

    def load_looks(self) -> List[StyledLook]:
        document = self._read()
        closet = decode_items(document.get(CLOSET_KEY))
        return rebuild_looks(closet, decode_looks(document.get(LOOKS_KEY)))

    def save_looks(self, looks: Iterable[StyledLook]) -> None:
        self._save_key(LOOKS_KEY, [encode_look(look) for look in looks])

    def load_profile(self) -> Optional[PersonalStyleProfile]:
        return decode_profile(self._read().get(PROFILE_KEY))

    def save_profile(self, profile: Optional[PersonalStyleProfile]) -> None:
        self._save_key(PROFILE_KEY, encode_profile(profile) if profile is not None else None)

    def load_calendar(self) -> Dict[date, str]:
        return rebuild_calendar(decode_calendar(self._read().get(CALENDAR_KEY)), self.load_looks())

    def save_calendar(self, assignments: Mapping[date, str]) -> None:
        self._save_key(CALENDAR_KEY, encode_calendar(assignments))


__all__ = [
    "ClosetStore",
    "JSONClosetStore",
    "CLOSET_KEY",
    "LOOKS_KEY",
    "PROFILE_KEY",
    "CALENDAR_KEY",
]
