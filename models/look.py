"""Styled look model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

from models.closet_item import ClassifiedItem
from models.taxonomy import FashionStyle

MIN_LOOK_PIECES = 2
MAX_LOOK_PIECES = 5


def look_identity(pieces: Iterable[ClassifiedItem]) -> str:
    """Order-independent identity built from the sorted piece ids."""

    return "|".join(sorted(piece.id for piece in pieces))


@dataclass(frozen=True)
class StyledLook:
    """A complete outfit with its explanatory text."""

    id: str
    style: FashionStyle
    pieces: Tuple[ClassifiedItem, ...]
    narrative: str
    highlights: Tuple[str, ...] = ()
    advantages: Tuple[str, ...] = ()

    @property
    def piece_ids(self) -> Tuple[str, ...]:
        return tuple(piece.id for piece in self.pieces)


__all__ = ["StyledLook", "look_identity", "MIN_LOOK_PIECES", "MAX_LOOK_PIECES"]
