"""Personal colour palette and style profile models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class PersonalPalette:
    """Named set of representative colours with styling suggestions."""

    name: str
    description: str
    colors: Tuple[str, ...]
    suggestions: Tuple[str, ...]


@dataclass(frozen=True)
class PersonalStyleProfile:
    """Colouring profile derived from a selfie reference."""

    selfie_ref: str
    palette: PersonalPalette
    eye_color: str
    hair_tone: str
    skin_tone: str
    face_shape: str

    @property
    def keyword_summary(self) -> List[str]:
        return [
            f"Eyes {self.eye_color}",
            f"Skin {self.skin_tone}",
            f"Palette {self.palette.name}",
        ]


__all__ = ["PersonalPalette", "PersonalStyleProfile"]
