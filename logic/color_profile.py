"""Deterministic personal colour profile derived from a selfie reference.

No image content is inspected: every attribute is picked from a fixed table
by a stable hash of the reference, so the same selfie always maps to the same
profile and different selfies may collide.
"""

from __future__ import annotations

import logging
from typing import Tuple

from models.style_profile import PersonalPalette, PersonalStyleProfile

logger = logging.getLogger(__name__)

PALETTES: Tuple[PersonalPalette, ...] = (
    PersonalPalette(
        name="Cool summer",
        description="Soft cool shades lift a light complexion and pastel accessories.",
        colors=("#F6A7C1", "#B79EFF", "#A6D1FF", "#8DE8D9"),
        suggestions=(
            "Reach for silver jewellery",
            "Pair sky blues with lavender",
            "Choose cool pinks for make-up",
        ),
    ),
    PersonalPalette(
        name="Warm autumn",
        description="Rich, deep colours bring out golden highlights and darker hair.",
        colors=("#E6B980", "#CD6B3A", "#9A4D2E", "#5E3D31"),
        suggestions=(
            "Wear camel coats",
            "Add olive green",
            "Finish the look with gold jewellery",
        ),
    ),
    PersonalPalette(
        name="Muted spring",
        description="Warm-based pastels add freshness and lightness.",
        colors=("#F9D5E5", "#E2F0CB", "#B3D6FF", "#FFF5BA"),
        suggestions=(
            "Build a total pastel look",
            "Pick light-wash denim",
            "Mix beige with powder pink",
        ),
    ),
    PersonalPalette(
        name="Winter contrast",
        description="Strong contrasts, icy blues and deep black create an elegant effect.",
        colors=("#0E1D4A", "#6D83F2", "#EAF0FF", "#0A0A0A"),
        suggestions=(
            "Pair black with cobalt",
            "Add silver accents",
            "Go for high-contrast make-up",
        ),
    ),
)

EYE_COLORS: Tuple[str, ...] = ("hazel", "green", "blue", "grey", "amber")
HAIR_TONES: Tuple[str, ...] = (
    "cool blonde",
    "golden blonde",
    "light brown",
    "chocolate brown",
    "glossy black",
    "copper blonde",
)
SKIN_TONES: Tuple[str, ...] = ("fair porcelain", "neutral beige", "olive", "deep brown", "cool beige")
FACE_SHAPES: Tuple[str, ...] = ("oval", "heart", "round", "diamond", "square")


def stable_hash(value: str) -> int:
    """32-bit signed polynomial string hash, independent of ``PYTHONHASHSEED``."""

    result = 0
    for char in value:
        result = (31 * result + ord(char)) & 0xFFFFFFFF
    return result - (1 << 32) if result & 0x80000000 else result


def analyze_selfie(selfie_ref: str) -> PersonalStyleProfile:
    """Derive palette, eye colour, hair tone, skin tone and face shape for a selfie."""

    value = abs(stable_hash(str(selfie_ref)))
    profile = PersonalStyleProfile(
        selfie_ref=str(selfie_ref),
        palette=PALETTES[value % len(PALETTES)],
        eye_color=EYE_COLORS[value % len(EYE_COLORS)],
        hair_tone=HAIR_TONES[(value // 3) % len(HAIR_TONES)],
        skin_tone=SKIN_TONES[(value // 5) % len(SKIN_TONES)],
        face_shape=FACE_SHAPES[(value // 7) % len(FACE_SHAPES)],
    )
    logger.info("Derived colour profile with palette '%s'", profile.palette.name)
    return profile


__all__ = ["PALETTES", "EYE_COLORS", "HAIR_TONES", "SKIN_TONES", "FACE_SHAPES", "stable_hash", "analyze_selfie"]
