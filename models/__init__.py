"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.closet_item import ClassifiedItem
from models.look import StyledLook, look_identity
from models.style_profile import PersonalPalette, PersonalStyleProfile

__all__ = [
    "ClassifiedItem",
    "StyledLook",
    "look_identity",
    "PersonalPalette",
    "PersonalStyleProfile",
]
