"""Keyword tables and matching rules used to classify garments.

Matching is plain ``lowercase + substring`` containment. There is no
tokenisation, so a keyword may hit inside an unrelated word ("blackout"
matches ``black``). Scores and fallbacks depend on those raw counts.
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from models.taxonomy import Category, FashionStyle, style_info

NEUTRAL_COLOR = "Neutral"

CATEGORY_KEYWORDS: Dict[Category, Tuple[str, ...]] = {
    Category.TOPS: ("bluz", "koszul", "t-shirt", "tshirt", "top", "golf", "sweter", "shirt"),
    Category.BOTTOMS: ("spodni", "jeans", "denim", "spódnic", "leggin", "leggins", "pants"),
    Category.DRESSES: ("sukien", "dress", "kombinezon"),
    Category.OUTERWEAR: ("płaszcz", "plaszcz", "marynark", "kurtk", "żakiet", "ramonesk", "kamizelk"),
    Category.SHOES: ("but", "sneaker", "trampk", "szpil", "loafer", "mokasyn", "boot", "obuw"),
    Category.ACCESSORIES: ("torb", "toreb", "pasek", "kapelusz", "okular", "chusta", "apaszk", "biż", "biz"),
    Category.UNKNOWN: (),
}

STYLE_KEYWORDS: Dict[FashionStyle, Tuple[str, ...]] = {
    FashionStyle.CLASSIC: ("marynark", "trencz", "koszul", "garnitur", "plis", "czarn", "biel"),
    FashionStyle.SMART_CASUAL: ("cygaret", "chinos", "mokasyn", "blezer", "żakiet", "plisowana", "koszulka polo"),
    FashionStyle.CASUAL: ("jeans", "denim", "basic", "t-shirt", "tshirt", "dres", "sweter", "cardigan", "bluza"),
    FashionStyle.MINIMALIST: ("beż", "bez", "szary", "golf", "prosty", "monochrom", "basic", "minimal"),
    FashionStyle.SPORTY: ("sport", "sneaker", "leggins", "trening", "dres", "technicz", "athleisure"),
    FashionStyle.BOHO: ("boho", "frędzl", "haft", "koronk", "maxi", "etno", "luźn"),
    FashionStyle.GLAMOUR: ("satyn", "błysk", "cek", "szpil", "wieczor", "koktajl", "futrz"),
    FashionStyle.ROMANTIC: ("kwiat", "falban", "plis", "pastel", "delikat", "koronk"),
    FashionStyle.STREETWEAR: ("oversize", "hoodie", "street", "cargo", "snapback", "crewneck"),
    FashionStyle.ROCK: ("skór", "ramonesk", "stud", "czarn", "metal", "rock"),
}

FALLBACK_STYLES: Dict[Category, Tuple[FashionStyle, ...]] = {
    Category.TOPS: (FashionStyle.CASUAL, FashionStyle.CLASSIC, FashionStyle.SMART_CASUAL),
    Category.BOTTOMS: (FashionStyle.CASUAL, FashionStyle.MINIMALIST, FashionStyle.SMART_CASUAL),
    Category.DRESSES: (FashionStyle.GLAMOUR, FashionStyle.ROMANTIC, FashionStyle.BOHO),
    Category.OUTERWEAR: (FashionStyle.CLASSIC, FashionStyle.STREETWEAR, FashionStyle.ROCK),
    Category.SHOES: (FashionStyle.CLASSIC, FashionStyle.CASUAL, FashionStyle.GLAMOUR),
    Category.ACCESSORIES: (FashionStyle.GLAMOUR, FashionStyle.BOHO, FashionStyle.MINIMALIST),
    Category.UNKNOWN: tuple(FashionStyle),
}

COLOR_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "Baby blue": ("baby blue", "błękit", "blekit", "blue", "turkus", "denim"),
    "Lilac": ("lili", "lilac", "fiolet", "lawend"),
    "Powder pink": ("róż", "roz", "pink", "blush"),
    "Beige": ("beż", "bez", "taupe", "camel", "karmel"),
    "White": ("biały", "bialy", "white", "krem"),
    "Black": ("czarn", "black", "grafit", "antracyt"),
    "Navy": ("granat", "navy", "kobalt"),
    "Green": ("ziel", "green", "oliwk", "emerald"),
    "Red": ("czerwie", "red", "bord", "wine"),
    "Gold": ("złot", "zlot", "gold", "miod"),
    "Silver": ("srebr", "silver", "platyn"),
}


def detect_category(label: str) -> Category:
    """Return the first category (in declared order) with a keyword hit."""

    lower = (label or "").lower()
    for category, keywords in CATEGORY_KEYWORDS.items():
        if any(keyword in lower for keyword in keywords):
            return category
    return Category.UNKNOWN


def fallback_styles(category: Category) -> List[FashionStyle]:
    """Leading two fallback styles for a category."""

    styles = FALLBACK_STYLES.get(category) or tuple(FashionStyle)
    return list(styles[:2])


def detect_styles(label: str, category: Category) -> List[FashionStyle]:
    """Return every style tied at the best keyword score, or the category fallback."""

    lower = (label or "").lower()
    scored = {
        style: sum(1 for keyword in keywords if keyword in lower)
        for style, keywords in STYLE_KEYWORDS.items()
    }
    max_score = max(scored.values(), default=0)
    if max_score > 0:
        return [style for style, score in scored.items() if score == max_score]
    return fallback_styles(category)


def detect_color_tags(label: str) -> List[str]:
    """Return the matched colour labels in table order, defaulting to ``Neutral``."""

    lower = (label or "").lower()
    matches = [
        color for color, keywords in COLOR_KEYWORDS.items() if any(keyword in lower for keyword in keywords)
    ]
    return matches or [NEUTRAL_COLOR]


def narrative(style: FashionStyle, highlighted_pieces: Sequence[str]) -> str:
    """Short story line combining the pieces with the style's tone."""

    pieces = ", ".join(highlighted_pieces)
    return f"Pairing {pieces} tells a story of {style_info(style).tone}."


__all__ = [
    "NEUTRAL_COLOR",
    "CATEGORY_KEYWORDS",
    "STYLE_KEYWORDS",
    "FALLBACK_STYLES",
    "COLOR_KEYWORDS",
    "detect_category",
    "detect_styles",
    "detect_color_tags",
    "fallback_styles",
    "narrative",
]
