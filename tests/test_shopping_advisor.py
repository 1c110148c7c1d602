"""Purchase review against the existing closet."""

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.garment_classifier import classify_items
from logic.shopping_advisor import ShoppingScope, evaluate_purchase


def test_no_candidates_gives_no_review() -> None:
    assert evaluate_purchase([], []) is None
    assert evaluate_purchase(["  "], []) is None


def test_single_item_review_against_empty_closet() -> None:
    review = evaluate_purchase(["content://shop/czarna-sukienka-satynowa.jpg"], [])

    assert review.title == "Review: Czarna sukienka satynowa"
    assert review.positives[0] == "Fits the Classic · Glamour · Rock style"
    assert "Colours: Black" in review.positives
    assert "A monotone colour scheme: consider a contrasting accent" in review.negatives
    assert "Nothing in your closet pairs with this yet" in review.negatives
    assert review.pairings == ("No pairings found in your closet",)
    assert review.preview_refs == ("content://shop/czarna-sukienka-satynowa.jpg",)


def test_outfit_review_flags_missing_pieces_and_lists_pairings() -> None:
    closet = classify_items(["content://closet/czarne-szpilki.jpg", "content://closet/jeans.jpg"])

    review = evaluate_purchase(
        ["content://shop/czarna-koszula.jpg"], closet, scope=ShoppingScope.OUTFIT
    )

    assert review.title == "Outfit review: Classic"
    assert "A ready outfit of 1 pieces" in review.positives
    assert "Missing bottoms to complete the outfit" in review.negatives
    assert "Missing shoes to complete the outfit" in review.negatives
    assert "Missing a top to complete the outfit" not in review.negatives
    assert review.pairings == ("Pairs with Czarne szpilki (shoes)",)
