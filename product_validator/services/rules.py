"""Static ban lists used by the rule classifier.

All tokens are lower-case and matched as substrings.
"""
from typing import Mapping, Optional, Tuple

from product_validator.models import IngredientForm

BANNED_CATEGORY_TOKENS: Tuple[str, ...] = (
    "condiment",
    "sauce",
    "mayonnaise",
    "aioli",
    "dessert",
    "chocolate",
    "drink",
    "energy drink",
    "alcohol",
    "pet",
    "cleaning",
    "vitamin",
    "meal kit",
    "ready meal",
)

BANNED_TITLE_TOKENS: Tuple[str, ...] = (
    "mayonnaise",
    "aioli",
    "dressing",
    "sauce kit",
    "meal kit",
    "powdered",
    "protein powder",
    "dessert",
)

FORM_BANS: Mapping[IngredientForm, Tuple[str, ...]] = {
    IngredientForm.RAW: ("pasteurised whites", "liquid egg", "mayonnaise", "aioli", "powder"),
    IngredientForm.FRESH: ("powder", "kit", "sauce"),
    IngredientForm.DRY: ("sauce", "kit", "ready meal"),
    IngredientForm.FROZEN: ("powder", "dried", "kit"),
    IngredientForm.COOKED: ("uncooked", "powder", "kit"),
    IngredientForm.CANNED: ("frozen", "powder", "dried"),
    IngredientForm.LIQUID: ("powder", "tablet", "capsule"),
    IngredientForm.POWDER: ("liquid", "ready to drink", "syrup"),
}

# Exhaustive over IngredientForm.
_missing_forms = set(IngredientForm) - set(FORM_BANS)
if _missing_forms:
    raise RuntimeError(f"FORM_BANS has no entry for: {sorted(f.value for f in _missing_forms)}")


def first_match(text: str, tokens: Tuple[str, ...]) -> Optional[str]:
    """Return the first token found in `text` (case-insensitive), else None."""
    haystack = text.lower()
    for token in tokens:
        if token in haystack:
            return token
    return None
