# recipe_assistant/core/allergens.py
"""
Local allergen screen applied to generated recipes.

This is a plain case-insensitive substring match over the ingredient lines.
It is a best-effort textual check, not a guarantee:
- false positives: allergy "egg" matches "eggplant";
- false negatives: synonyms ("groundnut" for peanut), other languages,
  allergens hidden inside compound ingredients ("pesto" for pine nuts).
Changing the matching rules changes what users are warned about, so keep it simple.
"""
from __future__ import annotations

from typing import List, Sequence

from .models import Recipe

NO_WARNING = "None"


def find_allergens(ingredients: Sequence[str], allergies: Sequence[str]) -> List[str]:
    """Return the allergies (user spelling, user order) found in any ingredient line."""
    haystack = "\n".join(ingredients).lower()
    found: List[str] = []
    for allergy in allergies:
        needle = allergy.strip().lower()
        if needle and needle in haystack:
            found.append(allergy.strip())
    return found


def format_warning(matches: Sequence[str]) -> str:
    return f"WARNING: contains {', '.join(matches)}"


def validate_recipes(recipes: Sequence[Recipe], allergies: Sequence[str]) -> List[Recipe]:
    """Annotate copies of `recipes` with isSafe / allergenWarning.

    With no allergies every recipe is safe and keeps the model's own warning text.
    Otherwise the local scan decides both fields.
    """
    out: List[Recipe] = []
    for recipe in recipes:
        if not allergies:
            out.append(recipe.model_copy(update={
                "is_safe": True,
                "allergen_warning": recipe.allergen_warning or NO_WARNING,
            }))
            continue
        matches = find_allergens(recipe.ingredients, allergies)
        if matches:
            out.append(recipe.model_copy(update={"is_safe": False, "allergen_warning": format_warning(matches)}))
        else:
            out.append(recipe.model_copy(update={"is_safe": True, "allergen_warning": NO_WARNING}))
    return out
