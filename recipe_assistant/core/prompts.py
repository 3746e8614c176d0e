# recipe_assistant/core/prompts.py
"""Prompt templates sent to the text model.

Both builders are pure: the same arguments always render the same string.
"""
from __future__ import annotations

from typing import Sequence

from .models import PantryItem

NONE_SPECIFIED = "none specified"

RECIPE_SCHEMA_EXAMPLE = """{
  "recipes": [
    {
      "name": "Garlic Butter Chicken",
      "description": "Juicy pan-seared chicken in a garlic butter sauce.",
      "prepTime": "10 minutes",
      "cookTime": "20 minutes",
      "difficulty": "easy",
      "servings": 4,
      "ingredients": ["4 chicken breasts", "3 tbsp butter", "4 cloves garlic, minced"],
      "instructions": ["Season the chicken with salt and pepper.", "Sear in butter until golden, about 6 minutes per side.", "Add garlic and cook for 1 minute more."],
      "allergenWarning": "None",
      "dietaryTags": ["gluten-free", "high-protein"]
    }
  ]
}"""

RECEIPT_SCHEMA_EXAMPLE = """[
  {"name": "ground beef", "quantity": "2.5 lb"},
  {"name": "bananas", "quantity": "6"},
  {"name": "milk", "quantity": ""}
]"""


def _enumerate(lines: Sequence[str]) -> str:
    return "\n".join(f"{i}. {line}" for i, line in enumerate(lines, start=1))


def _ingredient_line(item: PantryItem) -> str:
    return f"{item.name} ({item.quantity})" if item.quantity else item.name


def build_recipe_prompt(
    ingredients: Sequence[PantryItem],
    allergies: Sequence[str],
    dietary_preferences: Sequence[str],
    user_name: str,
    recipe_count: int = 3,
) -> str:
    name = user_name.strip() if user_name else ""
    parts = [
        f"You are a professional chef creating personalized recipes for {name or 'a home cook'}."
    ]

    if allergies:
        parts.append(
            "CRITICAL ALLERGIES (never use these ingredients or anything derived from them):\n"
            + _enumerate(allergies)
        )

    if dietary_preferences:
        parts.append("DIETARY PREFERENCES (every recipe must respect these):\n" + _enumerate(dietary_preferences))

    if ingredients:
        parts.append(
            f"AVAILABLE INGREDIENTS:\n{_enumerate([_ingredient_line(i) for i in ingredients])}\n\n"
            f"Create {recipe_count} recipes that use mainly these ingredients. "
            "You may assume common pantry staples (salt, pepper, oil, water)."
        )
    else:
        parts.append(
            f"No ingredient list was provided. Suggest {recipe_count} popular recipes "
            "that are easy to cook at home."
        )

    parts.append(
        "SAFETY RULES:\n"
        f"- The user is allergic to: {', '.join(allergies) if allergies else NONE_SPECIFIED}.\n"
        f"- The user follows these dietary preferences: "
        f"{', '.join(dietary_preferences) if dietary_preferences else NONE_SPECIFIED}.\n"
        "- Do not include any allergen, even as an optional ingredient or garnish.\n"
        "- If a recipe could contain a trace of an allergen, say so in allergenWarning; otherwise use \"None\"."
    )

    parts.append(
        "OUTPUT FORMAT:\n"
        "Return ONLY a JSON object, with no commentary and no markdown, in exactly this shape:\n"
        f"{RECIPE_SCHEMA_EXAMPLE}\n"
        "difficulty must be one of \"easy\", \"medium\" or \"hard\". "
        "ingredients are strings with quantities; instructions are ordered steps."
    )

    return "\n\n".join(parts)


def build_receipt_prompt(ocr_text: str) -> str:
    return (
        "The following text was read from a grocery store receipt with OCR and may contain "
        "abbreviations, prices and noise. Extract only the food and grocery ingredients.\n"
        "Expand abbreviations to plain ingredient names (\"GRND BEEF\" -> \"ground beef\"). "
        "Ignore totals, taxes, discounts, store information and non-food items. Do not invent items.\n"
        "Return ONLY a JSON array where each element is {\"name\": str, \"quantity\": str}; "
        "use an empty string when the quantity is unknown. Example:\n"
        f"{RECEIPT_SCHEMA_EXAMPLE}\n\n"
        f"Receipt text:\n{ocr_text}"
    )
