# recipe_assistant/core/receipt.py
"""Keyword line scanner used when the model cannot extract receipt items.

Lower recall and precision than the model path; it only keeps the upload
useful when the model is unavailable.
"""
from __future__ import annotations

import re
from typing import List, Optional

from .merge import merge_items
from .models import PantryItem

MAX_ITEMS = 20
MIN_LINE_LENGTH = 3

FOOD_KEYWORDS = (
    "apple", "avocado", "bacon", "banana", "bean", "beef", "berry", "bread",
    "broccoli", "butter", "carrot", "celery", "cheese", "chicken", "corn",
    "cream", "cucumber", "egg", "fish", "flour", "garlic", "grape", "ham",
    "honey", "juice", "lemon", "lettuce", "lime", "milk", "mushroom", "oat",
    "oil", "onion", "orange", "pasta", "pepper", "pork", "potato", "rice",
    "salmon", "sausage", "shrimp", "spinach", "sugar", "tomato", "tuna",
    "turkey", "yogurt",
)

_SKIP = re.compile(r"\b(?:sub\s*total|total|tax)\b", re.IGNORECASE)
_PRICE = re.compile(r"\$\s?\d+(?:\.\d{2})?")
_QUANTITY = re.compile(
    r"(?<![\d.])(\d{1,3}(?:\.\d+)?)(?!\d)\s*(?:(lbs|lb|oz|kg|g|ct)\b)?",
    re.IGNORECASE,
)
_ITEM_CODE = re.compile(r"\b\d{4,}\b")
_SPACES = re.compile(r"\s+")


def parse_line(line: str) -> Optional[PantryItem]:
    """Turn one receipt line into a pantry item, or None when it is not food."""
    text = line.strip()
    if len(text) < MIN_LINE_LENGTH or _SKIP.search(text):
        return None

    text = _PRICE.sub(" ", text)
    quantity = ""
    m = _QUANTITY.search(text)
    if m:
        number, unit = m.group(1), m.group(2)
        quantity = f"{number} {unit.lower()}" if unit else number
        text = text[:m.start()] + " " + text[m.end():]

    text = _ITEM_CODE.sub(" ", text)
    name = _SPACES.sub(" ", text).strip(" -*#:.,%").lower()
    if len(name) < MIN_LINE_LENGTH:
        return None
    if not any(k in name for k in FOOD_KEYWORDS):
        return None
    return PantryItem(name=name, quantity=quantity)


def extract_items_from_text(ocr_text: str, limit: int = MAX_ITEMS) -> List[PantryItem]:
    found: List[PantryItem] = []
    for line in (ocr_text or "").splitlines():
        item = parse_line(line)
        if item is not None:
            found.append(item)
    return merge_items([], found)[:limit]
