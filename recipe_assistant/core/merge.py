# recipe_assistant/core/merge.py
from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from .models import Pantry, PantryItem

QUANTITY_SEPARATOR = ", "


def _combine_quantities(current: str, incoming: str) -> str:
    if current and incoming:
        return f"{current}{QUANTITY_SEPARATOR}{incoming}"
    return current or incoming


def merge_items(
    existing: Iterable[PantryItem],
    incoming: Iterable[PantryItem],
) -> List[PantryItem]:
    """
    Merge `incoming` items into `existing` pantry items, keyed by lowercased name.

    Rules:
    - Existing items keep their position and display name.
    - A matching incoming item concatenates its quantity ("12" + "6" => "12, 6")
      when both sides have one, otherwise the non-empty quantity wins.
    - Unmatched items are appended in the order they arrive; repeats within
      `incoming` merge into the entry appended first.

    Neither input is mutated.
    """
    merged: List[PantryItem] = []
    idx: Dict[str, int] = {}

    for it in existing:
        key = it.key()
        if key in idx:
            # tolerate a non-unique stored pantry by folding it here too
            prev = merged[idx[key]]
            merged[idx[key]] = prev.model_copy(
                update={"quantity": _combine_quantities(prev.quantity, it.quantity)}
            )
            continue
        idx[key] = len(merged)
        merged.append(it.model_copy())

    for inc in incoming:
        key = inc.key()
        if key in idx:
            prev = merged[idx[key]]
            merged[idx[key]] = prev.model_copy(
                update={"quantity": _combine_quantities(prev.quantity, inc.quantity)}
            )
        else:
            idx[key] = len(merged)
            merged.append(inc.model_copy())

    return merged


def apply_merge(pantry: Pantry, incoming_items: Iterable[PantryItem]) -> Pantry:
    """Helper that returns a **new** Pantry with merged items."""
    return Pantry(items=merge_items(pantry.items, incoming_items))


def remove_item(pantry: Pantry, name: str) -> Tuple[Pantry, bool]:
    key = name.strip().lower()
    kept = [it.model_copy() for it in pantry.items if it.key() != key]
    return Pantry(items=kept), len(kept) != len(pantry.items)
