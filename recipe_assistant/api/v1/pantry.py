from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from recipe_assistant.api.deps import get_pantry_repo, get_user_id
from recipe_assistant.core.merge import apply_merge, remove_item
from recipe_assistant.core.models import Pantry, PantryItem, PantryResponse
from recipe_assistant.services.exceptions import NotFoundError
from recipe_assistant.services.repo.json_repo import JSONPantryRepo

router = APIRouter(tags=["pantry"])
logger = logging.getLogger(__name__)

# ---- Routes ------------------------------------------------------------------

@router.get("/api/pantry", response_model=PantryResponse)
def get_pantry(
    user_id: str = Depends(get_user_id),
    repo: JSONPantryRepo = Depends(get_pantry_repo),
):
    return PantryResponse(pantry=repo.load(user_id))


@router.put("/api/pantry", response_model=PantryResponse, status_code=status.HTTP_200_OK)
def replace_pantry(
    pantry: Pantry,
    user_id: str = Depends(get_user_id),
    repo: JSONPantryRepo = Depends(get_pantry_repo),
):
    # folding through the merger keeps names unique
    cleaned = repo.update(user_id, lambda _current: apply_merge(Pantry(), pantry.items))
    return PantryResponse(pantry=cleaned)


@router.post("/api/pantry/items", response_model=PantryResponse, status_code=status.HTTP_200_OK)
def merge_into_pantry(
    items: List[PantryItem],
    user_id: str = Depends(get_user_id),
    repo: JSONPantryRepo = Depends(get_pantry_repo),
):
    merged = repo.update(user_id, lambda current: apply_merge(current, items))
    logger.info("Merged %d items into pantry for %s (%d total)", len(items), user_id, len(merged.items))
    return PantryResponse(pantry=merged)


@router.delete("/api/pantry/items/{name}", response_model=PantryResponse)
def delete_pantry_item(
    name: str,
    user_id: str = Depends(get_user_id),
    repo: JSONPantryRepo = Depends(get_pantry_repo),
):
    removed = False

    def _remove(current: Pantry) -> Pantry:
        nonlocal removed
        updated, removed = remove_item(current, name)
        return updated

    pantry = repo.update(user_id, _remove)
    if not removed:
        raise NotFoundError(f"'{name}' is not in the pantry")
    return PantryResponse(pantry=pantry)
