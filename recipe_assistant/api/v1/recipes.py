from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends

from recipe_assistant.api.deps import (
    get_generator,
    get_metrics,
    get_pantry_repo,
    get_profile_repo,
    get_saved_recipe_repo,
    get_user_id,
)
from recipe_assistant.core.models import (
    GenerateRequest,
    GenerateResponse,
    Recipe,
    SavedRecipesResponse,
    SaveRecipeResponse,
    UnsaveRequest,
)
from recipe_assistant.services.exceptions import NotFoundError, ValidationError
from recipe_assistant.services.llm import RecipeGenerator
from recipe_assistant.services.metrics import MetricsLogger
from recipe_assistant.services.repo.json_repo import JSONPantryRepo, JSONSavedRecipeRepo
from recipe_assistant.services.repo.profile_repo import JSONUserProfileRepo

router = APIRouter(tags=["recipes"])
logger = logging.getLogger(__name__)

# ---- Generation --------------------------------------------------------------

@router.post("/api/generate-recipes", response_model=GenerateResponse)
def generate_recipes(
    request: GenerateRequest,
    user_id: str = Depends(get_user_id),
    generator: RecipeGenerator = Depends(get_generator),
    profiles: JSONUserProfileRepo = Depends(get_profile_repo),
    pantries: JSONPantryRepo = Depends(get_pantry_repo),
    metrics: MetricsLogger = Depends(get_metrics),
):
    profile = profiles.load(user_id)
    if profile is None:
        raise NotFoundError("No profile found. Set up your profile before generating recipes.")

    ingredients = request.ingredients
    if ingredients is None:
        ingredients = pantries.load(user_id).items

    t0 = time.perf_counter()
    recipes = generator.generate(ingredients, profile)
    metrics.log_latency(
        "generate_recipes",
        (time.perf_counter() - t0) * 1000.0,
        user_id=user_id,
        extra={
            "ingredients": len(ingredients),
            "allergies": len(profile.preferences.allergies),
            "recipes": len(recipes),
        },
    )
    return GenerateResponse(recipes=recipes, user_profile=profile)

# ---- Saved recipes -----------------------------------------------------------

@router.get("/api/recipes/saved", response_model=SavedRecipesResponse)
def list_saved_recipes(
    user_id: str = Depends(get_user_id),
    repo: JSONSavedRecipeRepo = Depends(get_saved_recipe_repo),
):
    return SavedRecipesResponse(recipes=repo.list(user_id))


@router.post("/api/recipes/save", response_model=SaveRecipeResponse)
def save_recipe(
    recipe: Recipe,
    user_id: str = Depends(get_user_id),
    repo: JSONSavedRecipeRepo = Depends(get_saved_recipe_repo),
):
    if not recipe.name.strip():
        raise ValidationError("Recipe name is required")
    saved = repo.add(user_id, recipe)
    logger.info("Saved recipe %s for %s", saved.recipe_id, user_id)
    return SaveRecipeResponse(recipe=saved)


@router.delete("/api/recipes/save/{recipe_id}")
def delete_saved_recipe(
    recipe_id: str,
    user_id: str = Depends(get_user_id),
    repo: JSONSavedRecipeRepo = Depends(get_saved_recipe_repo),
):
    if not repo.remove(user_id, recipe_id):
        raise NotFoundError(f"Saved recipe {recipe_id} not found")
    return {"success": True}


@router.post("/api/recipes/unsave")
def unsave_recipe(
    request: UnsaveRequest,
    user_id: str = Depends(get_user_id),
    repo: JSONSavedRecipeRepo = Depends(get_saved_recipe_repo),
):
    if not request.name.strip():
        raise ValidationError("Recipe name is required")
    removed = repo.remove_by_name(user_id, request.name)
    if not removed:
        raise NotFoundError(f"No saved recipe named '{request.name}'")
    return {"success": True, "removed": removed}
