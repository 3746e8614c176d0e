from __future__ import annotations

import re
from typing import Optional

from fastapi import Depends, Header

from recipe_assistant.config import Settings
from recipe_assistant.services.exceptions import ValidationError
from recipe_assistant.services.llm import (
    ReceiptItemExtractor,
    RecipeGenerator,
    TextCompleter,
    extract_completer,
    recipe_completer,
)
from recipe_assistant.services.metrics import MetricsLogger
from recipe_assistant.services.ocr import TesseractOCR
from recipe_assistant.services.repo.json_repo import JSONPantryRepo, JSONSavedRecipeRepo
from recipe_assistant.services.repo.profile_repo import JSONUserProfileRepo

_USER_ID = re.compile(r"^[A-Za-z0-9_-]{1,64}$")

# ---- Settings / identity -----------------------------------------------------

def get_settings() -> Settings:
    return Settings()


def get_user_id(
    x_user_id: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> str:
    """User identity for this request; falls back to the configured demo user."""
    user_id = (x_user_id or "").strip() or settings.default_user_id
    if not _USER_ID.match(user_id):
        raise ValidationError("X-User-Id must be 1-64 characters of letters, digits, '-' or '_'")
    return user_id

# ---- Repos -------------------------------------------------------------------

def get_profile_repo(settings: Settings = Depends(get_settings)) -> JSONUserProfileRepo:
    return JSONUserProfileRepo(settings)

def get_pantry_repo(settings: Settings = Depends(get_settings)) -> JSONPantryRepo:
    return JSONPantryRepo(settings)

def get_saved_recipe_repo(settings: Settings = Depends(get_settings)) -> JSONSavedRecipeRepo:
    return JSONSavedRecipeRepo(settings)

def get_metrics(settings: Settings = Depends(get_settings)) -> MetricsLogger:
    return MetricsLogger(settings)

# ---- External services -------------------------------------------------------

def get_recipe_completer(settings: Settings = Depends(get_settings)) -> TextCompleter:
    return recipe_completer(settings)

def get_extract_completer(settings: Settings = Depends(get_settings)) -> TextCompleter:
    return extract_completer(settings)

def get_generator(
    completer: TextCompleter = Depends(get_recipe_completer),
    settings: Settings = Depends(get_settings),
) -> RecipeGenerator:
    return RecipeGenerator(completer, recipe_count=settings.recipe_count)

def get_receipt_extractor(completer: TextCompleter = Depends(get_extract_completer)) -> ReceiptItemExtractor:
    return ReceiptItemExtractor(completer)

def get_ocr(settings: Settings = Depends(get_settings)) -> TesseractOCR:
    return TesseractOCR(settings)
