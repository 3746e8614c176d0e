# recipe_assistant/core/parsing.py
from __future__ import annotations

import json
import logging
import re
from typing import Any, List, Type, TypeVar

from pydantic import BaseModel, ValidationError as ModelValidationError

from recipe_assistant.services.exceptions import AIFormatError
from .models import PantryItem, Recipe

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)

M = TypeVar("M", bound=BaseModel)


def strip_code_fences(text: str) -> str:
    """Remove every ```json / ``` marker and trim what is left."""
    return _FENCE.sub("", text).strip()


def parse_model_json(raw: str) -> Any:
    """Parse free-form model output as JSON, raising AIFormatError with the raw text on failure."""
    if raw is None:
        raise AIFormatError("Model returned no content", raw_text="")
    try:
        return json.loads(strip_code_fences(raw))
    except (ValueError, TypeError) as e:
        raise AIFormatError(f"Model output is not valid JSON: {e}", raw_text=raw) from e


def _unwrap(data: Any, key: str, raw: str) -> list:
    # the model is asked for a wrapper object but bare arrays show up too
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get(key), list):
        return data[key]
    raise AIFormatError(f"Expected a JSON array or an object with a '{key}' array", raw_text=raw)


def _validate_rows(rows: list, model: Type[M], raw: str) -> List[M]:
    out: List[M] = []
    for i, row in enumerate(rows):
        if not isinstance(row, dict):
            logger.warning("Skipping non-object %s entry #%d from model output", model.__name__, i)
            continue
        try:
            out.append(model.model_validate(row))
        except ModelValidationError as e:
            logger.warning("Skipping invalid %s entry #%d from model output: %s", model.__name__, i, e)
    if rows and not out:
        raise AIFormatError(f"No valid {model.__name__} entries in model output", raw_text=raw)
    return out


def recipes_from_payload(data: Any, raw: str) -> List[Recipe]:
    rows = _unwrap(data, "recipes", raw)
    recipes = _validate_rows(rows, Recipe, raw)
    # a recipe without a name cannot be saved or displayed
    named = [r for r in recipes if r.name.strip()]
    if recipes and not named:
        raise AIFormatError("Model returned recipes without names", raw_text=raw)
    return named


def items_from_payload(data: Any, raw: str) -> List[PantryItem]:
    rows = _unwrap(data, "items", raw)
    return _validate_rows(rows, PantryItem, raw)
