from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Literal, Sequence

from recipe_assistant.config import Settings
from recipe_assistant.core.allergens import validate_recipes
from recipe_assistant.core.models import PantryItem, Profile, Recipe
from recipe_assistant.core.parsing import items_from_payload, parse_model_json, recipes_from_payload
from recipe_assistant.core.prompts import build_receipt_prompt, build_recipe_prompt
from recipe_assistant.core.receipt import extract_items_from_text
from .exceptions import AIFormatError, UpstreamError, UpstreamTimeoutError

# OpenAI SDK v1+
import openai
from openai import OpenAI

logger = logging.getLogger(__name__)


class TextCompleter:
    """
    Interface-like base: prompt in, raw model text out. Concrete impl below.
    """
    def complete(self, prompt: str) -> str:  # pragma: no cover - interface
        raise NotImplementedError


class OpenAICompleter(TextCompleter):
    def __init__(self, settings: Settings, model: str, system_prompt: str):
        try:
            self._client = OpenAI(
                api_key=settings.openai_api_key,
                timeout=settings.llm_timeout_seconds,
                max_retries=settings.llm_max_retries,
            )
        except Exception as e:
            raise UpstreamError("Could not initialize OpenAI client") from e
        self._model = model
        self._system_prompt = system_prompt

    @property
    def model(self) -> str:
        return self._model

    def complete(self, prompt: str) -> str:
        try:
            resp = self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "system", "content": self._system_prompt},
                          {"role": "user", "content": prompt}],
            )
        except openai.APITimeoutError as e:
            raise UpstreamTimeoutError(f"OpenAI request timed out after {self._client.timeout}s") from e
        except openai.OpenAIError as e:
            raise UpstreamError(f"OpenAI request failed: {e}") from e

        content = resp.choices[0].message.content if resp.choices else None
        if not content:
            raise AIFormatError("OpenAI returned an empty completion", raw_text=content or "")
        return content


def recipe_completer(settings: Settings) -> OpenAICompleter:
    return OpenAICompleter(
        settings,
        model=settings.openai_model_recipes,
        system_prompt="You are a precise recipe generator returning strict JSON.",
    )


def extract_completer(settings: Settings) -> OpenAICompleter:
    return OpenAICompleter(
        settings,
        model=settings.openai_model_extract,
        system_prompt="You extract grocery items from receipt text as strict JSON.",
    )


class RecipeGenerator:
    """prompt -> model -> parse -> allergen screen. The screen always runs last."""

    def __init__(self, completer: TextCompleter, recipe_count: int = 3):
        self._completer = completer
        self._recipe_count = recipe_count

    def generate(self, ingredients: Sequence[PantryItem], profile: Profile) -> List[Recipe]:
        prefs = profile.preferences
        prompt = build_recipe_prompt(
            ingredients,
            prefs.allergies,
            prefs.dietary_restrictions,
            profile.name,
            recipe_count=self._recipe_count,
        )
        raw = self._completer.complete(prompt)
        recipes = recipes_from_payload(parse_model_json(raw), raw)
        checked = validate_recipes(recipes, prefs.allergies)
        logger.info(
            "Generated %d recipes (%d flagged unsafe) from %d ingredients",
            len(checked), sum(1 for r in checked if not r.is_safe), len(ingredients),
        )
        return checked


@dataclass
class ExtractionResult:
    items: List[PantryItem] = field(default_factory=list)
    source: Literal["ai", "fallback"] = "ai"


class ReceiptItemExtractor:
    """Model-based receipt extraction with the keyword scanner as the fallback path."""

    def __init__(self, completer: TextCompleter):
        self._completer = completer

    def extract_with_model(self, ocr_text: str) -> List[PantryItem]:
        raw = self._completer.complete(build_receipt_prompt(ocr_text))
        return items_from_payload(parse_model_json(raw), raw)

    def extract(self, ocr_text: str) -> ExtractionResult:
        try:
            items = self.extract_with_model(ocr_text)
            logger.info("Model extracted %d receipt items", len(items))
            return ExtractionResult(items=items, source="ai")
        except Exception as e:
            # any failure on the model path degrades to the line scanner
            logger.warning("Receipt extraction via model failed, using fallback scanner: %s", e)
        items = extract_items_from_text(ocr_text)
        logger.info("Fallback scanner extracted %d receipt items", len(items))
        return ExtractionResult(items=items, source="fallback")
