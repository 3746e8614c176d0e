# recipe_assistant/core/models.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serializes with camelCase keys, accepts both camelCase and snake_case."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _clean_list(values: List[str]) -> List[str]:
    # strip, drop blanks, dedupe case-insensitively keeping the first spelling
    out: List[str] = []
    seen = set()
    for v in values:
        v = (v or "").strip()
        if v and v.lower() not in seen:
            seen.add(v.lower())
            out.append(v)
    return out


# ---------- Profile ----------

class Preferences(CamelModel):
    allergies: List[str] = Field(default_factory=list)
    dietary_restrictions: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("dietaryRestrictions", "dietaryPreferences", "dietary_restrictions"),
        serialization_alias="dietaryRestrictions",
    )

    @field_validator("allergies", "dietary_restrictions")
    @classmethod
    def _normalize(cls, v: List[str]) -> List[str]:
        return _clean_list(v)


class Profile(CamelModel):
    name: str = ""
    bio: str = ""
    preferences: Preferences = Field(default_factory=Preferences)

    @field_validator("name", "bio")
    @classmethod
    def _strip(cls, v: str) -> str:
        return v.strip()


# ---------- Pantry ----------

class PantryItem(CamelModel):
    """A single pantry entry. Quantity is free text ("2 lb", "12, 6")."""
    name: str = Field(..., min_length=1)
    quantity: str = ""

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("PantryItem.name cannot be blank")
        return v

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity_as_text(cls, v) -> str:
        if v is None:
            return ""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return f"{v:g}"
        return str(v).strip()

    def key(self) -> str:
        """Merge key: case-insensitive name."""
        return self.name.strip().lower()


class Pantry(CamelModel):
    items: List[PantryItem] = Field(default_factory=list)


# ---------- Recipes ----------

Difficulty = Literal["easy", "medium", "hard"]


class Recipe(CamelModel):
    name: str = ""
    description: str = ""
    prep_time: str = ""
    cook_time: str = ""
    difficulty: Difficulty = "medium"
    servings: Optional[Union[int, str]] = None
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    allergen_warning: str = "None"
    dietary_tags: List[str] = Field(default_factory=list)
    is_safe: bool = True

    @field_validator("difficulty", mode="before")
    @classmethod
    def _coerce_difficulty(cls, v) -> str:
        v = str(v or "").strip().lower()
        return v if v in ("easy", "medium", "hard") else "medium"

    @field_validator("servings", mode="before")
    @classmethod
    def _coerce_servings(cls, v):
        if isinstance(v, float):
            return int(v) if v.is_integer() else f"{v:g}"
        return v

    @field_validator("prep_time", "cook_time", "allergen_warning", mode="before")
    @classmethod
    def _as_text(cls, v) -> str:
        return "" if v is None else str(v)

    @field_validator("ingredients", "instructions", "dietary_tags", mode="before")
    @classmethod
    def _as_text_list(cls, v) -> List[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        if not isinstance(v, (list, tuple)):
            raise ValueError("expected a list of strings")
        return [str(x) for x in v if x is not None]


class SavedRecipe(Recipe):
    recipe_id: str
    saved_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# ---------- Requests / responses ----------

class GenerateRequest(CamelModel):
    # None means "use the stored pantry"
    ingredients: Optional[List[PantryItem]] = None


class GenerateResponse(CamelModel):
    success: bool = True
    recipes: List[Recipe]
    user_profile: Profile


class ProfileResponse(CamelModel):
    success: bool = True
    profile: Profile


class PantryResponse(CamelModel):
    success: bool = True
    pantry: Pantry


class SavedRecipesResponse(CamelModel):
    success: bool = True
    recipes: List[SavedRecipe]


class SaveRecipeResponse(CamelModel):
    success: bool = True
    recipe: SavedRecipe


class UnsaveRequest(CamelModel):
    name: str


class ReceiptScanResponse(CamelModel):
    success: bool = True
    ocr_text: str
    items: List[PantryItem]
    extraction: Literal["ai", "fallback"]
    pantry: Pantry
