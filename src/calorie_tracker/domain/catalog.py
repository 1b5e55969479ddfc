"""Domain models for the local food catalog."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from calorie_tracker.domain.nutrition import MacroProfile

FoodSource = Literal["custom", "external", "recipe"]

DEFAULT_PORTION_GRAMS = 100.0
DEFAULT_PORTION_LABEL = "100г"


@dataclass(frozen=True)
class Food:
    """Canonical catalog entry with per-100g nutrition."""

    id: UUID
    source: FoodSource
    source_id: str | None
    name: str
    name_secondary: str | None
    per_100g: MacroProfile
    created_at: datetime


@dataclass(frozen=True)
class Portion:
    """Named serving size for a food.

    The implicit 100 g portion used for foods without a stored default has
    no id.
    """

    id: UUID | None
    food_id: UUID
    label: str
    grams: float
    is_default: bool


@dataclass(frozen=True)
class CatalogEntry:
    """A food together with every alias text used for search."""

    food: Food
    aliases: list[str]


@dataclass(frozen=True)
class PortionSpec:
    """Portion definition used when creating foods."""

    label: str
    grams: float
    is_default: bool = False


@dataclass(frozen=True)
class SeedFood:
    """Reference food shipped with the application."""

    key: str
    id: UUID
    name: str
    name_secondary: str
    per_100g: MacroProfile
    aliases: tuple[str, ...]
    portions: tuple[PortionSpec, ...]


@dataclass(frozen=True)
class NewFood:
    """Payload for a food row about to be inserted."""

    source: FoodSource
    name: str
    per_100g: MacroProfile
    source_id: str | None = None
    name_secondary: str | None = None
    aliases: tuple[tuple[str, str], ...] = ()
    portions: tuple[PortionSpec, ...] = ()
    food_id: UUID | None = None


@dataclass
class SeedReport:
    """Counts of rows added by a seeding pass."""

    foods_added: int = 0
    aliases_added: int = 0
    healed_food_keys: list[str] = field(default_factory=list)


def normalize_alias(text: str) -> str:
    """Return the stored form of an alias (trimmed, lower-case)."""
    return text.strip().lower()


class PortionPayload(BaseModel):
    """Portion supplied when a user creates a food."""

    model_config = ConfigDict(allow_inf_nan=False)

    label: str = Field(min_length=1)
    grams: float = Field(gt=0)
    is_default: bool = False


class CustomFoodPayload(BaseModel):
    """User-entered food with per-100g nutrition."""

    model_config = ConfigDict(allow_inf_nan=False)

    name: str = Field(min_length=1)
    name_secondary: str | None = None
    calories: float = Field(ge=0)
    protein_g: float = Field(ge=0)
    carbs_g: float = Field(ge=0)
    fat_g: float = Field(ge=0)
    portions: list[PortionPayload] | None = None
