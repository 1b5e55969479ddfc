"""Domain models for the food log ledger."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from calorie_tracker.domain.nutrition import MacroProfile, UnitMode

Meal = Literal["breakfast", "lunch", "dinner", "snack"]


class LogMetadata(BaseModel):
    """Provenance of a log created from a recipe."""

    model_config = ConfigDict(frozen=True)

    recipe_id: int
    image_url: str


class NewLogEntry(BaseModel):
    """Validated payload for a new log row."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    food_id: UUID
    log_date: date
    meal: Meal
    unit_mode: UnitMode
    quantity: float = Field(gt=0)
    portion_id: UUID | None = None
    portion_label: str
    grams_total: float = Field(ge=0)
    calories: float = Field(ge=0)
    protein_g: float = Field(ge=0)
    carbs_g: float = Field(ge=0)
    fat_g: float = Field(ge=0)
    logged_at: datetime | None = None
    metadata: LogMetadata | None = None


@dataclass(frozen=True)
class LogEntry:
    """Persisted log row with frozen nutrition totals."""

    id: UUID
    user_id: str
    food_id: UUID
    logged_at: datetime
    log_date: date
    meal: Meal
    unit_mode: UnitMode
    quantity: float
    portion_id: UUID | None
    portion_label: str
    grams_total: float
    totals: MacroProfile
    metadata: LogMetadata | None = None
    food_name: str | None = None


@dataclass(frozen=True)
class RecentFood:
    """Food ranked by its most recent log."""

    food_id: UUID
    name: str
    name_secondary: str | None
    per_100g: MacroProfile
    last_logged_at: datetime
