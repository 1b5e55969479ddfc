"""Pydantic models for API request payloads."""

from datetime import date
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from calorie_tracker.domain.goals import ActivityLevel, DietGoal, GoalType, Sex
from calorie_tracker.domain.logs import Meal
from calorie_tracker.domain.nutrition import UnitMode


class AmountPayload(BaseModel):
    """Grams or a number of portions."""

    model_config = ConfigDict(allow_inf_nan=False)

    unit_mode: UnitMode
    grams: float | None = Field(default=None, ge=0)
    portion_id: UUID | None = None
    quantity: float = 1


class LogCreateRequest(AmountPayload):
    """Log a catalog food."""

    food_id: UUID
    log_date: date
    meal: Meal


class CopyDayRequest(BaseModel):
    """Copy every log of one day onto another."""

    from_date: date
    to_date: date


class WeightPayload(BaseModel):
    """Weigh-in from the profile store."""

    model_config = ConfigDict(allow_inf_nan=False)

    day: date
    weight_kg: float = Field(gt=0)


class EnergyProfilePayload(BaseModel):
    """Inputs for the daily calorie target."""

    sex: Sex
    birthdate: date
    activity_level: ActivityLevel
    goal: DietGoal


class GoalStatusRequest(BaseModel):
    """Profile fields and weigh-ins for a timeline projection."""

    model_config = ConfigDict(allow_inf_nan=False)

    current_weight_kg: float = Field(gt=0)
    height_cm: float = Field(gt=0)
    goal_type: GoalType
    target_weight_kg: float = Field(gt=0)
    plan_start_date: date
    plan_start_weight_kg: float = Field(gt=0)
    plan_target_date: date
    plan_pace_kg_per_week: float | None = None
    weights: list[WeightPayload] = Field(default_factory=list)
    today: date | None = None
    energy: EnergyProfilePayload | None = None
