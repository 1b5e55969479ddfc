"""Domain models for goal timeline projections."""

from dataclasses import dataclass
from datetime import date
from typing import Literal

GoalType = Literal["lose", "maintain", "gain"]
OnTrackStatus = Literal["on_track", "ahead", "behind", "unknown"]
Sex = Literal["male", "female", "other"]
ActivityLevel = Literal["sedentary", "lightly_active", "moderately_active", "very_active"]
DietGoal = Literal[
    "lose_weight",
    "gain_muscle",
    "maintain_weight",
    "boost_energy",
    "improve_nutrition",
    "gain_weight",
]


@dataclass(frozen=True)
class WeightEntry:
    """Single weigh-in read from the profile store."""

    day: date
    weight_kg: float
    bmi: float | None = None


@dataclass(frozen=True)
class OnTrackResult:
    """Classification of the projected finish date against the plan."""

    status: OnTrackStatus
    eta_date: date | None
    message: str


@dataclass(frozen=True)
class PlanSpec:
    """Plan derived from goal and weights."""

    target_date: date
    pace_kg_per_week: float


@dataclass(frozen=True)
class BmiCategory:
    """BMI band."""

    label: str
    min: float
    max: float


@dataclass(frozen=True)
class ProfileSnapshot:
    """Read-only profile fields consumed by the goal timeline."""

    current_weight_kg: float
    height_cm: float
    goal_type: GoalType
    target_weight_kg: float
    plan_start_date: date
    plan_start_weight_kg: float
    plan_target_date: date
    plan_pace_kg_per_week: float | None = None


@dataclass(frozen=True)
class TimelineSnapshot:
    """Everything a progress screen needs, recomputed on every read."""

    trend_weight_kg: float | None
    status: OnTrackResult
    progress_pct: float
    weeks_elapsed: int
    weeks_left: int
    weeks_total: int
    bmi: float
    bmi_category: str
