"""Goal timeline projections and daily energy targets.

Everything here is recomputed on every read; nothing is persisted.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, timedelta

from calorie_tracker.domain.goals import (
    ActivityLevel,
    BmiCategory,
    DietGoal,
    GoalType,
    OnTrackResult,
    PlanSpec,
    ProfileSnapshot,
    Sex,
    TimelineSnapshot,
    WeightEntry,
)
from calorie_tracker.services.nutrition import round1

DEFAULT_RATE_LOSE = 0.5
DEFAULT_RATE_GAIN = 0.25
DEFAULT_TOLERANCE_WEEKS = 1.0
DEFAULT_TREND_WINDOW = 7
ARRIVED_THRESHOLD_KG = 0.1

BMI_CATEGORIES = (
    BmiCategory(label="Underweight", min=0, max=18.5),
    BmiCategory(label="Normal", min=18.5, max=25),
    BmiCategory(label="Overweight", min=25, max=30),
    BmiCategory(label="Obese", min=30, max=50),
)

ACTIVITY_MULTIPLIERS: dict[ActivityLevel, float] = {
    "sedentary": 1.2,
    "lightly_active": 1.375,
    "moderately_active": 1.55,
    "very_active": 1.725,
}

GOAL_CALORIE_ADJUSTMENTS: dict[DietGoal, float] = {
    "lose_weight": -500,
    "gain_muscle": 300,
    "maintain_weight": 0,
    "boost_energy": 0,
    "improve_nutrition": 0,
    "gain_weight": 500,
}

MIN_DAILY_CALORIES = 1200


@dataclass
class GoalTimelineService:
    """Linear, pace-based projection of a weight goal."""

    loss_pace: float = DEFAULT_RATE_LOSE
    gain_pace: float = DEFAULT_RATE_GAIN
    tolerance_weeks: float = DEFAULT_TOLERANCE_WEEKS
    trend_window: int = DEFAULT_TREND_WINDOW

    def default_pace(self, goal_type: GoalType) -> float | None:
        """Return the default kg/week pace, or ``None`` for maintenance."""
        if goal_type == "lose":
            return self.loss_pace
        if goal_type == "gain":
            return self.gain_pace
        return None

    def trend_weight(self, entries: Sequence[WeightEntry], as_of: date) -> float | None:
        """Average the most recent weigh-ins on or before ``as_of``."""
        eligible = sorted(
            (entry for entry in entries if entry.day <= as_of),
            key=lambda entry: entry.day,
            reverse=True,
        )
        if not eligible:
            return None
        recent = eligible[: self.trend_window]
        return sum(entry.weight_kg for entry in recent) / len(recent)

    def on_track_status(  # noqa: PLR0913
        self,
        entries: Sequence[WeightEntry],
        start_weight: float,
        target_weight: float,
        plan_target_date: date,
        today: date,
        goal_type: GoalType,
    ) -> OnTrackResult:
        """Compare the trend-based ETA with the plan's target date.

        ``start_weight`` is accepted for parity with the plan record; the
        projection only depends on the current trend.
        """
        del start_weight
        if goal_type == "maintain":
            return OnTrackResult(status="on_track", eta_date=None, message="Maintaining")
        trend_today = self.trend_weight(entries, today)
        if trend_today is None:
            return OnTrackResult(
                status="unknown",
                eta_date=None,
                message="Log weigh-ins to see if you're on track",
            )
        remaining_kg = abs(target_weight - trend_today)
        if remaining_kg < ARRIVED_THRESHOLD_KG:
            return OnTrackResult(status="on_track", eta_date=today, message="Almost there!")

        rate = self.loss_pace if goal_type == "lose" else self.gain_pace
        eta_weeks = remaining_kg / rate
        eta_date = today + timedelta(days=math.ceil(eta_weeks * 7))
        plan_days = (plan_target_date - today).days
        eta_days = (eta_date - today).days
        diff_weeks = abs(eta_days - plan_days) / 7

        if diff_weeks <= self.tolerance_weeks:
            return OnTrackResult(status="on_track", eta_date=eta_date, message="On track!")
        if eta_days < plan_days:
            return OnTrackResult(
                status="ahead", eta_date=eta_date, message="Ahead of schedule!"
            )
        return OnTrackResult(
            status="behind", eta_date=eta_date, message="A bit behind, keep going!"
        )

    def compute_plan(
        self,
        goal_type: GoalType,
        start_weight: float,
        target_weight: float,
        start_date: date,
    ) -> PlanSpec:
        """Derive a plan target date and pace from the goal and weights."""
        pace = self.default_pace(goal_type)
        if pace is None:
            return PlanSpec(target_date=start_date, pace_kg_per_week=0)
        delta_kg = abs(target_weight - start_weight)
        weeks = max(1, math.ceil(delta_kg / pace))
        return PlanSpec(
            target_date=start_date + timedelta(days=weeks * 7), pace_kg_per_week=pace
        )

    def timeline(
        self,
        profile: ProfileSnapshot,
        entries: Sequence[WeightEntry],
        today: date,
    ) -> TimelineSnapshot:
        """Combine trend, status, progress and BMI for one profile."""
        trend = self.trend_weight(entries, today)
        status = self.on_track_status(
            entries,
            profile.plan_start_weight_kg,
            profile.target_weight_kg,
            profile.plan_target_date,
            today,
            profile.goal_type,
        )
        bmi = calc_bmi(profile.height_cm, trend or profile.current_weight_kg)
        return TimelineSnapshot(
            trend_weight_kg=round1(trend) if trend is not None else None,
            status=status,
            progress_pct=progress_pct(
                profile.plan_start_date, profile.plan_target_date, today
            ),
            weeks_elapsed=weeks_elapsed(profile.plan_start_date, today),
            weeks_left=weeks_left(profile.plan_target_date, today),
            weeks_total=weeks_total(profile.plan_start_date, profile.plan_target_date),
            bmi=bmi,
            bmi_category=bmi_category(bmi).label,
        )


def progress_pct(start: date, target: date, today: date) -> float:
    """Return elapsed time over total plan time, clamped to ``[0, 1]``."""
    total_days = (target - start).days
    if total_days <= 0:
        return 1.0
    elapsed_days = (today - start).days
    return min(1.0, max(0.0, elapsed_days / total_days))


def weeks_elapsed(start: date, today: date) -> int:
    return max(0, math.floor((today - start).days / 7))


def weeks_left(target: date, today: date) -> int:
    return max(0, math.ceil((target - today).days / 7))


def weeks_total(start: date, target: date) -> int:
    return max(1, math.ceil((target - start).days / 7))


def calc_bmi(height_cm: float, weight_kg: float) -> float:
    """Return BMI to one decimal, or 0 for non-positive inputs."""
    if height_cm <= 0 or weight_kg <= 0:
        return 0.0
    height_m = height_cm / 100
    return round1(weight_kg / (height_m * height_m))


def bmi_category(bmi: float) -> BmiCategory:
    for category in BMI_CATEGORIES:
        if bmi < category.max:
            return category
    return BMI_CATEGORIES[-1]


def age_on(birthdate: date, today: date) -> int:
    """Return full years lived on ``today``."""
    age = today.year - birthdate.year
    if (today.month, today.day) < (birthdate.month, birthdate.day):
        age -= 1
    return age


def calc_bmr(sex: Sex, weight_kg: float, height_cm: float, age: int) -> float:
    """Basal metabolic rate in kcal/day (Mifflin-St Jeor).

    Anything other than ``male`` uses the female constant.
    """
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    if sex == "male":
        return base + 5
    return base - 161


def daily_calorie_target(  # noqa: PLR0913
    sex: Sex,
    weight_kg: float,
    height_cm: float,
    age: int,
    activity_level: ActivityLevel,
    goal: DietGoal,
) -> int:
    """Return the whole-kcal daily target, never below ``MIN_DAILY_CALORIES``."""
    tdee = calc_bmr(sex, weight_kg, height_cm, age) * ACTIVITY_MULTIPLIERS[activity_level]
    adjusted = max(tdee + GOAL_CALORIE_ADJUSTMENTS[goal], MIN_DAILY_CALORIES)
    return math.floor(adjusted + 0.5)
