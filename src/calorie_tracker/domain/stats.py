"""Domain models for statistics."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DailyTotals:
    """Daily total macros."""

    day: date
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    entry_count: int = 0


@dataclass(frozen=True)
class PeriodSummary:
    """Aggregated totals for a date range."""

    daily: list[DailyTotals]
    avg_calories: float
    avg_protein_g: float
    avg_carbs_g: float
    avg_fat_g: float
