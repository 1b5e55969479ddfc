"""Nutrition domain models."""

from dataclasses import dataclass
from typing import Literal
from uuid import UUID

UnitMode = Literal["grams", "portion"]


@dataclass(frozen=True)
class MacroProfile:
    """Energy and macronutrients, either per 100 g or as scaled totals."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float


ZERO_MACROS = MacroProfile(calories=0.0, protein_g=0.0, carbs_g=0.0, fat_g=0.0)


@dataclass(frozen=True)
class GramsSelection:
    """User typed an explicit weight in grams."""

    grams: float


@dataclass(frozen=True)
class PortionSelection:
    """User picked a named portion and a count of it."""

    portion_id: UUID | None
    label: str
    portion_grams: float
    quantity: float


UnitSelection = GramsSelection | PortionSelection


@dataclass(frozen=True)
class ResolvedAmount:
    """Unit selection resolved to the columns stored on a log row."""

    unit_mode: UnitMode
    quantity: float
    portion_id: UUID | None
    portion_label: str
    grams_total: float


@dataclass(frozen=True)
class ExternalFood:
    """Top match from the external food-composition database."""

    fdc_id: int
    name_en: str
    per_100g: MacroProfile
