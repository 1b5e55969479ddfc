"""Unit resolution and per-100g scaling.

``scale_nutrition`` is the only place logged nutrition totals are computed.
"""

import math
from decimal import ROUND_HALF_UP, Decimal

from calorie_tracker.domain.errors import LogValidationError
from calorie_tracker.domain.nutrition import (
    ZERO_MACROS,
    GramsSelection,
    MacroProfile,
    PortionSelection,
    ResolvedAmount,
    UnitMode,
    UnitSelection,
)

_ONE_DECIMAL = Decimal("0.1")


def round1(value: float) -> float:
    """Round to one decimal place, halves away from zero."""
    return float(Decimal(repr(value)).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def resolve_grams_total(
    unit_mode: UnitMode, grams_input: float, portion_grams: float, quantity: float
) -> float:
    """Return total grams for a unit selection, never negative."""
    if unit_mode == "grams":
        return max(0.0, grams_input)
    return max(0.0, quantity * portion_grams)


def scale_nutrition(per_100g: MacroProfile, grams_total: float) -> MacroProfile:
    """Scale per-100g values to ``grams_total``.

    Raises ``LogValidationError`` when the amount is too large to produce
    finite totals.
    """
    if grams_total <= 0:
        return ZERO_MACROS
    calories, protein_g, carbs_g, fat_g = (
        value * grams_total / 100
        for value in (
            per_100g.calories,
            per_100g.protein_g,
            per_100g.carbs_g,
            per_100g.fat_g,
        )
    )
    if not all(math.isfinite(value) for value in (calories, protein_g, carbs_g, fat_g)):
        raise LogValidationError({"grams_total": "Amount is too large"})
    return MacroProfile(
        calories=round1(calories),
        protein_g=round1(protein_g),
        carbs_g=round1(carbs_g),
        fat_g=round1(fat_g),
    )


def resolve_selection(selection: UnitSelection) -> ResolvedAmount:
    """Resolve a unit selection into the quantity columns of a log row."""
    match selection:
        case GramsSelection(grams=grams):
            grams_total = resolve_grams_total("grams", grams, 0.0, 0.0)
            return ResolvedAmount(
                unit_mode="grams",
                quantity=grams,
                portion_id=None,
                portion_label=f"{_format_number(grams)}г",
                grams_total=grams_total,
            )
        case PortionSelection(
            portion_id=portion_id,
            label=label,
            portion_grams=portion_grams,
            quantity=quantity,
        ):
            grams_total = resolve_grams_total("portion", 0.0, portion_grams, quantity)
            return ResolvedAmount(
                unit_mode="portion",
                quantity=quantity,
                portion_id=portion_id,
                portion_label=label,
                grams_total=grams_total,
            )


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)
