"""Tests for unit resolution and nutrition scaling."""

from uuid import uuid4

import pytest

from calorie_tracker.domain.errors import LogValidationError
from calorie_tracker.domain.nutrition import (
    ZERO_MACROS,
    GramsSelection,
    MacroProfile,
    PortionSelection,
)
from calorie_tracker.services.nutrition import (
    resolve_grams_total,
    resolve_selection,
    round1,
    scale_nutrition,
)

EGG = MacroProfile(calories=155, protein_g=13, carbs_g=1.1, fat_g=11)


def test_scale_nutrition_at_100g_returns_per_100g_values() -> None:
    assert scale_nutrition(EGG, 100) == MacroProfile(
        calories=155, protein_g=13, carbs_g=1.1, fat_g=11
    )


def test_scale_nutrition_halves_at_50g() -> None:
    scaled = scale_nutrition(EGG, 50)

    assert scaled.calories == 77.5
    assert scaled.protein_g == 6.5
    assert scaled.carbs_g == 0.6
    assert scaled.fat_g == 5.5


def test_scale_nutrition_zero_grams_is_zero() -> None:
    assert scale_nutrition(EGG, 0) == ZERO_MACROS
    assert scale_nutrition(EGG, -10) == ZERO_MACROS


def test_scale_nutrition_is_deterministic() -> None:
    per_100g = MacroProfile(calories=246, protein_g=13.2, carbs_g=21.5, fat_g=11.8)

    assert scale_nutrition(per_100g, 137.3) == scale_nutrition(per_100g, 137.3)


def test_scale_nutrition_rejects_amount_overflowing_totals() -> None:
    with pytest.raises(LogValidationError) as exc_info:
        scale_nutrition(MacroProfile(200, 1, 1, 1), 1e308)

    assert exc_info.value.field_errors == {"grams_total": "Amount is too large"}


def test_scale_nutrition_rejects_nan_amount() -> None:
    with pytest.raises(LogValidationError):
        scale_nutrition(EGG, float("nan"))


def test_round1_rounds_halves_away_from_zero() -> None:
    assert round1(0.25) == 0.3
    assert round1(2.45) == 2.5
    assert round1(-0.25) == -0.3


def test_resolve_grams_total_portion_mode() -> None:
    assert resolve_grams_total("portion", 0, 50, 3) == 150


def test_resolve_grams_total_grams_mode_ignores_portion() -> None:
    assert resolve_grams_total("grams", 150, 50, 2) == 150


def test_resolve_grams_total_never_negative() -> None:
    assert resolve_grams_total("grams", -5, 0, 0) == 0
    assert resolve_grams_total("portion", 0, 50, -1) == 0


def test_resolve_selection_grams() -> None:
    amount = resolve_selection(GramsSelection(grams=150))

    assert amount.unit_mode == "grams"
    assert amount.quantity == 150
    assert amount.portion_id is None
    assert amount.portion_label == "150г"
    assert amount.grams_total == 150


def test_resolve_selection_portion() -> None:
    portion_id = uuid4()
    amount = resolve_selection(
        PortionSelection(
            portion_id=portion_id, label="1 ширхэг", portion_grams=50, quantity=3
        )
    )

    assert amount.unit_mode == "portion"
    assert amount.quantity == 3
    assert amount.portion_id == portion_id
    assert amount.portion_label == "1 ширхэг"
    assert amount.grams_total == 150
