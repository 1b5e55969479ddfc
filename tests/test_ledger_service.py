"""Tests for the food log ledger."""

from datetime import date
from uuid import uuid4

import pytest

from calorie_tracker.domain.catalog import Food
from calorie_tracker.domain.errors import FoodNotFoundError, LogValidationError
from calorie_tracker.domain.logs import LogMetadata
from calorie_tracker.domain.nutrition import GramsSelection, MacroProfile, PortionSelection
from calorie_tracker.services.catalog import CatalogService
from calorie_tracker.services.ledger import LogLedgerService
from calorie_tracker.services.search import SearchService

DAY_ONE = date(2025, 3, 1)
DAY_TWO = date(2025, 3, 2)


def _entry(food: Food, **overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "food_id": food.id,
        "log_date": DAY_ONE,
        "meal": "breakfast",
        "unit_mode": "grams",
        "quantity": 100,
        "portion_label": "100г",
        "grams_total": 100,
        "calories": 246,
        "protein_g": 13.2,
        "carbs_g": 21.5,
        "fat_g": 11.8,
    }
    payload.update(overrides)
    return payload


def test_insert_log_persists_snapshot(ledger_service: LogLedgerService, buuz: Food) -> None:
    log = ledger_service.insert_log(_entry(buuz))

    assert log.food_id == buuz.id
    assert log.log_date == DAY_ONE
    assert log.user_id == "local-user"
    assert log.food_name == "Бууз"
    assert log.totals == MacroProfile(246, 13.2, 21.5, 11.8)
    assert ledger_service.list_logs_by_day(DAY_ONE) == [log]


@pytest.mark.parametrize(
    ("overrides", "field"),
    [
        ({"meal": "brunch"}, "meal"),
        ({"unit_mode": "cups"}, "unit_mode"),
        ({"quantity": 0}, "quantity"),
        ({"grams_total": -1}, "grams_total"),
        ({"calories": float("nan")}, "calories"),
        ({"grams_total": float("inf")}, "grams_total"),
    ],
)
def test_insert_log_rejects_invalid_payload(
    ledger_service: LogLedgerService,
    buuz: Food,
    overrides: dict[str, object],
    field: str,
) -> None:
    with pytest.raises(LogValidationError) as exc_info:
        ledger_service.insert_log(_entry(buuz, **overrides))

    assert field in exc_info.value.field_errors
    assert ledger_service.list_logs_by_day(DAY_ONE) == []


def test_log_food_rejects_amount_overflowing_totals(
    ledger_service: LogLedgerService, buuz: Food
) -> None:
    with pytest.raises(LogValidationError):
        ledger_service.log_food(buuz.id, DAY_ONE, "lunch", GramsSelection(1e308))

    assert ledger_service.list_logs_by_day(DAY_ONE) == []


def test_log_food_scales_portions(ledger_service: LogLedgerService, buuz: Food) -> None:
    portion = ledger_service.catalog.default_portion(buuz.id)

    log = ledger_service.log_food(
        buuz.id,
        DAY_ONE,
        "lunch",
        PortionSelection(
            portion_id=portion.id,
            label=portion.label,
            portion_grams=portion.grams,
            quantity=3,
        ),
    )

    assert log.unit_mode == "portion"
    assert log.portion_id == portion.id
    assert log.grams_total == 150
    assert log.totals == MacroProfile(369, 19.8, 32.3, 17.7)


def test_log_food_unknown_food_raises(ledger_service: LogLedgerService) -> None:
    with pytest.raises(FoodNotFoundError):
        ledger_service.log_food(uuid4(), DAY_ONE, "lunch", GramsSelection(100))


def test_list_logs_by_day_orders_by_time(
    ledger_service: LogLedgerService, buuz: Food
) -> None:
    first = ledger_service.log_food(buuz.id, DAY_ONE, "dinner", GramsSelection(100))
    second = ledger_service.log_food(buuz.id, DAY_ONE, "breakfast", GramsSelection(50))
    ledger_service.log_food(buuz.id, DAY_TWO, "lunch", GramsSelection(10))

    logs = ledger_service.list_logs_by_day(DAY_ONE)

    assert [log.id for log in logs] == [first.id, second.id]


def test_list_logs_for_range(ledger_service: LogLedgerService, buuz: Food) -> None:
    ledger_service.log_food(buuz.id, DAY_TWO, "lunch", GramsSelection(10))
    ledger_service.log_food(buuz.id, DAY_ONE, "lunch", GramsSelection(20))
    ledger_service.log_food(buuz.id, date(2025, 3, 5), "lunch", GramsSelection(30))

    logs = ledger_service.list_logs_for_range(DAY_ONE, DAY_TWO)

    assert [log.log_date for log in logs] == [DAY_ONE, DAY_TWO]
    assert ledger_service.list_logs_for_range(DAY_TWO, DAY_ONE) == []


def test_delete_log_is_idempotent(ledger_service: LogLedgerService, buuz: Food) -> None:
    log = ledger_service.log_food(buuz.id, DAY_ONE, "lunch", GramsSelection(100))

    ledger_service.delete_log(log.id)
    ledger_service.delete_log(log.id)
    ledger_service.delete_log(uuid4())

    assert ledger_service.list_logs_by_day(DAY_ONE) == []


def test_copy_logs_from_day(ledger_service: LogLedgerService, buuz: Food) -> None:
    originals = [
        ledger_service.log_food(buuz.id, DAY_ONE, meal, GramsSelection(grams))
        for meal, grams in (("breakfast", 100), ("lunch", 150), ("snack", 30))
    ]

    copied = ledger_service.copy_logs_from_day(DAY_ONE, DAY_TWO)

    copies = ledger_service.list_logs_by_day(DAY_TWO)
    assert copied == 3
    assert len(copies) == 3
    assert [log.totals for log in copies] == [log.totals for log in originals]
    assert [log.meal for log in copies] == [log.meal for log in originals]
    assert {log.id for log in copies}.isdisjoint({log.id for log in originals})
    assert {log.logged_at for log in copies}.isdisjoint(
        {log.logged_at for log in originals}
    )
    assert len(ledger_service.list_logs_by_day(DAY_ONE)) == 3


def test_copy_logs_from_empty_day_returns_zero(ledger_service: LogLedgerService) -> None:
    assert ledger_service.copy_logs_from_day(DAY_TWO, DAY_ONE) == 0
    assert ledger_service.list_logs_by_day(DAY_ONE) == []


def test_recent_foods_are_distinct(
    ledger_service: LogLedgerService, buuz: Food, search_service: SearchService
) -> None:
    egg = search_service.search("өндөг")[0]
    for day in (date(2025, 2, 26), date(2025, 2, 27), date(2025, 2, 28)):
        ledger_service.log_food(buuz.id, day, "lunch", GramsSelection(100))
    ledger_service.log_food(egg.id, DAY_ONE, "breakfast", GramsSelection(50))

    recent = ledger_service.list_recent_foods(10)

    assert [food.food_id for food in recent] == [egg.id, buuz.id]
    assert ledger_service.list_recent_foods(1)[0].food_id == egg.id
    assert ledger_service.list_recent_foods(0) == []


def test_edit_log_quantity_rescales(ledger_service: LogLedgerService, buuz: Food) -> None:
    log = ledger_service.log_food(buuz.id, DAY_ONE, "lunch", GramsSelection(100))

    edited = ledger_service.edit_log_quantity(log.id, GramsSelection(200))

    assert edited.id == log.id
    assert edited.logged_at == log.logged_at
    assert edited.grams_total == 200
    assert edited.portion_label == "200г"
    assert edited.totals == MacroProfile(492, 26.4, 43, 23.6)


def test_edit_log_quantity_rejects_zero(
    ledger_service: LogLedgerService, buuz: Food
) -> None:
    log = ledger_service.log_food(buuz.id, DAY_ONE, "lunch", GramsSelection(100))

    with pytest.raises(LogValidationError):
        ledger_service.edit_log_quantity(log.id, GramsSelection(0))

    assert ledger_service.get_log(log.id).grams_total == 100


def test_edit_missing_log_raises(ledger_service: LogLedgerService) -> None:
    with pytest.raises(FoodNotFoundError):
        ledger_service.edit_log_quantity(uuid4(), GramsSelection(100))


def test_log_recipe_records_metadata(
    ledger_service: LogLedgerService, catalog_service: CatalogService
) -> None:
    log = ledger_service.log_recipe(
        recipe_id=716429,
        title="Pasta with garlic",
        per_serving=MacroProfile(540, 18, 80, 16),
        servings=2,
        day=DAY_ONE,
        meal="dinner",
        image_url="https://img.example/716429.jpg",
    )

    assert log.metadata == LogMetadata(
        recipe_id=716429, image_url="https://img.example/716429.jpg"
    )
    assert log.totals == MacroProfile(1080, 36, 160, 32)
    assert catalog_service.get_food(log.food_id).source == "recipe"
    copied = ledger_service.copy_logs_from_day(DAY_ONE, DAY_TWO)
    assert copied == 1
    assert ledger_service.list_logs_by_day(DAY_TWO)[0].metadata == log.metadata


def test_logged_days(ledger_service: LogLedgerService, buuz: Food) -> None:
    ledger_service.log_food(buuz.id, DAY_ONE, "lunch", GramsSelection(100))
    ledger_service.log_food(buuz.id, DAY_ONE, "dinner", GramsSelection(100))
    ledger_service.log_food(buuz.id, DAY_TWO, "lunch", GramsSelection(100))

    assert ledger_service.list_logged_days(DAY_TWO) == [DAY_TWO, DAY_ONE]
    assert ledger_service.list_logged_days(DAY_ONE) == [DAY_ONE]
