"""Tests for stats service."""

from datetime import date

from calorie_tracker.domain.catalog import Food
from calorie_tracker.domain.nutrition import GramsSelection
from calorie_tracker.services.ledger import LogLedgerService
from calorie_tracker.services.stats import StatsService


def test_daily_totals_include_empty_days(
    ledger_service: LogLedgerService, stats_service: StatsService, buuz: Food
) -> None:
    ledger_service.log_food(buuz.id, date(2025, 3, 1), "breakfast", GramsSelection(100))
    ledger_service.log_food(buuz.id, date(2025, 3, 1), "lunch", GramsSelection(50))
    ledger_service.log_food(buuz.id, date(2025, 3, 3), "lunch", GramsSelection(200))

    totals = stats_service.daily_totals(date(2025, 3, 1), date(2025, 3, 3))

    assert [day.day for day in totals] == [
        date(2025, 3, 1),
        date(2025, 3, 2),
        date(2025, 3, 3),
    ]
    assert totals[0].calories == 369
    assert totals[0].entry_count == 2
    assert totals[1].calories == 0
    assert totals[1].entry_count == 0
    assert totals[2].calories == 492


def test_daily_totals_reversed_range_is_empty(stats_service: StatsService) -> None:
    assert stats_service.daily_totals(date(2025, 3, 3), date(2025, 3, 1)) == []


def test_period_summary_averages(
    ledger_service: LogLedgerService, stats_service: StatsService, buuz: Food
) -> None:
    ledger_service.log_food(buuz.id, date(2025, 3, 1), "lunch", GramsSelection(100))
    ledger_service.log_food(buuz.id, date(2025, 3, 2), "lunch", GramsSelection(200))

    summary = stats_service.period_summary(date(2025, 3, 1), date(2025, 3, 3))

    assert len(summary.daily) == 3
    assert summary.avg_calories == 246
    assert summary.avg_protein_g == 13.2


def test_streak_counts_consecutive_days(
    ledger_service: LogLedgerService, stats_service: StatsService, buuz: Food
) -> None:
    for day in (date(2025, 3, 1), date(2025, 3, 3), date(2025, 3, 4), date(2025, 3, 5)):
        ledger_service.log_food(buuz.id, day, "lunch", GramsSelection(100))

    assert stats_service.streak(date(2025, 3, 5)) == 3
    assert stats_service.streak(date(2025, 3, 1)) == 1
    assert stats_service.streak(date(2025, 3, 6)) == 0
