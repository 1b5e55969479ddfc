"""Statistics service for food logs."""

from dataclasses import dataclass
from datetime import date, timedelta

from calorie_tracker.domain.logs import LogEntry
from calorie_tracker.domain.stats import DailyTotals, PeriodSummary
from calorie_tracker.services.ledger import LogLedgerService
from calorie_tracker.services.nutrition import round1


@dataclass
class StatsService:
    """Service for computing per-day totals from the ledger."""

    ledger: LogLedgerService

    def daily_totals(self, start: date, end: date) -> list[DailyTotals]:
        """Return one total per day in ``start..end``, empty days included."""
        if end < start:
            return []
        logs = self.ledger.list_logs_for_range(start, end)
        days = (end - start).days + 1
        return [
            _aggregate_day(start + timedelta(days=offset), logs)
            for offset in range(days)
        ]

    def period_summary(self, start: date, end: date) -> PeriodSummary:
        """Return daily totals and their averages over the range."""
        daily = self.daily_totals(start, end)
        total_days = max(len(daily), 1)
        return PeriodSummary(
            daily=daily,
            avg_calories=round1(sum(day.calories for day in daily) / total_days),
            avg_protein_g=round1(sum(day.protein_g for day in daily) / total_days),
            avg_carbs_g=round1(sum(day.carbs_g for day in daily) / total_days),
            avg_fat_g=round1(sum(day.fat_g for day in daily) / total_days),
        )

    def streak(self, today: date) -> int:
        """Count consecutive logged days ending at ``today``.

        Returns 0 when ``today`` has no logs.
        """
        logged = set(self.ledger.list_logged_days(today))
        count = 0
        day = today
        while day in logged:
            count += 1
            day -= timedelta(days=1)
        return count


def _aggregate_day(day: date, logs: list[LogEntry]) -> DailyTotals:
    total = DailyTotals(day=day, calories=0, protein_g=0, carbs_g=0, fat_g=0)
    for log in logs:
        if log.log_date != day:
            continue
        total = DailyTotals(
            day=day,
            calories=total.calories + log.totals.calories,
            protein_g=total.protein_g + log.totals.protein_g,
            carbs_g=total.carbs_g + log.totals.carbs_g,
            fat_g=total.fat_g + log.totals.fat_g,
            entry_count=total.entry_count + 1,
        )
    return DailyTotals(
        day=day,
        calories=round1(total.calories),
        protein_g=round1(total.protein_g),
        carbs_g=round1(total.carbs_g),
        fat_g=round1(total.fat_g),
        entry_count=total.entry_count,
    )
