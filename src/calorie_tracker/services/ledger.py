"""Day-indexed food log ledger."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID

from pydantic import ValidationError

from calorie_tracker.domain.errors import FoodNotFoundError, LogValidationError
from calorie_tracker.domain.logs import LogEntry, LogMetadata, Meal, NewLogEntry, RecentFood
from calorie_tracker.domain.nutrition import (
    MacroProfile,
    PortionSelection,
    ResolvedAmount,
    UnitSelection,
)
from calorie_tracker.services.catalog import CatalogService
from calorie_tracker.services.nutrition import resolve_selection, scale_nutrition

_logger = logging.getLogger(__name__)


class LogRepository(Protocol):
    """Persistence interface for log rows."""

    def insert_logs(self, user_id: str, entries: list[NewLogEntry]) -> list[LogEntry]:
        """Insert rows atomically and return them with generated ids."""

    def get_log(self, log_id: UUID) -> LogEntry | None:
        """Return a log row by id, if present."""

    def list_logs_by_day(self, user_id: str, day: date) -> list[LogEntry]:
        """Return logs for one civil date ordered by logging time."""

    def list_logs_for_range(self, user_id: str, start: date, end: date) -> list[LogEntry]:
        """Return logs in an inclusive date range ordered by date then time."""

    def delete_log(self, log_id: UUID) -> bool:
        """Delete a row; return whether one existed."""

    def update_log_amount(
        self, log_id: UUID, amount: ResolvedAmount, totals: MacroProfile
    ) -> LogEntry | None:
        """Replace the quantity and nutrition snapshot of a row."""

    def list_recent_foods(self, user_id: str, limit: int) -> list[RecentFood]:
        """Return foods by their latest log, newest first."""

    def list_logged_days(self, user_id: str, until: date) -> list[date]:
        """Return distinct dates with at least one log, up to ``until``."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class LogLedgerService:
    """Validates, persists and queries log entries."""

    repository: LogRepository
    catalog: CatalogService
    user_id: str = "local-user"
    clock: Callable[[], datetime] = _utc_now

    def insert_log(self, entry: NewLogEntry | Mapping[str, object]) -> LogEntry:
        """Validate and persist a log row."""
        validated = _validate(entry)
        if validated.logged_at is None:
            validated = validated.model_copy(update={"logged_at": self.clock()})
        return self.repository.insert_logs(self.user_id, [validated])[0]

    def log_food(
        self,
        food_id: UUID,
        day: date,
        meal: Meal,
        selection: UnitSelection,
        metadata: LogMetadata | None = None,
    ) -> LogEntry:
        """Resolve a unit selection against a food and log the result."""
        food = self.catalog.get_food(food_id)
        amount = resolve_selection(selection)
        totals = scale_nutrition(food.per_100g, amount.grams_total)
        return self.insert_log(
            {
                "food_id": food.id,
                "log_date": day,
                "meal": meal,
                "unit_mode": amount.unit_mode,
                "quantity": amount.quantity,
                "portion_id": amount.portion_id,
                "portion_label": amount.portion_label,
                "grams_total": amount.grams_total,
                "calories": totals.calories,
                "protein_g": totals.protein_g,
                "carbs_g": totals.carbs_g,
                "fat_g": totals.fat_g,
                "metadata": metadata,
            }
        )

    def log_recipe(  # noqa: PLR0913
        self,
        recipe_id: int,
        title: str,
        per_serving: MacroProfile,
        servings: float,
        day: date,
        meal: Meal,
        image_url: str,
    ) -> LogEntry:
        """Log servings of a recipe through its derived catalog food."""
        food = self.catalog.get_or_create_recipe_food(recipe_id, title, per_serving)
        portion = self.catalog.default_portion(food.id)
        selection = PortionSelection(
            portion_id=portion.id,
            label=portion.label,
            portion_grams=portion.grams,
            quantity=servings,
        )
        return self.log_food(
            food.id,
            day,
            meal,
            selection,
            metadata=LogMetadata(recipe_id=recipe_id, image_url=image_url),
        )

    def get_log(self, log_id: UUID) -> LogEntry:
        """Return a log or raise ``FoodNotFoundError``."""
        existing = self.repository.get_log(log_id)
        if existing is None:
            raise FoodNotFoundError(f"Log {log_id} not found")
        return existing

    def edit_log_quantity(self, log_id: UUID, selection: UnitSelection) -> LogEntry:
        """Change the amount of an existing log and refresh its snapshot."""
        existing = self.get_log(log_id)
        food = self.catalog.get_food(existing.food_id)
        amount = resolve_selection(selection)
        totals = scale_nutrition(food.per_100g, amount.grams_total)
        _validate(
            {
                "food_id": existing.food_id,
                "log_date": existing.log_date,
                "meal": existing.meal,
                "unit_mode": amount.unit_mode,
                "quantity": amount.quantity,
                "portion_id": amount.portion_id,
                "portion_label": amount.portion_label,
                "grams_total": amount.grams_total,
                "calories": totals.calories,
                "protein_g": totals.protein_g,
                "carbs_g": totals.carbs_g,
                "fat_g": totals.fat_g,
            }
        )
        updated = self.repository.update_log_amount(log_id, amount, totals)
        if updated is None:
            raise FoodNotFoundError(f"Log {log_id} not found")
        return updated

    def list_logs_by_day(self, day: date) -> list[LogEntry]:
        """Return all logs for a civil date, oldest first."""
        return self.repository.list_logs_by_day(self.user_id, day)

    def list_logs_for_range(self, start: date, end: date) -> list[LogEntry]:
        """Return logs between ``start`` and ``end`` inclusive."""
        if end < start:
            return []
        return self.repository.list_logs_for_range(self.user_id, start, end)

    def delete_log(self, log_id: UUID) -> None:
        """Delete a log; missing ids are ignored."""
        if not self.repository.delete_log(log_id):
            _logger.debug("Delete ignored, log %s does not exist", log_id)

    def copy_logs_from_day(self, from_day: date, to_day: date) -> int:
        """Duplicate every log of ``from_day`` onto ``to_day``.

        Returns the number of copies; 0 means there was nothing to copy.
        """
        source_logs = self.list_logs_by_day(from_day)
        if not source_logs:
            return 0
        copies = [
            _validate(
                {
                    "food_id": log.food_id,
                    "log_date": to_day,
                    "meal": log.meal,
                    "unit_mode": log.unit_mode,
                    "quantity": log.quantity,
                    "portion_id": log.portion_id,
                    "portion_label": log.portion_label,
                    "grams_total": log.grams_total,
                    "calories": log.totals.calories,
                    "protein_g": log.totals.protein_g,
                    "carbs_g": log.totals.carbs_g,
                    "fat_g": log.totals.fat_g,
                    "logged_at": self.clock(),
                    "metadata": log.metadata,
                }
            )
            for log in source_logs
        ]
        self.repository.insert_logs(self.user_id, copies)
        _logger.info("Copied %s logs from %s to %s", len(copies), from_day, to_day)
        return len(copies)

    def list_recent_foods(self, limit: int = 10) -> list[RecentFood]:
        """Return distinct foods by most recent log, newest first."""
        if limit <= 0:
            return []
        seen: set[UUID] = set()
        result: list[RecentFood] = []
        for row in self.repository.list_recent_foods(self.user_id, limit):
            if row.food_id in seen:
                continue
            seen.add(row.food_id)
            result.append(row)
            if len(result) == limit:
                break
        return result

    def list_logged_days(self, until: date) -> list[date]:
        """Return dates that have at least one log, up to ``until``."""
        return self.repository.list_logged_days(self.user_id, until)


def _validate(entry: NewLogEntry | Mapping[str, object]) -> NewLogEntry:
    payload = entry.model_dump() if isinstance(entry, NewLogEntry) else dict(entry)
    try:
        return NewLogEntry.model_validate(payload)
    except ValidationError as exc:
        field_errors = {
            ".".join(str(part) for part in error["loc"]) or "entry": error["msg"]
            for error in exc.errors()
        }
        raise LogValidationError(field_errors) from exc
