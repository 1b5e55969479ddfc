"""SQLite repository for food logs."""

import json
import sqlite3
from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

from calorie_tracker.adapters.sqlite_store import SqliteStore
from calorie_tracker.domain.errors import StorageError
from calorie_tracker.domain.logs import LogEntry, LogMetadata, NewLogEntry, RecentFood
from calorie_tracker.domain.nutrition import MacroProfile, ResolvedAmount
from calorie_tracker.services.ledger import LogRepository

_LOG_COLUMNS = (
    "l.id, l.user_id, l.food_id, l.logged_at, l.log_date, l.meal, l.unit_mode, "
    "l.quantity, l.portion_id, l.portion_label, l.grams_total, l.kcal, l.protein, "
    "l.carbs, l.fat, l.metadata, f.name AS food_name"
)


@dataclass
class SqliteLogRepository(LogRepository):
    """SQLite implementation for log rows."""

    store: SqliteStore

    def insert_logs(self, user_id: str, entries: list[NewLogEntry]) -> list[LogEntry]:
        """Insert rows in one transaction and return them."""
        ids: list[UUID] = []
        with self.store.transaction() as conn:
            for entry in entries:
                log_id = uuid4()
                logged_at = entry.logged_at or datetime.now(tz=UTC)
                conn.execute(
                    "INSERT INTO logs (id, user_id, food_id, logged_at, log_date, meal, "
                    "unit_mode, quantity, portion_id, portion_label, grams_total, kcal, "
                    "protein, carbs, fat, metadata) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    (
                        str(log_id),
                        user_id,
                        str(entry.food_id),
                        _format_timestamp(logged_at),
                        entry.log_date.isoformat(),
                        entry.meal,
                        entry.unit_mode,
                        entry.quantity,
                        str(entry.portion_id) if entry.portion_id else None,
                        entry.portion_label,
                        entry.grams_total,
                        entry.calories,
                        entry.protein_g,
                        entry.carbs_g,
                        entry.fat_g,
                        entry.metadata.model_dump_json() if entry.metadata else None,
                    ),
                )
                ids.append(log_id)
        created: list[LogEntry] = []
        for log_id in ids:
            log = self.get_log(log_id)
            if log is None:
                raise StorageError(f"Failed to insert log {log_id}")
            created.append(log)
        return created

    def get_log(self, log_id: UUID) -> LogEntry | None:
        """Return a log row by id."""
        row = self.store.fetch_one(
            f"SELECT {_LOG_COLUMNS} FROM logs l LEFT JOIN foods f ON f.id = l.food_id "
            "WHERE l.id = ?",
            (str(log_id),),
        )
        if row is None:
            return None
        return _parse_log(row)

    def list_logs_by_day(self, user_id: str, day: date) -> list[LogEntry]:
        """Return logs for a civil date ordered by logging time."""
        rows = self.store.fetch_all(
            f"SELECT {_LOG_COLUMNS} FROM logs l LEFT JOIN foods f ON f.id = l.food_id "
            "WHERE l.user_id = ? AND l.log_date = ? "
            "ORDER BY l.logged_at ASC, l.rowid ASC",
            (user_id, day.isoformat()),
        )
        return [_parse_log(row) for row in rows]

    def list_logs_for_range(self, user_id: str, start: date, end: date) -> list[LogEntry]:
        """Return logs within an inclusive date range."""
        rows = self.store.fetch_all(
            f"SELECT {_LOG_COLUMNS} FROM logs l LEFT JOIN foods f ON f.id = l.food_id "
            "WHERE l.user_id = ? AND l.log_date >= ? AND l.log_date <= ? "
            "ORDER BY l.log_date ASC, l.logged_at ASC, l.rowid ASC",
            (user_id, start.isoformat(), end.isoformat()),
        )
        return [_parse_log(row) for row in rows]

    def delete_log(self, log_id: UUID) -> bool:
        """Delete a log row."""
        with self.store.transaction() as conn:
            cursor = conn.execute("DELETE FROM logs WHERE id = ?", (str(log_id),))
            return cursor.rowcount > 0

    def update_log_amount(
        self, log_id: UUID, amount: ResolvedAmount, totals: MacroProfile
    ) -> LogEntry | None:
        """Replace quantity columns and the nutrition snapshot."""
        with self.store.transaction() as conn:
            conn.execute(
                "UPDATE logs SET unit_mode = ?, quantity = ?, portion_id = ?, "
                "portion_label = ?, grams_total = ?, kcal = ?, protein = ?, carbs = ?, "
                "fat = ? WHERE id = ?",
                (
                    amount.unit_mode,
                    amount.quantity,
                    str(amount.portion_id) if amount.portion_id else None,
                    amount.portion_label,
                    amount.grams_total,
                    totals.calories,
                    totals.protein_g,
                    totals.carbs_g,
                    totals.fat_g,
                    str(log_id),
                ),
            )
        return self.get_log(log_id)

    def list_recent_foods(self, user_id: str, limit: int) -> list[RecentFood]:
        """Return foods by their latest log, newest first."""
        rows = self.store.fetch_all(
            "SELECT f.id AS food_id, f.name, f.name_secondary, f.kcal_100g, "
            "f.protein_100g, f.carbs_100g, f.fat_100g, "
            "MAX(l.logged_at) AS last_logged_at "
            "FROM logs l JOIN foods f ON f.id = l.food_id "
            "WHERE l.user_id = ? GROUP BY f.id "
            "ORDER BY last_logged_at DESC LIMIT ?",
            (user_id, limit),
        )
        return [
            RecentFood(
                food_id=UUID(row["food_id"]),
                name=row["name"],
                name_secondary=row["name_secondary"],
                per_100g=MacroProfile(
                    calories=float(row["kcal_100g"]),
                    protein_g=float(row["protein_100g"]),
                    carbs_g=float(row["carbs_100g"]),
                    fat_g=float(row["fat_100g"]),
                ),
                last_logged_at=datetime.fromisoformat(row["last_logged_at"]),
            )
            for row in rows
        ]

    def list_logged_days(self, user_id: str, until: date) -> list[date]:
        """Return distinct logged dates up to ``until``, newest first."""
        rows = self.store.fetch_all(
            "SELECT DISTINCT log_date FROM logs WHERE user_id = ? AND log_date <= ? "
            "ORDER BY log_date DESC",
            (user_id, until.isoformat()),
        )
        return [date.fromisoformat(row["log_date"]) for row in rows]


def _format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="microseconds")


def _parse_log(row: sqlite3.Row) -> LogEntry:
    raw_metadata = row["metadata"]
    metadata = (
        LogMetadata.model_validate(json.loads(raw_metadata)) if raw_metadata else None
    )
    return LogEntry(
        id=UUID(row["id"]),
        user_id=row["user_id"],
        food_id=UUID(row["food_id"]),
        logged_at=datetime.fromisoformat(row["logged_at"]),
        log_date=date.fromisoformat(row["log_date"]),
        meal=row["meal"],
        unit_mode=row["unit_mode"],
        quantity=float(row["quantity"]),
        portion_id=UUID(row["portion_id"]) if row["portion_id"] else None,
        portion_label=row["portion_label"],
        grams_total=float(row["grams_total"]),
        totals=MacroProfile(
            calories=float(row["kcal"]),
            protein_g=float(row["protein"]),
            carbs_g=float(row["carbs"]),
            fat_g=float(row["fat"]),
        ),
        metadata=metadata,
        food_name=row["food_name"],
    )
