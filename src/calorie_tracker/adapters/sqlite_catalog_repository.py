"""SQLite implementation of the food catalog."""

import sqlite3
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID, uuid4

from calorie_tracker.adapters.sqlite_store import SqliteStore
from calorie_tracker.domain.catalog import (
    CatalogEntry,
    Food,
    NewFood,
    Portion,
    normalize_alias,
)
from calorie_tracker.domain.errors import FoodNotFoundError
from calorie_tracker.domain.nutrition import MacroProfile
from calorie_tracker.services.catalog import CatalogRepository

_TABLES = (
    """
    CREATE TABLE IF NOT EXISTS foods (
        id TEXT PRIMARY KEY,
        source TEXT NOT NULL DEFAULT 'custom',
        source_id TEXT,
        name TEXT NOT NULL,
        name_secondary TEXT,
        kcal_100g REAL NOT NULL,
        protein_100g REAL NOT NULL,
        carbs_100g REAL NOT NULL,
        fat_100g REAL NOT NULL,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS aliases (
        id TEXT PRIMARY KEY,
        food_id TEXT NOT NULL REFERENCES foods(id) ON DELETE CASCADE,
        text TEXT NOT NULL,
        lang TEXT NOT NULL DEFAULT 'mn',
        UNIQUE(food_id, text)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS portions (
        id TEXT PRIMARY KEY,
        food_id TEXT NOT NULL REFERENCES foods(id) ON DELETE CASCADE,
        label TEXT NOT NULL,
        grams REAL NOT NULL,
        is_default INTEGER NOT NULL DEFAULT 0
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS logs (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        food_id TEXT NOT NULL REFERENCES foods(id),
        logged_at TEXT NOT NULL,
        log_date TEXT NOT NULL,
        meal TEXT NOT NULL DEFAULT 'snack',
        unit_mode TEXT NOT NULL,
        quantity REAL NOT NULL,
        portion_id TEXT REFERENCES portions(id),
        portion_label TEXT NOT NULL,
        grams_total REAL NOT NULL,
        kcal REAL NOT NULL,
        protein REAL NOT NULL,
        carbs REAL NOT NULL,
        fat REAL NOT NULL,
        metadata TEXT
    )
    """,
)

_INDEXES = (
    "CREATE INDEX IF NOT EXISTS idx_aliases_text ON aliases(text)",
    "CREATE INDEX IF NOT EXISTS idx_logs_logged_at ON logs(logged_at)",
    "CREATE INDEX IF NOT EXISTS idx_logs_log_date ON logs(log_date)",
)

_FOOD_COLUMNS = (
    "f.id, f.source, f.source_id, f.name, f.name_secondary, f.kcal_100g, "
    "f.protein_100g, f.carbs_100g, f.fat_100g, f.created_at"
)


@dataclass
class SqliteCatalogRepository(CatalogRepository):
    """SQLite-backed repository for foods, aliases and portions."""

    store: SqliteStore

    def ensure_schema(self) -> list[str]:
        """Create tables, then apply additive column migrations."""
        applied: list[str] = []
        with self.store.transaction() as conn:
            for statement in _TABLES:
                conn.execute(statement)
        log_columns = self.store.column_names("logs")
        with self.store.transaction() as conn:
            if "log_date" not in log_columns:
                conn.execute("ALTER TABLE logs ADD COLUMN log_date TEXT")
                conn.execute(
                    "UPDATE logs SET log_date = substr(logged_at, 1, 10) "
                    "WHERE log_date IS NULL OR log_date = ''"
                )
                applied.append("logs.log_date")
            if "metadata" not in log_columns:
                conn.execute("ALTER TABLE logs ADD COLUMN metadata TEXT")
                applied.append("logs.metadata")
            for statement in _INDEXES:
                conn.execute(statement)
        return applied

    def get_food(self, food_id: UUID) -> Food | None:
        """Return a food by id, if present."""
        row = self.store.fetch_one(
            f"SELECT {_FOOD_COLUMNS} FROM foods f WHERE f.id = ?", (str(food_id),)
        )
        if row is None:
            return None
        return _parse_food(row)

    def find_food_by_source(self, source: str, source_id: str) -> Food | None:
        """Return the food created from an external record, if present."""
        row = self.store.fetch_one(
            f"SELECT {_FOOD_COLUMNS} FROM foods f "
            "WHERE f.source = ? AND f.source_id = ? ORDER BY f.rowid LIMIT 1",
            (source, source_id),
        )
        if row is None:
            return None
        return _parse_food(row)

    def list_catalog(self) -> list[CatalogEntry]:
        """Return foods with their alias texts in insertion order."""
        rows = self.store.fetch_all(
            f"SELECT {_FOOD_COLUMNS}, COALESCE(a.text, '') AS alias "
            "FROM foods f LEFT JOIN aliases a ON a.food_id = f.id "
            "ORDER BY f.rowid, a.rowid"
        )
        by_id: dict[str, tuple[Food, list[str]]] = {}
        for row in rows:
            entry = by_id.get(row["id"])
            if entry is None:
                entry = (_parse_food(row), [])
                by_id[row["id"]] = entry
            alias = row["alias"].strip()
            if alias and alias not in entry[1]:
                entry[1].append(alias)
        return [CatalogEntry(food=food, aliases=aliases) for food, aliases in by_id.values()]

    def list_portions(self, food_id: UUID) -> list[Portion]:
        """Return portions, default first then by ascending grams."""
        rows = self.store.fetch_all(
            "SELECT id, food_id, label, grams, is_default FROM portions "
            "WHERE food_id = ? ORDER BY is_default DESC, grams ASC",
            (str(food_id),),
        )
        return [_parse_portion(row) for row in rows]

    def list_aliases(self, food_id: UUID) -> list[tuple[str, str]]:
        """Return stored ``(text, lang)`` aliases for a food."""
        rows = self.store.fetch_all(
            "SELECT text, lang FROM aliases WHERE food_id = ? ORDER BY rowid",
            (str(food_id),),
        )
        return [(row["text"], row["lang"]) for row in rows]

    def insert_food(self, new_food: NewFood) -> Food:
        """Insert a food with aliases and portions in one transaction."""
        food_id = new_food.food_id or uuid4()
        created_at = datetime.now(tz=UTC).isoformat()
        per_100g = new_food.per_100g
        with self.store.transaction() as conn:
            conn.execute(
                "INSERT INTO foods (id, source, source_id, name, name_secondary, "
                "kcal_100g, protein_100g, carbs_100g, fat_100g, created_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    str(food_id),
                    new_food.source,
                    new_food.source_id,
                    new_food.name,
                    new_food.name_secondary,
                    per_100g.calories,
                    per_100g.protein_g,
                    per_100g.carbs_g,
                    per_100g.fat_g,
                    created_at,
                ),
            )
            for text, lang in new_food.aliases:
                _insert_alias(conn, food_id, text, lang)
            for portion in new_food.portions:
                conn.execute(
                    "INSERT INTO portions (id, food_id, label, grams, is_default) "
                    "VALUES (?, ?, ?, ?, ?)",
                    (
                        str(uuid4()),
                        str(food_id),
                        portion.label,
                        portion.grams,
                        int(portion.is_default),
                    ),
                )
        food = self.get_food(food_id)
        if food is None:
            raise FoodNotFoundError(f"Food {food_id} missing after insert")
        return food

    def add_alias(self, food_id: UUID, text: str, lang: str) -> bool:
        """Insert an alias unless (food, text) already exists."""
        with self.store.transaction() as conn:
            return _insert_alias(conn, food_id, text, lang)

    def count_logs_for_food(self, food_id: UUID) -> int:
        """Return how many log rows reference a food."""
        row = self.store.fetch_one(
            "SELECT COUNT(*) AS count FROM logs WHERE food_id = ?", (str(food_id),)
        )
        return int(row["count"]) if row else 0

    def update_food_nutrition(self, food_id: UUID, per_100g: MacroProfile) -> Food:
        """Overwrite per-100g values of a food."""
        with self.store.transaction() as conn:
            conn.execute(
                "UPDATE foods SET kcal_100g = ?, protein_100g = ?, carbs_100g = ?, "
                "fat_100g = ? WHERE id = ?",
                (
                    per_100g.calories,
                    per_100g.protein_g,
                    per_100g.carbs_g,
                    per_100g.fat_g,
                    str(food_id),
                ),
            )
        food = self.get_food(food_id)
        if food is None:
            raise FoodNotFoundError(f"Food {food_id} not found")
        return food


def _insert_alias(conn: sqlite3.Connection, food_id: UUID, text: str, lang: str) -> bool:
    alias = normalize_alias(text)
    if not alias:
        return False
    cursor = conn.execute(
        "INSERT OR IGNORE INTO aliases (id, food_id, text, lang) VALUES (?, ?, ?, ?)",
        (str(uuid4()), str(food_id), alias, lang),
    )
    return cursor.rowcount == 1


def _parse_food(row: sqlite3.Row) -> Food:
    """Parse a foods row into a domain model."""
    return Food(
        id=UUID(row["id"]),
        source=row["source"],
        source_id=row["source_id"],
        name=row["name"],
        name_secondary=row["name_secondary"],
        per_100g=MacroProfile(
            calories=float(row["kcal_100g"]),
            protein_g=float(row["protein_100g"]),
            carbs_g=float(row["carbs_100g"]),
            fat_g=float(row["fat_100g"]),
        ),
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def _parse_portion(row: sqlite3.Row) -> Portion:
    return Portion(
        id=UUID(row["id"]),
        food_id=UUID(row["food_id"]),
        label=row["label"],
        grams=float(row["grams"]),
        is_default=bool(row["is_default"]),
    )
