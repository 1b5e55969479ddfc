"""Owned SQLite handle shared by the catalog and log repositories."""

import logging
import sqlite3
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from calorie_tracker.domain.errors import StorageError

_logger = logging.getLogger(__name__)

Params = Sequence[object]


@dataclass
class SqliteStore:
    """Single connection opened at process start and closed at shutdown."""

    connection: sqlite3.Connection

    @classmethod
    def open(cls, db_path: str) -> "SqliteStore":
        """Open (creating if needed) the database file at ``db_path``."""
        try:
            if db_path != ":memory:":
                Path(db_path).parent.mkdir(parents=True, exist_ok=True)
            connection = sqlite3.connect(db_path, check_same_thread=False)
            connection.row_factory = sqlite3.Row
            connection.execute("PRAGMA foreign_keys = ON;")
        except (OSError, sqlite3.Error) as exc:
            raise StorageError(f"Failed to open database {db_path}") from exc
        _logger.info("Opened food database at %s", db_path)
        return cls(connection=connection)

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run the enclosed statements atomically."""
        try:
            with self.connection:
                yield self.connection
        except sqlite3.Error as exc:
            raise StorageError(str(exc)) from exc

    def fetch_all(self, sql: str, params: Params = ()) -> list[sqlite3.Row]:
        """Return every row produced by a query."""
        try:
            return self.connection.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            raise StorageError(str(exc)) from exc

    def fetch_one(self, sql: str, params: Params = ()) -> sqlite3.Row | None:
        """Return the first row produced by a query, if any."""
        rows = self.fetch_all(sql, params)
        return rows[0] if rows else None

    def column_names(self, table: str) -> set[str]:
        """Return the column names currently defined on ``table``."""
        rows = self.fetch_all(f"PRAGMA table_info({table})")
        return {row["name"] for row in rows}

    def close(self) -> None:
        """Close the underlying connection."""
        self.connection.close()
