"""Person table backed by SQLite."""

from __future__ import annotations

import logging
import sqlite3
import threading
import uuid
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Any

from people_dao.errors import ConflictError, StorageError
from people_dao.types import Person

logger = logging.getLogger(__name__)

TABLE = "person"

# Columns a caller may filter on with select_one().
_LOOKUP_COLUMNS = frozenset({"id", "email", "phone"})
_WRITABLE_COLUMNS = frozenset({"name", "email", "phone", "birth_date", "address"})

_NOW_SQL = "strftime('%Y-%m-%dT%H:%M:%fZ', 'now')"

_SAMPLE_PEOPLE: list[dict[str, Any]] = [
    {
        "name": "João Silva",
        "email": "joao.silva@email.com",
        "phone": "11999998888",
        "birth_date": "1990-05-15",
        "address": "Rua das Flores, 123",
    },
    {
        "name": "Maria Santos",
        "email": "maria.santos@email.com",
        "phone": "11988887777",
        "birth_date": "1985-10-20",
        "address": "Av. Brasil, 456",
    },
    {
        "name": "Pedro Oliveira",
        "email": "pedro.oliveira@email.com",
        "phone": "11977776666",
        "birth_date": "1992-03-08",
        "address": "Rua do Sol, 789",
    },
]


def _casefold(value: str | None) -> str | None:
    return value.casefold() if value is not None else None


class SQLitePersonStore:
    """Insert/update/delete/select primitives over the person table.

    All values are bound as parameters. Column names only ever come from
    the fixed sets above.
    """

    def __init__(self, db_path: Path | str = ":memory:") -> None:
        self._db_path = str(db_path)
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()
        try:
            self._conn = sqlite3.connect(self._db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.create_function("casefold", 1, _casefold, deterministic=True)
            self._create_schema()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open person database at {self._db_path}: {e}", original=e) from e

    @property
    def db_path(self) -> str:
        return self._db_path

    def insert(self, fields: Mapping[str, Any]) -> Person:
        """Insert a new row. Storage assigns id, created_at and updated_at."""
        values = self._writable(fields)
        values["id"] = str(uuid.uuid4())
        columns = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        with self._transaction("insert") as conn:
            conn.execute(
                f"INSERT INTO {TABLE} ({columns}) VALUES ({placeholders})",
                list(values.values()),
            )
            row = conn.execute(f"SELECT * FROM {TABLE} WHERE id = ?", (values["id"],)).fetchone()
        return self._row_to_person(row)

    def update(self, record_id: str, fields: Mapping[str, Any]) -> Person | None:
        """Apply a partial update. Returns None when no row has record_id."""
        values = self._writable(fields)
        if not values:
            return self.get(record_id)
        assignments = ", ".join(f"{column} = ?" for column in values)
        with self._transaction("update") as conn:
            cursor = conn.execute(
                f"UPDATE {TABLE} SET {assignments} WHERE id = ?",
                [*values.values(), record_id],
            )
            if cursor.rowcount == 0:
                return None
            row = conn.execute(f"SELECT * FROM {TABLE} WHERE id = ?", (record_id,)).fetchone()
        return self._row_to_person(row)

    def delete(self, record_id: str) -> bool:
        with self._transaction("delete") as conn:
            cursor = conn.execute(f"DELETE FROM {TABLE} WHERE id = ?", (record_id,))
        return cursor.rowcount > 0

    def get(self, record_id: str) -> Person | None:
        return self.select_one("id", record_id)

    def select_one(self, column: str, value: Any) -> Person | None:
        """Exact match on an indexed column. First row by name if several match."""
        if column not in _LOOKUP_COLUMNS:
            raise ValueError(f"Cannot look up person by column '{column}'")
        rows = self._query(
            f"SELECT * FROM {TABLE} WHERE {column} = ? ORDER BY name, id LIMIT 1", (value,)
        )
        return self._row_to_person(rows[0]) if rows else None

    def select_where_name_contains(self, substring: str) -> list[Person]:
        """Case-insensitive partial match on name, ordered by name."""
        rows = self._query(
            f"SELECT * FROM {TABLE} WHERE instr(casefold(name), ?) > 0 ORDER BY name, id",
            (substring.casefold(),),
        )
        return [self._row_to_person(row) for row in rows]

    def select_all(self) -> list[Person]:
        rows = self._query(f"SELECT * FROM {TABLE} ORDER BY name, id", ())
        return [self._row_to_person(row) for row in rows]

    def count(self) -> int:
        rows = self._query(f"SELECT COUNT(*) FROM {TABLE}", ())
        return rows[0][0]

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def _create_schema(self) -> None:
        self._conn.executescript(f"""
            CREATE TABLE IF NOT EXISTS {TABLE} (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                email TEXT NOT NULL UNIQUE,
                phone TEXT,
                birth_date TEXT,
                address TEXT,
                created_at TEXT NOT NULL DEFAULT ({_NOW_SQL}),
                updated_at TEXT NOT NULL DEFAULT ({_NOW_SQL})
            );
            CREATE INDEX IF NOT EXISTS idx_{TABLE}_phone ON {TABLE} (phone);
            CREATE INDEX IF NOT EXISTS idx_{TABLE}_name ON {TABLE} (name);
            CREATE TRIGGER IF NOT EXISTS trg_{TABLE}_updated_at
            AFTER UPDATE ON {TABLE}
            FOR EACH ROW WHEN NEW.updated_at = OLD.updated_at
            BEGIN
                UPDATE {TABLE} SET updated_at = {_NOW_SQL} WHERE id = NEW.id;
            END;
        """)
        self._conn.commit()

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[sqlite3.Connection]:
        with self._lock:
            try:
                with self._conn:
                    yield self._conn
            except sqlite3.IntegrityError as e:
                if "UNIQUE" in str(e) and f"{TABLE}.email" in str(e):
                    logger.warning("Person %s rejected: duplicate email", operation)
                    raise ConflictError("A person with this email already exists", field="email") from e
                logger.error("Person %s violated a constraint: %s", operation, e)
                raise StorageError(f"Person {operation} rejected by storage: {e}", original=e) from e
            except sqlite3.Error as e:
                logger.error("Person %s failed: %s", operation, e)
                raise StorageError(f"Person {operation} failed: {e}", original=e) from e

    def _query(self, sql: str, params: tuple[Any, ...]) -> list[sqlite3.Row]:
        with self._lock:
            try:
                return self._conn.execute(sql, params).fetchall()
            except sqlite3.Error as e:
                logger.error("Person query failed: %s", e)
                raise StorageError(f"Person query failed: {e}", original=e) from e

    @staticmethod
    def _writable(fields: Mapping[str, Any]) -> dict[str, Any]:
        unknown = set(fields) - _WRITABLE_COLUMNS
        if unknown:
            raise ValueError(f"Unknown person columns: {', '.join(sorted(unknown))}")
        return {
            key: value.isoformat() if isinstance(value, date) else value
            for key, value in fields.items()
        }

    @staticmethod
    def _row_to_person(row: sqlite3.Row) -> Person:
        return Person(**dict(row))


def seed_sample_people(store: SQLitePersonStore) -> list[Person]:
    """Insert the sample people, skipping any whose email is already stored."""
    created = []
    for fields in _SAMPLE_PEOPLE:
        if store.select_one("email", fields["email"]) is not None:
            continue
        created.append(store.insert(fields))
    logger.info("Seeded %d sample people", len(created))
    return created
