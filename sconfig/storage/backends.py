# ==============================================
# Storage Backends
# ==============================================
#
# PURPOSE:
#   The two physical media a KeyValueStore can sit on.
#
# CLASSES:
# --------
# - LoadResult (dataclass)
#     values: dict          → defaults merged with persisted data
#     created: bool         → backing file/table was created or seeded
#     recovered: bool       → persisted data was unreadable, defaults used
#     unpersisted: list     → keys that failed to write while seeding
#
# - JsonBackend
#     One pretty-printed JSON object holding every key.
#     load(defaults)      → write defaults if file absent, else merge file
#     write(values, key)  → rewrite the whole file (tmp + replace)
#
# - SQLiteBackend
#     Table key_value(key TEXT PRIMARY KEY, value TEXT NOT NULL),
#     values stored as JSON text.
#     load(defaults)      → merge all rows; seed every key if table empty
#     write(values, key)  → upsert the single row for key
#
# FAILURE MODES:
# --------------
#   JSON file unreadable  → defaults stand alone, file left untouched
#   SQLite read failure   → defaults stand alone, warning logged
#   SQLite row write fails→ error logged, write() returns False
#   Filesystem errors on the JSON file propagate as OSError.
#
# ==============================================

import json
import logging
import os
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from sconfig.diagnostics import QUIET, Diagnostics
from sconfig.paths import display_path

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    values: Dict[str, Any]
    created: bool = False
    recovered: bool = False
    unpersisted: List[str] = field(default_factory=list)


class JsonBackend:
    """Flat-file backend: the full value set in one JSON document."""

    name = "json"

    def __init__(self, path: Path, indent: int = 2,
                 diagnostics: Diagnostics = QUIET):
        self.path = Path(path)
        self.indent = indent
        self.diagnostics = diagnostics
        self.relative = display_path(self.path)

    def load(self, defaults: Dict[str, Any]) -> LoadResult:
        """
        Merge persisted data over defaults.

        Args:
            defaults: Default values (not mutated)

        Returns:
            LoadResult with the merged values
        """
        if not self.path.exists():
            self._save(defaults)
            return LoadResult(values=dict(defaults), created=True)

        data = self._read()
        if data is None:
            return LoadResult(values=dict(defaults), recovered=True)
        return LoadResult(values={**defaults, **data})

    def write(self, values: Dict[str, Any], key: str) -> bool:
        """
        Rewrite the whole file with values. key is not needed here.

        JSON object keys are strings; KeyValueStore only passes string
        keys so values read back unchanged.

        Raises:
            TypeError: a value is not JSON-serializable (file untouched)
        """
        self._save(values)
        return True

    def close(self) -> None:
        pass

    def _read(self) -> Optional[Dict[str, Any]]:
        with open(self.path, "rb") as f:
            raw = f.read()
        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            self.diagnostics.warning(
                logger, 'Failed to read data at "%s": %s', self.relative, e
            )
            return None
        if not isinstance(data, dict):
            self.diagnostics.warning(
                logger, 'Failed to read data at "%s": expected a JSON object, got %s',
                self.relative, type(data).__name__,
            )
            return None
        return data

    def _save(self, values: Dict[str, Any]) -> None:
        # Serialize first so an unserializable value leaves the file intact
        text = json.dumps(values, indent=self.indent, ensure_ascii=False)
        tmp = self.path.with_name(self.path.name + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp, self.path)


class SQLiteBackend:
    """Embedded-table backend: one row per key in key_value."""

    name = "sqlite"

    CREATE_TABLE = (
        "CREATE TABLE IF NOT EXISTS key_value ("
        " key TEXT PRIMARY KEY,"
        " value TEXT NOT NULL"
        ")"
    )
    SELECT_ALL = "SELECT key, value FROM key_value"
    SELECT_ONE = "SELECT value FROM key_value WHERE key = ?"
    UPSERT = (
        "INSERT INTO key_value (key, value) VALUES (?, ?) "
        "ON CONFLICT(key) DO UPDATE SET value = excluded.value"
    )

    def __init__(self, path: Path, diagnostics: Diagnostics = QUIET):
        self.path = Path(path)
        self.diagnostics = diagnostics
        self.relative = display_path(self.path)
        self.connection: Optional[sqlite3.Connection] = None

    def connect(self) -> None:
        # Open the database file and create the table if needed
        if self.connection is None:
            self.connection = sqlite3.connect(str(self.path))
            self.connection.execute(self.CREATE_TABLE)
            self.connection.commit()

    def close(self) -> None:
        if self.connection is not None:
            self.connection.close()
            self.connection = None

    def load(self, defaults: Dict[str, Any]) -> LoadResult:
        """
        Merge all rows over defaults. An empty table is seeded with
        every merged key so the table always holds the full key set.
        """
        self.connect()
        try:
            rows = self.fetch_all()
            db_values = {key: json.loads(value) for key, value in rows}
        except (sqlite3.Error, json.JSONDecodeError) as e:
            logger.warning(
                'Failed to read data from SQLite database at "%s": %s', self.relative, e
            )
            return LoadResult(values=dict(defaults), recovered=True)

        values = {**defaults, **db_values}
        if rows:
            return LoadResult(values=values)

        unpersisted = [key for key, value in values.items()
                       if not self.write_key(key, value)]
        return LoadResult(values=values, created=True, unpersisted=unpersisted)

    def write(self, values: Dict[str, Any], key: str) -> bool:
        return self.write_key(key, values[key])

    def write_key(self, key: str, value: Any) -> bool:
        """
        Upsert one row.

        Returns:
            True on success, False if the row could not be written
        """
        try:
            if self.connection is None:
                raise sqlite3.ProgrammingError("database is not connected")
            self.connection.execute(self.UPSERT, (str(key), json.dumps(value)))
            self.connection.commit()
            return True
        except (sqlite3.Error, TypeError, ValueError) as e:
            self.diagnostics.error(
                logger, 'Error writing "%s" to SQLite database at "%s": %s',
                key, self.relative, e,
            )
            if self.connection is not None and self.connection.in_transaction:
                self.connection.rollback()
            return False

    def fetch_all(self) -> List[tuple]:
        if self.connection is None:
            raise sqlite3.ProgrammingError("database is not connected")
        return self.connection.execute(self.SELECT_ALL).fetchall()

    def fetch_one(self, key: str) -> Any:
        """Decoded persisted value for key, or None if there is no row."""
        if self.connection is None:
            raise sqlite3.ProgrammingError("database is not connected")
        row = self.connection.execute(self.SELECT_ONE, (str(key),)).fetchone()
        return json.loads(row[0]) if row else None

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
