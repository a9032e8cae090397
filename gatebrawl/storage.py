"""SQLite storage of level start data and saved games."""

from __future__ import annotations

import os
import sqlite3
from typing import Any, Iterable, Sequence

STAT_COLUMNS = (
    "health",
    "ad",
    "movev",
    "fastmovev",
    "jumpv",
    "attackdelay",
    "fastmovedelay",
    "attackpretime",
    "x",
    "y",
    "width",
    "height",
    "addbloodcd",
    "preattack",
    "prefastmove",
    "preaddblood",
    "maxhealth",
)

TABLES = ("origin", "user")

_INTEGER_COLUMNS = {"attackdelay", "fastmovedelay", "attackpretime", "addbloodcd",
                    "preattack", "prefastmove", "preaddblood"}


class StorageError(Exception):
    """A database operation failed."""


class Database:
    """A connection to the game's SQLite file."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        try:
            self._conn = sqlite3.connect(os.fspath(path))
        except sqlite3.Error as exc:
            raise StorageError(f"cannot open database {path!s}: {exc}") from exc
        self._conn.row_factory = sqlite3.Row

    def execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        """Run a statement that returns no rows and commit it."""
        try:
            with self._conn:
                self._conn.execute(sql, tuple(params))
        except sqlite3.Error as exc:
            raise StorageError(f"SQL error: {exc}") from exc

    def query(self, sql: str, columns: Iterable[str], params: Sequence[Any] = ()) -> list[tuple]:
        """Return the named columns of every row, one tuple per row."""
        columns = list(columns)
        try:
            rows = self._conn.execute(sql, tuple(params)).fetchall()
        except sqlite3.Error as exc:
            raise StorageError(f"query error: {exc}") from exc
        result = []
        for row in rows:
            keys = set(row.keys())
            missing = [c for c in columns if c not in keys]
            if missing:
                raise StorageError(f"no column {missing[0]!r} in result")
            result.append(tuple(row[c] for c in columns))
        return result

    def ensure_schema(self) -> None:
        """Create the ``origin`` and ``user`` tables if they do not exist."""
        stats = ", ".join(
            f"{name} {'INTEGER' if name in _INTEGER_COLUMNS else 'REAL'}" for name in STAT_COLUMNS
        )
        for table in TABLES:
            self.execute(f"CREATE TABLE IF NOT EXISTS {table} (class TEXT, {stats}, levelid INTEGER)")

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()