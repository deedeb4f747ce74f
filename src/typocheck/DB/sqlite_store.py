# typocheck/DB/sqlite_store.py
from __future__ import annotations
import json
import sqlite3
from typing import Any, Dict, Iterator

_SCHEMA = """
CREATE TABLE IF NOT EXISTS settings (
  key TEXT PRIMARY KEY,
  value TEXT NOT NULL
);
"""


class SQLiteStore:
    """Key/value settings persisted in SQLite; values are stored as JSON text."""
    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        self.conn: sqlite3.Connection = sqlite3.connect(db_path)
        self.conn.executescript(_SCHEMA)

    # ---- Read ----
    def get(self, key: str, default: Any = None) -> Any:
        row = self.conn.execute("SELECT value FROM settings WHERE key=?", (key,)).fetchone()
        if row is None:
            return default
        return json.loads(row[0])

    def items(self) -> Iterator[tuple[str, Any]]:
        for key, value in self.conn.execute("SELECT key, value FROM settings ORDER BY key"):
            yield key, json.loads(value)

    # ---- Create / Update ----
    def set(self, key: str, value: Any) -> None:
        self.conn.execute(
            "INSERT OR REPLACE INTO settings(key, value) VALUES (?,?)",
            (key, json.dumps(value, ensure_ascii=False)),
        )
        self.conn.commit()

    def update(self, values: Dict[str, Any]) -> None:
        rows = [(k, json.dumps(v, ensure_ascii=False)) for k, v in values.items()]
        self.conn.executemany("INSERT OR REPLACE INTO settings(key, value) VALUES (?,?)", rows)
        self.conn.commit()

    # ---- Delete ----
    def delete(self, key: str) -> None:
        self.conn.execute("DELETE FROM settings WHERE key=?", (key,))
        self.conn.commit()

    # ---- lifecycle ----
    def close(self) -> None:
        self.conn.close()
