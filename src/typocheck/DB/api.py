# typocheck/DB/api.py
from __future__ import annotations
import os
from typing import Any, Dict, Iterator, Protocol


class SettingsStore(Protocol):
    # Read
    def get(self, key: str, default: Any = None) -> Any: ...
    def items(self) -> Iterator[tuple[str, Any]]: ...
    # Create / Update
    def set(self, key: str, value: Any) -> None: ...
    def update(self, values: Dict[str, Any]) -> None: ...
    # Delete
    def delete(self, key: str) -> None: ...
    # lifecycle
    def close(self) -> None: ...


def make_store(dsn: str, *, initial: Dict[str, Any] | None = None) -> SettingsStore:
    """
    Factory:
      - sqlite:///path -> SQLiteStore (file is created on first use)
      - memory://      -> MemoryStore (seeded with `initial` when given)
    `initial` values never overwrite keys already persisted.
    """
    if dsn.startswith("sqlite:///"):
        path = dsn.removeprefix("sqlite:///")
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        # lazy import to keep sqlite3 off the memory-only path
        from .sqlite_store import SQLiteStore
        store: SettingsStore = SQLiteStore(path)
    elif dsn.startswith("memory://"):
        from .memory_store import MemoryStore
        store = MemoryStore()
    else:
        raise ValueError(f"Unsupported store DSN: {dsn}")

    if initial:
        missing = object()
        store.update({k: v for k, v in initial.items() if store.get(k, missing) is missing})
    return store
