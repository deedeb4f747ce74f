# typocheck/DB/memory_store.py
from __future__ import annotations
import copy
from typing import Any, Dict, Iterator


class MemoryStore:
    """Simple in-memory settings (useful for tests or ephemeral runs)."""
    def __init__(self, values: Dict[str, Any] | None = None) -> None:
        self._rows: Dict[str, Any] = dict(values or {})

    # R
    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._rows:
            return default
        # hand out copies so callers cannot mutate stored lists/dicts
        return copy.deepcopy(self._rows[key])

    def items(self) -> Iterator[tuple[str, Any]]:
        for k, v in list(self._rows.items()):
            yield k, copy.deepcopy(v)

    # C/U
    def set(self, key: str, value: Any) -> None:
        self._rows[key] = copy.deepcopy(value)

    def update(self, values: Dict[str, Any]) -> None:
        for k, v in values.items():
            self.set(k, v)

    # D
    def delete(self, key: str) -> None:
        self._rows.pop(key, None)

    def close(self) -> None:
        self._rows.clear()
