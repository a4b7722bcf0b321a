"""Process-wide memo of parsed schema files."""

from __future__ import annotations

import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any


class SchemaCache:
    """Append-only map from resolved schema path to parsed content.

    Reads never take the lock. Two threads may parse the same file at once;
    only the first insertion is kept and both callers get that value.
    """

    def __init__(self) -> None:
        self._entries: dict[Path, Any] = {}
        self._lock = threading.Lock()

    def get(self, path: Path) -> Any | None:
        return self._entries.get(path.resolve())

    def get_or_load(self, path: Path, loader: Callable[[Path], Any]) -> Any:
        key = path.resolve()
        if key in self._entries:
            return self._entries[key]
        loaded = loader(key)
        with self._lock:
            return self._entries.setdefault(key, loaded)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, Path) and path.resolve() in self._entries

    def __len__(self) -> int:
        return len(self._entries)
