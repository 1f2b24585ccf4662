"""Thread-safe mapping from entry path to immutable entry bytes."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import Dict, Iterator, List, Optional

__all__ = ["EntryMap"]


class EntryMap(Mapping):
    """Lock-guarded ``path -> bytes`` map.

    Values are replaced wholesale and never mutated in place, so a reader that
    fetched a value before a write keeps seeing the old bytes. Iteration walks a
    snapshot of the keys taken under the lock.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, bytes] = {}
        self._lock = threading.RLock()

    def __getitem__(self, entry_path: str) -> bytes:
        with self._lock:
            return self._entries[entry_path]

    def __iter__(self) -> Iterator[str]:
        return iter(self.paths())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, entry_path: object) -> bool:
        with self._lock:
            return entry_path in self._entries

    def get(self, entry_path: str, default: Optional[bytes] = None) -> Optional[bytes]:
        with self._lock:
            return self._entries.get(entry_path, default)

    def put(self, entry_path: str, data: bytes) -> None:
        with self._lock:
            self._entries[entry_path] = bytes(data)

    def paths(self) -> List[str]:
        with self._lock:
            return list(self._entries)

    def snapshot(self) -> Dict[str, bytes]:
        """Return a shallow copy of the current map, consistent across all keys."""

        with self._lock:
            return dict(self._entries)

    def replace_all(self, entries: Mapping[str, bytes]) -> None:
        """Swap the whole map for ``entries`` in one step."""

        fresh = {path: bytes(data) for path, data in entries.items()}
        with self._lock:
            self._entries = fresh

    def clear(self) -> None:
        with self._lock:
            self._entries = {}
