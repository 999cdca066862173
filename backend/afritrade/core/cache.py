"""
Expiring in-memory cache
────────────────────────
Key → (payload, fetched_at) store shared by every fetch of a data-service
instance. An entry is served while `now - fetched_at < expiry`; older entries
are treated as absent but stay in memory until `clear()` (nothing is pruned).

Writes are last-value-wins. A lock guards the dict because the periodic
refresh job runs on an APScheduler worker thread.
"""
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional


@dataclass
class CacheEntry:
    key: str
    payload: Any
    fetched_at: float


class TTLCache:
    def __init__(self, expiry_seconds: float = 24 * 60 * 60, clock: Callable[[], float] = time.time):
        self.expiry_seconds = expiry_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def is_valid(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and (self._clock() - entry.fetched_at) < self.expiry_seconds

    def get(self, key: str) -> Optional[Any]:
        """Return the payload for `key`, or None when missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or (self._clock() - entry.fetched_at) >= self.expiry_seconds:
                return None
            return entry.payload

    def put(self, key: str, payload: Any) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(key=key, payload=payload, fetched_at=self._clock())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return self.is_valid(key)

    def __len__(self) -> int:
        # Counts expired entries too
        with self._lock:
            return len(self._entries)
