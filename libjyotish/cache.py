"""
Thread-safe snapshot cache.

Entries are keyed by the requested instant truncated to the minute and expire
after a fixed lifetime (5 minutes by default). Expired entries are never
returned, and every store drops them.
"""

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from .models import AstronomicalSnapshot
from .time_utils import to_utc, truncate_to_minute


def _utcnow() -> datetime:
    return to_utc(None)


@dataclass(frozen=True)
class CacheEntry:
    key: datetime
    source: str
    snapshot: AstronomicalSnapshot
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class SnapshotCache:
    """
    Args:
        ttl: Entry lifetime in seconds; defaults to state.get_cache_ttl()
        clock: Callable returning the current aware datetime (injectable for
            tests)
    """

    def __init__(
        self,
        ttl: Optional[float] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if ttl is None:
            from .state import get_cache_ttl

            ttl = get_cache_ttl()
        self.ttl = timedelta(seconds=ttl)
        self._clock = clock
        self._entries: Dict[datetime, CacheEntry] = {}
        self._lock = threading.Lock()

    @staticmethod
    def key_for(instant: datetime) -> datetime:
        return truncate_to_minute(instant)

    def get(self, instant: datetime) -> Optional[AstronomicalSnapshot]:
        """Return the live snapshot for the instant's minute, or None."""
        key = self.key_for(instant)
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(now):
                del self._entries[key]
                return None
            return entry.snapshot

    def put(self, instant: datetime, snapshot: AstronomicalSnapshot) -> CacheEntry:
        """
        Store a snapshot; a later put for the same minute wins.

        Expired entries for other minutes are dropped at the same time, so a
        caller polling "now" holds at most ttl / 60 + 1 entries.
        """
        key = self.key_for(instant)
        now = self._clock()
        entry = CacheEntry(key, snapshot.source, snapshot, now + self.ttl)
        with self._lock:
            self._purge(now)
            self._entries[key] = entry
        return entry

    def _purge(self, now: datetime) -> int:
        # Caller holds self._lock
        stale = [k for k, e in self._entries.items() if e.is_expired(now)]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def purge_expired(self) -> int:
        """Drop expired entries and return how many were removed."""
        now = self._clock()
        with self._lock:
            return self._purge(now)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
