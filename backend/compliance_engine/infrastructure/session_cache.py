"""Session Data Cache — per-service map from Congress number to raw session payload.

Invariants:
    - Owned by one SessionBoundaryService instance (no module-level singleton)
    - ttl_seconds=None: entries live until clear()/invalidate() or process exit
    - With a ttl, an entry older than ttl is evicted on the next read
    - Concurrent writers for one key store the same deterministic payload (benign race, no lock)

Design Decisions:
    - Injectable clock: tests age entries without sleeping
    - Ages measured on the same UTC clock the service uses
"""

from dataclasses import dataclass
from datetime import datetime

from compliance_engine.core.domain_types import Clock, utc_now


@dataclass
class _Entry:
    payload: dict
    stored_at: datetime


class SessionDataCache:
    """Congress number -> payload, with optional expiry."""

    def __init__(self, ttl_seconds: float | None = None, clock: Clock = utc_now):
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[int, _Entry] = {}

    def get(self, congress: int) -> dict | None:
        entry = self._entries.get(congress)
        if entry is None:
            return None
        if self._expired(entry):
            del self._entries[congress]
            return None
        return entry.payload

    def set(self, congress: int, payload: dict) -> None:
        self._entries[congress] = _Entry(payload=payload, stored_at=self._clock())

    def __contains__(self, congress: int) -> bool:
        return self.get(congress) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def invalidate(self, congress: int) -> None:
        self._entries.pop(congress, None)

    def clear(self) -> None:
        self._entries.clear()

    def _expired(self, entry: _Entry) -> bool:
        if self._ttl_seconds is None:
            return False
        age = (self._clock() - entry.stored_at).total_seconds()
        return age >= self._ttl_seconds
