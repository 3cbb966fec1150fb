"""
In-process read cache for entity schedules.

Keyed by (entity_type, entity_id). Every write to an entity's schedule must
call invalidate() for that entity after commit. The cache lives for the
lifetime of the process; a multi-instance deployment would need a shared
invalidation channel.
"""

import logging
import os
import threading
import time
from typing import Dict, List, Optional, Tuple

from app.utils.working_hours import WorkingHourEntry

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = float(os.getenv("SCHEDULE_CACHE_TTL_SECONDS", "300"))

CacheKey = Tuple[str, int]


class ScheduleCache:
    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS):
        self.ttl_seconds = ttl_seconds
        self._entries: Dict[CacheKey, Tuple[float, List[WorkingHourEntry]]] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, entity_type: str, entity_id: int) -> Optional[List[WorkingHourEntry]]:
        key = (entity_type, entity_id)
        with self._lock:
            item = self._entries.get(key)
            if item is None:
                self.misses += 1
                return None
            expires_at, schedule = item
            if time.monotonic() > expires_at:
                del self._entries[key]
                self.misses += 1
                return None
            self.hits += 1
            return [e.model_copy() for e in schedule]

    def set(self, entity_type: str, entity_id: int, schedule: List[WorkingHourEntry]) -> None:
        expires_at = time.monotonic() + self.ttl_seconds
        with self._lock:
            self._entries[(entity_type, entity_id)] = (expires_at, [e.model_copy() for e in schedule])

    def invalidate(self, entity_type: str, entity_id: int) -> None:
        with self._lock:
            removed = self._entries.pop((entity_type, entity_id), None)
        if removed is not None:
            logger.debug(f"Invalidated cached schedule for {entity_type}:{entity_id}")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def stats(self) -> dict:
        with self._lock:
            return {
                "size": len(self._entries),
                "keys": [f"{t}:{i}" for t, i in self._entries],
                "hits": self.hits,
                "misses": self.misses,
            }


# Singleton instance
_schedule_cache: Optional[ScheduleCache] = None


def get_schedule_cache() -> ScheduleCache:
    """Get or create the singleton ScheduleCache instance."""
    global _schedule_cache
    if _schedule_cache is None:
        _schedule_cache = ScheduleCache()
    return _schedule_cache
