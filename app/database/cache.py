"""
Per-collection in-memory cache for the document store

The live feed, review queue and calendar are polled every few seconds, so
whole collections are kept in memory for a short TTL. Writes replace the
cached list, so readers in the same process never see stale data.
"""
import time
from threading import Lock
from typing import Any, Dict, List, Optional, Tuple

from app.core.config import CACHE_TTL_SECONDS

Records = List[Dict[str, Any]]


class CollectionCache:
    """
    Thread-safe TTL cache of collection name -> list of records
    """
    def __init__(self, ttl_seconds: int = 60):
        self.ttl = ttl_seconds
        self._entries: Dict[str, Tuple[Records, float]] = {}
        self._lock = Lock()
        self.hits = 0
        self.misses = 0

    def get(self, collection: str) -> Optional[Records]:
        """Cached records, or None when absent or expired"""
        with self._lock:
            entry = self._entries.get(collection)
            if entry is None:
                self.misses += 1
                return None
            records, expires_at = entry
            if time.monotonic() >= expires_at:
                del self._entries[collection]
                self.misses += 1
                return None
            self.hits += 1
            return records

    def put(self, collection: str, records: Records):
        with self._lock:
            self._entries[collection] = (records, time.monotonic() + self.ttl)

    def drop(self, collection: str):
        with self._lock:
            self._entries.pop(collection, None)

    def clear(self):
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {"collections": len(self._entries), "hits": self.hits, "misses": self.misses}


_collection_cache = CollectionCache(ttl_seconds=CACHE_TTL_SECONDS)


def get_collection_cache() -> CollectionCache:
    return _collection_cache
