"""
Fixed-window rate limiting for the public portal routes

Callers are keyed by client IP and request path. Counts live in process
memory, so each worker limits on its own.
"""
import logging
import math
import threading
import time
from collections import defaultdict, deque
from typing import Deque, Dict

from fastapi import HTTPException, Request

from app.core.config import (
    PUBLIC_CHECKIN_RATE_LIMIT,
    PUBLIC_RSVP_RATE_LIMIT,
    RATE_LIMIT_WINDOW_SECONDS,
)

logger = logging.getLogger(__name__)


class RateLimiter:
    """At most `limit` calls per key within `window_seconds`"""

    def __init__(self, limit: int, window_seconds: int):
        self.limit = limit
        self.window_seconds = window_seconds
        self._events: Dict[str, Deque[float]] = defaultdict(deque)
        self._lock = threading.Lock()

    def _expire(self, events: Deque[float], now: float) -> None:
        threshold = now - self.window_seconds
        while events and events[0] <= threshold:
            events.popleft()

    def allow(self, key: str) -> bool:
        now = time.time()
        with self._lock:
            events = self._events[key]
            self._expire(events, now)
            if len(events) >= self.limit:
                return False
            events.append(now)
            return True

    def retry_after(self, key: str) -> float:
        """Seconds until `key` may call again (0 when it already may)"""
        now = time.time()
        with self._lock:
            events = self._events.get(key)
            if not events:
                return 0.0
            self._expire(events, now)
            if len(events) < self.limit:
                return 0.0
            return max(0.0, self.window_seconds - (now - events[0]))

    def reset(self, key: str) -> None:
        with self._lock:
            self._events.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._events.clear()


PUBLIC_RSVP_LIMITER = RateLimiter(limit=PUBLIC_RSVP_RATE_LIMIT, window_seconds=RATE_LIMIT_WINDOW_SECONDS)
PUBLIC_CHECKIN_LIMITER = RateLimiter(limit=PUBLIC_CHECKIN_RATE_LIMIT, window_seconds=RATE_LIMIT_WINDOW_SECONDS)


def client_key(request: Request) -> str:
    host = request.client.host if request.client else "unknown"
    return f"{host}_{request.url.path}"


def enforce_rate_limit(limiter: RateLimiter, request: Request) -> None:
    """
    Raise 429 with Retry-After once the caller has used up the window
    """
    key = client_key(request)
    if limiter.allow(key):
        return

    retry = limiter.retry_after(key)
    logger.warning(f"[RATE LIMIT] Rejected {request.url.path} for {key} (retry in {retry:.0f}s)")
    headers = {"Retry-After": str(int(math.ceil(retry)))} if retry else None
    raise HTTPException(
        status_code=429,
        detail="Too many requests. Please try again later.",
        headers=headers,
    )
