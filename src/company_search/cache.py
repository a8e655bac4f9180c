"""
Caller-side helpers for the HTTP layer: a bounded TTL response cache and a
fixed-window rate limiter. Both are plain objects handed to whoever serves
requests; each guards its own state with a lock.
"""
from __future__ import annotations
import math
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Optional, Tuple

from .config import (
    CACHE_MAX_ENTRIES, CACHE_TTL_SECONDS, RATE_LIMIT_MAX, RATE_LIMIT_WINDOW_SECONDS,
)

Clock = Callable[[], float]


class TTLCache:
    """LRU cache whose entries also expire `ttl` seconds after insertion."""

    def __init__(self, ttl: float = CACHE_TTL_SECONDS,
                 max_entries: int = CACHE_MAX_ENTRIES,
                 clock: Clock = time.monotonic) -> None:
        self.ttl = float(ttl)
        self.max_entries = max(1, int(max_entries))
        self._clock = clock
        self._lock = threading.Lock()
        self._data: "OrderedDict[Hashable, Tuple[float, Any]]" = OrderedDict()

    def get(self, key: Hashable, default: Any = None) -> Any:
        now = self._clock()
        with self._lock:
            hit = self._data.get(key)
            if hit is None:
                return default
            stored_at, value = hit
            if now - stored_at >= self.ttl:
                del self._data[key]
                return default
            self._data.move_to_end(key)
            return value

    def set(self, key: Hashable, value: Any) -> None:
        now = self._clock()
        with self._lock:
            self._data[key] = (now, value)
            self._data.move_to_end(key)
            while len(self._data) > self.max_entries:
                self._data.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


@dataclass(frozen=True)
class RateDecision:
    ok: bool
    retry_after: int = 0   # whole seconds until the window resets


class RateLimiter:
    """At most `max_requests` per key within each `window` seconds."""

    def __init__(self, max_requests: int = RATE_LIMIT_MAX,
                 window: float = RATE_LIMIT_WINDOW_SECONDS,
                 clock: Clock = time.monotonic,
                 max_keys: int = 10_000) -> None:
        self.max_requests = max(1, int(max_requests))
        self.window = float(window)
        self.max_keys = max(1, int(max_keys))
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: "OrderedDict[Hashable, list]" = OrderedDict()   # key -> [started_at, count], oldest window first

    def check(self, key: Hashable) -> RateDecision:
        now = self._clock()
        with self._lock:
            rec = self._windows.get(key)
            if rec is None or now - rec[0] >= self.window:
                if rec is None and len(self._windows) >= self.max_keys:
                    self._prune(now)
                self._windows[key] = [now, 1]
                self._windows.move_to_end(key)
                return RateDecision(True)
            if rec[1] < self.max_requests:
                rec[1] += 1
                return RateDecision(True)
            retry = math.ceil(rec[0] + self.window - now)
            return RateDecision(False, max(1, retry))

    def _prune(self, now: float) -> None:
        stale = [k for k, (start, _) in self._windows.items() if now - start >= self.window]
        for k in stale:
            del self._windows[k]
        # still full: forget the clients whose windows started first
        while len(self._windows) >= self.max_keys:
            self._windows.popitem(last=False)

    def reset(self, key: Optional[Hashable] = None) -> None:
        with self._lock:
            if key is None:
                self._windows.clear()
            else:
                self._windows.pop(key, None)
