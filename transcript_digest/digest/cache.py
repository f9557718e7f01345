"""
Result Cache

Bounded, thread-safe LRU cache for digests, keyed by a fingerprint of the
transcript text and the engine identity. Entries are evicted when either
the entry count or the summed cost (characters of cached transcript)
exceeds its limit.

get_or_compute() adds a single-flight guard: while one caller computes a
missing key, other callers for the same key wait for that result instead of
invoking the engine again. If the computation fails, one of the waiters
takes over.
"""

import hashlib
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable

from transcript_digest.config import CACHE_COST_LIMIT, CACHE_COUNT_LIMIT
from transcript_digest.logging_config import debug_log


def fingerprint(text: str, engine_identity: str) -> str:
    """Deterministic cache key for (text, engine). Never depends on time."""
    payload = f"{engine_identity}\x00{text}".encode("utf-8")
    return hashlib.md5(payload).hexdigest()


@dataclass(frozen=True)
class CachedResult:
    """One cache entry; replaced wholesale on overwrite."""
    key: str
    value: Any
    timestamp: float
    cost: int


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    evictions: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class ResultCache:
    """
    LRU cache with count and cost limits.

    Args:
        count_limit: Maximum number of entries
        cost_limit: Maximum summed entry cost
    """

    def __init__(self, count_limit: int = CACHE_COUNT_LIMIT, cost_limit: int = CACHE_COST_LIMIT):
        self.count_limit = count_limit
        self.cost_limit = cost_limit
        self.stats = CacheStats()
        self._entries: OrderedDict[str, CachedResult] = OrderedDict()
        self._total_cost = 0
        self._lock = threading.Lock()
        self._in_flight: dict[str, threading.Event] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    @property
    def total_cost(self) -> int:
        return self._total_cost

    def get(self, key: str) -> Any | None:
        """Cached value for key, or None. Counts a hit or a miss."""
        with self._lock:
            return self._lookup(key)

    def put(self, key: str, value: Any, cost: int = 0) -> None:
        with self._lock:
            self._store(key, value, cost)

    def get_or_compute(self, key: str, compute: Callable[[], Any], cost: int = 0) -> tuple[Any, bool]:
        """
        Return the cached value, computing and storing it on a miss.

        Args:
            key: Fingerprint of the request
            compute: Produces the value; called at most once per key at a time
            cost: Cost recorded for a newly stored value

        Returns:
            (value, hit) where hit is True if no computation was needed by
            this caller

        Raises:
            Whatever compute raises; nothing is stored in that case
        """
        while True:
            with self._lock:
                entry = self._entries.get(key)
                if entry is not None:
                    self._entries.move_to_end(key)
                    self.stats.hits += 1
                    return entry.value, True

                pending = self._in_flight.get(key)
                if pending is None:
                    self.stats.misses += 1
                    pending = threading.Event()
                    self._in_flight[key] = pending
                    owner = True
                else:
                    owner = False

            if not owner:
                debug_log(f"[Cache] Waiting for in-flight computation of {key[:8]}")
                pending.wait()
                continue

            try:
                value = compute()
                with self._lock:
                    self._store(key, value, cost)
                return value, False
            finally:
                with self._lock:
                    self._in_flight.pop(key, None)
                pending.set()

    def resize(self, count_limit: int | None = None, cost_limit: int | None = None) -> None:
        """Change limits, evicting least recently used entries as needed."""
        with self._lock:
            if count_limit is not None:
                self.count_limit = count_limit
            if cost_limit is not None:
                self.cost_limit = cost_limit
            self._evict()

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._total_cost = 0

    # --- internals (caller holds the lock) ---

    def _lookup(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            self.stats.misses += 1
            return None
        self._entries.move_to_end(key)
        self.stats.hits += 1
        return entry.value

    def _store(self, key: str, value: Any, cost: int) -> None:
        previous = self._entries.pop(key, None)
        if previous is not None:
            self._total_cost -= previous.cost
        self._entries[key] = CachedResult(key=key, value=value, timestamp=time.time(), cost=cost)
        self._total_cost += cost
        self._evict()

    def _evict(self) -> None:
        while self._entries and (
            len(self._entries) > self.count_limit or self._total_cost > self.cost_limit
        ):
            _, evicted = self._entries.popitem(last=False)
            self._total_cost -= evicted.cost
            self.stats.evictions += 1
            debug_log(f"[Cache] Evicted {evicted.key[:8]} (cost {evicted.cost})")
