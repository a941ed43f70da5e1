"""
Memo Cache - category-partitioned TTL + LRU memoization.

Stores the results of deterministic, expensive computations (DSR updates,
card selections, profile lookups, cognitive analyses, session snapshots)
so each unique input combination is computed at most once while fresh.

Storage is a two-level map: category -> key -> entry. One re-entrant lock
guards all maps and counters. Maintenance sweeps take the lock per batch
so request-path reads are never stalled for a full sweep.

Usage:
    cache = MemoCache()
    cache.set(CacheCategory.USER_PROFILES, "user-1", profile)
    profile = cache.get(CacheCategory.USER_PROFILES, "user-1")
"""

from __future__ import annotations

import dataclasses
import hashlib
import heapq
import json
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Mapping, TypeVar

from loguru import logger
from pydantic import BaseModel

from .categories import (
    CATEGORY_CONFIG,
    COMPACTION_RATIO,
    DEFAULT_MEMORY_BUDGET_BYTES,
    FALLBACK_SIZE_ESTIMATE,
    CacheCategory,
    CategoryConfig,
)

T = TypeVar("T")

DEFAULT_MAINTENANCE_BATCH_SIZE = 256


# =============================================================================
# Entries and Stats
# =============================================================================


@dataclass
class CacheEntry:
    """A cached value plus its bookkeeping. Only the access fields change."""

    value: Any
    expiry: float
    access_count: int = 0
    last_accessed: float = 0.0
    size_estimate: int = 0


@dataclass
class CategoryStats:
    items: int = 0
    memory_usage: int = 0
    hits: int = 0
    misses: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


@dataclass
class CacheStats:
    """Point-in-time snapshot of cache health."""

    total_items: int
    total_memory_usage: int  # bytes
    hit_rate: float  # 0-1
    miss_rate: float  # 0-1
    eviction_count: int
    per_category: dict[str, CategoryStats] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_items": self.total_items,
            "total_memory_usage": self.total_memory_usage,
            "hit_rate": self.hit_rate,
            "miss_rate": self.miss_rate,
            "eviction_count": self.eviction_count,
            "per_category": {
                name: {
                    "items": stats.items,
                    "memory_usage": stats.memory_usage,
                    "hits": stats.hits,
                    "misses": stats.misses,
                    "hit_rate": stats.hit_rate,
                }
                for name, stats in self.per_category.items()
            },
        }


# =============================================================================
# Serialization helpers
# =============================================================================


def _json_default(obj: Any) -> Any:
    """Render the value types this project caches as JSON-compatible data."""
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=repr)
    if isinstance(obj, Mapping):
        return dict(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not serializable")


def estimate_size(value: Any) -> int:
    """
    Best-effort byte size of a value via its JSON rendering.

    Falls back to a fixed estimate when the value cannot be serialized.
    """
    try:
        return len(json.dumps(value, default=_json_default).encode("utf-8"))
    except (TypeError, ValueError, OverflowError, RecursionError) as exc:
        logger.debug("Size estimation failed ({}), using fallback", exc)
        return FALLBACK_SIZE_ESTIMATE


def create_hash(data: Any) -> str:
    """
    Deterministic content hash for building cache keys.

    Equal inputs always produce equal hashes across processes.
    """
    try:
        canonical = json.dumps(data, default=_json_default, sort_keys=True, separators=(",", ":"))
    except (TypeError, ValueError, OverflowError, RecursionError) as exc:
        logger.debug("Canonical JSON failed ({}), hashing repr instead", exc)
        canonical = repr(data)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


# =============================================================================
# Memo Cache
# =============================================================================


class MemoCache:
    """
    Category-partitioned memoization cache.

    Each category has its own TTL and maximum entry count. When a category
    overflows, least-recently-used entries go first (ties: fewest accesses,
    then oldest insertion). A global memory budget triggers compaction of
    the coldest entries across all categories during maintenance.

    Never raises to callers on the read/write path.
    """

    def __init__(
        self,
        categories: Mapping[CacheCategory, CategoryConfig] | None = None,
        memory_budget_bytes: int = DEFAULT_MEMORY_BUDGET_BYTES,
        maintenance_batch_size: int = DEFAULT_MAINTENANCE_BATCH_SIZE,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the cache.

        Args:
            categories: Per-category overrides merged over CATEGORY_CONFIG
            memory_budget_bytes: Total estimated size that triggers compaction
            maintenance_batch_size: Entries examined per lock acquisition
            clock: Monotonic time source in seconds
        """
        # Every category keeps a bucket, overridden or not
        self._config: dict[CacheCategory, CategoryConfig] = {**CATEGORY_CONFIG, **(categories or {})}
        self.memory_budget_bytes = memory_budget_bytes
        self.maintenance_batch_size = max(1, maintenance_batch_size)
        self._clock = clock

        self._lock = threading.RLock()
        self._entries: dict[CacheCategory, OrderedDict[str, CacheEntry]] = {
            category: OrderedDict() for category in self._config
        }

        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._category_hits: dict[CacheCategory, int] = {c: 0 for c in self._config}
        self._category_misses: dict[CacheCategory, int] = {c: 0 for c in self._config}

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------

    def get(self, category: CacheCategory, key: str, default: Any = None) -> Any:
        """
        Look up a fresh entry.

        Expired entries are deleted by the read that discovers them.

        Returns:
            The cached value, or ``default`` on a miss
        """
        with self._lock:
            bucket = self._entries[category]
            entry = bucket.get(key)
            now = self._clock()

            if entry is not None and now > entry.expiry:
                del bucket[key]
                entry = None

            if entry is None:
                self._misses += 1
                self._category_misses[category] += 1
                return default

            entry.access_count += 1
            entry.last_accessed = now
            self._hits += 1
            self._category_hits[category] += 1
            return entry.value

    def set(self, category: CacheCategory, key: str, value: Any, size: int | None = None) -> None:
        """
        Store a value, replacing any previous entry for the key.

        Args:
            category: Target category
            key: Opaque key within the category
            value: Value to cache; treated as immutable once stored
            size: Caller-supplied byte size (estimated when omitted)
        """
        size_estimate = size if size is not None else estimate_size(value)

        with self._lock:
            now = self._clock()
            bucket = self._entries[category]
            bucket.pop(key, None)
            bucket[key] = CacheEntry(
                value=value,
                expiry=now + self._config[category].ttl_seconds,
                access_count=0,
                last_accessed=now,
                size_estimate=size_estimate,
            )
            self._enforce_size_locked(category)

    def get_or_compute(self, category: CacheCategory, key: str, compute: Callable[[], T]) -> T:
        """Return the cached value for key, computing and storing it on a miss."""
        sentinel = object()
        cached = self.get(category, key, sentinel)
        if cached is not sentinel:
            return cached

        value = compute()
        self.set(category, key, value)
        return value

    def enforce_size(self, category: CacheCategory) -> int:
        """
        Evict LRU entries until the category fits its max size.

        Returns:
            Number of entries evicted
        """
        with self._lock:
            return self._enforce_size_locked(category)

    def _enforce_size_locked(self, category: CacheCategory) -> int:
        bucket = self._entries[category]
        excess = len(bucket) - self._config[category].max_size
        if excess <= 0:
            return 0

        # nsmallest is stable, so insertion order breaks remaining ties
        victims = heapq.nsmallest(
            excess,
            bucket.items(),
            key=lambda item: (item[1].last_accessed, item[1].access_count),
        )
        for key, _ in victims:
            del bucket[key]
            self._evictions += 1

        logger.debug("Evicted {} entries from {}", len(victims), category.value)
        return len(victims)

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def perform_maintenance(self) -> int:
        """
        Sweep expired entries from every category, then compact if needed.

        Returns:
            Number of expired entries removed
        """
        before = len(self)
        removed = 0

        for category in self._config:
            with self._lock:
                keys = list(self._entries[category].keys())

            for start in range(0, len(keys), self.maintenance_batch_size):
                batch = keys[start : start + self.maintenance_batch_size]
                with self._lock:
                    bucket = self._entries[category]
                    now = self._clock()
                    for key in batch:
                        entry = bucket.get(key)
                        if entry is not None and now > entry.expiry:
                            del bucket[key]
                            removed += 1

        logger.info(
            "Cache maintenance completed: {} expired items removed, {} -> {} items",
            removed,
            before,
            len(self),
        )

        self.compact_memory()
        return removed

    def compact_memory(self) -> int:
        """
        Drop the coldest share of all entries when over the memory budget.

        Score = access_count * idle time; lowest scores go first.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        total_memory = 0
        candidates: list[tuple[float, CacheCategory, str, CacheEntry]] = []

        for category in self._config:
            with self._lock:
                keys = list(self._entries[category].keys())

            for start in range(0, len(keys), self.maintenance_batch_size):
                batch = keys[start : start + self.maintenance_batch_size]
                with self._lock:
                    bucket = self._entries[category]
                    for key in batch:
                        entry = bucket.get(key)
                        if entry is None:
                            continue
                        total_memory += entry.size_estimate
                        score = entry.access_count * (now - entry.last_accessed)
                        candidates.append((score, category, key, entry))

        if total_memory <= self.memory_budget_bytes:
            return 0

        remove_count = int(len(candidates) * COMPACTION_RATIO)
        logger.info(
            "Memory usage high ({:.2f}MB), compacting {} of {} entries",
            total_memory / (1024 * 1024),
            remove_count,
            len(candidates),
        )

        # nsmallest is stable, so scan order breaks score ties
        victims = heapq.nsmallest(remove_count, candidates, key=lambda item: item[0])

        removed = 0
        for start in range(0, len(victims), self.maintenance_batch_size):
            with self._lock:
                for _, category, key, entry in victims[start : start + self.maintenance_batch_size]:
                    bucket = self._entries[category]
                    # Skip entries replaced or dropped since they were scored
                    if bucket.get(key) is entry:
                        del bucket[key]
                        self._evictions += 1
                        removed += 1

        return removed

    def clear(self, category: CacheCategory | None = None) -> int:
        """
        Drop one category, or everything when no category is given.

        Hit/miss/eviction counters reset only on a full clear.

        Returns:
            Number of entries dropped
        """
        with self._lock:
            if category is not None:
                count = len(self._entries[category])
                self._entries[category].clear()
                logger.info("Cleared {} items from {} cache", count, category.value)
                return count

            count = sum(len(bucket) for bucket in self._entries.values())
            for bucket in self._entries.values():
                bucket.clear()
            self._hits = self._misses = self._evictions = 0
            self._category_hits = {c: 0 for c in self._config}
            self._category_misses = {c: 0 for c in self._config}
            logger.info("Cleared entire cache ({} items)", count)
            return count

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def get_stats(self) -> CacheStats:
        """Snapshot of cache usage. Read-only."""
        with self._lock:
            requests = self._hits + self._misses
            per_category = {
                category.value: CategoryStats(
                    items=len(bucket),
                    memory_usage=sum(e.size_estimate for e in bucket.values()),
                    hits=self._category_hits[category],
                    misses=self._category_misses[category],
                )
                for category, bucket in self._entries.items()
            }
            return CacheStats(
                total_items=sum(s.items for s in per_category.values()),
                total_memory_usage=sum(s.memory_usage for s in per_category.values()),
                hit_rate=self._hits / requests if requests else 0.0,
                miss_rate=self._misses / requests if requests else 0.0,
                eviction_count=self._evictions,
                per_category=per_category,
            )

    def peek_entry(self, category: CacheCategory, key: str) -> CacheEntry | None:
        """Entry bookkeeping without counting as an access (may be expired)."""
        with self._lock:
            entry = self._entries[category].get(key)
            return dataclasses.replace(entry) if entry is not None else None

    def keys(self, category: CacheCategory) -> list[str]:
        with self._lock:
            return list(self._entries[category].keys())

    def config_for(self, category: CacheCategory) -> CategoryConfig:
        return self._config[category]

    def __len__(self) -> int:
        with self._lock:
            return sum(len(bucket) for bucket in self._entries.values())

    # ------------------------------------------------------------------
    # Typed accessors
    # ------------------------------------------------------------------

    def get_cached_dsr(self, card_id: str, response_hash: str) -> Any:
        return self.get(CacheCategory.DSR_CALCULATIONS, f"{card_id}:{response_hash}")

    def cache_dsr(self, card_id: str, response_hash: str, dsr: Any) -> None:
        self.set(CacheCategory.DSR_CALCULATIONS, f"{card_id}:{response_hash}", dsr)

    def get_cached_card_selection(self, session_state_hash: str, available_cards_hash: str) -> Any:
        return self.get(CacheCategory.CARD_SELECTIONS, f"{session_state_hash}:{available_cards_hash}")

    def cache_card_selection(self, session_state_hash: str, available_cards_hash: str, selection: Any) -> None:
        self.set(CacheCategory.CARD_SELECTIONS, f"{session_state_hash}:{available_cards_hash}", selection)

    def get_cached_user_profile(self, user_id: str) -> Any:
        return self.get(CacheCategory.USER_PROFILES, user_id)

    def cache_user_profile(self, user_id: str, profile: Any) -> None:
        self.set(CacheCategory.USER_PROFILES, user_id, profile)

    def get_cached_cognitive_analysis(self, response_history_hash: str, session_state_hash: str) -> Any:
        return self.get(CacheCategory.COGNITIVE_ANALYSIS, f"{response_history_hash}:{session_state_hash}")

    def cache_cognitive_analysis(self, response_history_hash: str, session_state_hash: str, analysis: Any) -> None:
        self.set(CacheCategory.COGNITIVE_ANALYSIS, f"{response_history_hash}:{session_state_hash}", analysis)

    def get_cached_environmental_context(self, context_hash: str) -> Any:
        return self.get(CacheCategory.ENVIRONMENTAL_CONTEXT, context_hash)

    def cache_environmental_context(self, context_hash: str, context: Any) -> None:
        self.set(CacheCategory.ENVIRONMENTAL_CONTEXT, context_hash, context)

    def get_cached_session_state(self, session_id: str) -> Any:
        return self.get(CacheCategory.SESSION_STATES, session_id)

    def cache_session_state(self, session_id: str, state: Any) -> None:
        self.set(CacheCategory.SESSION_STATES, session_id, state)
