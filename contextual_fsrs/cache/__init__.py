"""
Memo cache for expensive, deterministic computations.

Components:
- CacheCategory / CategoryConfig: Fixed partitions with TTL and size limits
- MemoCache: Thread-safe TTL + LRU cache with memory compaction
- CacheMaintenance: Background expiry sweep and stats logging
"""

from .categories import CATEGORY_CONFIG, CacheCategory, CategoryConfig
from .maintenance import CacheMaintenance, MaintenanceStatus
from .memo_cache import CacheEntry, CacheStats, CategoryStats, MemoCache, create_hash, estimate_size

__all__ = [
    # Categories
    "CacheCategory",
    "CategoryConfig",
    "CATEGORY_CONFIG",
    # Cache
    "MemoCache",
    "CacheEntry",
    "CacheStats",
    "CategoryStats",
    "create_hash",
    "estimate_size",
    # Maintenance
    "CacheMaintenance",
    "MaintenanceStatus",
]
