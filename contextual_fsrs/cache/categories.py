"""
Cache categories and their freshness/capacity limits.

Limits are fixed at construction time; they are not runtime settings.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum


class CacheCategory(str, Enum):
    """Independent partitions of the memo cache."""

    DSR_CALCULATIONS = "dsrCalculations"
    CARD_SELECTIONS = "cardSelections"
    USER_PROFILES = "userProfiles"
    COGNITIVE_ANALYSIS = "cognitiveAnalysis"
    ENVIRONMENTAL_CONTEXT = "environmentalContext"
    SESSION_STATES = "sessionStates"


@dataclass(frozen=True)
class CategoryConfig:
    """Freshness and capacity of one category."""

    ttl: timedelta
    max_size: int

    @property
    def ttl_seconds(self) -> float:
        return self.ttl.total_seconds()


CATEGORY_CONFIG: dict[CacheCategory, CategoryConfig] = {
    CacheCategory.DSR_CALCULATIONS: CategoryConfig(ttl=timedelta(minutes=5), max_size=1000),
    CacheCategory.CARD_SELECTIONS: CategoryConfig(ttl=timedelta(minutes=1), max_size=500),
    CacheCategory.USER_PROFILES: CategoryConfig(ttl=timedelta(minutes=15), max_size=200),
    CacheCategory.COGNITIVE_ANALYSIS: CategoryConfig(ttl=timedelta(minutes=3), max_size=300),
    CacheCategory.ENVIRONMENTAL_CONTEXT: CategoryConfig(ttl=timedelta(minutes=2), max_size=100),
    CacheCategory.SESSION_STATES: CategoryConfig(ttl=timedelta(minutes=30), max_size=150),
}

DEFAULT_MEMORY_BUDGET_BYTES = 50 * 1024 * 1024

# Share of all entries dropped when the memory budget is exceeded
COMPACTION_RATIO = 0.2

# Size assumed when a value cannot be serialized
FALLBACK_SIZE_ESTIMATE = 1000
