"""
Contextual FSRS scheduling engine.

Updates a flashcard's difficulty, stability and retrievability after a review,
taking session fatigue, cognitive load, time of day and device conditions
into account, and derives the next review interval.

Usage:
    from contextual_fsrs import SchedulingService

    with SchedulingService.from_settings() as service:
        outcome = service.review(card, response)
        print(outcome.interval_days, outcome.result.explanation)
"""

from contextual_fsrs.cache import CacheCategory, CacheMaintenance, MemoCache
from contextual_fsrs.config import Settings, get_settings
from contextual_fsrs.logging_config import configure_logging
from contextual_fsrs.scheduling import (
    CardMemoryState,
    ContextualFactors,
    DSRUpdateResult,
    EnvironmentalFactors,
    FSRSParameters,
    Rating,
    ReviewOutcome,
    ReviewResponse,
    SchedulingEngine,
    UserProfile,
)
from contextual_fsrs.service import SchedulingService

__version__ = "1.0.0"

__all__ = [
    "CacheCategory",
    "CacheMaintenance",
    "MemoCache",
    "Settings",
    "get_settings",
    "configure_logging",
    "CardMemoryState",
    "ContextualFactors",
    "DSRUpdateResult",
    "EnvironmentalFactors",
    "FSRSParameters",
    "Rating",
    "ReviewOutcome",
    "ReviewResponse",
    "SchedulingEngine",
    "UserProfile",
    "SchedulingService",
]
