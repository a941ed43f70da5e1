"""
Context Model - memory state and review context value types.

A card's memory state is a snapshot owned by the persistence layer. The
scheduling engine receives a snapshot and hands back an updated one; it
never mutates shared state.

Bounds enforced on every update:
- difficulty: 1..10
- stability: >= 0.1 days
- retrievability: 0.01..0.99
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Mapping

# =============================================================================
# Bounds
# =============================================================================

D_MIN = 1.0
D_MAX = 10.0
S_MIN = 0.1
R_MIN = 0.01
R_MAX = 0.99

# Divisor floor for the forgetting curve
STABILITY_EPSILON = 0.01

# Only the most recent entries of a card's history feed the calculators
RECENT_HISTORY_WINDOW = 5

SECONDS_PER_DAY = 24 * 60 * 60


# =============================================================================
# Enumerations
# =============================================================================


class Rating(str, Enum):
    """User rating of a retrieval attempt."""

    AGAIN = "again"  # Retrieval failed
    HARD = "hard"  # Retrieved with high effort
    GOOD = "good"  # Retrieved normally
    EASY = "easy"  # Retrieved fluently

    @property
    def numeric(self) -> int:
        """Numeric encoding used for variance and trend (1-4)."""
        return _RATING_NUMBERS[self]


_RATING_NUMBERS = {
    Rating.AGAIN: 1,
    Rating.HARD: 2,
    Rating.GOOD: 3,
    Rating.EASY: 4,
}


class NetworkQuality(str, Enum):
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    OFFLINE = "offline"


class Device(str, Enum):
    DESKTOP = "desktop"
    TABLET = "tablet"
    MOBILE = "mobile"


class AmbientNoise(str, Enum):
    QUIET = "quiet"
    MODERATE = "moderate"
    NOISY = "noisy"


class Lighting(str, Enum):
    DIM = "dim"
    OPTIMAL = "optimal"
    BRIGHT = "bright"


class StabilityTrend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


# =============================================================================
# Review Context
# =============================================================================


@dataclass(frozen=True)
class EnvironmentalFactors:
    """Physical and technical conditions of a review."""

    network_quality: NetworkQuality = NetworkQuality.GOOD
    device: Device = Device.DESKTOP
    battery_level: float | None = None  # 0-1, absent on mains power
    ambient_noise: AmbientNoise | None = None
    lighting: Lighting | None = None


@dataclass(frozen=True)
class ContextualFactors:
    """Situational signals captured alongside a review."""

    session_fatigue_index: float  # 0 (fresh) to 1 (exhausted)
    cognitive_load_at_time: float  # 0 (no capacity) to 1 (full capacity)
    time_of_day: datetime  # Moment the review happened
    environmental_factors: EnvironmentalFactors = field(default_factory=EnvironmentalFactors)


@dataclass(frozen=True)
class ReviewResponse:
    """A single review event. Ephemeral, never persisted verbatim."""

    rating: Rating
    response_time: float  # ms
    contextual_factors: ContextualFactors

    @property
    def reviewed_at(self) -> datetime:
        return self.contextual_factors.time_of_day


@dataclass(frozen=True)
class PerformanceRecord:
    """One entry of a card's append-only review history."""

    rating: Rating
    timestamp: datetime


# =============================================================================
# Memory State
# =============================================================================


@dataclass(frozen=True)
class CardMemoryState:
    """
    Snapshot of a card's memory state.

    Attributes:
        card_id: Stable identifier of the card
        difficulty: Intrinsic difficulty (1-10)
        stability: Days until recall probability decays to ~37% (1/e)
        retrievability: Recall probability at last computation (0-1)
        average_response_time: Personal average answer time in ms
        performance_history: Reviews, most recent last
        cognitive_load_index: Load derived from response patterns (0-1)
        stability_trend: Direction of recent stability changes
        contextual_difficulty: Bucket key (hour "0".."23" or weekday name)
            to difficulty modifier
        last_reviewed: Time of the previous review, None if never reviewed
    """

    card_id: str
    difficulty: float = 5.0
    stability: float = 1.0
    retrievability: float = 0.9
    average_response_time: float = 0.0
    performance_history: tuple[PerformanceRecord, ...] = ()
    cognitive_load_index: float = 0.0
    stability_trend: StabilityTrend = StabilityTrend.STABLE
    contextual_difficulty: Mapping[str, float] = field(default_factory=dict)
    last_reviewed: datetime | None = None

    @property
    def recent_ratings(self) -> list[Rating]:
        """Ratings of the last few reviews, oldest first."""
        return [r.rating for r in self.performance_history[-RECENT_HISTORY_WINDOW:]]

    def with_update(self, result: DSRUpdateResult, reviewed_at: datetime | None = None) -> CardMemoryState:
        """Return a new snapshot carrying the updated DSR values."""
        changes = {
            "difficulty": result.difficulty,
            "stability": result.stability,
            "retrievability": result.retrievability,
        }
        if reviewed_at is not None:
            changes["last_reviewed"] = reviewed_at
        return replace(self, **changes)


@dataclass(frozen=True)
class DSRUpdateResult:
    """Engine output for one review."""

    difficulty: float
    stability: float
    retrievability: float
    confidence: float
    explanation: str

    def to_dict(self) -> dict[str, float | str]:
        return {
            "difficulty": self.difficulty,
            "stability": self.stability,
            "retrievability": self.retrievability,
            "confidence": self.confidence,
            "explanation": self.explanation,
        }


# =============================================================================
# Helpers
# =============================================================================


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def effective_stability(stability: float | None) -> float:
    """Stability used as a divisor; zero or absent counts as one day."""
    if stability is None or not stability > 0:
        return 1.0
    return max(stability, STABILITY_EPSILON)


def days_since_last_review(card: CardMemoryState, now: datetime) -> int:
    """
    Whole days elapsed between the card's last review and ``now``.

    Never-reviewed cards and clocks that run backwards both yield 0.
    """
    if card.last_reviewed is None:
        return 0

    last = card.last_reviewed
    if (last.tzinfo is None) != (now.tzinfo is None):
        last = last.replace(tzinfo=None)
        now = now.replace(tzinfo=None)

    elapsed = (now - last).total_seconds() / SECONDS_PER_DAY
    return max(0, math.floor(elapsed))


def forgetting_curve(days: float, stability: float | None) -> float:
    """R = exp(-t/S)"""
    return math.exp(-days / effective_stability(stability))
