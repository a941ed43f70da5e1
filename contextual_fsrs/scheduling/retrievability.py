"""
Retrievability under cognitive load.

Forgetting curve R = exp(-t/S), adjusted for the learner's capacity and
fatigue at review time and for the short-term performance trend.
"""

from __future__ import annotations

from .context import (
    R_MAX,
    R_MIN,
    CardMemoryState,
    ReviewResponse,
    clamp,
    days_since_last_review,
    forgetting_curve,
)
from .modifiers import trend_slope

COGNITIVE_LOAD_WEIGHT = 0.1
FATIGUE_WEIGHT = 0.05
TREND_WEIGHT = 0.1
MIN_TREND_SAMPLES = 3


class RetrievabilityCalculator:
    """Derives current recall probability for a review."""

    def compute_retrievability(self, card: CardMemoryState, response: ReviewResponse) -> float:
        days = days_since_last_review(card, response.reviewed_at)
        base = forgetting_curve(days, card.stability)

        context = response.contextual_factors
        load_modifier = 1 - (1 - context.cognitive_load_at_time) * COGNITIVE_LOAD_WEIGHT
        fatigue_modifier = 1 - context.session_fatigue_index * FATIGUE_WEIGHT
        trend_modifier = self.trend_modifier(card)

        return clamp(base * load_modifier * fatigue_modifier * trend_modifier, R_MIN, R_MAX)

    def trend_modifier(self, card: CardMemoryState) -> float:
        """Improving ratings lift retrievability, declining ones lower it."""
        ratings = [r.numeric for r in card.recent_ratings]
        if len(ratings) < MIN_TREND_SAMPLES:
            return 1.0
        return 1.0 + trend_slope(ratings) * TREND_WEIGHT
