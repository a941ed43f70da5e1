"""
Contextual stability.

Base FSRS-style stability growth per rating, scaled by fatigue, the study
environment and the consistency of recent ratings.
"""

from __future__ import annotations

import math

from .context import (
    S_MIN,
    CardMemoryState,
    Rating,
    ReviewResponse,
    days_since_last_review,
    effective_stability,
    forgetting_curve,
)
from .modifiers import environmental_stability, variance
from .parameters import DEFAULT_PARAMETERS, FSRSParameters

FATIGUE_WEIGHT = 0.15
CONSISTENCY_WEIGHT = 0.05
CONSISTENCY_FLOOR = 0.95
MIN_CONSISTENCY_SAMPLES = 3


class StabilityCalculator:
    """Derives updated memory stability for a review."""

    def compute_stability(
        self,
        card: CardMemoryState,
        response: ReviewResponse,
        parameters: FSRSParameters = DEFAULT_PARAMETERS,
    ) -> float:
        base = self.base_stability(card, response, parameters)

        context = response.contextual_factors
        fatigue_modifier = 1 - context.session_fatigue_index * FATIGUE_WEIGHT
        environment_modifier = environmental_stability(context.environmental_factors)
        consistency_modifier = self.consistency_modifier(card)

        return max(S_MIN, base * fatigue_modifier * environment_modifier * consistency_modifier)

    def base_stability(
        self,
        card: CardMemoryState,
        response: ReviewResponse,
        parameters: FSRSParameters,
    ) -> float:
        """Stability growth before situational modifiers."""
        w = parameters
        stability = effective_stability(card.stability)
        days = days_since_last_review(card, response.reviewed_at)
        retention = forgetting_curve(days, card.stability)

        if response.rating == Rating.AGAIN:
            return stability * w[11]

        if response.rating == Rating.HARD:
            return stability * (1 + math.exp(w[5]) * (w[6] - retention) * w[7])

        if response.rating == Rating.GOOD:
            return stability * (
                1
                + math.exp(w[8])
                * (11 - card.difficulty)
                * math.pow(w[9], -retention)
                * (math.exp((1 - retention) * w[10]) - 1)
            )

        # Rating.EASY
        return stability * (1 + math.exp(w[15]) * (w[16] - retention) * w[17])

    def consistency_modifier(self, card: CardMemoryState) -> float:
        """Steady recent ratings keep stability intact; erratic ones shave it."""
        ratings = [r.numeric for r in card.recent_ratings]
        if len(ratings) < MIN_CONSISTENCY_SAMPLES:
            return 1.0
        return max(CONSISTENCY_FLOOR, 1.0 - variance(ratings) * CONSISTENCY_WEIGHT)
