"""
Contextual difficulty.

Maps the rating to a base difficulty, shifts it by the situational
modifiers, then smooths toward the prior with an exponential moving average.
"""

from __future__ import annotations

from dataclasses import dataclass

from .context import D_MAX, D_MIN, CardMemoryState, ContextualFactors, Rating, clamp
from .modifiers import environmental_difficulty, response_time_difficulty, time_of_day_difficulty

RATING_DIFFICULTY = {
    Rating.AGAIN: 8.5,
    Rating.HARD: 6.5,
    Rating.GOOD: 4.5,
    Rating.EASY: 2.5,
}


@dataclass(frozen=True)
class DifficultyConfig:
    fatigue_weight: float = 0.5
    cognitive_load_weight: float = 0.3
    smoothing: float = 0.3  # Weight of the new observation


class DifficultyCalculator:
    """Derives the next difficulty from a rating and its context."""

    def __init__(self, config: DifficultyConfig | None = None):
        self.config = config or DifficultyConfig()

    def compute_difficulty(
        self,
        prior_difficulty: float,
        rating: Rating,
        context: ContextualFactors,
        card: CardMemoryState,
        response_time: float | None = None,
    ) -> float:
        """
        Compute the blended difficulty for a review.

        Args:
            prior_difficulty: Difficulty before this review
            rating: The user's rating
            context: Situational signals of the review
            card: Card snapshot (for the personal response-time average)
            response_time: Answer time in ms (no response-time modifier when omitted)

        Returns:
            Difficulty in [1, 10]
        """
        adjusted = (
            RATING_DIFFICULTY[rating]
            + context.session_fatigue_index * self.config.fatigue_weight
            + (1 - context.cognitive_load_at_time) * self.config.cognitive_load_weight
            + time_of_day_difficulty(context.time_of_day)
            + environmental_difficulty(context.environmental_factors)
            + response_time_difficulty(response_time, card.average_response_time)
        )
        adjusted = clamp(adjusted, D_MIN, D_MAX)

        alpha = self.config.smoothing
        blended = prior_difficulty * (1 - alpha) + adjusted * alpha
        return clamp(blended, D_MIN, D_MAX)
