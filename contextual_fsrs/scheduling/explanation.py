"""
Human-readable rationale for a DSR update.

Display only: nothing in scheduling reads these strings back.
"""

from __future__ import annotations

from .context import CardMemoryState, ReviewResponse, effective_stability

FALLBACK_EXPLANATION = "Standard FSRS calculation applied"

DIFFICULTY_DELTA_THRESHOLD = 0.5
STABILITY_GAIN_RATIO = 1.2
STABILITY_LOSS_RATIO = 0.8
HIGH_FATIGUE = 0.7
LOW_CAPACITY = 0.5


class ExplanationGenerator:
    """Diffs prior and updated state into a short explanation."""

    def explain(
        self,
        card: CardMemoryState,
        response: ReviewResponse,
        difficulty: float,
        stability: float,
    ) -> str:
        """
        Build the explanation for an update.

        Args:
            card: Snapshot before the review
            response: The review being explained
            difficulty: Updated difficulty
            stability: Updated stability

        Returns:
            Clauses joined by "; ", or the fallback when nothing stands out
        """
        clauses: list[str] = []

        difficulty_change = difficulty - card.difficulty
        if abs(difficulty_change) > DIFFICULTY_DELTA_THRESHOLD:
            if difficulty_change > 0:
                clauses.append(
                    f"Difficulty increased due to {response.rating.value} rating and contextual factors"
                )
            else:
                clauses.append("Difficulty decreased reflecting improved performance")

        stability_ratio = stability / effective_stability(card.stability)
        if stability_ratio > STABILITY_GAIN_RATIO:
            clauses.append("Memory stability improved significantly")
        elif stability_ratio < STABILITY_LOSS_RATIO:
            clauses.append("Memory stability decreased due to poor performance")

        context = response.contextual_factors
        if context.session_fatigue_index > HIGH_FATIGUE:
            clauses.append("High fatigue level affected calculation")

        if context.cognitive_load_at_time < LOW_CAPACITY:
            clauses.append("Low cognitive capacity considered in adjustment")

        return "; ".join(clauses) or FALLBACK_EXPLANATION
