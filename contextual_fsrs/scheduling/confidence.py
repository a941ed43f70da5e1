"""Confidence in a single DSR update."""

from __future__ import annotations

from .context import CardMemoryState, ReviewResponse

BASE_CONFIDENCE = 0.7

# Plausible human answer window (ms); outside it the signal is noisy
PLAUSIBLE_RESPONSE_MIN = 1000
PLAUSIBLE_RESPONSE_MAX = 30000


class ConfidenceEstimator:
    """
    Scores how trustworthy an update is.

    Deeper history, a consistent streak and a plausible response time each
    raise confidence above the base.
    """

    def compute_confidence(self, card: CardMemoryState, response: ReviewResponse) -> float:
        confidence = BASE_CONFIDENCE
        history = card.performance_history

        if len(history) > 10:
            confidence += 0.2
        elif len(history) > 5:
            confidence += 0.1

        if len(history) >= 3:
            last_three = [record.rating for record in history[-3:]]
            if all(r == last_three[0] for r in last_three):
                confidence += 0.1

        if PLAUSIBLE_RESPONSE_MIN < response.response_time < PLAUSIBLE_RESPONSE_MAX:
            confidence += 0.1

        return min(1.0, confidence)
