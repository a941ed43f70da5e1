"""
Next review interval.

interval = S * ln(1 / (1 - target_retention)), shortened for contexts the
card has historically been hard in and for high cognitive load, and
stretched or shrunk by the stability trend.
"""

from __future__ import annotations

import math
from datetime import datetime

from .context import CardMemoryState, StabilityTrend

DEFAULT_TARGET_RETENTION = 0.9

CONTEXT_WEIGHT = 0.1
CONTEXT_FLOOR = 0.5
COGNITIVE_LOAD_WEIGHT = 0.3
COGNITIVE_LOAD_FLOOR = 0.7

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

TREND_MODIFIERS = {
    StabilityTrend.INCREASING: 1.1,
    StabilityTrend.DECREASING: 0.9,
    StabilityTrend.STABLE: 1.0,
}


class IntervalOptimizer:
    """Projects the next review interval in whole days."""

    def compute_interval(
        self,
        card: CardMemoryState,
        target_retention: float = DEFAULT_TARGET_RETENTION,
        now: datetime | None = None,
    ) -> int:
        """
        Compute days until the next review.

        Args:
            card: Snapshot carrying the freshly computed stability
            target_retention: Recall probability to aim for (0-1, exclusive)
            now: Moment whose hour and weekday select contextual modifiers

        Returns:
            Interval in days, at least 1
        """
        now = now or datetime.now()

        base_interval = card.stability * math.log(1 / (1 - target_retention))
        interval = (
            base_interval
            * self.contextual_modifier(card, now)
            * self.cognitive_load_modifier(card.cognitive_load_index)
            * TREND_MODIFIERS.get(card.stability_trend, 1.0)
        )
        # Half-up rounding, not banker's
        return max(1, math.floor(interval + 0.5))

    def contextual_modifier(self, card: CardMemoryState, now: datetime) -> float:
        """Higher historical difficulty at this hour/weekday means a shorter interval."""
        buckets = card.contextual_difficulty or {}
        hour_modifier = buckets.get(str(now.hour), 0.0)
        day_modifier = buckets.get(WEEKDAY_NAMES[now.weekday()], 0.0)
        return max(CONTEXT_FLOOR, 1.0 - (hour_modifier + day_modifier) * CONTEXT_WEIGHT)

    def cognitive_load_modifier(self, cognitive_load_index: float) -> float:
        return max(COGNITIVE_LOAD_FLOOR, 1.0 - cognitive_load_index * COGNITIVE_LOAD_WEIGHT)
