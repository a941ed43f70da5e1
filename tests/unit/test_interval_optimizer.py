"""
Unit tests for IntervalOptimizer.
"""

import math
from datetime import datetime

import pytest

from contextual_fsrs.scheduling import IntervalOptimizer
from contextual_fsrs.scheduling.context import StabilityTrend

MONDAY_9AM = datetime(2024, 1, 1, 9)


class TestComputeInterval:
    def test_base_interval(self, make_card):
        optimizer = IntervalOptimizer()
        card = make_card(stability=10.0)

        # 10 * ln(10) = 23.03
        assert optimizer.compute_interval(card, 0.9, now=MONDAY_9AM) == 23

    def test_target_retention_scales_interval(self, make_card):
        optimizer = IntervalOptimizer()
        card = make_card(stability=10.0)

        # 10 * ln(20) = 29.96, 10 * ln(5) = 16.09
        assert optimizer.compute_interval(card, 0.95, now=MONDAY_9AM) == 30
        assert optimizer.compute_interval(card, 0.8, now=MONDAY_9AM) == 16

    def test_minimum_one_day(self, make_card):
        optimizer = IntervalOptimizer()
        card = make_card(stability=0.1)

        assert optimizer.compute_interval(card, 0.9, now=MONDAY_9AM) == 1

    def test_hard_hour_shortens_interval(self, make_card):
        optimizer = IntervalOptimizer()
        card = make_card(stability=10.0, contextual_difficulty={"9": 2.0})

        # 23.03 * 0.8 = 18.42
        assert optimizer.compute_interval(card, 0.9, now=MONDAY_9AM) == 18

    def test_other_hours_do_not_apply(self, make_card):
        optimizer = IntervalOptimizer()
        card = make_card(stability=10.0, contextual_difficulty={"21": 2.0, "Friday": 3.0})

        assert optimizer.compute_interval(card, 0.9, now=MONDAY_9AM) == 23

    def test_contextual_modifier_floor(self, make_card):
        optimizer = IntervalOptimizer()
        card = make_card(stability=10.0, contextual_difficulty={"9": 10.0, "Monday": 10.0})

        assert optimizer.contextual_modifier(card, MONDAY_9AM) == 0.5
        # 23.03 * 0.5 = 11.51
        assert optimizer.compute_interval(card, 0.9, now=MONDAY_9AM) == 12

    def test_cognitive_load(self, make_card):
        optimizer = IntervalOptimizer()
        card = make_card(stability=10.0, cognitive_load_index=1.0)

        assert optimizer.cognitive_load_modifier(1.0) == pytest.approx(0.7)
        # 23.03 * 0.7 = 16.12
        assert optimizer.compute_interval(card, 0.9, now=MONDAY_9AM) == 16

    @pytest.mark.parametrize(
        "trend,expected",
        [
            (StabilityTrend.INCREASING, 25),  # 25.33
            (StabilityTrend.STABLE, 23),
            (StabilityTrend.DECREASING, 21),  # 20.72
        ],
    )
    def test_stability_trend(self, make_card, trend, expected):
        optimizer = IntervalOptimizer()
        card = make_card(stability=10.0, stability_trend=trend)

        assert optimizer.compute_interval(card, 0.9, now=MONDAY_9AM) == expected

    def test_rounds_to_nearest_day(self, make_card):
        optimizer = IntervalOptimizer()
        # Stability chosen so the raw interval lands just above 2.5
        card = make_card(stability=2.5 / math.log(10) + 1e-9)

        assert optimizer.compute_interval(card, 0.9, now=MONDAY_9AM) == 3

    def test_more_stability_never_shortens(self, make_card):
        optimizer = IntervalOptimizer()
        intervals = [
            optimizer.compute_interval(make_card(stability=s), 0.9, now=MONDAY_9AM) for s in (0.5, 1, 2, 5, 20, 80)
        ]

        assert intervals == sorted(intervals)
