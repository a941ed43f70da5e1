"""
Situational modifier tables and statistics helpers.

The time-of-day table and the environmental weights are hand-tuned
configuration data shared by the difficulty and stability calculators.
"""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from .context import AmbientNoise, Device, EnvironmentalFactors, Lighting, NetworkQuality

# Additive difficulty modifier by hour of day (0-23)
TIME_OF_DAY_DIFFICULTY: dict[int, float] = {
    0: 0.6,    # Very late - most difficult
    1: 0.6,
    2: 0.7,
    3: 0.7,
    4: 0.6,
    5: 0.4,
    6: -0.1,   # Early morning - slightly easier
    7: -0.1,
    8: -0.2,   # Peak morning performance
    9: -0.2,
    10: -0.1,
    11: 0.0,
    12: 0.1,   # Post-lunch dip
    13: 0.2,
    14: 0.3,   # Afternoon low
    15: 0.1,
    16: -0.1,  # Second peak
    17: -0.1,
    18: 0.0,
    19: 0.1,
    20: 0.2,   # Evening decline
    21: 0.3,
    22: 0.4,
    23: 0.5,
}

NETWORK_DIFFICULTY = {
    NetworkQuality.POOR: 0.2,
    NetworkQuality.OFFLINE: 0.3,
}

DEVICE_DIFFICULTY = {
    Device.MOBILE: 0.1,
    Device.TABLET: 0.05,
}

LOW_BATTERY_THRESHOLD = 0.2
LOW_BATTERY_DIFFICULTY = 0.1

NOISE_STABILITY = {
    AmbientNoise.QUIET: 1.05,
    AmbientNoise.NOISY: 0.95,
}

LIGHTING_STABILITY = {
    Lighting.OPTIMAL: 1.02,
    Lighting.DIM: 0.98,
    Lighting.BRIGHT: 0.98,
}


def time_of_day_difficulty(moment: datetime) -> float:
    return TIME_OF_DAY_DIFFICULTY.get(moment.hour, 0.0)


def environmental_difficulty(factors: EnvironmentalFactors | None) -> float:
    """Additive difficulty from network, device and battery conditions."""
    if factors is None:
        return 0.0

    modifier = NETWORK_DIFFICULTY.get(factors.network_quality, 0.0)
    modifier += DEVICE_DIFFICULTY.get(factors.device, 0.0)

    if factors.battery_level is not None and factors.battery_level < LOW_BATTERY_THRESHOLD:
        modifier += LOW_BATTERY_DIFFICULTY

    return modifier


def environmental_stability(factors: EnvironmentalFactors | None) -> float:
    """Multiplicative stability factor from noise and lighting."""
    if factors is None:
        return 1.0

    modifier = 1.0
    if factors.ambient_noise is not None:
        modifier *= NOISE_STABILITY.get(factors.ambient_noise, 1.0)
    if factors.lighting is not None:
        modifier *= LIGHTING_STABILITY.get(factors.lighting, 1.0)
    return modifier


def response_time_difficulty(response_time: float | None, average_response_time: float) -> float:
    """
    Slower than usual reads as harder, faster as easier.

    Returns 0 when the answer time is unknown or no personal average exists yet.
    """
    if response_time is None or average_response_time <= 0:
        return 0.0

    ratio = response_time / average_response_time

    if ratio > 2.0:
        return 0.5
    if ratio > 1.5:
        return 0.3
    if ratio < 0.5:
        return -0.3
    if ratio < 0.7:
        return -0.1
    return 0.0


def variance(values: Sequence[float]) -> float:
    """Population variance, 0 for an empty sequence."""
    if not values:
        return 0.0
    mean = sum(values) / len(values)
    return sum((v - mean) ** 2 for v in values) / len(values)


def trend_slope(values: Sequence[float]) -> float:
    """Least-squares slope over evenly spaced samples, 0 when undefined."""
    n = len(values)
    if n < 2:
        return 0.0

    sum_x = sum_y = sum_xy = sum_xx = 0.0
    for i, y in enumerate(values):
        sum_x += i
        sum_y += y
        sum_xy += i * y
        sum_xx += i * i

    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        return 0.0

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    return slope if slope == slope else 0.0  # NaN guard
