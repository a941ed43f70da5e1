"""
FSRS parameter vector.

21 weights (w0..w20) learned per user elsewhere, or the built-in defaults
tuned for the general population. Treated as immutable input.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Sequence

PARAMETER_COUNT = 21

# Reasonable bounds for any learned weight
PARAMETER_MIN = 0.001
PARAMETER_MAX = 100.0

DEFAULT_WEIGHTS: tuple[float, ...] = (
    0.4,    # w0: initial stability for Again
    0.6,    # w1: initial stability for Hard
    2.4,    # w2: initial stability for Good
    5.8,    # w3: initial stability for Easy
    4.93,   # w4: difficulty decay
    0.94,   # w5: hard growth exponent
    0.86,   # w6: hard retention pivot
    0.01,   # w7: hard growth scale
    1.49,   # w8: good growth exponent
    0.14,   # w9: good retention base
    0.94,   # w10: good forgetting exponent
    2.18,   # w11: lapse stability factor
    0.05,   # w12
    0.34,   # w13
    1.26,   # w14
    0.29,   # w15: easy growth exponent
    2.61,   # w16: easy retention pivot
    0.62,   # w17: easy growth scale
    0.36,   # w18
    0.26,   # w19
    2.4,    # w20
)


def validate_parameters(values: Sequence[float]) -> list[str]:
    """
    Check a parameter vector for shape and sanity.

    Returns:
        List of human-readable problems (empty when valid)
    """
    errors: list[str] = []

    if len(values) != PARAMETER_COUNT:
        errors.append(f"Invalid parameter count: expected {PARAMETER_COUNT}, got {len(values)}")

    for i, value in enumerate(values):
        if not math.isfinite(value):
            errors.append(f"Parameter w{i} is not finite: {value}")
        elif value < PARAMETER_MIN or value > PARAMETER_MAX:
            errors.append(f"Parameter w{i} is out of reasonable bounds: {value}")

    return errors


@dataclass(frozen=True)
class FSRSParameters:
    """Immutable FSRS weight vector."""

    weights: tuple[float, ...] = DEFAULT_WEIGHTS

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> FSRSParameters:
        """
        Build parameters from any sequence of numbers.

        Raises:
            ValueError: If the vector fails validation
        """
        weights = tuple(float(v) for v in values)
        errors = validate_parameters(weights)
        if errors:
            raise ValueError("; ".join(errors))
        return cls(weights)

    def __getitem__(self, index: int) -> float:
        return self.weights[index]

    def __iter__(self) -> Iterator[float]:
        return iter(self.weights)

    def __len__(self) -> int:
        return len(self.weights)


DEFAULT_PARAMETERS = FSRSParameters()


@dataclass(frozen=True)
class UserProfile:
    """The slice of a user profile the engine reads."""

    user_id: str
    fsrs_parameters: FSRSParameters | None = None
