"""
Contextual FSRS scheduling.

Components:
- Context model: CardMemoryState, ReviewResponse and their enums
- DifficultyCalculator / StabilityCalculator / RetrievabilityCalculator
- ConfidenceEstimator / ExplanationGenerator
- IntervalOptimizer: next review interval in days
- SchedulingEngine: orchestrates one review end to end
"""

from .confidence import ConfidenceEstimator
from .context import (
    AmbientNoise,
    CardMemoryState,
    ContextualFactors,
    Device,
    DSRUpdateResult,
    EnvironmentalFactors,
    Lighting,
    NetworkQuality,
    PerformanceRecord,
    Rating,
    ReviewResponse,
    StabilityTrend,
)
from .difficulty import DifficultyCalculator
from .engine import ReviewOutcome, SchedulingEngine
from .explanation import FALLBACK_EXPLANATION, ExplanationGenerator
from .interval import DEFAULT_TARGET_RETENTION, IntervalOptimizer
from .parameters import DEFAULT_PARAMETERS, FSRSParameters, UserProfile, validate_parameters
from .retrievability import RetrievabilityCalculator
from .stability import StabilityCalculator

__all__ = [
    # Context model
    "Rating",
    "NetworkQuality",
    "Device",
    "AmbientNoise",
    "Lighting",
    "StabilityTrend",
    "EnvironmentalFactors",
    "ContextualFactors",
    "ReviewResponse",
    "PerformanceRecord",
    "CardMemoryState",
    "DSRUpdateResult",
    # Parameters
    "FSRSParameters",
    "DEFAULT_PARAMETERS",
    "UserProfile",
    "validate_parameters",
    # Calculators
    "DifficultyCalculator",
    "StabilityCalculator",
    "RetrievabilityCalculator",
    "ConfidenceEstimator",
    "ExplanationGenerator",
    "FALLBACK_EXPLANATION",
    "IntervalOptimizer",
    "DEFAULT_TARGET_RETENTION",
    # Engine
    "SchedulingEngine",
    "ReviewOutcome",
]
