"""
Scheduling Engine - contextual DSR updates for a single review.

Orchestrates the calculators in a fixed order:
    difficulty -> stability -> retrievability -> confidence -> explanation

Later stages read earlier results but never change them. The engine holds
no state between calls; the optional memo cache is injected by the owner.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from loguru import logger

from ..cache import MemoCache, create_hash
from .confidence import ConfidenceEstimator
from .context import CardMemoryState, DSRUpdateResult, ReviewResponse
from .difficulty import DifficultyCalculator
from .explanation import ExplanationGenerator
from .interval import DEFAULT_TARGET_RETENTION, IntervalOptimizer
from .parameters import DEFAULT_PARAMETERS, FSRSParameters, UserProfile
from .retrievability import RetrievabilityCalculator
from .stability import StabilityCalculator


@dataclass(frozen=True)
class ReviewOutcome:
    """DSR update plus the scheduling consequence of one review."""

    result: DSRUpdateResult
    card: CardMemoryState  # Snapshot carrying the updated DSR values
    interval_days: int


class SchedulingEngine:
    """
    Computes contextual FSRS updates.

    Every calculator is total over validated input, so update_card has no
    failure path. Input validation belongs to the caller (see schemas).
    """

    def __init__(
        self,
        cache: MemoCache | None = None,
        parameters: FSRSParameters = DEFAULT_PARAMETERS,
        difficulty: DifficultyCalculator | None = None,
        stability: StabilityCalculator | None = None,
        retrievability: RetrievabilityCalculator | None = None,
        confidence: ConfidenceEstimator | None = None,
        explanation: ExplanationGenerator | None = None,
        interval: IntervalOptimizer | None = None,
    ):
        """
        Initialize the engine.

        Args:
            cache: Memo cache for DSR results (no caching if None)
            parameters: Weights used when a profile carries none
        """
        self.cache = cache
        self.parameters = parameters
        self.difficulty = difficulty or DifficultyCalculator()
        self.stability = stability or StabilityCalculator()
        self.retrievability = retrievability or RetrievabilityCalculator()
        self.confidence = confidence or ConfidenceEstimator()
        self.explanation = explanation or ExplanationGenerator()
        self.interval = interval or IntervalOptimizer()

    def resolve_parameters(self, profile: UserProfile | None) -> FSRSParameters:
        if profile is not None and profile.fsrs_parameters is not None:
            return profile.fsrs_parameters
        return self.parameters

    def update_card(
        self,
        card: CardMemoryState,
        response: ReviewResponse,
        profile: UserProfile | None = None,
    ) -> DSRUpdateResult:
        """
        Compute the DSR update for a review, consulting the cache first.

        Args:
            card: Snapshot before the review
            response: The validated review event
            profile: Optional profile carrying personal FSRS weights

        Returns:
            DSRUpdateResult with clamped values
        """
        parameters = self.resolve_parameters(profile)

        if self.cache is None:
            return self.calculate(card, response, parameters)

        input_hash = self.input_hash(card, response, parameters)
        cached = self.cache.get_cached_dsr(card.card_id, input_hash)
        if cached is not None:
            logger.debug(f"DSR cache hit for card {card.card_id}")
            return cached

        result = self.calculate(card, response, parameters)
        self.cache.cache_dsr(card.card_id, input_hash, result)
        logger.debug(
            f"DSR computed for card {card.card_id}: D={result.difficulty:.2f}, "
            f"S={result.stability:.2f}, R={result.retrievability:.2f}"
        )
        return result

    def calculate(
        self,
        card: CardMemoryState,
        response: ReviewResponse,
        parameters: FSRSParameters = DEFAULT_PARAMETERS,
    ) -> DSRUpdateResult:
        """Run the calculators without touching the cache."""
        context = response.contextual_factors

        difficulty = self.difficulty.compute_difficulty(
            card.difficulty,
            response.rating,
            context,
            card,
            response_time=response.response_time,
        )
        stability = self.stability.compute_stability(card, response, parameters)
        retrievability = self.retrievability.compute_retrievability(card, response)
        confidence = self.confidence.compute_confidence(card, response)
        explanation = self.explanation.explain(card, response, difficulty, stability)

        return DSRUpdateResult(
            difficulty=difficulty,
            stability=stability,
            retrievability=retrievability,
            confidence=confidence,
            explanation=explanation,
        )

    def compute_interval(
        self,
        card: CardMemoryState,
        target_retention: float = DEFAULT_TARGET_RETENTION,
        now: datetime | None = None,
    ) -> int:
        """Next review interval in days. Cheap, so never cached."""
        return self.interval.compute_interval(card, target_retention, now=now)

    def review(
        self,
        card: CardMemoryState,
        response: ReviewResponse,
        profile: UserProfile | None = None,
        target_retention: float = DEFAULT_TARGET_RETENTION,
    ) -> ReviewOutcome:
        """
        Update a card and project its next interval in one call.

        The interval is computed against the freshly updated stability, using
        the review moment for the hour/weekday context.
        """
        result = self.update_card(card, response, profile)
        updated = card.with_update(result, reviewed_at=response.reviewed_at)
        interval_days = self.compute_interval(updated, target_retention, now=response.reviewed_at)

        return ReviewOutcome(result=result, card=updated, interval_days=interval_days)

    @staticmethod
    def input_hash(card: CardMemoryState, response: ReviewResponse, parameters: FSRSParameters) -> str:
        """Content hash of everything a DSR update depends on."""
        return create_hash(
            {
                "card": card,
                "response": response,
                "parameters": list(parameters),
            }
        )
