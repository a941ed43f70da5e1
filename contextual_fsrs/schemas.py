"""
Inbound validation models.

The scheduling core assumes validated input. These models are the boundary:
they reject unknown ratings, negative or non-finite response times and
out-of-range indices, then convert to the core value types. Field names are
accepted in snake_case or camelCase.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from contextual_fsrs.scheduling.context import (
    AmbientNoise,
    CardMemoryState,
    ContextualFactors,
    Device,
    EnvironmentalFactors,
    Lighting,
    NetworkQuality,
    PerformanceRecord,
    Rating,
    ReviewResponse,
    StabilityTrend,
)
from contextual_fsrs.scheduling.parameters import FSRSParameters, UserProfile, validate_parameters


class _InboundModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        allow_inf_nan=False,
        extra="ignore",
    )


# ========================================
# Review Response
# ========================================


class EnvironmentalFactorsIn(_InboundModel):
    network_quality: NetworkQuality = NetworkQuality.GOOD
    device: Device = Device.DESKTOP
    battery_level: float | None = Field(default=None, ge=0.0, le=1.0)
    ambient_noise: AmbientNoise | None = None
    lighting: Lighting | None = None

    def to_factors(self) -> EnvironmentalFactors:
        return EnvironmentalFactors(
            network_quality=self.network_quality,
            device=self.device,
            battery_level=self.battery_level,
            ambient_noise=self.ambient_noise,
            lighting=self.lighting,
        )


class ContextualFactorsIn(_InboundModel):
    session_fatigue_index: float = Field(default=0.0, ge=0.0, le=1.0)
    cognitive_load_at_time: float = Field(default=1.0, ge=0.0, le=1.0)
    time_of_day: datetime
    environmental_factors: EnvironmentalFactorsIn = Field(default_factory=EnvironmentalFactorsIn)

    def to_factors(self) -> ContextualFactors:
        return ContextualFactors(
            session_fatigue_index=self.session_fatigue_index,
            cognitive_load_at_time=self.cognitive_load_at_time,
            time_of_day=self.time_of_day,
            environmental_factors=self.environmental_factors.to_factors(),
        )


class ReviewResponseIn(_InboundModel):
    """A review event as submitted by a client."""

    rating: Rating
    response_time: float = Field(ge=0.0, description="Answer time in ms")
    contextual_factors: ContextualFactorsIn

    def to_response(self) -> ReviewResponse:
        return ReviewResponse(
            rating=self.rating,
            response_time=self.response_time,
            contextual_factors=self.contextual_factors.to_factors(),
        )


# ========================================
# Card State
# ========================================


class PerformanceRecordIn(_InboundModel):
    rating: Rating
    timestamp: datetime


class CardStateIn(_InboundModel):
    """Card memory snapshot as loaded by the persistence layer."""

    card_id: str = Field(min_length=1)
    difficulty: float = Field(default=5.0, ge=1.0, le=10.0)
    stability: float = Field(default=1.0, ge=0.0)
    retrievability: float = Field(default=0.9, ge=0.0, le=1.0)
    average_response_time: float = Field(default=0.0, ge=0.0)
    performance_history: list[PerformanceRecordIn] = Field(default_factory=list)
    cognitive_load_index: float = Field(default=0.0, ge=0.0, le=1.0)
    stability_trend: StabilityTrend = StabilityTrend.STABLE
    contextual_difficulty: dict[str, float] = Field(default_factory=dict)
    last_reviewed: datetime | None = None

    def to_state(self) -> CardMemoryState:
        return CardMemoryState(
            card_id=self.card_id,
            difficulty=self.difficulty,
            stability=self.stability,
            retrievability=self.retrievability,
            average_response_time=self.average_response_time,
            performance_history=tuple(
                PerformanceRecord(rating=r.rating, timestamp=r.timestamp) for r in self.performance_history
            ),
            cognitive_load_index=self.cognitive_load_index,
            stability_trend=self.stability_trend,
            contextual_difficulty=dict(self.contextual_difficulty),
            last_reviewed=self.last_reviewed,
        )


# ========================================
# User Profile
# ========================================


class UserProfileIn(_InboundModel):
    user_id: str = Field(min_length=1)
    fsrs_parameters: list[float] | None = None

    @field_validator("fsrs_parameters")
    @classmethod
    def _check_parameters(cls, value: list[float] | None) -> list[float] | None:
        if value is not None:
            errors = validate_parameters(value)
            if errors:
                raise ValueError("; ".join(errors))
        return value

    def to_profile(self) -> UserProfile:
        parameters = FSRSParameters(tuple(self.fsrs_parameters)) if self.fsrs_parameters else None
        return UserProfile(user_id=self.user_id, fsrs_parameters=parameters)
