"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from datetime import datetime, timedelta
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from contextual_fsrs.scheduling import (  # noqa: E402
    AmbientNoise,
    CardMemoryState,
    ContextualFactors,
    EnvironmentalFactors,
    Lighting,
    PerformanceRecord,
    Rating,
    ReviewResponse,
)

# Monday, 9 AM: the time-of-day table gives -0.2 difficulty at this hour
REVIEW_TIME = datetime(2024, 1, 1, 9, 0, 0)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class FakeClock:
    """Manually advanced monotonic clock for cache tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def clock():
    """Provide a controllable clock."""
    return FakeClock()


@pytest.fixture
def review_time():
    """Provide the canonical review moment (Monday 09:00)."""
    return REVIEW_TIME


@pytest.fixture
def make_response():
    """Factory for review responses with neutral defaults."""

    def _make(
        rating: Rating = Rating.GOOD,
        response_time: float = 5000.0,
        fatigue: float = 0.0,
        cognitive_load: float = 1.0,
        at: datetime = REVIEW_TIME,
        environment: EnvironmentalFactors | None = None,
    ) -> ReviewResponse:
        return ReviewResponse(
            rating=rating,
            response_time=response_time,
            contextual_factors=ContextualFactors(
                session_fatigue_index=fatigue,
                cognitive_load_at_time=cognitive_load,
                time_of_day=at,
                environmental_factors=environment or EnvironmentalFactors(),
            ),
        )

    return _make


@pytest.fixture
def make_card():
    """Factory for card snapshots; ``ratings`` builds a daily history ending a day before review."""

    def _make(card_id: str = "card-001", ratings: list[Rating] | None = None, **overrides) -> CardMemoryState:
        if ratings:
            start = REVIEW_TIME - timedelta(days=len(ratings))
            overrides.setdefault(
                "performance_history",
                tuple(
                    PerformanceRecord(rating=rating, timestamp=start + timedelta(days=i))
                    for i, rating in enumerate(ratings)
                ),
            )
        return CardMemoryState(card_id=card_id, **overrides)

    return _make


@pytest.fixture
def new_card(make_card):
    """A never-reviewed card with default state."""
    return make_card()


@pytest.fixture
def quiet_environment():
    """Quiet room, optimal lighting, desktop on a good network."""
    return EnvironmentalFactors(ambient_noise=AmbientNoise.QUIET, lighting=Lighting.OPTIMAL)


