"""
Scheduling service - composition root.

Owns the memo cache, its maintenance timer and the scheduling engine, and
makes their lifecycle explicit:

    service = SchedulingService.from_settings()
    service.start()
    outcome = service.review(card, response, profile)
    service.shutdown()
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from contextual_fsrs.cache import CacheMaintenance, MemoCache
from contextual_fsrs.config import Settings, get_settings
from contextual_fsrs.logging_config import configure_logging
from contextual_fsrs.scheduling.context import CardMemoryState, DSRUpdateResult, ReviewResponse
from contextual_fsrs.scheduling.engine import ReviewOutcome, SchedulingEngine
from contextual_fsrs.scheduling.parameters import UserProfile


@dataclass
class SchedulingService:
    """Wires the engine to an injected cache and runs cache maintenance."""

    engine: SchedulingEngine
    cache: MemoCache | None = None
    maintenance: CacheMaintenance | None = None
    target_retention: float = 0.9

    @classmethod
    def from_settings(cls, settings: Settings | None = None, setup_logging: bool = True) -> SchedulingService:
        """
        Build a service from application settings.

        Args:
            settings: Application settings (defaults to get_settings())
            setup_logging: Install the loguru sinks from LOG_LEVEL / LOG_FILE.
                Pass False when the caller has already configured logging.
        """
        settings = settings or get_settings()
        if setup_logging:
            configure_logging(settings.log_level, settings.log_file)

        cache = None
        maintenance = None
        if settings.cache_enabled:
            cache = MemoCache(
                memory_budget_bytes=settings.cache_memory_budget_bytes,
                maintenance_batch_size=settings.cache_maintenance_batch_size,
            )
            maintenance = CacheMaintenance(
                cache,
                interval_seconds=settings.cache_maintenance_interval_seconds,
                stats_interval_seconds=settings.cache_stats_interval_seconds,
            )

        engine = SchedulingEngine(cache=cache, parameters=settings.get_fsrs_parameters())
        return cls(
            engine=engine,
            cache=cache,
            maintenance=maintenance,
            target_retention=settings.fsrs_desired_retention,
        )

    def start(self) -> None:
        logger.info("Starting scheduling service (cache: {})", "on" if self.cache else "off")
        if self.maintenance:
            self.maintenance.start()

    def shutdown(self) -> None:
        """Stop maintenance, log final cache stats and drop cached data."""
        logger.info("Shutting down scheduling service...")
        if self.maintenance:
            self.maintenance.stop()
        if self.cache:
            logger.info("Final cache stats: {}", self.cache.get_stats().to_dict())
            self.cache.clear()
        logger.info("Scheduling service shutdown complete")

    def update_card(
        self,
        card: CardMemoryState,
        response: ReviewResponse,
        profile: UserProfile | None = None,
    ) -> DSRUpdateResult:
        return self.engine.update_card(card, response, profile)

    def review(
        self,
        card: CardMemoryState,
        response: ReviewResponse,
        profile: UserProfile | None = None,
        target_retention: float | None = None,
    ) -> ReviewOutcome:
        return self.engine.review(
            card,
            response,
            profile,
            target_retention=target_retention or self.target_retention,
        )

    def __enter__(self) -> SchedulingService:
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()
