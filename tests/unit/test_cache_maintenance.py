"""
Unit tests for CacheMaintenance and the SchedulingService lifecycle.
"""

import pytest

from contextual_fsrs.cache import CacheCategory, CacheMaintenance, MemoCache
from contextual_fsrs.config import Settings
from contextual_fsrs.scheduling import Rating
from contextual_fsrs.service import SchedulingService


class BrokenCache(MemoCache):
    """Cache whose sweep always fails."""

    def perform_maintenance(self) -> int:
        raise RuntimeError("sweep exploded")


class TestRunOnce:
    def test_records_status(self, clock):
        cache = MemoCache(clock=clock)
        cache.set(CacheCategory.CARD_SELECTIONS, "k", "v")
        clock.advance(61)
        maintenance = CacheMaintenance(cache)

        removed = maintenance.run_once()

        assert removed == 1
        assert maintenance.status.total_runs == 1
        assert maintenance.status.last_removed == 1
        assert maintenance.status.last_run_at is not None
        assert maintenance.status.error_message is None

    def test_failure_is_recorded_not_raised(self):
        maintenance = CacheMaintenance(BrokenCache())

        assert maintenance.run_once() == 0
        assert maintenance.status.error_message == "sweep exploded"
        assert maintenance.status.total_runs == 0

    def test_log_stats_does_not_touch_entries(self, clock):
        cache = MemoCache(clock=clock)
        cache.set(CacheCategory.USER_PROFILES, "u", 1)

        CacheMaintenance(cache).log_stats()

        assert cache.peek_entry(CacheCategory.USER_PROFILES, "u").access_count == 0


class TestBackgroundThread:
    def test_start_and_stop(self):
        maintenance = CacheMaintenance(MemoCache(), interval_seconds=3600, stats_interval_seconds=3600)

        maintenance.start()
        assert maintenance.status.is_running

        maintenance.stop(timeout=2.0)
        assert not maintenance.status.is_running

    def test_start_twice_is_noop(self):
        maintenance = CacheMaintenance(MemoCache(), interval_seconds=3600)

        maintenance.start()
        thread = maintenance._thread
        maintenance.start()

        assert maintenance._thread is thread
        maintenance.stop(timeout=2.0)

    def test_stop_without_start(self):
        maintenance = CacheMaintenance(MemoCache())

        maintenance.stop()

        assert not maintenance.status.is_running

    def test_loop_sweeps_on_interval(self):
        cache = MemoCache()
        maintenance = CacheMaintenance(cache, interval_seconds=0.01, stats_interval_seconds=3600)

        maintenance.start()
        maintenance._stop_event.wait(0.2)
        maintenance.stop(timeout=2.0)

        assert maintenance.status.total_runs >= 1


class TestSchedulingService:
    @pytest.fixture(autouse=True)
    def logging_calls(self, monkeypatch):
        calls = []
        monkeypatch.setattr(
            "contextual_fsrs.service.configure_logging",
            lambda level, log_file: calls.append((level, log_file)),
        )
        return calls

    def test_from_settings_configures_logging(self, logging_calls, tmp_path):
        log_file = str(tmp_path / "fsrs.log")
        settings = Settings(_env_file=None, cache_enabled=False, log_level="DEBUG", log_file=log_file)

        SchedulingService.from_settings(settings)

        assert logging_calls == [("DEBUG", log_file)]

    def test_caller_can_keep_its_own_logging(self, logging_calls):
        settings = Settings(_env_file=None, cache_enabled=False)

        SchedulingService.from_settings(settings, setup_logging=False)

        assert logging_calls == []

    def test_from_settings_with_cache(self):
        settings = Settings(_env_file=None, cache_enabled=True, cache_memory_budget_mb=1)

        service = SchedulingService.from_settings(settings)

        assert service.cache is not None
        assert service.engine.cache is service.cache
        assert service.maintenance.cache is service.cache
        assert service.cache.memory_budget_bytes == 1024 * 1024

    def test_from_settings_without_cache(self):
        settings = Settings(_env_file=None, cache_enabled=False)

        service = SchedulingService.from_settings(settings)

        assert service.cache is None
        assert service.maintenance is None
        assert service.engine.cache is None

    def test_context_manager_lifecycle(self, new_card, make_response):
        settings = Settings(_env_file=None, cache_maintenance_interval_seconds=3600)

        with SchedulingService.from_settings(settings) as service:
            assert service.maintenance.status.is_running
            service.update_card(new_card, make_response())
            assert len(service.cache) == 1

        assert not service.maintenance.status.is_running
        assert len(service.cache) == 0

    def test_review_uses_configured_retention(self, make_card, make_response):
        settings = Settings(_env_file=None, cache_enabled=False, fsrs_desired_retention=0.8)
        service = SchedulingService.from_settings(settings)
        card = make_card(stability=10.0)

        assert service.review(card, make_response(Rating.GOOD)).interval_days == 16
        assert service.review(card, make_response(Rating.GOOD), target_retention=0.9).interval_days == 23
