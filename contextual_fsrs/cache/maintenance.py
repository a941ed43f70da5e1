"""
Background cache maintenance for the memo cache.

Runs independent of request traffic:
- Sweeps expired entries (and compacts over-budget memory) on an interval
- Logs cache statistics on a slower interval

Runs in a daemon thread with a stop event for clean shutdown.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from datetime import datetime

from loguru import logger

from .memo_cache import MemoCache


@dataclass
class MaintenanceStatus:
    """Current maintenance status."""

    is_running: bool = False
    total_runs: int = 0
    last_run_at: datetime | None = None
    last_removed: int = 0
    error_message: str | None = None


@dataclass
class CacheMaintenance:
    """
    Periodic maintenance timer for a MemoCache.

    Usage:
        maintenance = CacheMaintenance(cache, interval_seconds=600)
        maintenance.start()
        # ... service runs ...
        maintenance.stop()
    """

    cache: MemoCache
    interval_seconds: float = 600.0  # 10 minutes
    stats_interval_seconds: float = 3600.0  # 1 hour

    # Internal state
    _status: MaintenanceStatus = field(default_factory=MaintenanceStatus)
    _thread: threading.Thread | None = field(default=None, repr=False)
    _stop_event: threading.Event = field(default_factory=threading.Event, repr=False)

    @property
    def status(self) -> MaintenanceStatus:
        return self._status

    def start(self) -> None:
        """Start the maintenance thread (no-op if already running)."""
        if self._status.is_running:
            logger.warning("Cache maintenance already running")
            return

        self._stop_event.clear()
        self._status.is_running = True
        self._thread = threading.Thread(
            target=self._loop,
            name="memo-cache-maintenance",
            daemon=True,
        )
        self._thread.start()

        logger.info(
            "Cache maintenance started (interval: {}s, stats every {}s)",
            self.interval_seconds,
            self.stats_interval_seconds,
        )

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the maintenance thread gracefully."""
        if not self._status.is_running:
            return

        self._stop_event.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=timeout)

        self._status.is_running = False
        logger.info("Cache maintenance stopped")

    def run_once(self) -> int:
        """
        Run one maintenance pass now.

        Errors are logged and recorded in the status, never propagated,
        so the background loop survives a bad pass.

        Returns:
            Number of expired entries removed
        """
        try:
            removed = self.cache.perform_maintenance()
        except Exception as exc:
            logger.error("Cache maintenance failed: {}", exc)
            self._status.error_message = str(exc)
            return 0

        self._status.total_runs += 1
        self._status.last_run_at = datetime.now()
        self._status.last_removed = removed
        self._status.error_message = None
        return removed

    def log_stats(self) -> None:
        stats = self.cache.get_stats()
        logger.info(
            "Cache stats: items={}, memory={:.2f}MB, hit_rate={:.1f}%",
            stats.total_items,
            stats.total_memory_usage / (1024 * 1024),
            stats.hit_rate * 100,
        )

    def _loop(self) -> None:
        next_maintenance = time.monotonic() + self.interval_seconds
        next_stats = time.monotonic() + self.stats_interval_seconds

        while not self._stop_event.is_set():
            timeout = max(0.0, min(next_maintenance, next_stats) - time.monotonic())
            if self._stop_event.wait(timeout=timeout):
                break  # Stop event was set

            now = time.monotonic()
            if now >= next_maintenance:
                self.run_once()
                next_maintenance = now + self.interval_seconds
            if now >= next_stats:
                self.log_stats()
                next_stats = now + self.stats_interval_seconds
