#!/usr/bin/env python3
"""
Background refresh of the combined feed.

Runs force_refresh on wall-clock multiples of the interval (every quarter hour
by default, like a ``*/15 * * * *`` cron entry) and optionally once at startup.
Refresh failures are logged and never reach request handling.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from .caching import FeedCache

logger = logging.getLogger(__name__)


def seconds_until_next_tick(now: datetime, interval_seconds: int) -> float:
    """
    Seconds from now until the next wall-clock multiple of the interval.

    A time exactly on a boundary waits a full interval.
    """
    elapsed = now.timestamp() % interval_seconds
    return interval_seconds - elapsed


class FeedRefresher:
    """Periodically refreshes a FeedCache in its own asyncio task."""

    def __init__(
        self,
        cache: FeedCache,
        *,
        interval_seconds: int = 900,
        refresh_on_startup: bool = True,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self.cache = cache
        self.interval_seconds = interval_seconds
        self.refresh_on_startup = refresh_on_startup
        self._clock = clock
        self._stop_event = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._task is not None:
            return
        loop = asyncio.get_running_loop()
        self._stop_event.clear()
        self._task = loop.create_task(self._run(), name="feed-refresher")
        logger.info(f"Feed refresher started (interval {self.interval_seconds}s)")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._stop_event.set()
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        finally:
            self._task = None
            logger.info("Feed refresher stopped")

    async def refresh_once(self) -> bool:
        """Run one forced refresh, logging any failure. Returns success."""
        try:
            await self.cache.force_refresh()
            return True
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Scheduled feed refresh failed")
            return False

    async def _run(self) -> None:
        if self.refresh_on_startup:
            await self.refresh_once()

        while not self._stop_event.is_set():
            delay = seconds_until_next_tick(self._clock(), self.interval_seconds)
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
            except asyncio.TimeoutError:
                await self.refresh_once()
