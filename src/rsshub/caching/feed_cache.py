#!/usr/bin/env python3
"""
Combined feed cache.

Holds the last rendered RSS document and the time it was built. The entry is
an immutable value replaced in a single assignment, so readers never see a
document paired with another refresh's timestamp.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from ..aggregator import FeedAggregator
from ..exceptions import AggregationError
from ..renderers import render_rss_xml

logger = logging.getLogger(__name__)

CACHE_DURATION = timedelta(minutes=15)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CacheEntry:
    """A rendered feed and its generation time."""
    rendered_xml: str
    last_update: datetime

    def age(self, now: datetime) -> timedelta:
        """Get age of entry relative to now."""
        return now - self.last_update


@dataclass(frozen=True)
class CacheStatus:
    """Read-only snapshot for status reporting."""
    last_update: Optional[datetime]
    cache_age: Optional[timedelta]

    @property
    def cache_age_ms(self) -> Optional[int]:
        if self.cache_age is None:
            return None
        return int(self.cache_age.total_seconds() * 1000)


class FeedCache:
    """
    Whole-feed cache with on-demand and forced refresh.

    Refreshes are serialized by a lock. A reader that finds the entry stale
    waits for any refresh in progress and re-checks before starting another,
    so concurrent stale reads collapse into one aggregation run.
    """

    def __init__(self,
                 aggregator: FeedAggregator,
                 cache_duration: timedelta = CACHE_DURATION,
                 feed_link: str = 'https://your-domain.com/rss',
                 description_max_length: int = 500,
                 clock: Callable[[], datetime] = utc_now):
        """
        Initialize feed cache.

        Args:
            aggregator: Produces fresh aggregated feeds
            cache_duration: Staleness window
            feed_link: Channel link for the rendered document
            description_max_length: Characters kept from item descriptions
            clock: Returns the current UTC time
        """
        self.aggregator = aggregator
        self.cache_duration = cache_duration
        self.feed_link = feed_link
        self.description_max_length = description_max_length
        self._clock = clock

        self._entry: Optional[CacheEntry] = None
        self._lock = asyncio.Lock()
        self._refresh_count = 0

    @property
    def entry(self) -> Optional[CacheEntry]:
        return self._entry

    @property
    def refresh_count(self) -> int:
        """Number of completed refreshes since startup."""
        return self._refresh_count

    def is_stale(self, entry: Optional[CacheEntry] = None) -> bool:
        """Check whether the given (or current) entry needs a refresh."""
        entry = entry if entry is not None else self._entry
        if entry is None:
            return True
        return entry.age(self._clock()) > self.cache_duration

    async def get_or_refresh(self) -> str:
        """
        Get the rendered feed, refreshing first if missing or stale.

        Raises:
            AggregationError: If a needed refresh fails
        """
        entry = self._entry
        if not self.is_stale(entry):
            logger.debug("Serving cached feed")
            return entry.rendered_xml

        async with self._lock:
            # Another caller may have refreshed while we waited
            entry = self._entry
            if self.is_stale(entry):
                entry = await self._refresh()
            return entry.rendered_xml

    async def force_refresh(self) -> CacheEntry:
        """
        Unconditionally rebuild and replace the cached feed.

        Raises:
            AggregationError: If aggregation or rendering fails; the previous
                entry stays in place
        """
        async with self._lock:
            return await self._refresh()

    def status(self) -> CacheStatus:
        entry = self._entry
        if entry is None:
            return CacheStatus(last_update=None, cache_age=None)
        return CacheStatus(last_update=entry.last_update, cache_age=entry.age(self._clock()))

    async def _refresh(self) -> CacheEntry:
        """Aggregate, render and publish a new entry. Caller holds the lock."""
        logger.info('Updating RSS cache...')
        try:
            feed = await self.aggregator.aggregate()
        except Exception as e:
            raise AggregationError('aggregation', e) from e

        generated_at = self._clock()
        try:
            xml = render_rss_xml(
                feed.items,
                source_names=self.aggregator.registry.names(),
                generated_at=generated_at,
                feed_link=self.feed_link,
                ttl_minutes=int(self.cache_duration.total_seconds() // 60),
                description_max_length=self.description_max_length
            )
        except Exception as e:
            raise AggregationError('rendering', e) from e

        entry = CacheEntry(rendered_xml=xml, last_update=generated_at)
        self._entry = entry
        self._refresh_count += 1
        logger.info(f'Cache updated successfully with {len(feed)} items')
        return entry
