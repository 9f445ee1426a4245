#!/usr/bin/env python3
"""
Feed aggregation pipeline.

Fetches every configured source concurrently, merges the per-source results,
sorts newest first, removes title duplicates and caps the result.
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from .deduplication import TitleDeduplicator
from .feed_fetcher import FeedFetcher
from .models import AggregatedFeed, FeedItem
from .sources import FeedSource, SourceRegistry

logger = logging.getLogger(__name__)

MAX_FEED_ITEMS = 100


def sort_newest_first(items: Sequence[FeedItem]) -> List[FeedItem]:
    """
    Stable sort by publish time, newest first.

    Items without a date sort as the epoch. Ties keep their input order.
    """
    return sorted(items, key=lambda item: item.sort_timestamp, reverse=True)


class FeedAggregator:
    """Runs one fetch-merge-sort-dedupe-cap cycle per call to aggregate()."""

    def __init__(self,
                 registry: SourceRegistry,
                 fetcher_factory: Optional[Callable[[], FeedFetcher]] = None,
                 max_items: int = MAX_FEED_ITEMS,
                 max_concurrent: int = 10):
        """
        Initialize aggregator.

        Args:
            registry: Configured feed sources
            fetcher_factory: Creates the async-context fetcher used for one run
            max_items: Cap on items in the combined feed
            max_concurrent: Maximum simultaneous downloads
        """
        self.registry = registry
        self.fetcher_factory = fetcher_factory or FeedFetcher
        self.max_items = max_items
        self.max_concurrent = max_concurrent
        self.deduplicator = TitleDeduplicator()

    async def aggregate(self, sources: Optional[Sequence[FeedSource]] = None) -> AggregatedFeed:
        """
        Build a fresh combined feed.

        Args:
            sources: Sources to aggregate (defaults to the registry)

        Returns:
            AggregatedFeed with at most max_items items, newest first
        """
        if sources is None:
            sources = self.registry.sources

        logger.info('Starting RSS feed combination...')
        start_time = time.time()

        merged = await self._fetch_all(sources)
        ordered = sort_newest_first(merged)
        unique_items, dedup_result = self.deduplicator.deduplicate(ordered)
        items = tuple(unique_items[:self.max_items])

        duration = time.time() - start_time
        logger.info(
            f"Combined {len(unique_items)} unique items from {len(sources)} sources "
            f"({dedup_result.duplicates_found} duplicates) in {duration:.2f}s"
        )

        return AggregatedFeed(items=items, generated_at=datetime.now(timezone.utc))

    async def _fetch_all(self, sources: Sequence[FeedSource]) -> List[FeedItem]:
        """Fetch all sources concurrently and concatenate in source order."""
        if not sources:
            return []

        semaphore = asyncio.Semaphore(self.max_concurrent)

        async with self.fetcher_factory() as fetcher:

            async def fetch_with_semaphore(source: FeedSource) -> List[FeedItem]:
                async with semaphore:
                    return await fetcher.fetch(source)

            # Settle all: one failing source never cancels the others
            results = await asyncio.gather(
                *(fetch_with_semaphore(source) for source in sources),
                return_exceptions=True
            )

        merged: List[FeedItem] = []
        successful = 0
        for source, result in zip(sources, results):
            if isinstance(result, BaseException):
                logger.error(f"Failed to fetch {source.name}: {result}")
                continue
            successful += 1
            merged.extend(result)

        logger.info(f"Fetched {successful}/{len(sources)} feeds")
        return merged
