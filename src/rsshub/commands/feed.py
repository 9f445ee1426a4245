#!/usr/bin/env python3
"""
Feed command: one-shot aggregation from the command line.
"""

import asyncio
import json
from argparse import Namespace
from functools import partial
from pathlib import Path

from .base import BaseCommand
from ..aggregator import FeedAggregator
from ..feed_fetcher import FeedFetcher
from ..renderers import render_json, render_rss_xml


class FeedCommand(BaseCommand):
    """Build the combined feed once and print or save it."""

    SUBCOMMANDS = ['fetch']

    def describe(self) -> str:
        return "Combined feed operations"

    def build_aggregator(self) -> FeedAggregator:
        feeds = self.config.feeds
        return FeedAggregator(
            self.registry,
            fetcher_factory=partial(FeedFetcher, timeout=feeds.timeout, user_agent=feeds.user_agent),
            max_items=feeds.max_items,
            max_concurrent=feeds.max_concurrent_feeds
        )

    def fetch(self, args: Namespace) -> int:
        """Aggregate all sources and emit RSS XML or JSON."""
        output_format = getattr(args, 'format', 'rss')
        feed = asyncio.run(self.build_aggregator().aggregate())

        if output_format == 'json':
            document = json.dumps(
                render_json(feed, source_names=self.registry.names()),
                ensure_ascii=False,
                indent=2
            )
        else:
            document = render_rss_xml(
                feed.items,
                source_names=self.registry.names(),
                generated_at=feed.generated_at,
                feed_link=self.config.server.public_feed_url,
                ttl_minutes=self.config.cache.cache_duration_minutes,
                description_max_length=self.config.feeds.description_max_length
            )

        output = getattr(args, 'output', None)
        if output:
            Path(output).write_text(document, encoding='utf-8')
            self.logger.info(f"Wrote {len(feed)} items to {output}")
        else:
            print(document)
        return 0
