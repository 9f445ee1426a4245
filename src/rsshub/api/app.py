#!/usr/bin/env python3
"""
FastAPI application factory.

The feed cache, aggregator and refresher are created per application and kept
on ``app.state``; the lifespan starts the background refresh on startup and
stops it on shutdown.
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from datetime import timedelta
from functools import partial
from typing import Callable, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..aggregator import FeedAggregator
from ..caching import FeedCache
from ..config import Config, get_config
from ..feed_fetcher import FeedFetcher
from ..scheduling import FeedRefresher
from ..sources import SourceRegistry, get_default_registry
from .routes import router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config: Config = app.state.config
    refresher: FeedRefresher = app.state.refresher
    warmup: Optional[asyncio.Task] = None

    if config.cache.enable_scheduler:
        refresher.start()
    elif config.cache.refresh_on_startup:
        warmup = asyncio.get_running_loop().create_task(refresher.refresh_once(), name="feed-warmup")

    logger.info(f"RSS Hub serving {len(app.state.registry)} sources")
    try:
        yield
    finally:
        if warmup is not None and not warmup.done():
            warmup.cancel()
            try:
                await warmup
            except asyncio.CancelledError:
                pass
        await refresher.stop()


def create_app(config: Optional[Config] = None,
               registry: Optional[SourceRegistry] = None,
               fetcher_factory: Optional[Callable[[], FeedFetcher]] = None) -> FastAPI:
    """
    Build the RSS hub application.

    Args:
        config: Application configuration (global config if None)
        registry: Feed sources (built-in catalog if None)
        fetcher_factory: Fetcher used by each aggregation run

    Returns:
        Configured FastAPI app
    """
    config = config or get_config()
    registry = registry or get_default_registry()

    if fetcher_factory is None:
        fetcher_factory = partial(
            FeedFetcher,
            timeout=config.feeds.timeout,
            user_agent=config.feeds.user_agent
        )

    aggregator = FeedAggregator(
        registry,
        fetcher_factory=fetcher_factory,
        max_items=config.feeds.max_items,
        max_concurrent=config.feeds.max_concurrent_feeds
    )
    feed_cache = FeedCache(
        aggregator,
        cache_duration=timedelta(minutes=config.cache.cache_duration_minutes),
        feed_link=config.server.public_feed_url,
        description_max_length=config.feeds.description_max_length
    )
    refresher = FeedRefresher(
        feed_cache,
        interval_seconds=config.cache.refresh_interval_seconds,
        refresh_on_startup=config.cache.refresh_on_startup
    )

    app = FastAPI(
        title="Financial News RSS Hub",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.registry = registry
    app.state.aggregator = aggregator
    app.state.feed_cache = feed_cache
    app.state.refresher = refresher
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.include_router(router)

    return app
