#!/usr/bin/env python3
"""
Whole-feed caching with time-bounded staleness and forced refresh.
"""

from .feed_cache import FeedCache, CacheEntry, CacheStatus, CACHE_DURATION

__all__ = [
    'FeedCache', 'CacheEntry', 'CacheStatus', 'CACHE_DURATION'
]
