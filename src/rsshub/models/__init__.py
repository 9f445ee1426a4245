#!/usr/bin/env python3
"""
Core data models for feed aggregation.
"""

from .item import FeedItem, EPOCH
from .feed import AggregatedFeed

__all__ = ['FeedItem', 'AggregatedFeed', 'EPOCH']
