#!/usr/bin/env python3
"""
Built-in financial news feeds.
"""

from typing import Tuple

from .base import FeedSource

DEFAULT_SOURCES: Tuple[FeedSource, ...] = (
    FeedSource(
        name='Harvard Business Review',
        url='http://feeds.harvardbusiness.org/harvardbusiness?format=xml',
        category='Business Strategy'
    ),
    FeedSource(
        name='CNBC',
        url='https://www.cnbc.com/id/100003114/device/rss/rss.html',
        category='Markets & Business'
    ),
    FeedSource(
        name='Financial Times',
        url='https://www.ft.com/rss/home',
        category='Global Finance'
    ),
    FeedSource(
        name='Bloomberg',
        url='https://feeds.bloomberg.com/markets/news.rss',
        category='Markets'
    ),
)
