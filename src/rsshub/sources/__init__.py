#!/usr/bin/env python3
"""
Feed source registry: the static list of upstream feeds.
"""

from .base import FeedSource
from .catalog import DEFAULT_SOURCES
from .registry import SourceRegistry, get_default_registry

__all__ = ['FeedSource', 'DEFAULT_SOURCES', 'SourceRegistry', 'get_default_registry']
