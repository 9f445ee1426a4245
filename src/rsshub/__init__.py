#!/usr/bin/env python3
"""
Financial News RSS Hub.

Aggregates several RSS feeds into one deduplicated, time-cached combined feed
served as RSS XML and JSON.
"""

__version__ = "1.0.0"
