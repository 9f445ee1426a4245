#!/usr/bin/env python3
"""
Title-based deduplication of feed items.

Syndicated headlines show up across several financial sources with different
URLs, so identity is the normalized title key rather than the link. Distinct
stories with identical normalized titles are collapsed as well.
"""

import logging
import time
from typing import Dict, Any, List, Sequence, Tuple

from .models import FeedItem
from .text_sanitizer import normalize_title_key

logger = logging.getLogger(__name__)


class DeduplicationResult:
    """Results from a deduplication pass with basic metrics."""

    def __init__(self):
        """Initialize empty deduplication result."""
        self.original_count = 0
        self.unique_count = 0
        self.duplicates_found = 0
        self.per_source: Dict[str, int] = {}  # source_name -> dropped items
        self.processing_time = 0.0

    @property
    def duplicate_rate(self) -> float:
        """Calculate duplicate rate as percentage."""
        if self.original_count == 0:
            return 0.0
        return (self.duplicates_found / self.original_count) * 100

    def add_duplicate(self, dropped: FeedItem):
        """Record a dropped duplicate."""
        self.duplicates_found += 1
        self.per_source[dropped.source_name] = self.per_source.get(dropped.source_name, 0) + 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary for serialization."""
        return {
            'original_count': self.original_count,
            'unique_count': self.unique_count,
            'duplicates_found': self.duplicates_found,
            'duplicate_rate': self.duplicate_rate,
            'per_source': self.per_source,
            'processing_time': self.processing_time
        }


class TitleDeduplicator:
    """
    Keeps the first item for each normalized title key.

    Callers sort newest-first beforehand, so the first occurrence is the most
    recent instance of a headline.
    """

    def deduplicate(self, items: Sequence[FeedItem]) -> Tuple[List[FeedItem], DeduplicationResult]:
        """
        Remove items whose normalized title was already seen.

        Args:
            items: Items in priority order

        Returns:
            Tuple of (unique items in input order, deduplication result)
        """
        start_time = time.time()
        result = DeduplicationResult()
        result.original_count = len(items)

        unique_items: List[FeedItem] = []
        seen_keys = set()

        for item in items:
            key = normalize_title_key(item.title)
            if key in seen_keys:
                result.add_duplicate(item)
                continue
            seen_keys.add(key)
            unique_items.append(item)

        result.unique_count = len(unique_items)
        result.processing_time = time.time() - start_time

        if result.duplicates_found:
            logger.debug(
                f"Removed {result.duplicates_found} duplicates "
                f"({result.duplicate_rate:.1f}%) from {result.original_count} items"
            )

        return unique_items, result

    def deduplicate_simple(self, items: Sequence[FeedItem]) -> List[FeedItem]:
        """Deduplicate and return only the unique items."""
        unique_items, _ = self.deduplicate(items)
        return unique_items
