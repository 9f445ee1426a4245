#!/usr/bin/env python3
"""
Feed item data model.

Represents one normalized news entry after parsing and field mapping.
"""

from datetime import datetime, timezone
from typing import Dict, Any, Optional
from dataclasses import dataclass

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class FeedItem:
    """
    A single normalized item of the combined feed.

    Items are value objects: created once by the fetcher and never mutated.
    """
    title: str
    link: str
    source_name: str
    category: str
    guid: str
    published_at: Optional[datetime] = None
    description: str = ""

    @property
    def sort_timestamp(self) -> float:
        """Publish time as a POSIX timestamp, with a missing date as the epoch."""
        return (self.published_at or EPOCH).timestamp()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON wire format."""
        return {
            'title': self.title,
            'link': self.link,
            'pubDate': self.published_at.isoformat() if self.published_at else None,
            'description': self.description,
            'source': self.source_name,
            'category': self.category,
            'guid': self.guid
        }

    def __repr__(self):
        return f"FeedItem(title='{self.title[:50]}...', source='{self.source_name}')"
