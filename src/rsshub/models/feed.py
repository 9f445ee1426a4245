#!/usr/bin/env python3
"""
Aggregated feed data model.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Tuple, List, Dict, Any

from .item import FeedItem


@dataclass(frozen=True)
class AggregatedFeed:
    """Result of one aggregation run: items newest first plus generation time."""
    items: Tuple[FeedItem, ...] = ()
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __len__(self) -> int:
        return len(self.items)

    def items_to_dict(self) -> List[Dict[str, Any]]:
        return [item.to_dict() for item in self.items]
