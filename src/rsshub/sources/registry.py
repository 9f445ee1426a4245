#!/usr/bin/env python3
"""
Feed source registry.

Holds the fixed, ordered list of configured sources. Order matters: the
aggregator concatenates per-source results in registry order before sorting.
"""

import logging
from typing import Iterable, Iterator, List, Optional, Tuple

from .base import FeedSource
from .catalog import DEFAULT_SOURCES

logger = logging.getLogger(__name__)


class SourceRegistry:
    """Ordered, read-only collection of feed sources."""

    def __init__(self, sources: Optional[Iterable[FeedSource]] = None):
        """
        Initialize registry.

        Args:
            sources: Sources to register (uses the built-in catalog if None)

        Raises:
            ValueError: If two sources share a name
        """
        if sources is None:
            sources = DEFAULT_SOURCES

        registered: List[FeedSource] = []
        seen = set()
        for source in sources:
            if source.name in seen:
                raise ValueError(f"Duplicate source name: {source.name}")
            seen.add(source.name)
            registered.append(source)

        self._sources: Tuple[FeedSource, ...] = tuple(registered)
        logger.debug(f"Registered {len(self._sources)} feed sources")

    def __iter__(self) -> Iterator[FeedSource]:
        return iter(self._sources)

    def __len__(self) -> int:
        return len(self._sources)

    @property
    def sources(self) -> Tuple[FeedSource, ...]:
        return self._sources

    def names(self) -> List[str]:
        """Get source names in registry order."""
        return [source.name for source in self._sources]

    def get_source(self, name: str) -> FeedSource:
        """
        Look up a source by name.

        Raises:
            KeyError: If source not found
        """
        for source in self._sources:
            if source.name == name:
                return source
        raise KeyError(f"Source '{name}' not found. Available: {self.names()}")

    def get_sources_by_category(self, category: str) -> List[FeedSource]:
        return [source for source in self._sources if source.category == category]


# Global registry instance
_default_registry: Optional[SourceRegistry] = None


def get_default_registry() -> SourceRegistry:
    """Get the registry of built-in sources."""
    global _default_registry
    if _default_registry is None:
        _default_registry = SourceRegistry()
    return _default_registry
