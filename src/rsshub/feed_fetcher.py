#!/usr/bin/env python3
"""
Async RSS Feed Fetcher

Downloads a single source's feed document, parses it with feedparser and maps
every entry to a normalized FeedItem. Failures are contained per source: a
network error, timeout or unparseable document yields an empty list.
"""

import asyncio
import logging
from datetime import datetime
from typing import List, Optional

import aiohttp
import feedparser
import pytz
from dateutil import parser as date_parser

from .config import BROWSER_USER_AGENT
from .exceptions import SourceError, SourceConnectionError, SourceParseError, SourceTimeoutError
from .models import FeedItem
from .sources import FeedSource
from .text_sanitizer import html_to_snippet

logger = logging.getLogger(__name__)


class FeedFetcher:
    """Async per-source feed fetcher. Use as an async context manager."""

    def __init__(self, timeout: float = 10, user_agent: str = BROWSER_USER_AGENT):
        """
        Initialize feed fetcher.

        Args:
            timeout: Total request timeout in seconds
            user_agent: User-Agent header sent to feed providers
        """
        self.timeout = timeout
        self.user_agent = user_agent

        # Session will be created per async context
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        """Async context manager entry."""
        self._session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout),
            headers={'User-Agent': self.user_agent}
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self._session:
            await self._session.close()
            self._session = None

    async def fetch(self, source: FeedSource) -> List[FeedItem]:
        """
        Fetch and normalize all items of one source.

        Never raises: every failure is logged and results in an empty list.

        Args:
            source: Feed source to fetch

        Returns:
            Normalized items in upstream order
        """
        try:
            logger.info(f"Fetching {source.name}...")
            try:
                content = await self._download(source.url)
            except asyncio.TimeoutError as e:
                raise SourceTimeoutError(source.name, self.timeout) from e
            except aiohttp.ClientError as e:
                raise SourceConnectionError(source.name, source.url, e) from e

            feed = feedparser.parse(content)
            entries = getattr(feed, 'entries', None) or []

            if feed.get('bozo'):
                if not entries:
                    raise SourceParseError(source.name, 'feed document', feed.get('bozo_exception'))
                logger.warning(f"Feed parsing warning for {source.name}: {feed.get('bozo_exception')}")

            items = self.parse_entries(entries, source)
            logger.info(f"Fetched {len(items)} items from {source.name}")
            return items

        except SourceError as e:
            logger.error(f"Error fetching {source.name}: {e.message}", extra={'error': e.to_dict()})
            return []
        except Exception as e:
            logger.error(f"Unexpected error fetching {source.name}: {e}", exc_info=True)
            return []

    async def _download(self, url: str) -> bytes:
        """Download raw feed bytes."""
        if not self._session:
            raise RuntimeError("FeedFetcher must be used as async context manager")

        async with self._session.get(url) as response:
            response.raise_for_status()
            return await response.read()

    def parse_entries(self, entries: list, source: FeedSource) -> List[FeedItem]:
        """
        Map feedparser entries to FeedItem objects.

        Entries with neither an identifier nor a link are skipped since they
        cannot carry a guid.
        """
        items = []

        for entry in entries:
            try:
                item = self.normalize_entry(entry, source)
            except Exception as e:
                logger.error(f"Error parsing entry from {source.name}: {e}")
                continue

            if item is None:
                logger.debug(f"Skipping entry without id or link from {source.name}")
                continue
            items.append(item)

        return items

    def normalize_entry(self, entry, source: FeedSource) -> Optional[FeedItem]:
        """Map one upstream entry to a FeedItem, or None if it has no identity."""
        link = (entry.get('link') or '').strip()
        guid = (entry.get('id') or '').strip() or link
        if not guid:
            return None

        return FeedItem(
            title=(entry.get('title') or '').strip(),
            link=link,
            source_name=source.name,
            category=source.category,
            guid=guid,
            published_at=parse_published_date(entry),
            description=extract_description(entry)
        )


# Zone abbreviations seen in RSS pubDate values, as UTC offsets in seconds
TZ_ABBREVIATIONS = {
    'UT': 0, 'GMT': 0, 'UTC': 0, 'Z': 0,
    'EST': -5 * 3600, 'EDT': -4 * 3600,
    'CST': -6 * 3600, 'CDT': -5 * 3600,
    'MST': -7 * 3600, 'MDT': -6 * 3600,
    'PST': -8 * 3600, 'PDT': -7 * 3600,
    'BST': 1 * 3600, 'CET': 1 * 3600, 'CEST': 2 * 3600,
}


def _struct_to_utc(parsed) -> Optional[datetime]:
    try:
        return pytz.utc.localize(datetime(*parsed[:6]))
    except (TypeError, ValueError) as e:
        logger.debug(f"Failed to convert time struct {parsed}: {e}")
        return None


def parse_published_date(entry) -> Optional[datetime]:
    """
    Parse an entry's publish date as a UTC datetime.

    Prefers feedparser's ``published_parsed`` struct, which is already
    normalized to UTC. Falls back to parsing the raw ``published`` string
    with dateutil, then to ``updated_parsed``.
    """
    parsed = entry.get('published_parsed')
    if parsed:
        dt = _struct_to_utc(parsed)
        if dt is not None:
            return dt

    date_str = entry.get('published')
    if date_str:
        try:
            dt = date_parser.parse(date_str, tzinfos=TZ_ABBREVIATIONS)

            if dt.tzinfo is None:
                # Assume UTC if no timezone info
                dt = pytz.utc.localize(dt)

            return dt.astimezone(pytz.utc)

        except (ValueError, OverflowError) as e:
            logger.debug(f"Failed to parse date '{date_str}': {e}")

    parsed = entry.get('updated_parsed')
    if parsed:
        return _struct_to_utc(parsed)

    return None


def extract_description(entry) -> str:
    """Plain-text snippet of the summary, else raw content, else empty."""
    snippet = html_to_snippet(entry.get('summary'))
    if snippet:
        return snippet

    for content in entry.get('content') or []:
        value = content.get('value')
        if value:
            return value

    return ''
