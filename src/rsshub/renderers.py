#!/usr/bin/env python3
"""
Output renderers for the combined feed.

Pure functions: RSS 2.0 XML for feed readers and a JSON-ready document for
API consumers.
"""

from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .models import AggregatedFeed, FeedItem
from .text_sanitizer import escape_xml, truncate_text

FEED_TITLE = 'Financial News Hub - Combined Feed'
JSON_DESCRIPTION = 'Combined feed from top financial news sources'
DEFAULT_FEED_LINK = 'https://your-domain.com/rss'


def format_rfc822(dt: datetime) -> str:
    """Format a datetime as an RSS date, e.g. 'Mon, 01 Jan 2024 12:00:00 GMT'."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return format_datetime(dt.astimezone(timezone.utc), usegmt=True)


def format_iso_utc(dt: datetime) -> str:
    """Format a datetime as ISO-8601 UTC with milliseconds and a Z suffix."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def describe_sources(source_names: Sequence[str]) -> str:
    """Channel description derived from the configured sources."""
    names = list(source_names)
    if not names:
        return 'Combined RSS feed'
    if len(names) == 1:
        joined = names[0]
    elif len(names) == 2:
        joined = f"{names[0]} and {names[1]}"
    else:
        joined = f"{', '.join(names[:-1])}, and {names[-1]}"
    return f"Combined RSS feed from {joined}"


def render_item_xml(item: FeedItem, build_date: str, description_max_length: int = 500) -> str:
    """Render one <item> element."""
    pub_date = format_rfc822(item.published_at) if item.published_at else build_date
    # Truncate the raw text first so the cut never splits an entity
    description = escape_xml(truncate_text(item.description, description_max_length))

    return f"""
    <item>
      <title>{escape_xml(item.title)}</title>
      <link>{escape_xml(item.link)}</link>
      <description>{description}</description>
      <pubDate>{pub_date}</pubDate>
      <source>{escape_xml(item.source_name)}</source>
      <category>{escape_xml(item.category)}</category>
      <guid>{escape_xml(item.guid)}</guid>
    </item>"""


def render_rss_xml(items: Iterable[FeedItem],
                   *,
                   source_names: Sequence[str],
                   generated_at: Optional[datetime] = None,
                   feed_link: str = DEFAULT_FEED_LINK,
                   ttl_minutes: int = 15,
                   description_max_length: int = 500) -> str:
    """
    Render items as an RSS 2.0 document.

    Args:
        items: Normalized items, already in output order
        source_names: Configured source names for the channel description
        generated_at: Build date; also the pubDate of undated items
        feed_link: Channel <link>
        ttl_minutes: Channel <ttl>
        description_max_length: Characters kept from each description

    Returns:
        XML document as a string
    """
    build_date = format_rfc822(generated_at or datetime.now(timezone.utc))
    rss_items = ''.join(
        render_item_xml(item, build_date, description_max_length) for item in items
    )

    return f"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>{escape_xml(FEED_TITLE)}</title>
    <link>{escape_xml(feed_link)}</link>
    <description>{escape_xml(describe_sources(source_names))}</description>
    <language>en-us</language>
    <lastBuildDate>{build_date}</lastBuildDate>
    <ttl>{ttl_minutes}</ttl>
    {rss_items}
  </channel>
</rss>"""


def render_json(feed: AggregatedFeed, *, source_names: Sequence[str]) -> Dict[str, Any]:
    """Render an aggregated feed as a JSON-ready document."""
    items: List[Dict[str, Any]] = feed.items_to_dict()
    return {
        'title': FEED_TITLE,
        'description': JSON_DESCRIPTION,
        'items': items,
        'lastUpdated': format_iso_utc(feed.generated_at),
        'sources': list(source_names)
    }
