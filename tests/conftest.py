import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Optional, Union

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from rsshub.config import CacheConfig, Config, FeedConfig, ServerConfig  # noqa: E402
from rsshub.models import FeedItem  # noqa: E402
from rsshub.sources import FeedSource, SourceRegistry  # noqa: E402

BASE_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_item(
    title: str,
    source_name: str = "A",
    published_at: Optional[datetime] = None,
    description: str = "",
    link: Optional[str] = None,
) -> FeedItem:
    link = link or f"https://example.com/{source_name}/{abs(hash(title))}"
    return FeedItem(
        title=title,
        link=link,
        source_name=source_name,
        category="Markets",
        guid=link,
        published_at=published_at,
        description=description,
    )


def make_source(name: str) -> FeedSource:
    return FeedSource(name=name, url=f"https://{name.lower()}.example.com/rss", category="Markets")


class FakeFetcher:
    """Async-context fetcher returning canned items or raising per source name."""

    def __init__(self, results: Dict[str, Union[List[FeedItem], Exception]]) -> None:
        self.results = results
        self.calls: List[str] = []
        self.entered = 0

    def __call__(self) -> "FakeFetcher":
        return self

    async def __aenter__(self) -> "FakeFetcher":
        self.entered += 1
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        return None

    async def fetch(self, source: FeedSource) -> List[FeedItem]:
        self.calls.append(source.name)
        result = self.results.get(source.name, [])
        if isinstance(result, Exception):
            raise result
        return list(result)


class FakeClock:
    def __init__(self, now: datetime = BASE_TIME) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def registry() -> SourceRegistry:
    return SourceRegistry([make_source("A"), make_source("B"), make_source("C")])


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def test_config() -> Config:
    return Config(
        server=ServerConfig(port=3000, public_feed_url="https://hub.example.com/rss"),
        feeds=FeedConfig(timeout=5),
        cache=CacheConfig(refresh_on_startup=False, enable_scheduler=False),
    )


@pytest.fixture
def sample_items() -> List[FeedItem]:
    return [
        make_item("Stocks rally on earnings", "A", BASE_TIME - timedelta(hours=1)),
        make_item("Oil slips", "B", BASE_TIME - timedelta(hours=3)),
        make_item("Dollar steady", "C", None),
    ]


SAMPLE_RSS = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Sample</title>
    <link>https://example.com</link>
    <description>Sample feed</description>
    <item>
      <title>Fed Raises Rates</title>
      <link>https://example.com/fed</link>
      <guid isPermaLink="false">fed-123</guid>
      <description>&lt;p&gt;The Fed &lt;b&gt;raised&lt;/b&gt; rates.&lt;/p&gt;</description>
      <pubDate>Fri, 01 Mar 2024 10:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Markets Open Higher</title>
      <link>https://example.com/markets</link>
      <description>Stocks climbed at the open.</description>
    </item>
  </channel>
</rss>
"""


@pytest.fixture
def sample_rss() -> bytes:
    return SAMPLE_RSS
