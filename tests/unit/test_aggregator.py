import asyncio
from datetime import timedelta

import pytest

from conftest import BASE_TIME, FakeFetcher, make_item, make_source

from rsshub.aggregator import FeedAggregator, sort_newest_first
from rsshub.models import EPOCH
from rsshub.sources import SourceRegistry
from rsshub.text_sanitizer import normalize_title_key


@pytest.mark.asyncio
async def test_cross_source_duplicate_keeps_latest_version(registry):
    """Test that the most recent instance of a normalized title wins."""
    fetcher = FakeFetcher({
        "A": [make_item("Fed Raises Rates", "A", BASE_TIME - timedelta(hours=2))],
        "B": [make_item("fed raises rates!!", "B", BASE_TIME)],
    })

    feed = await FeedAggregator(registry, fetcher_factory=fetcher).aggregate()

    assert len(feed.items) == 1
    assert feed.items[0].title == "fed raises rates!!"
    assert feed.items[0].source_name == "B"


@pytest.mark.asyncio
async def test_all_sources_failing_yields_empty_feed(registry):
    fetcher = FakeFetcher({name: RuntimeError("down") for name in registry.names()})

    feed = await FeedAggregator(registry, fetcher_factory=fetcher).aggregate()

    assert feed.items == ()
    assert fetcher.calls == ["A", "B", "C"]


@pytest.mark.asyncio
async def test_failing_source_contributes_nothing(registry):
    """Test that aggregate([A, B, C]) equals aggregate([B, C]) when A fails."""
    results = {
        "A": RuntimeError("boom"),
        "B": [make_item("Oil slips", "B", BASE_TIME), make_item("Gold gains", "B", None)],
        "C": [make_item("Bonds flat", "C", BASE_TIME - timedelta(minutes=5))],
    }
    aggregator = FeedAggregator(registry, fetcher_factory=FakeFetcher(results))

    with_failure = await aggregator.aggregate()
    without_failing = await aggregator.aggregate([registry.get_source("B"), registry.get_source("C")])

    assert with_failure.items == without_failing.items
    assert [item.title for item in with_failure.items] == ["Oil slips", "Bonds flat", "Gold gains"]


@pytest.mark.asyncio
async def test_output_is_capped_at_one_hundred_items(registry):
    items = [make_item(f"Story {i}", "A", BASE_TIME - timedelta(minutes=i)) for i in range(150)]

    feed = await FeedAggregator(registry, fetcher_factory=FakeFetcher({"A": items})).aggregate()

    assert len(feed.items) == 100
    assert feed.items[0].title == "Story 0"
    assert feed.items[-1].title == "Story 99"


@pytest.mark.asyncio
async def test_items_sorted_newest_first_with_undated_last(registry):
    fetcher = FakeFetcher({
        "A": [make_item("Old", "A", BASE_TIME - timedelta(days=1)), make_item("Undated", "A", None)],
        "B": [make_item("New", "B", BASE_TIME)],
        "C": [make_item("Middle", "C", BASE_TIME - timedelta(hours=1))],
    })

    feed = await FeedAggregator(registry, fetcher_factory=fetcher).aggregate()
    stamps = [(item.published_at or EPOCH) for item in feed.items]

    assert [item.title for item in feed.items] == ["New", "Middle", "Old", "Undated"]
    assert all(stamps[i] >= stamps[i + 1] for i in range(len(stamps) - 1))


@pytest.mark.asyncio
async def test_output_titles_have_distinct_keys(registry):
    fetcher = FakeFetcher({
        "A": [make_item("Tech rebounds", "A", BASE_TIME), make_item("Oil: up", "A", BASE_TIME)],
        "B": [make_item("TECH REBOUNDS", "B", BASE_TIME), make_item("oil up", "B", None)],
        "C": [make_item("Tech-rebounds", "C", None)],
    })

    feed = await FeedAggregator(registry, fetcher_factory=fetcher).aggregate()
    keys = [normalize_title_key(item.title) for item in feed.items]

    assert len(keys) == len(set(keys))
    assert all(item.guid for item in feed.items)


def test_sort_is_stable_for_equal_timestamps():
    first = make_item("First", "A", BASE_TIME)
    second = make_item("Second", "B", BASE_TIME)
    third = make_item("Third", "C", BASE_TIME)

    assert sort_newest_first([first, second, third]) == [first, second, third]


@pytest.mark.asyncio
async def test_equal_timestamps_keep_source_list_order(registry):
    fetcher = FakeFetcher({
        "A": [make_item("From A", "A", BASE_TIME)],
        "B": [make_item("From B", "B", BASE_TIME)],
        "C": [make_item("From C", "C", BASE_TIME)],
    })

    feed = await FeedAggregator(registry, fetcher_factory=fetcher).aggregate()

    assert [item.source_name for item in feed.items] == ["A", "B", "C"]


@pytest.mark.asyncio
async def test_sources_are_fetched_concurrently():
    """Test that one slow source does not serialize the others."""
    registry = SourceRegistry([make_source(name) for name in ["A", "B", "C", "D"]])
    in_flight = 0
    max_in_flight = 0

    class SlowFetcher(FakeFetcher):
        async def fetch(self, source):
            nonlocal in_flight, max_in_flight
            in_flight += 1
            max_in_flight = max(max_in_flight, in_flight)
            await asyncio.sleep(0.05)
            in_flight -= 1
            return [make_item(f"Story from {source.name}", source.name, BASE_TIME)]

    feed = await FeedAggregator(registry, fetcher_factory=SlowFetcher({})).aggregate()

    assert max_in_flight == 4
    assert len(feed.items) == 4


@pytest.mark.asyncio
async def test_concurrency_cap_limits_simultaneous_fetches():
    registry = SourceRegistry([make_source(name) for name in ["A", "B", "C", "D"]])
    in_flight = 0
    max_in_flight = 0

    class SlowFetcher(FakeFetcher):
        async def fetch(self, source):
            nonlocal in_flight, max_in_flight
            in_flight += 1
            max_in_flight = max(max_in_flight, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return []

    await FeedAggregator(registry, fetcher_factory=SlowFetcher({}), max_concurrent=2).aggregate()

    assert max_in_flight == 2


@pytest.mark.asyncio
async def test_one_fetcher_session_per_run(registry):
    fetcher = FakeFetcher({})
    aggregator = FeedAggregator(registry, fetcher_factory=fetcher)

    await aggregator.aggregate()
    await aggregator.aggregate()

    assert fetcher.entered == 2


@pytest.mark.asyncio
async def test_empty_source_list(registry):
    feed = await FeedAggregator(registry, fetcher_factory=FakeFetcher({})).aggregate([])

    assert feed.items == ()
    assert feed.generated_at is not None
