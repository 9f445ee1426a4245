import xml.etree.ElementTree as ET
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from conftest import BASE_TIME, FakeFetcher, make_item

from rsshub.api import create_app


@pytest.fixture
def fetcher():
    return FakeFetcher({
        "A": [make_item("Fed Raises Rates", "A", BASE_TIME - timedelta(hours=2))],
        "B": [make_item("fed raises rates!!", "B", BASE_TIME), make_item("Oil <slips> & more", "B", None)],
        "C": RuntimeError("feed down"),
    })


@pytest.fixture
def app(test_config, registry, fetcher):
    return create_app(test_config, registry, fetcher_factory=fetcher)


@pytest.fixture
def client(app):
    return TestClient(app)


class FailingFactory:
    """Fetcher factory whose sessions cannot be opened."""

    def __call__(self):
        raise RuntimeError("cannot create session")


def test_index_lists_endpoints_and_sources(client):
    response = client.get("/")

    assert response.status_code == 200
    body = response.json()
    assert body["endpoints"] == {"rss": "/rss", "json": "/json", "status": "/status"}
    assert body["sources"] == ["A", "B", "C"]


def test_rss_returns_combined_feed(client, fetcher):
    response = client.get("/rss")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/rss+xml")

    channel = ET.fromstring(response.content).find("channel")
    titles = [item.findtext("title") for item in channel.findall("item")]
    assert titles == ["fed raises rates!!", "Oil <slips> & more"]
    assert channel.findtext("link") == "https://hub.example.com/rss"
    assert "Oil &lt;slips&gt; &amp; more" in response.text


def test_rss_is_served_from_cache_while_fresh(client, fetcher):
    first = client.get("/rss")
    second = client.get("/rss")

    assert first.text == second.text
    assert fetcher.entered == 1


def test_rss_failure_returns_500(test_config, registry):
    client = TestClient(create_app(test_config, registry, fetcher_factory=FailingFactory()))

    response = client.get("/rss")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate RSS feed"}


def test_json_bypasses_cache(client, fetcher):
    client.get("/rss")
    response = client.get("/json")

    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Financial News Hub - Combined Feed"
    assert body["description"] == "Combined feed from top financial news sources"
    assert body["sources"] == ["A", "B", "C"]
    assert body["lastUpdated"].endswith("Z")
    assert [item["title"] for item in body["items"]] == ["fed raises rates!!", "Oil <slips> & more"]
    assert body["items"][1]["pubDate"] is None
    assert fetcher.entered == 2


def test_json_failure_returns_500(test_config, registry):
    client = TestClient(create_app(test_config, registry, fetcher_factory=FailingFactory()))

    response = client.get("/json")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate JSON feed"}


def test_status_before_first_refresh(client):
    body = client.get("/status").json()

    assert body["status"] == "running"
    assert body["lastUpdate"] is None
    assert body["cacheAge"] is None
    assert body["sources"] == 3
    assert body["uptime"] >= 0


def test_status_after_refresh(client):
    client.get("/rss")

    body = client.get("/status").json()

    assert body["lastUpdate"].endswith("Z")
    assert isinstance(body["cacheAge"], int)
    assert body["cacheAge"] >= 0


def test_cors_allows_any_origin(client):
    response = client.get("/status", headers={"Origin": "https://reader.example.org"})

    assert response.headers["access-control-allow-origin"] == "*"


def test_lifespan_without_scheduler(app):
    with TestClient(app) as client:
        assert client.get("/status").status_code == 200
        assert not app.state.refresher.running

    assert app.state.feed_cache.entry is None
