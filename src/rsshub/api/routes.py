#!/usr/bin/env python3
"""
Read endpoints of the RSS hub.
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from ..renderers import render_json, format_iso_utc

logger = logging.getLogger(__name__)

RSS_MEDIA_TYPE = "application/rss+xml"

router = APIRouter()


@router.get("/")
async def index(request: Request):
    registry = request.app.state.registry
    return {
        "message": "Financial News RSS Hub",
        "endpoints": {
            "rss": "/rss",
            "json": "/json",
            "status": "/status",
        },
        "sources": registry.names(),
    }


@router.get("/rss")
async def rss_feed(request: Request):
    """Combined feed as RSS XML, served from cache while fresh."""
    try:
        xml = await request.app.state.feed_cache.get_or_refresh()
    except Exception:
        logger.exception("Error serving RSS")
        return JSONResponse(status_code=500, content={"error": "Failed to generate RSS feed"})
    return Response(content=xml, media_type=RSS_MEDIA_TYPE)


@router.get("/json")
async def json_feed(request: Request):
    """Combined feed as JSON from a fresh aggregation run (bypasses the cache)."""
    try:
        feed = await request.app.state.aggregator.aggregate()
        body = render_json(feed, source_names=request.app.state.registry.names())
    except Exception:
        logger.exception("Error serving JSON")
        return JSONResponse(status_code=500, content={"error": "Failed to generate JSON feed"})
    return body


@router.get("/status")
async def status(request: Request):
    cache_status = request.app.state.feed_cache.status()
    return {
        "status": "running",
        "lastUpdate": format_iso_utc(cache_status.last_update) if cache_status.last_update else None,
        "cacheAge": cache_status.cache_age_ms,
        "sources": len(request.app.state.registry),
        "uptime": time.monotonic() - request.app.state.started_at,
    }
