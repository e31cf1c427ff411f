from __future__ import annotations

import json

import aiohttp
import pytest
from aiohttp.test_utils import TestClient, TestServer

from models import TrackedItem
from services.analytics import AnalyticsForwarder
from services.enrichment import EnrichmentFetcher
from webapp import create_app, drain_forwards
from webapp.app import PIXEL_GIF

COLLECTOR = "https://collector.test/mp/collect"


def _build_app(store, analytics_session, page_session, public_dir=None):
    return create_app(
        store,
        forwarder=AnalyticsForwarder(session=analytics_session),
        fetcher=EnrichmentFetcher(session=page_session),
        public_dir=public_dir,
    )


@pytest.mark.asyncio
async def test_track_records_item_and_returns_pixel(store, data_path, make_session):
    analytics = make_session(default=204)
    app = _build_app(store, analytics, make_session())

    async with TestClient(TestServer(app)) as client:
        response = await client.get("/track", params={"item_id": "110445512345"})
        body = await response.read()
        await drain_forwards(app)

    assert response.status == 200
    assert response.content_type == "image/gif"
    assert body == PIXEL_GIF
    assert "no-store" in response.headers["Cache-Control"]
    assert store.snapshot() == (TrackedItem("110445512345"),)
    assert json.loads(data_path.read_text(encoding="utf-8")) == ["110445512345"]

    method, url, kwargs = analytics.calls[0]
    assert (method, url) == ("POST", COLLECTOR)
    assert kwargs["json"]["events"][0]["params"] == {
        "item_id": "110445512345",
        "page_title": "eBay Listing",
        "page_location": "https://www.ebay.com/itm/110445512345",
    }


@pytest.mark.asyncio
async def test_track_twice_stores_item_once(store, make_session):
    analytics = make_session(default=204)
    app = _build_app(store, analytics, make_session())

    async with TestClient(TestServer(app)) as client:
        for _ in range(2):
            response = await client.get("/track", params={"item_id": "110445512345"})
            assert response.status == 200
        await drain_forwards(app)

    assert [item.id for item in store.snapshot()] == ["110445512345"]
    assert len(analytics.calls) == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("query", [{"item_id": "abc"}, {"item_id": ""}, {"item_id": "1104455123"}, {}])
async def test_track_rejects_invalid_ids(store, data_path, make_session, query):
    analytics = make_session(default=204)
    app = _build_app(store, analytics, make_session())

    async with TestClient(TestServer(app)) as client:
        response = await client.get("/track", params=query)

    assert response.status == 400
    assert store.snapshot() == ()
    assert not data_path.exists()
    assert analytics.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("failure", [500, aiohttp.ClientConnectionError("collector down")])
async def test_track_serves_pixel_when_forwarding_fails(store, make_session, failure):
    app = _build_app(store, make_session(default=failure), make_session())

    async with TestClient(TestServer(app)) as client:
        response = await client.get("/track", params={"item_id": "110445512345"})
        body = await response.read()
        await drain_forwards(app)

    assert response.status == 200
    assert body == PIXEL_GIF
    assert store.contains(TrackedItem("110445512345"))


@pytest.mark.asyncio
async def test_track_returns_500_when_forward_cannot_be_scheduled(store, make_session, monkeypatch):
    def boom(app, event):
        raise RuntimeError("event loop closed")

    monkeypatch.setattr("webapp.app._schedule_forward", boom)
    app = _build_app(store, make_session(default=204), make_session())

    async with TestClient(TestServer(app)) as client:
        response = await client.get("/track", params={"item_id": "110445512345"})

    assert response.status == 500


@pytest.mark.asyncio
async def test_current_tags_degrades_unavailable_item(store, make_session):
    await store.add(TrackedItem("223300001111"))
    pages = make_session(default=503)
    app = _build_app(store, make_session(), pages)

    async with TestClient(TestServer(app)) as client:
        response = await client.get("/current-tags")
        html = await response.text()

    assert response.status == 200
    assert response.content_type == "text/html"
    assert "223300001111" in html
    assert "Details not available" in html
    assert pages.calls[0][1] == "https://www.ebay.com/itm/223300001111"


@pytest.mark.asyncio
async def test_current_tags_renders_enriched_rows(store, make_session, sample_item_html):
    await store.add(TrackedItem("110445512345"))
    await store.add(TrackedItem("223300001111"))
    pages = make_session(
        {"https://www.ebay.com/itm/223300001111": sample_item_html},
        default=aiohttp.ClientConnectionError("reset"),
    )
    app = _build_app(store, make_session(), pages)

    async with TestClient(TestServer(app)) as client:
        response = await client.get("/current-tags")
        html = await response.text()

    assert response.status == 200
    assert "Vintage Film Camera 35mm" in html
    assert "https://i.ebayimg.com/images/g/abc/s-l500.jpg" in html
    assert html.count("Details not available") == 1
    assert html.index("110445512345") < html.index("Vintage Film Camera 35mm")


@pytest.mark.asyncio
async def test_status_lists_tracked_ids(store, make_session):
    await store.add(TrackedItem("110445512345"))
    app = _build_app(store, make_session(), make_session())

    async with TestClient(TestServer(app)) as client:
        response = await client.get("/status")
        html = await response.text()

    assert response.status == 200
    assert "Tracking Server is Running!" in html
    assert "<li>110445512345</li>" in html


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/", "/home"])
async def test_home_pages(store, make_session, path):
    app = _build_app(store, make_session(), make_session())

    async with TestClient(TestServer(app)) as client:
        response = await client.get(path)
        html = await response.text()

    assert response.status == 200
    assert "/track?item_id=YOUR_ITEM_ID" in html


@pytest.mark.asyncio
async def test_static_files_served_from_public_dir(store, make_session, tmp_path):
    public_dir = tmp_path / "site"
    public_dir.mkdir()
    (public_dir / "robots.txt").write_text("User-agent: *\n", encoding="utf-8")
    app = _build_app(store, make_session(), make_session(), public_dir=public_dir)

    async with TestClient(TestServer(app)) as client:
        found = await client.get("/static/robots.txt")
        found_body = await found.text()
        missing = await client.get("/static/missing.txt")

    assert found.status == 200
    assert found_body == "User-agent: *\n"
    assert missing.status == 404


@pytest.mark.asyncio
async def test_static_route_absent_without_public_dir(store, make_session):
    app = _build_app(store, make_session(), make_session())

    async with TestClient(TestServer(app)) as client:
        response = await client.get("/static/style.css")

    assert response.status == 404
