"""aiohttp application exposing the tracking pixel and listing pages."""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from aiohttp import web

from config import settings
from models import AnalyticsEvent
from services.analytics import AnalyticsForwarder
from services.enrichment import EnrichmentFetcher
from services.errors import ValidationError
from services.listing import ListingRenderer
from services.store import TrackedItemStore
from services.validator import parse_item_id
from webapp.pages import render_home, render_status

logger = logging.getLogger(__name__)

# 1x1 transparent GIF
PIXEL_GIF = bytes([
    0x47, 0x49, 0x46, 0x38, 0x39, 0x61, 0x01, 0x00, 0x01, 0x00, 0x80, 0xFF,
    0x00, 0xFF, 0xFF, 0xFF, 0x00, 0x00, 0x00, 0x21, 0xF9, 0x04, 0x01, 0x00,
    0x00, 0x00, 0x00, 0x2C, 0x00, 0x00, 0x00, 0x00, 0x01, 0x00, 0x01, 0x00,
    0x00, 0x02, 0x02, 0x4C, 0x01, 0x00, 0x3B,
])
NO_CACHE_HEADERS = {"Cache-Control": "no-store, no-cache, must-revalidate, max-age=0"}

STORE_KEY = web.AppKey("store", TrackedItemStore)
FORWARDER_KEY = web.AppKey("forwarder", AnalyticsForwarder)
FETCHER_KEY = web.AppKey("fetcher", EnrichmentFetcher)
RENDERER_KEY = web.AppKey("renderer", ListingRenderer)
PENDING_FORWARDS_KEY = web.AppKey("pending_forwards", set)

routes = web.RouteTableDef()


def _log_forward_outcome(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Unexpected analytics forwarding failure", exc_info=exc)


def _schedule_forward(app: web.Application, event: AnalyticsEvent) -> None:
    task = asyncio.create_task(app[FORWARDER_KEY].forward(event))
    pending = app[PENDING_FORWARDS_KEY]
    pending.add(task)
    task.add_done_callback(pending.discard)
    task.add_done_callback(_log_forward_outcome)


async def drain_forwards(app: web.Application) -> None:
    """Wait for analytics forwards still in flight."""
    pending = list(app[PENDING_FORWARDS_KEY])
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)


@routes.get("/track")
async def track(request: web.Request) -> web.Response:
    try:
        item = parse_item_id(request.query.get("item_id"))
    except ValidationError as exc:
        logger.info("Rejected tracking hit: %s", exc)
        return web.Response(status=400, text=str(exc))

    app = request.app
    await app[STORE_KEY].add(item)

    try:
        event = AnalyticsEvent.for_item(item, app[FETCHER_KEY].item_url(item))
        _schedule_forward(app, event)
    except Exception:
        logger.exception("Could not schedule analytics forwarding for item %s", item.id)
        return web.Response(status=500, text="Error logging to analytics")

    return web.Response(body=PIXEL_GIF, content_type="image/gif", headers=NO_CACHE_HEADERS)


@routes.get("/current-tags")
async def current_tags(request: web.Request) -> web.Response:
    renderer = request.app[RENDERER_KEY]
    rows = await renderer.render(request.app[STORE_KEY].snapshot())
    return web.Response(text=renderer.render_html(rows), content_type="text/html")


@routes.get("/status")
async def status(request: web.Request) -> web.Response:
    return web.Response(
        text=render_status(request.app[STORE_KEY].snapshot()),
        content_type="text/html",
    )


@routes.get("/")
@routes.get("/home")
async def home(request: web.Request) -> web.Response:
    base_url = f"{request.scheme}://{request.host}"
    return web.Response(text=render_home(base_url), content_type="text/html")


async def _close_clients(app: web.Application) -> None:
    await drain_forwards(app)
    await app[FORWARDER_KEY].close()
    await app[FETCHER_KEY].close()


def create_app(
    store: TrackedItemStore,
    *,
    forwarder: AnalyticsForwarder | None = None,
    fetcher: EnrichmentFetcher | None = None,
    public_dir: Path | None = None,
) -> web.Application:
    """Build the web application around an already loaded store."""
    app = web.Application()
    fetcher = fetcher or EnrichmentFetcher()

    app[STORE_KEY] = store
    app[FORWARDER_KEY] = forwarder or AnalyticsForwarder()
    app[FETCHER_KEY] = fetcher
    app[RENDERER_KEY] = ListingRenderer(fetcher)
    app[PENDING_FORWARDS_KEY] = set()

    app.add_routes(routes)

    static_root = public_dir or settings.PUBLIC_DIR
    if static_root.is_dir():
        app.router.add_static("/static", static_root)
    else:
        logger.warning("Public directory %s not found; static files disabled", static_root)

    app.on_cleanup.append(_close_clients)
    return app
