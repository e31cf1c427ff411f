"""Informational HTML pages."""
from __future__ import annotations

from html import escape
from typing import Sequence

from models import TrackedItem


def _page(title: str, body: Sequence[str]) -> str:
    lines = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '<meta charset="utf-8">',
        f"<title>{escape(title)}</title>",
        '<link rel="stylesheet" href="/static/style.css">',
        "</head>",
        "<body>",
        *body,
        "</body>",
        "</html>",
    ]
    return "\n".join(lines)


def render_status(items: Sequence[TrackedItem]) -> str:
    body = [
        "<h1>Tracking Server is Running!</h1>",
        f"<p>The server is currently tracking {len(items)} item IDs:</p>",
        "<ul>",
        *(f"<li>{escape(item.id)}</li>" for item in items),
        "</ul>",
    ]
    return _page("Tracking Server Status", body)


def render_home(base_url: str) -> str:
    snippet = f'<img src="{base_url}/track?item_id=YOUR_ITEM_ID" width="1" height="1" alt="">'
    body = [
        "<h1>Item Tracker</h1>",
        "<p>Embed the pixel below in a listing description to record views of the item.</p>",
        f"<pre><code>{escape(snippet)}</code></pre>",
        "<ul>",
        '<li><a href="/current-tags">Tracked items</a></li>',
        '<li><a href="/status">Server status</a></li>',
        "</ul>",
    ]
    return _page("Item Tracker", body)
