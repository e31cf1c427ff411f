"""Listing of tracked items enriched with live marketplace data."""
from __future__ import annotations

import asyncio
import logging
from html import escape
from typing import Sequence

from models import DisplayRow, Enrichment, TrackedItem
from services.enrichment import EnrichmentFetcher

logger = logging.getLogger(__name__)


class ListingRenderer:
    """Builds display rows for a snapshot of tracked items."""

    def __init__(self, fetcher: EnrichmentFetcher) -> None:
        self.fetcher = fetcher

    async def render(self, items: Sequence[TrackedItem]) -> list[DisplayRow]:
        """Enrich every item independently, keeping the input order."""
        if not items:
            return []

        results = await asyncio.gather(
            *(self.fetcher.fetch(item) for item in items),
            return_exceptions=True,
        )

        rows: list[DisplayRow] = []
        for item, result in zip(items, results):
            if isinstance(result, Enrichment):
                rows.append(DisplayRow.from_enrichment(item, result))
                continue
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning("Enrichment failed for item %s: %r", item.id, result)
            rows.append(DisplayRow.unavailable(item))

        available = sum(1 for row in rows if row.available)
        logger.info("Rendered %s rows (%s enriched)", len(rows), available)
        return rows

    @staticmethod
    def render_html(rows: Sequence[DisplayRow]) -> str:
        lines = [
            "<!DOCTYPE html>",
            "<html>",
            "<head>",
            '<meta charset="utf-8">',
            "<title>Tracked Items</title>",
            '<link rel="stylesheet" href="/static/style.css">',
            "</head>",
            "<body>",
            "<h1>Tracked Items</h1>",
        ]

        if not rows:
            lines.append("<p>No items are being tracked yet.</p>")
        else:
            lines.append('<ul class="tracked-items">')
            for row in rows:
                lines.append(_render_row(row))
            lines.append("</ul>")

        lines.extend(["</body>", "</html>"])
        return "\n".join(lines)


def _render_row(row: DisplayRow) -> str:
    item_id = escape(row.item_id)
    if not row.available:
        return (
            '<li class="item item--unavailable">'
            f'<span class="item-id">{item_id}</span> '
            f'<em class="item-status">{escape(row.title)}</em>'
            "</li>"
        )

    url = escape(row.url or "", quote=True)
    thumbnail = escape(row.thumbnail_url or "", quote=True)
    title = escape(row.title)
    return (
        '<li class="item">'
        f'<a href="{url}"><img class="item-thumbnail" src="{thumbnail}" alt="{escape(row.title, quote=True)}"></a> '
        f'<a class="item-title" href="{url}">{title}</a> '
        f'<span class="item-id">{item_id}</span>'
        "</li>"
    )
