"""Enrichment of tracked items with live marketplace data."""
from __future__ import annotations

import asyncio
import logging
from typing import Optional
from urllib.parse import urljoin

import aiohttp
from bs4 import BeautifulSoup

from config import settings
from models import Enrichment, TrackedItem
from services.errors import EnrichmentError

logger = logging.getLogger(__name__)

TITLE_SELECTORS = (
    'h1.x-item-title__mainTitle span',
    'h1.x-item-title__mainTitle',
    'h1#itemTitle',
)
THUMBNAIL_SELECTORS = (
    'div.ux-image-carousel-item img',
    'img#icImg',
)
IMAGE_ATTRIBUTES = ('src', 'data-zoom-src', 'data-src')


class EnrichmentFetcher:
    """Fetches item pages and extracts title and thumbnail."""

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.headers = settings.HEADERS
        self.session = session
        self._owns_session = session is None
        self.base_url = base_url or settings.ITEM_BASE_URL
        self.timeout = timeout or settings.REQUEST_TIMEOUT

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self.session is None:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            connector = aiohttp.TCPConnector(limit_per_host=5, limit=20)
            self.session = aiohttp.ClientSession(
                headers=self.headers,
                timeout=timeout,
                connector=connector,
            )
        return self.session

    async def close(self) -> None:
        """Close the session if we own it."""
        if self._owns_session and self.session is not None:
            await self.session.close()
            self.session = None

    def item_url(self, item: TrackedItem) -> str:
        return urljoin(self.base_url, item.id)

    async def fetch(self, item: TrackedItem) -> Optional[Enrichment]:
        """Fetch the item page and extract display data, or None."""
        url = self.item_url(item)
        html = await self.get_page_content(url)
        if html is None:
            return None
        return self.parse_item_page(html, url)

    async def get_page_content(self, url: str) -> Optional[str]:
        """Fetch HTML content from an URL."""
        session = await self._get_session()

        try:
            async with session.get(
                url,
                headers=self.headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                response.raise_for_status()
                return await response.text()
        except UnicodeDecodeError as exc:
            logger.warning("Undecodable item page %s: %s", url, exc)
            return None
        except asyncio.TimeoutError as exc:
            logger.warning("Timeout fetching item page %s: %s", url, exc)
            return None
        except aiohttp.ClientResponseError as exc:
            logger.warning("HTTP error fetching item page %s (status %s)", url, exc.status)
            return None
        except aiohttp.ClientError as exc:
            logger.warning("Error fetching item page %s: %s", url, exc)
            logger.debug("Item page request error details", exc_info=True)
            return None

    def parse_item_page(self, html: str, item_url: str) -> Optional[Enrichment]:
        """Parse title and thumbnail from an item page."""
        soup = BeautifulSoup(html, 'html.parser')

        try:
            title = self._extract_title(soup)
            thumbnail_url = self._extract_thumbnail(soup, item_url)
        except EnrichmentError as exc:
            logger.info("Item page %s did not match expected markup: %s", item_url, exc)
            return None

        return Enrichment(title=title, source_url=item_url, thumbnail_url=thumbnail_url)

    @staticmethod
    def _extract_title(soup: BeautifulSoup) -> str:
        for selector in TITLE_SELECTORS:
            tag = soup.select_one(selector)
            if tag:
                title = tag.get_text(" ", strip=True)
                if title:
                    return title

        meta = soup.select_one('meta[property="og:title"]')
        if meta and (meta.get('content') or '').strip():
            return meta['content'].strip()

        raise EnrichmentError("no title found")

    def _extract_thumbnail(self, soup: BeautifulSoup, item_url: str) -> str:
        for selector in THUMBNAIL_SELECTORS:
            img_tag = soup.select_one(selector)
            if not img_tag:
                continue
            for attribute in IMAGE_ATTRIBUTES:
                img_url = self._normalize_media_url(img_tag.get(attribute) or '', item_url)
                if img_url:
                    return img_url

        meta = soup.select_one('meta[property="og:image"]')
        if meta:
            img_url = self._normalize_media_url(meta.get('content') or '', item_url)
            if img_url:
                return img_url

        raise EnrichmentError("no thumbnail found")

    @staticmethod
    def _normalize_media_url(url: str, base_url: str) -> str:
        candidate = (url or "").strip()
        if not candidate or candidate.startswith("data:"):
            return ""
        if candidate.startswith("//"):
            return f"https:{candidate}"
        if candidate.startswith("http"):
            return candidate
        return urljoin(base_url, candidate)
