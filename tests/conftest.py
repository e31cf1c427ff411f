"""Pytest configuration and fixtures."""
from __future__ import annotations

from unittest.mock import Mock

import aiohttp
import pytest

from config import settings
from services.store import TrackedItemStore


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch, tmp_path) -> None:
    """Set up test environment variables"""
    monkeypatch.setenv('PORT', '3000')
    monkeypatch.setenv('DATA_PATH', str(tmp_path / 'tracked_items.json'))
    monkeypatch.setenv('PUBLIC_DIR', str(tmp_path / 'public'))
    monkeypatch.setenv('REQUEST_TIMEOUT', '5')
    monkeypatch.setenv('ANALYTICS_ENDPOINT', 'https://collector.test/mp/collect')
    monkeypatch.setenv('ANALYTICS_MEASUREMENT_ID', 'G-TEST123')
    monkeypatch.setenv('ANALYTICS_API_SECRET', '')
    monkeypatch.setenv('ANALYTICS_CLIENT_ID', 'anon')
    monkeypatch.setenv('ITEM_BASE_URL', 'https://www.ebay.com/itm/')
    settings.reload()


@pytest.fixture
def data_path():
    return settings.DATA_PATH


@pytest.fixture
def store(data_path) -> TrackedItemStore:
    tracked = TrackedItemStore(data_path)
    tracked.load()
    return tracked


class FakeResponse:
    """Minimal stand-in for aiohttp.ClientResponse used as a context manager."""

    def __init__(self, url: str, status: int = 200, body: str | bytes = "") -> None:
        self.url = url
        self.status = status
        self._body = body

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, *exc_info) -> bool:
        return False

    async def text(self) -> str:
        if isinstance(self._body, bytes):
            return self._body.decode("utf-8")
        return self._body

    def raise_for_status(self) -> None:
        if self.status >= 400:
            raise aiohttp.ClientResponseError(
                request_info=Mock(real_url=self.url),
                history=(),
                status=self.status,
                message="error",
            )


class FakeSession:
    """Records requests and answers them from a url -> outcome table.

    An outcome is an HTML string or raw bytes (200), an int status, or an exception to raise.
    """

    def __init__(self, routes: dict | None = None, default: object = 200) -> None:
        self.routes = routes or {}
        self.default = default
        self.calls: list[tuple[str, str, dict]] = []
        self.closed = False

    def _respond(self, method: str, url: str, **kwargs) -> FakeResponse:
        self.calls.append((method, url, kwargs))
        outcome = self.routes.get(url, self.default)
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, int):
            return FakeResponse(url, status=outcome)
        return FakeResponse(url, body=outcome)

    def get(self, url: str, **kwargs) -> FakeResponse:
        return self._respond("GET", url, **kwargs)

    def post(self, url: str, **kwargs) -> FakeResponse:
        return self._respond("POST", url, **kwargs)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_session():
    return FakeSession


@pytest.fixture
def sample_item_html() -> str:
    """Trimmed eBay item page with title and image carousel"""
    return """
    <html>
        <head>
            <meta property="og:title" content="Vintage Camera | eBay">
        </head>
        <body>
            <h1 class="x-item-title__mainTitle">
                <span class="ux-textspans ux-textspans--BOLD">Vintage Film Camera 35mm</span>
            </h1>
            <div class="ux-image-carousel">
                <div class="ux-image-carousel-item active image">
                    <img src="https://i.ebayimg.com/images/g/abc/s-l500.jpg" alt="Vintage Film Camera">
                </div>
                <div class="ux-image-carousel-item image">
                    <img data-src="https://i.ebayimg.com/images/g/def/s-l500.jpg" alt="Vintage Film Camera">
                </div>
            </div>
        </body>
    </html>
    """


@pytest.fixture
def invalid_html() -> str:
    """HTML without item markup"""
    return """
    <html>
        <body>
            <div>We looked everywhere for this page.</div>
        </body>
    </html>
    """
