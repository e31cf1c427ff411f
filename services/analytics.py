"""Best-effort relay of tracking hits to the analytics collector."""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

import aiohttp

from config import settings
from models import AnalyticsEvent
from services.errors import ForwardError

logger = logging.getLogger(__name__)


class AnalyticsForwarder:
    """Sends Measurement Protocol events; failures are logged and returned."""

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        *,
        endpoint: str | None = None,
        measurement_id: str | None = None,
        api_secret: str | None = None,
        client_id: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.session = session
        self._owns_session = session is None
        self.endpoint = endpoint or settings.ANALYTICS_ENDPOINT
        self.measurement_id = measurement_id or settings.ANALYTICS_MEASUREMENT_ID
        self.api_secret = settings.ANALYTICS_API_SECRET if api_secret is None else api_secret
        self.client_id = client_id or settings.ANALYTICS_CLIENT_ID
        self.timeout = timeout or settings.REQUEST_TIMEOUT

    async def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
        return self.session

    async def close(self) -> None:
        """Close the session if we own it."""
        if self._owns_session and self.session is not None:
            await self.session.close()
            self.session = None

    def _params(self) -> dict[str, str]:
        params = {"measurement_id": self.measurement_id}
        if self.api_secret:
            params["api_secret"] = self.api_secret
        return params

    async def forward(self, event: AnalyticsEvent) -> Optional[ForwardError]:
        """Send one event. Returns None on success, the ForwardError otherwise."""
        session = await self._get_session()
        payload = event.to_payload(self.client_id)

        try:
            async with session.post(
                self.endpoint,
                params=self._params(),
                json=payload,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                if not 200 <= response.status < 300:
                    error = ForwardError(
                        f"Collector responded with HTTP {response.status}",
                        status=response.status,
                    )
                    logger.warning(
                        "Analytics forward for item %s rejected (status %s)",
                        event.item_id,
                        response.status,
                    )
                    return error
        except asyncio.TimeoutError as exc:
            logger.warning("Timeout forwarding analytics for item %s", event.item_id)
            return ForwardError(f"Timeout: {exc!r}")
        except aiohttp.ClientError as exc:
            logger.warning("Error forwarding analytics for item %s: %s", event.item_id, exc)
            logger.debug("Analytics forward error details", exc_info=True)
            return ForwardError(str(exc))

        logger.debug("Forwarded %s for item %s", event.event_name, event.item_id)
        return None
