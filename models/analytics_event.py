"""Analytics event relayed to the measurement collector."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .tracked_item import TrackedItem

PAGE_VIEW = "page_view"
DEFAULT_PAGE_TITLE = "eBay Listing"


@dataclass(frozen=True, slots=True)
class AnalyticsEvent:
    """Page view event built for a single tracking hit."""

    item_id: str
    page_title: str
    page_url: str
    event_name: str = PAGE_VIEW

    @classmethod
    def for_item(cls, item: TrackedItem, page_url: str, page_title: str = DEFAULT_PAGE_TITLE) -> "AnalyticsEvent":
        return cls(item_id=item.id, page_title=page_title, page_url=page_url)

    def to_payload(self, client_id: str) -> dict[str, Any]:
        """Measurement Protocol request body for this event."""
        return {
            "client_id": client_id,
            "events": [
                {
                    "name": self.event_name,
                    "params": {
                        "item_id": self.item_id,
                        "page_title": self.page_title,
                        "page_location": self.page_url,
                    },
                }
            ],
        }
