"""Row model for the tracked items listing."""
from __future__ import annotations

from dataclasses import dataclass

from .enrichment import Enrichment
from .tracked_item import TrackedItem

UNAVAILABLE_LABEL = "Details not available"


@dataclass(frozen=True, slots=True)
class DisplayRow:
    """One rendered entry of the listing page."""

    item_id: str
    title: str
    url: str | None = None
    thumbnail_url: str | None = None
    available: bool = True

    @classmethod
    def from_enrichment(cls, item: TrackedItem, enrichment: Enrichment) -> "DisplayRow":
        return cls(
            item_id=item.id,
            title=enrichment.title,
            url=enrichment.source_url,
            thumbnail_url=enrichment.thumbnail_url,
        )

    @classmethod
    def unavailable(cls, item: TrackedItem) -> "DisplayRow":
        return cls(item_id=item.id, title=UNAVAILABLE_LABEL, available=False)
