"""Display metadata scraped from an item page."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Enrichment:
    """Live title and thumbnail of a tracked item."""

    title: str
    source_url: str
    thumbnail_url: str
