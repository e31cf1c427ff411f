"""Services package initialization"""
from .analytics import AnalyticsForwarder
from .enrichment import EnrichmentFetcher
from .listing import ListingRenderer
from .store import TrackedItemStore

__all__ = ["AnalyticsForwarder", "EnrichmentFetcher", "ListingRenderer", "TrackedItemStore"]
