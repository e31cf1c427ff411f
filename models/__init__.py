"""Models package initialization"""
from .analytics_event import AnalyticsEvent
from .display_row import DisplayRow
from .enrichment import Enrichment
from .tracked_item import TrackedItem

__all__ = ['AnalyticsEvent', 'DisplayRow', 'Enrichment', 'TrackedItem']
