"""Error taxonomy of the tracking pipeline."""
from __future__ import annotations


class TrackerError(Exception):
    """Base class for tracker failures."""


class ValidationError(TrackerError):
    """Raised when an inbound item identifier is missing or malformed."""


class PersistenceError(TrackerError):
    """Raised when the tracked items file cannot be read or written."""


class ForwardError(TrackerError):
    """Analytics collector call failed."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class EnrichmentError(TrackerError):
    """Item page could not be fetched or did not contain expected markup."""


__all__ = [
    "EnrichmentError",
    "ForwardError",
    "PersistenceError",
    "TrackerError",
    "ValidationError",
]
