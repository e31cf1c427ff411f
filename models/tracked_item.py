"""
Data models for the application
"""
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TrackedItem:
    """A marketplace item identifier recorded by the tracker"""
    id: str

    def __str__(self) -> str:
        return self.id
