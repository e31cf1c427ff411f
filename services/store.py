"""Durable, deduplicated list of tracked item identifiers."""
from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Sequence

from config import settings
from models import TrackedItem
from services.errors import PersistenceError
from services.validator import is_valid

logger = logging.getLogger(__name__)


class TrackedItemStore:
    """Insertion-ordered set of tracked items persisted as a JSON array."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or settings.DATA_PATH
        self._items: list[TrackedItem] = []
        self._index: set[TrackedItem] = set()
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._items)

    def load(self) -> tuple[TrackedItem, ...]:
        """Load the persisted list, falling back to an empty one on any failure."""
        self._items = []
        self._index = set()

        try:
            raw_ids = self._read()
        except PersistenceError:
            logger.exception("Failed to load tracked items from %s; starting empty", self.path)
            return self.snapshot()

        dropped = 0
        for raw in raw_ids:
            if not isinstance(raw, str) or not is_valid(raw):
                dropped += 1
                continue
            item = TrackedItem(raw.strip())
            if item in self._index:
                dropped += 1
                continue
            self._items.append(item)
            self._index.add(item)

        if dropped:
            logger.warning("Dropped %s malformed or duplicate entries from %s", dropped, self.path)
            try:
                self._write(self.snapshot())
            except PersistenceError:
                logger.exception("Failed to rewrite cleaned tracked items to %s", self.path)

        logger.info("Loaded %s tracked items from %s", len(self._items), self.path)
        return self.snapshot()

    def contains(self, item: TrackedItem) -> bool:
        return item in self._index

    async def add(self, item: TrackedItem) -> bool:
        """Record ``item`` and persist the whole list. Returns False for duplicates."""
        async with self._lock:
            if self.contains(item):
                return False

            self._items.append(item)
            self._index.add(item)
            snapshot = self.snapshot()

            loop = asyncio.get_running_loop()
            try:
                await loop.run_in_executor(None, self._write, snapshot)
            except PersistenceError:
                # memory stays ahead of disk until the next successful write
                logger.exception("Failed to persist tracked items to %s", self.path)

        logger.info("Tracking new item %s (%s total)", item.id, len(snapshot))
        return True

    def snapshot(self) -> tuple[TrackedItem, ...]:
        return tuple(self._items)

    def _read(self) -> list[object]:
        if not self.path.exists():
            return []
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, ValueError, RecursionError) as exc:
            raise PersistenceError(f"Cannot read {self.path}: {exc}") from exc
        if not isinstance(data, list):
            raise PersistenceError(f"Expected a JSON array in {self.path}, got {type(data).__name__}")
        return data

    def _write(self, items: Sequence[TrackedItem]) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as handle:
                json.dump([item.id for item in items], handle, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise PersistenceError(f"Cannot write {self.path}: {exc}") from exc
