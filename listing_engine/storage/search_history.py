# listing_engine/storage/search_history.py

"""Bounded, deduplicated, persisted history of search queries."""

import json
import logging
import threading
import time
from collections.abc import Callable, Iterator
from itertools import islice
from typing import Any, cast

from listing_engine.config.settings import Settings
from listing_engine.exceptions import (
    InvalidQueryError,
    PersistenceCorruptionError,
)
from listing_engine.models.search_history import SearchHistoryItem
from listing_engine.storage.history_storage import SlotStorage

logger = logging.getLogger("listing_engine.history")


class SearchHistoryStore:
    """Most-recent-first query history with one entry per distinct query.

    The in-memory list mirrors a single storage slot.  Every mutation
    rewrites the whole slot, under a lock, so concurrent ``record``
    calls cannot break the capacity or uniqueness invariants.
    """

    def __init__(
        self,
        storage: SlotStorage,
        capacity: int | None = None,
        key: str | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._storage = storage
        self._capacity: int = capacity or Settings.HISTORY_CAPACITY
        self._key: str = key or Settings.HISTORY_STORAGE_KEY
        self._clock = clock
        self._lock = threading.Lock()
        self._items: list[SearchHistoryItem] = self._load()

    # ── Persistence ──────────────────────────────────────

    def _parse(self, raw: str) -> list[SearchHistoryItem]:
        """Decode the slot, raising on anything but a list of entries."""
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, RecursionError) as exc:
            msg = f"history slot is not JSON: {exc}"
            raise PersistenceCorruptionError(msg) from exc

        if not isinstance(data, list):
            msg = "history slot is not a list"
            raise PersistenceCorruptionError(msg)

        items: list[SearchHistoryItem] = []
        seen: set[str] = set()
        for entry in cast(list[object], data):
            if not isinstance(entry, dict):
                msg = f"history entry is not an object: {entry!r}"
                raise PersistenceCorruptionError(msg)
            try:
                item = SearchHistoryItem.from_dict(
                    cast(dict[str, Any], entry)
                )
            except (ValueError, OverflowError) as exc:
                raise PersistenceCorruptionError(str(exc)) from exc
            if item.query in seen:
                continue
            seen.add(item.query)
            items.append(item)
        return items[: self._capacity]

    def _load(self) -> list[SearchHistoryItem]:
        """Rehydrate from storage; absent or corrupt slots yield ``[]``."""
        try:
            raw = self._storage.get(self._key)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning(
                "Could not read search history slot '%s': %s",
                self._key,
                exc,
            )
            return []
        if raw is None:
            return []
        try:
            items = self._parse(raw)
        except PersistenceCorruptionError as exc:
            logger.warning(
                "Discarding corrupt search history slot '%s': %s",
                self._key,
                exc,
            )
            return []
        logger.debug("Loaded %d search history items", len(items))
        return items

    def _persist(self, items: list[SearchHistoryItem]) -> None:
        payload = json.dumps(
            [item.to_dict() for item in items],
            ensure_ascii=False,
        )
        self._storage.set(self._key, payload)

    # ── Mutations ────────────────────────────────────────

    def _next_timestamp(self) -> int:
        now = int(self._clock() * 1000)
        if self._items and now <= self._items[0].timestamp:
            return self._items[0].timestamp + 1
        return now

    def record(
        self, query: str, category: str | None = None
    ) -> SearchHistoryItem:
        """Record a search, moving a repeated query to the front.

        Raises:
            InvalidQueryError: *query* is empty after trimming.
        """
        if not isinstance(query, str):
            msg = f"Query must be a string, got {type(query).__name__}"
            raise InvalidQueryError(msg)
        cleaned = query.strip()
        if not cleaned:
            msg = "Query must not be empty"
            raise InvalidQueryError(msg)

        with self._lock:
            item = SearchHistoryItem(
                query=cleaned,
                timestamp=self._next_timestamp(),
                category=category or None,
            )
            remaining = [i for i in self._items if i.query != cleaned]
            updated = [item, *remaining][: self._capacity]
            self._persist(updated)
            self._items = updated

        logger.debug(
            "Recorded search '%s' (category=%s, size=%d)",
            cleaned,
            category,
            len(self._items),
        )
        return item

    def clear(self) -> int:
        """Forget every query and remove the persisted slot.

        Returns the number of items that were removed.
        """
        with self._lock:
            count = len(self._items)
            self._storage.remove(self._key)
            self._items = []
        logger.info("Search history cleared (%d items removed)", count)
        return count

    def close(self) -> None:
        """Release the underlying storage."""
        self._storage.close()

    # ── Queries ──────────────────────────────────────────

    def recent(self, limit: int | None = None) -> Iterator[str]:
        """Lazily yield up to *limit* queries, most recent first.

        Each call starts over from the current state.
        """
        count = Settings.HISTORY_RECENT_LIMIT if limit is None else limit
        snapshot = tuple(self._items)
        return (item.query for item in islice(snapshot, max(0, count)))

    def by_category(self, category: str) -> Iterator[str]:
        """Lazily yield every query recorded under *category*."""
        snapshot = tuple(self._items)
        return (
            item.query for item in snapshot if item.category == category
        )

    @property
    def items(self) -> tuple[SearchHistoryItem, ...]:
        """Immutable snapshot of the full history."""
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, query: object) -> bool:
        return any(item.query == query for item in self._items)
