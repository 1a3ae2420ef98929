# listing_engine/models/search_history.py

"""Search history entry model."""

import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class SearchHistoryItem:
    """One recorded search: the query as typed, when, and its category."""

    query: str
    timestamp: int  # epoch milliseconds
    category: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the persisted slot shape."""
        return {
            "query": self.query,
            "timestamp": self.timestamp,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "SearchHistoryItem":
        """Rebuild an item from the persisted slot shape.

        Raises ``ValueError`` when the entry is structurally invalid.
        """
        query = raw.get("query")
        timestamp = raw.get("timestamp")
        category = raw.get("category")
        if not isinstance(query, str) or not query.strip():
            msg = f"history entry has no query: {raw!r}"
            raise ValueError(msg)
        if isinstance(timestamp, bool) or not isinstance(
            timestamp, (int, float)
        ):
            msg = f"history entry has no timestamp: {raw!r}"
            raise ValueError(msg)
        if not math.isfinite(timestamp):
            msg = f"history entry has a non-finite timestamp: {raw!r}"
            raise ValueError(msg)
        if category is not None and not isinstance(category, str):
            msg = f"history entry has a bad category: {raw!r}"
            raise ValueError(msg)
        return cls(query=query, timestamp=int(timestamp), category=category)
