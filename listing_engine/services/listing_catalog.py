# listing_engine/services/listing_catalog.py

"""Local catalog of unified listings with lookup and search."""

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any, cast

from listing_engine.exceptions import NotFoundError
from listing_engine.filters.listing_filter import FilterCriteria, ListingFilter
from listing_engine.filters.listing_unifier import (
    ListingUnifier,
    record_from_dict,
)
from listing_engine.models.listing import SourceRecord, UnifiedListing

logger = logging.getLogger("listing_engine.catalog")


class LocalCatalog:
    """Unified view over the local products and services."""

    def __init__(
        self,
        records: Iterable[SourceRecord] = (),
        base_url: str = "",
    ) -> None:
        self._listings: list[UnifiedListing] = ListingUnifier.unify_all(
            records, base_url
        )
        self._by_id: dict[str, UnifiedListing] = {}
        self._by_slug: dict[str, UnifiedListing] = {}
        for listing in self._listings:
            if listing.id in self._by_id:
                logger.warning("Duplicate listing id %s ignored", listing.id)
                continue
            self._by_id[listing.id] = listing
            if listing.slug:
                self._by_slug.setdefault(listing.slug, listing)
        logger.debug("LocalCatalog holds %d listings", len(self._by_id))

    @classmethod
    def load(cls, path: Path, base_url: str = "") -> "LocalCatalog":
        """Build a catalog from ``{"products": [...], "services": [...]}``."""
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            msg = f"{path} does not hold a listings object"
            raise ValueError(msg)

        payload = cast(dict[str, Any], data)
        records: list[SourceRecord] = []
        for key, kind in (("products", "product"), ("services", "service")):
            for entry in payload.get(key, []):
                records.append(record_from_dict(entry, kind))

        logger.info("Loaded %d listing records from %s", len(records), path)
        return cls(records, base_url)

    @property
    def listings(self) -> list[UnifiedListing]:
        return list(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)

    def get(self, listing_id: str) -> UnifiedListing:
        """Return the listing with *listing_id*.

        Raises:
            NotFoundError: no source record has that id.
        """
        try:
            return self._by_id[listing_id]
        except KeyError:
            msg = f"Listing not found: {listing_id}"
            raise NotFoundError(msg) from None

    def get_by_slug(self, slug: str) -> UnifiedListing:
        """Return the listing published under *slug*."""
        try:
            return self._by_slug[slug]
        except KeyError:
            msg = f"Listing not found: {slug}"
            raise NotFoundError(msg) from None

    def search(
        self,
        query: str,
        category: str | None = None,
    ) -> list[UnifiedListing]:
        """Listings matching *query* (and *category*), in catalog order."""
        criteria = FilterCriteria(
            query=query,
            categories=[category] if category else [],
        )
        results, _ = ListingFilter.filter_listings(self.listings, criteria)
        return results
