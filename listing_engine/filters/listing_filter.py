# listing_engine/filters/listing_filter.py

"""Local search, filtering and sorting over unified listings."""

import logging
from dataclasses import dataclass, field

from listing_engine.models.listing import UnifiedListing

logger = logging.getLogger("listing_engine.filters")

SORT_ORDERS: tuple[str, ...] = (
    "relevance",
    "price-low",
    "price-high",
    "rating",
    "newest",
    "popular",
)


@dataclass
class FilterCriteria:
    """User-selected filters for a listing grid."""

    query: str = ""
    categories: list[str] = field(default_factory=lambda: list[str]())
    locations: list[str] = field(default_factory=lambda: list[str]())
    price_min: float = 0.0
    price_max: float | None = None
    min_rating: float = 0.0
    is_service: bool | None = None


class ListingFilter:
    """Filter and order listings the way the listing grid does."""

    @staticmethod
    def matches_query(listing: UnifiedListing, query: str) -> bool:
        """Case-insensitive match over title, description and tags."""
        needle = query.strip().lower()
        if not needle:
            return True
        return (
            needle in listing.title.lower()
            or needle in listing.description.lower()
            or any(needle in tag.lower() for tag in listing.tags)
        )

    @staticmethod
    def filter_listings(
        listings: list[UnifiedListing],
        criteria: FilterCriteria,
    ) -> tuple[list[UnifiedListing], int]:
        """Apply every criterion in turn.

        The price filter compares the listing's upper bound against the
        requested window.  Returns the kept listings and the count removed.
        """
        kept: list[UnifiedListing] = []
        for listing in listings:
            if not ListingFilter.matches_query(listing, criteria.query):
                continue
            if (
                criteria.categories
                and listing.category not in criteria.categories
            ):
                continue
            if (
                criteria.locations
                and listing.location not in criteria.locations
            ):
                continue
            upper = listing.price.sort_key(high=True)
            if upper < criteria.price_min:
                continue
            if criteria.price_max is not None and upper > criteria.price_max:
                continue
            if listing.rating < criteria.min_rating:
                continue
            if (
                criteria.is_service is not None
                and listing.is_service != criteria.is_service
            ):
                continue
            kept.append(listing)

        removed = len(listings) - len(kept)
        if removed:
            logger.info("Listing filter removed %d listings", removed)
        return kept, removed

    @staticmethod
    def sort_listings(
        listings: list[UnifiedListing],
        order: str = "relevance",
    ) -> list[UnifiedListing]:
        """Return a new list in the requested order.

        ``relevance`` keeps the input order.  Sorting is stable, so ties
        keep their relative input order too.
        """
        if order not in SORT_ORDERS:
            msg = f"Unknown sort order: {order!r}"
            raise ValueError(msg)
        if order == "price-low":
            return sorted(listings, key=lambda item: item.price.sort_key())
        if order == "price-high":
            return sorted(
                listings,
                key=lambda item: item.price.sort_key(high=True),
                reverse=True,
            )
        if order == "rating":
            return sorted(
                listings, key=lambda item: item.rating, reverse=True
            )
        if order == "newest":
            return sorted(
                listings, key=lambda item: item.created_at, reverse=True
            )
        if order == "popular":
            return sorted(
                listings, key=lambda item: item.views_count, reverse=True
            )
        return list(listings)
