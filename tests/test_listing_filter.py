# tests/test_listing_filter.py

"""Tests for ListingFilter search, filtering and sorting."""

import unittest

from listing_engine.filters.listing_filter import FilterCriteria, ListingFilter
from listing_engine.models.listing import ProductRecord, UnifiedListing
from listing_engine.models.price import DisplayPrice


def _make(
    listing_id: str,
    title: str,
    low: float = 10.0,
    high: float | None = None,
    rating: float = 0.0,
    is_service: bool = False,
    **extra: object,
) -> UnifiedListing:
    """Create a minimal UnifiedListing."""
    return UnifiedListing(
        id=listing_id,
        title=title,
        price=DisplayPrice(low, low if high is None else high),
        is_service=is_service,
        original_data=ProductRecord(id=listing_id),
        rating=rating,
        **extra,  # type: ignore[arg-type]
    )


class TestMatchesQuery(unittest.TestCase):
    """ListingFilter.matches_query behaviour."""

    def test_title_case_insensitive(self) -> None:
        """Title matches ignore case."""
        self.assertTrue(
            ListingFilter.matches_query(_make("1", "Office Chair"), "CHAIR")
        )

    def test_description_and_tags(self) -> None:
        """Description and tags are searched too."""
        listing = _make(
            "1", "Seat", description="ergonomic mesh", tags=["Furniture"]
        )
        self.assertTrue(ListingFilter.matches_query(listing, "mesh"))
        self.assertTrue(ListingFilter.matches_query(listing, "furn"))
        self.assertFalse(ListingFilter.matches_query(listing, "desk"))

    def test_blank_query_matches_everything(self) -> None:
        """An empty query does not filter."""
        self.assertTrue(ListingFilter.matches_query(_make("1", "X"), "  "))


class TestFilterListings(unittest.TestCase):
    """ListingFilter.filter_listings behaviour."""

    def setUp(self) -> None:
        self.listings = [
            _make("a", "Cheap Chair", 20, rating=3.0, category="Furniture"),
            _make("b", "Fancy Chair", 400, rating=4.8, category="Furniture"),
            _make(
                "c", "Chair Repair", 30, 90, rating=4.0,
                is_service=True, category="Repairs",
            ),
        ]

    def test_no_criteria_keeps_all(self) -> None:
        """Default criteria remove nothing."""
        kept, removed = ListingFilter.filter_listings(
            self.listings, FilterCriteria()
        )
        self.assertEqual(len(kept), 3)
        self.assertEqual(removed, 0)

    def test_price_window_uses_upper_bound(self) -> None:
        """Ranges are judged by their upper bound."""
        kept, removed = ListingFilter.filter_listings(
            self.listings, FilterCriteria(price_max=50)
        )
        self.assertEqual([item.id for item in kept], ["a"])
        self.assertEqual(removed, 2)

    def test_min_rating(self) -> None:
        """Listings under the rating floor are dropped."""
        kept, _ = ListingFilter.filter_listings(
            self.listings, FilterCriteria(min_rating=4.0)
        )
        self.assertEqual([item.id for item in kept], ["b", "c"])

    def test_type_filter(self) -> None:
        """is_service narrows to one variant."""
        kept, _ = ListingFilter.filter_listings(
            self.listings, FilterCriteria(is_service=True)
        )
        self.assertEqual([item.id for item in kept], ["c"])

    def test_category_filter(self) -> None:
        """Only listed categories survive."""
        kept, _ = ListingFilter.filter_listings(
            self.listings, FilterCriteria(categories=["Repairs"])
        )
        self.assertEqual([item.id for item in kept], ["c"])


class TestSortListings(unittest.TestCase):
    """ListingFilter.sort_listings behaviour."""

    def setUp(self) -> None:
        self.listings = [
            _make("a", "A", 50, rating=3.0, views_count=5),
            _make("b", "B", 10, 200, rating=4.5, views_count=50),
            _make("c", "C", 30, rating=4.0, views_count=1),
        ]

    def test_relevance_keeps_order(self) -> None:
        """relevance returns the input order as a new list."""
        result = ListingFilter.sort_listings(self.listings)
        self.assertEqual([i.id for i in result], ["a", "b", "c"])
        self.assertIsNot(result, self.listings)

    def test_price_low_uses_min(self) -> None:
        """Ascending price sorts on the lower bound."""
        result = ListingFilter.sort_listings(self.listings, "price-low")
        self.assertEqual([i.id for i in result], ["b", "c", "a"])

    def test_price_high_uses_max(self) -> None:
        """Descending price sorts on the upper bound."""
        result = ListingFilter.sort_listings(self.listings, "price-high")
        self.assertEqual([i.id for i in result], ["b", "a", "c"])

    def test_rating_and_popular(self) -> None:
        """rating and popular sort descending."""
        by_rating = ListingFilter.sort_listings(self.listings, "rating")
        self.assertEqual([i.id for i in by_rating], ["b", "c", "a"])
        popular = ListingFilter.sort_listings(self.listings, "popular")
        self.assertEqual([i.id for i in popular], ["b", "a", "c"])

    def test_unknown_order_rejected(self) -> None:
        """Unknown sort orders raise ValueError."""
        with self.assertRaises(ValueError):
            ListingFilter.sort_listings(self.listings, "random")


if __name__ == "__main__":
    unittest.main()
