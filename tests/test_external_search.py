# tests/test_external_search.py

"""Tests for ExternalComparisonEngine search, retry and comparison."""

import asyncio
import unittest
from unittest.mock import AsyncMock

from listing_engine.config.settings import Settings
from listing_engine.exceptions import InvalidQueryError, TransportError
from listing_engine.models.external_product import ExternalProduct, Platform
from listing_engine.services.external_search import ExternalComparisonEngine
from listing_engine.services.mock_catalog import (
    ExternalCatalogProvider,
    MockCatalogProvider,
)


class _FlakyProvider(ExternalCatalogProvider):
    """Fails a fixed number of times before serving the mock catalog."""

    def __init__(self, failures: int) -> None:
        self.failures = failures
        self.calls = 0
        self._inner = MockCatalogProvider()

    async def fetch(
        self, query: str, category: str | None = None
    ) -> list[ExternalProduct]:
        self.calls += 1
        if self.calls <= self.failures:
            raise ConnectionError("connection reset")
        return await self._inner.fetch(query, category)


def _ids(products: list[ExternalProduct]) -> list[str]:
    return [p.id for p in products]


class TestSearch(unittest.IsolatedAsyncioTestCase):
    """ExternalComparisonEngine.search behaviour."""

    def setUp(self) -> None:
        self.sleep = AsyncMock()
        self.engine = ExternalComparisonEngine(
            MockCatalogProvider(), delay=0.8, sleep=self.sleep
        )

    async def test_title_match(self) -> None:
        """A direct title match returns just that listing."""
        results = await self.engine.search("headphones")
        self.assertEqual(_ids(results), ["jumia-1"])

    async def test_match_is_case_insensitive(self) -> None:
        """Matching ignores case."""
        results = await self.engine.search("OFFICE")
        self.assertEqual(_ids(results), ["amazon-1"])

    async def test_category_match(self) -> None:
        """The category is matched against titles too."""
        results = await self.engine.search("zzz", category="Desk")
        self.assertEqual(_ids(results), ["ebay-1"])

    async def test_keyword_fallback(self) -> None:
        """Tech wording falls back to electronics."""
        results = await self.engine.search("tech gadget")
        self.assertEqual(_ids(results), ["jumia-1", "ali-1"])
        for product in results:
            self.assertIn("electronics", product.tags)

    async def test_furniture_fallback(self) -> None:
        """Furniture wording falls back to furniture listings."""
        results = await self.engine.search("furniture deals")
        self.assertEqual(_ids(results), ["amazon-1", "ebay-1"])

    async def test_generic_fallback_never_empty(self) -> None:
        """A nonsense query still returns the catalog prefix."""
        results = await self.engine.search("xyz-nonsense")
        self.assertEqual(_ids(results), ["jumia-1", "ali-1"])

    async def test_rule_with_no_tagged_items_uses_prefix(self) -> None:
        """A matching rule that picks nothing defers to the prefix."""
        engine = ExternalComparisonEngine(
            MockCatalogProvider(),
            delay=0,
            fallback_rules=[{"keywords": ["toy"], "tags": ["toys"]}],
            fallback_size=1,
            sleep=self.sleep,
        )
        results = await engine.search("toy robot")
        self.assertEqual(_ids(results), ["jumia-1"])

    async def test_blank_query_rejected(self) -> None:
        """Blank queries raise before any waiting."""
        with self.assertRaises(InvalidQueryError):
            await self.engine.search("   ")
        self.sleep.assert_not_awaited()

    async def test_simulated_latency(self) -> None:
        """The round trip is simulated with the configured delay."""
        await self.engine.search("watch")
        self.sleep.assert_awaited_once_with(0.8)

    async def test_transport_failure(self) -> None:
        """Provider connection errors surface as TransportError."""
        engine = ExternalComparisonEngine(
            _FlakyProvider(failures=1), delay=0, sleep=self.sleep
        )
        with self.assertRaises(TransportError):
            await engine.search("watch")

    async def test_fresh_results_each_call(self) -> None:
        """Callers may mutate results without affecting later searches."""
        first = await self.engine.search("headphones")
        first[0].tags.append("mutated")
        second = await self.engine.search("headphones")
        self.assertNotIn("mutated", second[0].tags)

    async def test_cancellation(self) -> None:
        """Cancelling an in-flight search abandons it."""
        engine = ExternalComparisonEngine(MockCatalogProvider(), delay=10)
        task = asyncio.create_task(engine.search("watch"))
        await asyncio.sleep(0)
        task.cancel()
        with self.assertRaises(asyncio.CancelledError):
            await task


class TestSearchWithRetry(unittest.IsolatedAsyncioTestCase):
    """ExternalComparisonEngine.search_with_retry behaviour."""

    async def test_recovers_after_failure(self) -> None:
        """A transient failure is retried with linear backoff."""
        sleep = AsyncMock()
        provider = _FlakyProvider(failures=2)
        engine = ExternalComparisonEngine(provider, delay=0, sleep=sleep)

        results = await engine.search_with_retry(
            "headphones", attempts=3, retry_delay=0.5
        )

        self.assertEqual(_ids(results), ["jumia-1"])
        self.assertEqual(provider.calls, 3)
        backoffs = [c.args[0] for c in sleep.await_args_list if c.args[0]]
        self.assertEqual(backoffs, [0.5, 1.0])

    async def test_gives_up(self) -> None:
        """The last TransportError propagates once attempts run out."""
        provider = _FlakyProvider(failures=10)
        engine = ExternalComparisonEngine(
            provider, delay=0, sleep=AsyncMock()
        )
        with self.assertRaises(TransportError):
            await engine.search_with_retry("watch", attempts=2)
        self.assertEqual(provider.calls, 2)

    async def test_zero_attempts_means_one_try(self) -> None:
        """An explicit attempts=0 still makes exactly one call."""
        sleep = AsyncMock()
        provider = _FlakyProvider(failures=10)
        engine = ExternalComparisonEngine(provider, delay=0, sleep=sleep)
        with self.assertRaises(TransportError):
            await engine.search_with_retry("watch", attempts=0)
        self.assertEqual(provider.calls, 1)
        self.assertEqual(
            [c.args[0] for c in sleep.await_args_list if c.args[0]], []
        )

    async def test_invalid_query_not_retried(self) -> None:
        """Only transport failures are retried."""
        provider = _FlakyProvider(failures=0)
        engine = ExternalComparisonEngine(
            provider, delay=0, sleep=AsyncMock()
        )
        with self.assertRaises(InvalidQueryError):
            await engine.search_with_retry("")
        self.assertEqual(provider.calls, 0)


class TestCompare(unittest.TestCase):
    """ExternalComparisonEngine.compare behaviour."""

    def setUp(self) -> None:
        self.external = [
            ExternalProduct(
                id="x", title="X", price=10, platform=Platform.EBAY
            )
        ]

    def test_both_sides(self) -> None:
        """Recommendations appear when both sides have results."""
        result = ExternalComparisonEngine.compare(["local"], self.external)
        self.assertEqual(result.local_advantages, Settings.LOCAL_ADVANTAGES)
        self.assertEqual(
            result.external_advantages, Settings.EXTERNAL_ADVANTAGES
        )
        self.assertEqual(result.recommendations, Settings.RECOMMENDATIONS)

    def test_one_side_empty(self) -> None:
        """No recommendations when either side is empty."""
        for local, external in (([], self.external), (["local"], [])):
            with self.subTest(local=local, external=external):
                result = ExternalComparisonEngine.compare(local, external)
                self.assertEqual(result.recommendations, [])
                self.assertTrue(result.local_advantages)

    def test_result_lists_are_copies(self) -> None:
        """Mutating a result never touches the configured text."""
        result = ExternalComparisonEngine.compare(["a"], self.external)
        result.recommendations.append("extra")
        self.assertNotIn("extra", Settings.RECOMMENDATIONS)


class TestPlatforms(unittest.TestCase):
    """Platform registry lookups."""

    def setUp(self) -> None:
        self.engine = ExternalComparisonEngine(MockCatalogProvider())

    def test_registry_order(self) -> None:
        """Platforms come back in registry order."""
        self.assertEqual(
            [p.id for p in self.engine.platforms],
            ["jumia", "aliexpress", "amazon", "ebay"],
        )

    def test_search_url(self) -> None:
        """Search URLs encode the query."""
        url = self.engine.platform("ebay").search_url("office chair")
        self.assertTrue(url.endswith("?q=office+chair"))

    def test_unknown_platform(self) -> None:
        """Unknown ids raise KeyError."""
        with self.assertRaises(KeyError):
            self.engine.platform("etsy")

    def test_default_provider_from_settings(self) -> None:
        """The provider class is loaded from its dotted path."""
        engine = ExternalComparisonEngine()
        self.assertIsInstance(engine._provider, MockCatalogProvider)


if __name__ == "__main__":
    unittest.main()
