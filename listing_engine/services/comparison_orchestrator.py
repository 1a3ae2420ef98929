# listing_engine/services/comparison_orchestrator.py

"""Orchestrates local lookup, external search and history for one query."""

import logging

from listing_engine.exceptions import (
    ErrorState,
    NotFoundError,
    TransportError,
    classify_error,
)
from listing_engine.models.comparison import ComparisonReport
from listing_engine.models.external_product import ExternalProduct
from listing_engine.models.listing import UnifiedListing
from listing_engine.services.external_search import ExternalComparisonEngine
from listing_engine.services.listing_catalog import LocalCatalog
from listing_engine.storage.search_history import SearchHistoryStore

logger = logging.getLogger("listing_engine.orchestrator")


class ComparisonOrchestrator:
    """Coordinates history, local catalog search and external comparison."""

    def __init__(
        self,
        catalog: LocalCatalog,
        engine: ExternalComparisonEngine,
        history: SearchHistoryStore,
        retry_attempts: int | None = None,
    ) -> None:
        self.catalog = catalog
        self.engine = engine
        self.history = history
        self._retry_attempts = retry_attempts

    async def _search_external(
        self,
        query: str,
        category: str | None,
    ) -> tuple[list[ExternalProduct], ErrorState | None]:
        """Run the external search, turning transport failures into state."""
        try:
            products = await self.engine.search_with_retry(
                query, category, attempts=self._retry_attempts
            )
        except TransportError as exc:
            logger.error(
                "External comparison unavailable for '%s': %s", query, exc
            )
            return [], classify_error(exc)
        return products, None

    async def run(
        self,
        query: str,
        category: str | None = None,
    ) -> ComparisonReport:
        """Record *query*, then compare local against external results.

        A bad query raises before anything is recorded.  Transport
        failures do not raise: the report carries a ``NETWORK`` error
        state and an empty external list instead.
        """
        item = self.history.record(query, category)
        cleaned = item.query

        report = ComparisonReport(query=cleaned, category=category)
        report.local = self.catalog.search(cleaned, category)
        report.external, report.error = await self._search_external(
            cleaned, category
        )
        report.comparison = self.engine.compare(
            report.local, report.external
        )

        logger.info(
            "Comparison for '%s': %d local, %d external%s",
            cleaned,
            len(report.local),
            len(report.external),
            f" ({report.error.type.value})" if report.error else "",
        )
        return report

    def lookup(
        self, listing_id: str
    ) -> tuple[UnifiedListing | None, ErrorState | None]:
        """Resolve a listing id for a detail view.

        Returns the listing, or ``None`` plus a ``NOT_FOUND`` error state.
        """
        try:
            return self.catalog.get(listing_id), None
        except NotFoundError as exc:
            logger.info("Lookup miss for %s", listing_id)
            return None, classify_error(exc)

    def suggestions(self, limit: int | None = None) -> list[str]:
        """Recent queries to offer as search suggestions."""
        return list(self.history.recent(limit))
