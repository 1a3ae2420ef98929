# listing_engine/services/external_search.py

"""External marketplace search and local-vs-external comparison."""

import asyncio
import importlib
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from listing_engine.config.settings import Settings
from listing_engine.exceptions import InvalidQueryError, TransportError
from listing_engine.models.comparison import ComparisonResult
from listing_engine.models.external_product import (
    ExternalPlatform,
    ExternalProduct,
)
from listing_engine.services.mock_catalog import ExternalCatalogProvider

logger = logging.getLogger("listing_engine.external")

SleepFn = Callable[[float], Awaitable[Any]]


def _load_provider_class(dotted_path: str) -> type[Any]:
    """Dynamically import a provider class from its dotted module path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls: type[Any] = getattr(module, class_name)
    return cls


def _registered_platforms() -> dict[str, ExternalPlatform]:
    return {
        entry["id"]: ExternalPlatform(**entry)
        for entry in Settings.EXTERNAL_PLATFORMS
    }


class ExternalComparisonEngine:
    """Finds comparable external listings and weighs them against local ones.

    Matching is a substring test on titles.  When nothing matches, the
    fallback rules (ordered keyword -> tag policy) pick something to show
    so the comparison panel is never empty because of wording alone.
    """

    def __init__(
        self,
        provider: ExternalCatalogProvider | None = None,
        delay: float | None = None,
        fallback_rules: list[dict[str, list[str]]] | None = None,
        fallback_size: int | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        if provider is None:
            provider = _load_provider_class(Settings.EXTERNAL_PROVIDER)()
        self._provider: ExternalCatalogProvider = provider
        self._delay: float = (
            Settings.EXTERNAL_SEARCH_DELAY if delay is None else delay
        )
        self._fallback_rules = (
            Settings.FALLBACK_RULES
            if fallback_rules is None
            else fallback_rules
        )
        self._fallback_size: int = (
            Settings.FALLBACK_PREFIX_SIZE
            if fallback_size is None
            else fallback_size
        )
        self._sleep = sleep
        self._platforms = _registered_platforms()

    # ── Platform registry ────────────────────────────────

    @property
    def platforms(self) -> list[ExternalPlatform]:
        """Registered platforms in registry order."""
        return list(self._platforms.values())

    def platform(self, platform_id: str) -> ExternalPlatform:
        """Look up a registered platform by id."""
        try:
            return self._platforms[platform_id]
        except KeyError:
            msg = f"Unknown platform: {platform_id!r}"
            raise KeyError(msg) from None

    # ── Matching ─────────────────────────────────────────

    def _fallback(
        self,
        folded_query: str,
        catalog: list[ExternalProduct],
    ) -> list[ExternalProduct]:
        for rule in self._fallback_rules:
            keywords = rule.get("keywords", [])
            if not any(kw in folded_query for kw in keywords):
                continue
            wanted = set(rule.get("tags", []))
            picked = [
                p for p in catalog if wanted.intersection(p.tags)
            ]
            if picked:
                logger.debug(
                    "Fallback rule %s picked %d products",
                    keywords,
                    len(picked),
                )
                return picked
            break
        return catalog[: self._fallback_size]

    def match(
        self,
        query: str,
        catalog: list[ExternalProduct],
        category: str | None = None,
    ) -> list[ExternalProduct]:
        """Select catalog items for *query*, falling back when none match."""
        folded = query.strip().casefold()
        folded_category = category.casefold() if category else ""
        results = [
            p
            for p in catalog
            if folded in p.title.casefold()
            or (folded_category and folded_category in p.title.casefold())
        ]
        if results:
            return results
        return self._fallback(folded, catalog)

    # ── Search ───────────────────────────────────────────

    async def search(
        self,
        query: str,
        category: str | None = None,
    ) -> list[ExternalProduct]:
        """Search the external catalog after the simulated round trip.

        Cancelling the awaiting task abandons the search with no side
        effects.

        Raises:
            InvalidQueryError: *query* is blank.
            TransportError: the provider failed in transit.
        """
        if not query or not query.strip():
            msg = "Query must not be empty"
            raise InvalidQueryError(msg)

        await self._sleep(self._delay)
        try:
            catalog = await self._provider.fetch(query, category)
        except (OSError, asyncio.TimeoutError) as exc:
            logger.error(
                "External search failed for '%s': %s",
                query,
                exc,
                exc_info=exc,
            )
            msg = f"External search failed: {exc}"
            raise TransportError(msg) from exc

        results = self.match(query, catalog, category)
        logger.info(
            "External search '%s' returned %d of %d products",
            query,
            len(results),
            len(catalog),
        )
        return results

    async def search_with_retry(
        self,
        query: str,
        category: str | None = None,
        attempts: int | None = None,
        retry_delay: float | None = None,
    ) -> list[ExternalProduct]:
        """Retry :meth:`search` on transport failures, backing off linearly.

        Re-raises the last :class:`TransportError` once attempts run out.
        """
        max_attempts = max(
            1, Settings.RETRY_ATTEMPTS if attempts is None else attempts
        )
        step = Settings.RETRY_DELAY if retry_delay is None else retry_delay

        attempt = 1
        while True:
            try:
                return await self.search(query, category)
            except TransportError:
                logger.warning(
                    "External search attempt %d/%d failed for '%s'",
                    attempt,
                    max_attempts,
                    query,
                )
                if attempt >= max_attempts:
                    raise
            await self._sleep(step * attempt)
            attempt += 1

    # ── Comparison ───────────────────────────────────────

    @staticmethod
    def compare(
        local_results: Sequence[object],
        external_results: Sequence[ExternalProduct],
    ) -> ComparisonResult:
        """Weigh local against external results.

        Recommendations appear only when both sides found something.
        """
        result = ComparisonResult(
            local_advantages=list(Settings.LOCAL_ADVANTAGES),
            external_advantages=list(Settings.EXTERNAL_ADVANTAGES),
        )
        if local_results and external_results:
            result.recommendations = list(Settings.RECOMMENDATIONS)
        return result
