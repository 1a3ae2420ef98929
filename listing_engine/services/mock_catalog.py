# listing_engine/services/mock_catalog.py

"""External catalog providers: the adapter contract and a static stand-in."""

import logging
from abc import ABC, abstractmethod
from dataclasses import replace

from listing_engine.models.external_product import ExternalProduct, Platform
from listing_engine.models.price import PriceRange

logger = logging.getLogger("listing_engine.external")


class ExternalCatalogProvider(ABC):
    """Supplies candidate listings from external marketplaces.

    A live adapter would query each platform; the engine only relies on
    getting back fresh :class:`ExternalProduct` objects, and on transport
    problems surfacing as :class:`OSError` (``ConnectionError``,
    ``TimeoutError``).
    """

    @abstractmethod
    async def fetch(
        self, query: str, category: str | None = None
    ) -> list[ExternalProduct]:
        """Return candidate products for *query*, in catalog order."""


_CATALOG: tuple[ExternalProduct, ...] = (
    ExternalProduct(
        id="jumia-1",
        title="Wireless Bluetooth Headphones - Premium Quality",
        price=89,
        platform=Platform.JUMIA,
        url="https://jumia.com/product/wireless-headphones",
        image=(
            "https://images.unsplash.com/photo-1505740420928-5e560c06d30e"
            "?w=300&h=300&fit=crop"
        ),
        rating=4.3,
        reviews=245,
        shipping="Free shipping",
        estimated_delivery="3-5 days",
        tags=["electronics", "audio"],
    ),
    ExternalProduct(
        id="ali-1",
        title="Smart Watch with Health Monitoring",
        price=PriceRange(min=45, max=120),
        platform=Platform.ALIEXPRESS,
        url="https://aliexpress.com/item/smart-watch",
        image=(
            "https://images.unsplash.com/photo-1523275335684-37898b6baf30"
            "?w=300&h=300&fit=crop"
        ),
        rating=4.1,
        reviews=1230,
        shipping="Free shipping",
        estimated_delivery="7-15 days",
        tags=["electronics", "wearables"],
    ),
    ExternalProduct(
        id="amazon-1",
        title="Ergonomic Office Chair with Lumbar Support",
        price=299,
        platform=Platform.AMAZON,
        url="https://amazon.com/ergonomic-office-chair",
        image=(
            "https://images.unsplash.com/photo-1586023492125-27b2c045efd7"
            "?w=300&h=300&fit=crop"
        ),
        rating=4.6,
        reviews=890,
        shipping="Prime delivery",
        estimated_delivery="1-2 days",
        tags=["furniture", "office"],
    ),
    ExternalProduct(
        id="ebay-1",
        title="Refurbished Standing Desk Frame",
        price=PriceRange(min=150, max=210),
        platform=Platform.EBAY,
        url="https://ebay.com/itm/standing-desk-frame",
        rating=3.9,
        reviews=58,
        shipping="Calculated at checkout",
        estimated_delivery="5-9 days",
        tags=["furniture", "office"],
    ),
)


class MockCatalogProvider(ExternalCatalogProvider):
    """Serves a fixed catalog; every call hands out fresh copies."""

    def __init__(
        self, catalog: list[ExternalProduct] | None = None
    ) -> None:
        self._catalog: list[ExternalProduct] = list(
            _CATALOG if catalog is None else catalog
        )

    async def fetch(
        self, query: str, category: str | None = None
    ) -> list[ExternalProduct]:
        logger.debug(
            "Mock catalog serving %d products for '%s'",
            len(self._catalog),
            query,
        )
        return [replace(p, tags=list(p.tags)) for p in self._catalog]
