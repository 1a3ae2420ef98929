# listing_engine/models/external_product.py

"""External marketplace data models."""

from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import quote_plus

from listing_engine.models.price import PriceValue


class Platform(str, Enum):
    """Marketplaces whose listings can be surfaced for comparison."""

    JUMIA = "jumia"
    ALIEXPRESS = "aliexpress"
    AMAZON = "amazon"
    EBAY = "ebay"


@dataclass
class ExternalProduct:
    """A single listing found on an external marketplace."""

    id: str
    title: str
    price: PriceValue
    platform: Platform
    url: str = ""
    image: str = ""
    rating: float = 0.0
    reviews: int = 0
    shipping: str | None = None
    estimated_delivery: str | None = None
    tags: list[str] = field(default_factory=lambda: list[str]())


@dataclass(frozen=True)
class ExternalPlatform:
    """Registry entry describing how to reach one marketplace."""

    id: str
    name: str
    base_url: str
    search_path: str
    logo: str = ""

    def search_url(self, query: str) -> str:
        """Build this platform's search URL for *query*."""
        return (
            f"{self.base_url.rstrip('/')}{self.search_path}"
            f"?q={quote_plus(query)}"
        )
