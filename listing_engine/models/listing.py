# listing_engine/models/listing.py

"""Listing source records and the unified listing view model."""

from dataclasses import asdict, dataclass, field, fields
from typing import Any, ClassVar

from listing_engine.models.price import DisplayPrice


def _known_fields(cls: type[Any], payload: dict[str, Any]) -> dict[str, Any]:
    """Keep only the keys of *payload* that *cls* declares as fields."""
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in payload.items() if k in names}


@dataclass
class ProductRecord:
    """A physical product as delivered by the catalog API."""

    kind: ClassVar[str] = "product"

    id: int | str
    product_name: str = ""
    product_description: str = ""
    slug: str = ""
    product_price: Any = None
    currency: str = ""
    currency_symbol: str = ""
    is_negotiable: bool = False
    product_brand: str = ""
    product_model: str = ""
    product_category: str = ""
    product_condition: str = ""
    product_status: str = ""
    featured_image: str = ""
    gallery_images: list[str] = field(default_factory=lambda: list[str]())
    tags: str | list[str] = ""
    tags_list: list[str] | None = None
    full_location: str = ""
    address_details: str = ""
    provider_phone: str = ""
    is_promoted: bool = False
    is_featured: bool = False
    views_count: int = 0
    created_at: str = ""
    average_rating: float | None = None
    rating_count: int | None = None
    user_details: dict[str, Any] = field(
        default_factory=lambda: dict[str, Any]()
    )
    category_details: dict[str, Any] = field(
        default_factory=lambda: dict[str, Any]()
    )

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ProductRecord":
        """Build a record from an API payload, ignoring unknown keys."""
        return cls(**_known_fields(cls, payload))


@dataclass
class ServiceRecord:
    """A bookable service as delivered by the catalog API."""

    kind: ClassVar[str] = "service"

    id: int | str
    service_name: str = ""
    service_description: str = ""
    slug: str = ""
    starting_price: Any = None
    max_price: Any = None
    currency: str = ""
    currency_symbol: str = ""
    price_type: str = ""
    provider_name: str = ""
    provider_title: str = ""
    provider_bio: str = ""
    provider_expertise: str = ""
    provider_experience: str = ""
    provider_certifications: str = ""
    provider_languages: str = ""
    provider_phone: str = ""
    serves_remote: bool = False
    service_radius: float | None = None
    response_time: str = ""
    availability: str = ""
    featured_image: str = ""
    gallery_images: list[str] = field(default_factory=lambda: list[str]())
    tags: str | list[str] = ""
    is_promoted: bool = False
    is_featured: bool = False
    is_verified: bool = False
    views_count: int = 0
    created_at: str = ""
    average_rating: float | None = None
    rating_count: int | None = None
    user_details: dict[str, Any] = field(
        default_factory=lambda: dict[str, Any]()
    )
    category_details: dict[str, Any] = field(
        default_factory=lambda: dict[str, Any]()
    )
    city_details: dict[str, Any] = field(
        default_factory=lambda: dict[str, Any]()
    )
    state_details: dict[str, Any] = field(
        default_factory=lambda: dict[str, Any]()
    )
    country_details: dict[str, Any] = field(
        default_factory=lambda: dict[str, Any]()
    )

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ServiceRecord":
        """Build a record from an API payload, ignoring unknown keys."""
        return cls(**_known_fields(cls, payload))


SourceRecord = ProductRecord | ServiceRecord


@dataclass
class UnifiedListing:
    """Canonical view of any sellable item, product or service."""

    id: str
    title: str
    price: DisplayPrice
    is_service: bool
    original_data: SourceRecord
    description: str = ""
    slug: str = ""
    rating: float = 0.0
    rating_count: int = 0
    category: str = ""
    location: str = ""
    image: str = ""
    tags: list[str] = field(default_factory=lambda: list[str]())
    provider_name: str = ""
    provider_phone: str = ""
    currency_symbol: str = "$"
    is_promoted: bool = False
    is_featured: bool = False
    is_verified: bool = False
    views_count: int = 0
    created_at: str = ""

    def product_details(self) -> ProductRecord:
        """Return the source product, or raise if this is a service."""
        if self.is_service or not isinstance(
            self.original_data, ProductRecord
        ):
            msg = f"Listing {self.id} is not a product"
            raise TypeError(msg)
        return self.original_data

    def service_details(self) -> ServiceRecord:
        """Return the source service, or raise if this is a product."""
        if not self.is_service or not isinstance(
            self.original_data, ServiceRecord
        ):
            msg = f"Listing {self.id} is not a service"
            raise TypeError(msg)
        return self.original_data

    def to_dict(self) -> dict[str, object]:
        """Serialise to plain JSON-compatible values."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "slug": self.slug,
            "price": self.price.to_json(),
            "formatted_price": self.price.format(self.currency_symbol),
            "rating": self.rating,
            "rating_count": self.rating_count,
            "category": self.category,
            "location": self.location,
            "image": self.image,
            "tags": list(self.tags),
            "is_service": self.is_service,
            "is_promoted": self.is_promoted,
            "is_featured": self.is_featured,
            "is_verified": self.is_verified,
            "provider_name": self.provider_name,
            "provider_phone": self.provider_phone,
            "views_count": self.views_count,
            "created_at": self.created_at,
            "original_data": asdict(self.original_data),
        }
