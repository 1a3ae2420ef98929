# listing_engine/filters/listing_unifier.py

"""Map product and service records onto one ``UnifiedListing`` shape."""

import logging
from collections.abc import Iterable
from typing import Any

from listing_engine.config.settings import Settings
from listing_engine.filters.price_normalizer import PriceNormalizer
from listing_engine.filters.rating import clamp_rating
from listing_engine.models.listing import (
    ProductRecord,
    ServiceRecord,
    SourceRecord,
    UnifiedListing,
)
from listing_engine.models.price import PriceRange

logger = logging.getLogger("listing_engine.filters")

_NO_LOCATION = "Location not specified"
_UNKNOWN_PROVIDER = "Unknown Provider"


def record_from_dict(payload: dict[str, Any], kind: str) -> SourceRecord:
    """Build the record variant named by *kind* from an API payload."""
    if kind == ProductRecord.kind:
        return ProductRecord.from_dict(payload)
    if kind == ServiceRecord.kind:
        return ServiceRecord.from_dict(payload)
    msg = f"Unknown listing kind: {kind!r}"
    raise ValueError(msg)


class ListingUnifier:
    """Pure, deterministic transform from source records to listings."""

    @staticmethod
    def process_tags(
        tags: str | list[str] | None,
    ) -> list[str]:
        """Normalise a tag list or comma-separated tag string.

        Tags are trimmed and blanks dropped; order is preserved.
        """
        if isinstance(tags, list):
            return [
                t.strip() for t in tags
                if isinstance(t, str) and t.strip()
            ]
        if isinstance(tags, str) and tags.strip():
            return [t.strip() for t in tags.split(",") if t.strip()]
        return []

    @staticmethod
    def process_image_url(
        image_url: str | None,
        base_url: str = "",
    ) -> str:
        """Resolve a possibly-relative image URL, with a placeholder."""
        if not image_url:
            return Settings.PLACEHOLDER_IMAGE
        if image_url.startswith(("http://", "https://")):
            return image_url
        if image_url.startswith("/"):
            return f"{base_url}{image_url}" if base_url else image_url
        if base_url:
            return f"{base_url.rstrip('/')}/{image_url}"
        return image_url

    @staticmethod
    def _user_display_name(user_details: dict[str, Any]) -> str:
        return str(
            user_details.get("full_name")
            or user_details.get("username")
            or ""
        )

    @staticmethod
    def _unify_product(
        product: ProductRecord, base_url: str
    ) -> UnifiedListing:
        tags = ListingUnifier.process_tags(
            product.tags_list or product.tags
        )
        return UnifiedListing(
            id=f"product-{product.id}",
            title=product.product_name or "Untitled Product",
            description=product.product_description or "",
            slug=product.slug,
            price=PriceNormalizer.normalize(product.product_price),
            rating=clamp_rating(product.average_rating),
            rating_count=max(0, product.rating_count or 0),
            category=str(
                product.category_details.get("name")
                or product.product_category
                or "Uncategorized"
            ),
            location=(
                product.full_location
                or product.address_details
                or _NO_LOCATION
            ),
            image=ListingUnifier.process_image_url(
                product.featured_image, base_url
            ),
            tags=tags,
            is_service=False,
            is_promoted=bool(product.is_promoted),
            is_featured=bool(product.is_featured),
            is_verified=False,
            provider_name=(
                ListingUnifier._user_display_name(product.user_details)
                or _UNKNOWN_PROVIDER
            ),
            provider_phone=product.provider_phone or "",
            currency_symbol=(
                product.currency_symbol or Settings.CURRENCY_SYMBOL
            ),
            views_count=max(0, product.views_count or 0),
            created_at=product.created_at,
            original_data=product,
        )

    @staticmethod
    def _service_price(service: ServiceRecord) -> float | PriceRange:
        """A range when ``max_price`` exceeds the start, else a scalar."""
        start = max(0.0, PriceNormalizer.to_amount(service.starting_price))
        if service.max_price is None:
            return start
        ceiling = PriceNormalizer.to_amount(service.max_price)
        if ceiling > start:
            return PriceRange(min=start, max=ceiling)
        return start

    @staticmethod
    def _service_location(service: ServiceRecord) -> str:
        if service.serves_remote:
            return "Remote Available"
        city = service.city_details.get("name")
        if not city:
            return _NO_LOCATION
        parts = [
            city,
            service.state_details.get("name"),
            service.country_details.get("name"),
        ]
        return ", ".join(str(p) for p in parts if p)

    @staticmethod
    def _unify_service(
        service: ServiceRecord, base_url: str
    ) -> UnifiedListing:
        return UnifiedListing(
            id=f"service-{service.id}",
            title=service.service_name or "Untitled Service",
            description=service.service_description or "",
            slug=service.slug,
            price=PriceNormalizer.normalize(
                ListingUnifier._service_price(service)
            ),
            rating=clamp_rating(service.average_rating),
            rating_count=max(0, service.rating_count or 0),
            category=str(
                service.category_details.get("name") or "Uncategorized"
            ),
            location=ListingUnifier._service_location(service),
            image=ListingUnifier.process_image_url(
                service.featured_image, base_url
            ),
            tags=ListingUnifier.process_tags(service.tags),
            is_service=True,
            is_promoted=bool(service.is_promoted),
            is_featured=bool(service.is_featured),
            is_verified=bool(service.is_verified),
            provider_name=(
                service.provider_name
                or ListingUnifier._user_display_name(service.user_details)
                or _UNKNOWN_PROVIDER
            ),
            provider_phone=service.provider_phone or "",
            currency_symbol=(
                service.currency_symbol or Settings.CURRENCY_SYMBOL
            ),
            views_count=max(0, service.views_count or 0),
            created_at=service.created_at,
            original_data=service,
        )

    @staticmethod
    def unify(
        source: SourceRecord,
        base_url: str = "",
    ) -> UnifiedListing:
        """Map one product or service record to a :class:`UnifiedListing`.

        The source record is kept untouched on ``original_data`` and the
        variant survives as ``is_service``.

        Raises:
            TypeError: *source* is neither variant.
            InvalidRangeError: the record carries a malformed price.
        """
        if isinstance(source, ProductRecord):
            return ListingUnifier._unify_product(source, base_url)
        if isinstance(source, ServiceRecord):
            return ListingUnifier._unify_service(source, base_url)
        msg = f"Cannot unify {type(source).__name__}"
        raise TypeError(msg)

    @staticmethod
    def unify_all(
        sources: Iterable[SourceRecord],
        base_url: str = "",
    ) -> list[UnifiedListing]:
        """Unify every record, preserving input order."""
        listings = [
            ListingUnifier.unify(source, base_url) for source in sources
        ]
        logger.debug("Unified %d listings", len(listings))
        return listings
