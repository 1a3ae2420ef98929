# listing_engine/models/comparison.py

"""Local-vs-external comparison results."""

from dataclasses import dataclass, field

from listing_engine.exceptions import ErrorState
from listing_engine.models.external_product import ExternalProduct
from listing_engine.models.listing import UnifiedListing


@dataclass
class ComparisonResult:
    """Why buy here, why buy there, and what to do about it."""

    local_advantages: list[str] = field(
        default_factory=lambda: list[str]()
    )
    external_advantages: list[str] = field(
        default_factory=lambda: list[str]()
    )
    recommendations: list[str] = field(
        default_factory=lambda: list[str]()
    )


@dataclass
class ComparisonReport:
    """Container for one completed local + external comparison."""

    query: str
    category: str | None = None
    local: list[UnifiedListing] = field(
        default_factory=lambda: list[UnifiedListing]()
    )
    external: list[ExternalProduct] = field(
        default_factory=lambda: list[ExternalProduct]()
    )
    comparison: ComparisonResult = field(default_factory=ComparisonResult)
    error: ErrorState | None = None
