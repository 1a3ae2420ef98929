# listing_engine/filters/price_normalizer.py

"""Collapse scalar-or-range prices into one comparable display value."""

import logging
from collections.abc import Mapping
from typing import Any

from listing_engine.exceptions import InvalidRangeError
from listing_engine.models.price import DisplayPrice, PriceRange

logger = logging.getLogger("listing_engine.filters")


class PriceNormalizer:
    """Normalise listing prices without mutating the caller's value."""

    @staticmethod
    def to_amount(raw: Any) -> float:
        """Coerce a scalar bound (number or numeric string) to a float."""
        if raw is None:
            return 0.0
        if isinstance(raw, bool):
            msg = f"Price bound is not numeric: {raw!r}"
            raise InvalidRangeError(msg)
        if isinstance(raw, (int, float)):
            return float(raw)
        if isinstance(raw, str):
            try:
                return float(raw.strip())
            except ValueError as exc:
                msg = f"Price bound is not numeric: {raw!r}"
                raise InvalidRangeError(msg) from exc
        msg = f"Unsupported price type: {type(raw).__name__}"
        raise InvalidRangeError(msg)

    @staticmethod
    def normalize(price: Any) -> DisplayPrice:
        """Normalise a scalar, a :class:`PriceRange` or a ``{min, max}`` map.

        Missing prices become ``0``.  Negative bounds clamp to ``0``.  A
        range whose bounds are equal collapses to the scalar form, so it
        formats exactly like that scalar.

        Raises:
            InvalidRangeError: ``min > max``, or a bound is not numeric.
        """
        if isinstance(price, PriceRange):
            low = PriceNormalizer.to_amount(price.min)
            high = PriceNormalizer.to_amount(price.max)
        elif isinstance(price, Mapping):
            low = PriceNormalizer.to_amount(price.get("min"))
            high = PriceNormalizer.to_amount(
                price.get("max", price.get("min"))
            )
        else:
            value = max(0.0, PriceNormalizer.to_amount(price))
            return DisplayPrice(low=value, high=value)

        if low > high:
            msg = f"Price range min {low} exceeds max {high}"
            raise InvalidRangeError(msg)

        if low < 0:
            logger.debug("Clamping negative price range %s-%s", low, high)
        return DisplayPrice(low=max(0.0, low), high=max(0.0, high))

    @staticmethod
    def format(
        price: Any,
        symbol: str = "$",
        style: str = "range",
    ) -> str:
        """Normalise and render *price* in one step."""
        return PriceNormalizer.normalize(price).format(symbol, style)
