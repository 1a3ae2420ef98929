# listing_engine/models/price.py

"""Price shapes: raw ranges from listings and the normalised display form."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PriceRange:
    """A ``{min, max}`` price as supplied by a listing source."""

    min: float
    max: float


# A raw price is either a scalar or a range
PriceValue = float | int | PriceRange


def format_amount(value: float) -> str:
    """Render an amount with thousands separators, dropping ``.00``."""
    if float(value).is_integer():
        return f"{value:,.0f}"
    return f"{value:,.2f}"


@dataclass(frozen=True)
class DisplayPrice:
    """A normalised, non-negative price ready for comparison or display.

    A scalar price has ``low == high``.  A range keeps both bounds so the
    caller can decide between ``"from $45"`` and ``"$45 - $120"``.
    """

    low: float
    high: float

    @property
    def is_range(self) -> bool:
        """True when the bounds differ."""
        return self.low != self.high

    def sort_key(self, high: bool = False) -> float:
        """Comparable value: the lower bound, or the upper bound if *high*."""
        return self.high if high else self.low

    def format(self, symbol: str = "$", style: str = "range") -> str:
        """Render the price.

        ``style="range"`` gives ``"$45 - $120"``; ``style="from"`` gives
        ``"from $45"``.  Scalars (and collapsed ranges) ignore the style.
        """
        if not self.is_range:
            if self.low == 0:
                return "Free"
            return f"{symbol}{format_amount(self.low)}"
        if style == "from":
            return f"from {symbol}{format_amount(self.low)}"
        return (
            f"{symbol}{format_amount(self.low)} - "
            f"{symbol}{format_amount(self.high)}"
        )

    def to_json(self) -> float | dict[str, float]:
        """Serialise back to the scalar-or-range wire shape."""
        if self.is_range:
            return {"min": self.low, "max": self.high}
        return self.low
