# listing_engine/filters/rating.py

"""Star rating helpers with half-star resolution."""

from typing import Literal

StarFill = Literal["full", "half", "empty"]

MAX_RATING = 5.0


def clamp_rating(value: float | None) -> float:
    """Clamp a rating into ``[0, 5]``; a missing rating is ``0``."""
    if value is None:
        return 0.0
    return max(0.0, min(MAX_RATING, float(value)))


def round_to_half(value: float | None) -> float:
    """Round a rating to the nearest half star."""
    return round(clamp_rating(value) * 2) / 2


def star_fills(rating: float | None, stars: int = 5) -> list[StarFill]:
    """Fill state for each star, left to right.

    Star ``i`` (1-based) is full when ``rating >= i`` and half when
    ``rating >= i - 0.5``.
    """
    current = clamp_rating(rating)
    fills: list[StarFill] = []
    for index in range(1, stars + 1):
        if current >= index:
            fills.append("full")
        elif current >= index - 0.5:
            fills.append("half")
        else:
            fills.append("empty")
    return fills


def format_rating(rating: float | None) -> str:
    """One-decimal rating label, ``"0.0"`` when unrated."""
    return f"{clamp_rating(rating):.1f}"
