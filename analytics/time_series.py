"""
Synthetic price histories.

There are no recorded historical prices in the dataset, so histories are
backward extrapolations from today's price at a constant growth rate. Every
point is tagged ``source="estimated"``.
"""
from __future__ import annotations

from datetime import date
from typing import List

from .models import PricePoint


def reconstruct_price_history(
    current_price: float,
    years: int,
    growth_rate: float,
    current_year: int | None = None,
) -> List[PricePoint]:
    """
    Return ``years + 1`` points starting at the current year and stepping back.

    The point at index ``i`` is dated ``current_year - i`` and priced at
    ``current_price / (1 + growth_rate) ** i``.
    """
    if years < 0:
        raise ValueError("years must be non-negative")
    if growth_rate <= -1:
        raise ValueError("growth_rate must be greater than -1")
    current_year = current_year or date.today().year
    return [
        PricePoint(year=current_year - offset, price=current_price / (1 + growth_rate) ** offset)
        for offset in range(years + 1)
    ]


def project_price(current_price: float, years: int, growth_rate: float) -> float:
    """Forward projection at the same constant growth rate."""
    return current_price * (1 + growth_rate) ** years


def growth_percent(start_price: float, end_price: float) -> float:
    if not start_price:
        return 0.0
    return (end_price - start_price) / start_price * 100
