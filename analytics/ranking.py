"""
Rank scored properties for recommendation lists.
"""
from __future__ import annotations

from typing import Iterable, List

from .filters import FilterSpec
from .models import ScoredProperty

RANKING_KEYS = {
    "roi": lambda item: item.metrics.roi,
    "yield_percent": lambda item: item.metrics.yield_percent,
    "composite_score": lambda item: item.metrics.composite_score,
}
DEFAULT_RANKING_KEY = "composite_score"


def _contains(value: str | None, needle: str) -> bool:
    return bool(value) and needle in value.lower()


def matches_location(item: ScoredProperty, location: str) -> bool:
    needle = location.strip().lower()
    record = item.record
    return any(
        _contains(value, needle)
        for value in (record.city, record.area_name, record.locality, record.location)
    )


def matches_investment_filters(item: ScoredProperty, filters: FilterSpec) -> bool:
    """
    Budget, type, risk and location predicates. Budgets only admit listings
    with a valid price; risk reads the already-computed bucket.
    """
    record = item.record
    if filters.budget_min is not None or filters.budget_max is not None:
        if not record.has_valid_price:
            return False
        if filters.budget_min is not None and record.price < filters.budget_min:
            return False
        if filters.budget_max is not None and record.price > filters.budget_max:
            return False
    property_type = (filters.property_type or "").strip().lower()
    if property_type and not _contains(record.property_type, property_type):
        return False
    if filters.risk_level and item.metrics.risk_level != filters.risk_level:
        return False
    if filters.location and not matches_location(item, filters.location):
        return False
    return True


def select_properties(
    items: Iterable[ScoredProperty], filters: FilterSpec, require_price: bool = False
) -> List[ScoredProperty]:
    """Scored properties passing ``filters``; unpriced ones stay unless ``require_price``."""
    return [
        item
        for item in items
        if (item.record.has_valid_price or not require_price) and matches_investment_filters(item, filters)
    ]


def apply_investment_filters(items: Iterable[ScoredProperty], filters: FilterSpec) -> List[ScoredProperty]:
    """Properties eligible for ranking: a valid price plus every filter."""
    return select_properties(items, filters, require_price=True)


def rank_properties(
    items: Iterable[ScoredProperty],
    sort_by: str = DEFAULT_RANKING_KEY,
    filters: FilterSpec | None = None,
    limit: int | None = 10,
) -> List[ScoredProperty]:
    """
    Top properties by ``sort_by``, highest first.

    The sort is stable, so ties keep their input order.
    """
    try:
        key_fn = RANKING_KEYS[sort_by]
    except KeyError:
        raise ValueError(f"Unsupported ranking key '{sort_by}'") from None
    candidates = apply_investment_filters(items, filters or FilterSpec())
    ranked = sorted(candidates, key=key_fn, reverse=True)
    return ranked if limit is None else ranked[:limit]
