"""
Group scored properties by a key and summarize each group.
"""
from __future__ import annotations

import re
from bisect import bisect_right
from typing import Callable, Dict, Hashable, Iterable, List, Optional, Sequence, TypeVar

from .config import DEFAULT_CONFIG, AnalyticsConfig
from .models import GroupSummary, ScoredProperty

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

UNKNOWN_KEY = "Unknown"

GROUP_SORTS = {
    "average_price": (lambda group: group.average_price, True),
    "count": (lambda group: group.count, True),
    "amenities_score": (lambda group: group.amenities_score, True),
    "average_price_per_area": (lambda group: group.average_price_per_area, True),
    "average_roi": (lambda group: group.average_roi, True),
    "key": (lambda group: _natural_key(group.key), False),
}

_DIGITS = re.compile(r"(\d+)")


def _natural_key(value: str):
    return tuple(
        (0, int(part), "") if part.isdigit() else (1, 0, part.lower())
        for part in _DIGITS.split(value)
        if part
    )


def group_by(
    items: Iterable[T],
    key_fn: Callable[[T], K],
    reducer: Optional[Callable[[V, T], V]] = None,
    initial: Callable[[], V] = list,
) -> Dict[K, V]:
    """
    Fold items into per-key accumulators.

    Keys keep first-seen order. Without a reducer each key collects its items
    into a list.
    """
    if reducer is None:
        def reducer(acc, item):
            acc.append(item)
            return acc

    grouped: Dict[K, V] = {}
    for item in items:
        key = key_fn(item)
        acc = grouped[key] if key in grouped else initial()
        grouped[key] = reducer(acc, item)
    return grouped


def field_key(name: str) -> Callable[[ScoredProperty], str]:
    """Key function reading a record attribute, with blanks grouped as Unknown."""

    def key_fn(item: ScoredProperty) -> str:
        value = getattr(item.record, name)
        if value is None or value == "":
            return UNKNOWN_KEY
        return str(value)

    return key_fn


def carpet_area_bucket(area: float | None, boundaries: Sequence[int] = DEFAULT_CONFIG.carpet_area_boundaries) -> str:
    if area is None or area <= 0:
        return UNKNOWN_KEY
    idx = bisect_right(boundaries, area) - 1
    if idx >= len(boundaries) - 1:
        return f"{boundaries[-1]}+"
    return f"{boundaries[idx]}-{boundaries[idx + 1]}"


def carpet_area_key(config: AnalyticsConfig = DEFAULT_CONFIG) -> Callable[[ScoredProperty], str]:
    return lambda item: carpet_area_bucket(item.record.carpet_area, config.carpet_area_boundaries)


def price_range_label(price: float | None, config: AnalyticsConfig = DEFAULT_CONFIG) -> str | None:
    if price is None or price <= 0:
        return None
    label = None
    for threshold, name in config.price_ranges:
        if price >= threshold:
            label = name
    return label


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def summarize_group(key: str, members: Sequence[ScoredProperty], distinct_field: str | None = None) -> GroupSummary:
    valid = [member for member in members if member.record.has_valid_price]
    prices = [member.record.price for member in valid]
    per_area = [
        member.metrics.price_per_area for member in valid if member.metrics.price_per_area is not None
    ]

    distinct: List[str] = []
    if distinct_field:
        for member in members:
            value = getattr(member.record, distinct_field)
            if value not in (None, "") and str(value) not in distinct:
                distinct.append(str(value))

    return GroupSummary(
        key=key,
        count=len(members),
        valid_count=len(valid),
        average_price=_mean(prices),
        average_price_per_area=_mean(per_area),
        min_price=min(prices) if prices else None,
        max_price=max(prices) if prices else None,
        total_price=sum(prices),
        amenities_score=sum(len(member.record.amenities) for member in members),
        average_roi=_mean([member.metrics.roi for member in valid]),
        average_yield=_mean([member.metrics.yield_percent for member in valid]),
        average_composite_score=_mean([member.metrics.composite_score for member in valid]),
        distinct=distinct,
    )


def sort_groups(groups: Iterable[GroupSummary], sort_by: str) -> List[GroupSummary]:
    try:
        key_fn, descending = GROUP_SORTS[sort_by]
    except KeyError:
        raise ValueError(f"Unsupported group sort '{sort_by}'") from None
    return sorted(groups, key=key_fn, reverse=descending)


def summarize_groups(
    items: Iterable[ScoredProperty],
    key_fn: Callable[[ScoredProperty], str],
    *,
    sort_by: str,
    distinct_field: str | None = None,
) -> List[GroupSummary]:
    """Group items and return one summary per key, ordered by ``sort_by``."""
    grouped = group_by(items, key_fn)
    summaries = [summarize_group(key, members, distinct_field) for key, members in grouped.items()]
    return sort_groups(summaries, sort_by)


def top_groups(groups: Iterable[GroupSummary], limit: int, min_members: int) -> List[GroupSummary]:
    """Drop groups below ``min_members`` and keep the first ``limit``."""
    return [group for group in groups if group.count >= min_members][:limit]
