"""
Parse request filter parameters and apply record-source filters.

Malformed values never fail a request: each one falls back to the
documented default and the substitution is logged at debug level.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Sequence, Tuple

from .config import DEFAULT_CONFIG, AnalyticsConfig
from .metrics import RiskStrategy
from .models import RISK_LEVELS, PropertyRecord
from .normalizer import parse_number

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass
class FilterSpec:
    city: str | None = None
    location_name: str | None = None
    area_name: str | None = None
    search: str | None = None
    bounds: Tuple[float, float, float, float] | None = None
    budget_min: float | None = None
    budget_max: float | None = None
    property_type: str | None = None
    risk_level: str | None = None
    location: str | None = None
    years: int = DEFAULT_CONFIG.default_history_years
    limit: int = DEFAULT_CONFIG.default_limit
    sort_by: str | None = None
    strategy: RiskStrategy = RiskStrategy.PRICE_TIER
    min_members: int = DEFAULT_CONFIG.min_group_members
    ids: List[str] = field(default_factory=list)


def _text(params: Mapping, name: str) -> str | None:
    value = params.get(name)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _bounded_int(params: Mapping, name: str, default: int, minimum: int, maximum: int) -> int:
    raw = _text(params, name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.debug("Ignoring malformed %s=%r, using %s", name, raw, default)
        return default
    if value < minimum or value > maximum:
        logger.debug("Ignoring out-of-range %s=%r, using %s", name, raw, default)
        return default
    return value


def _number(params: Mapping, name: str) -> float | None:
    raw = _text(params, name)
    if raw is None:
        return None
    value = parse_number(raw)
    if value is None:
        logger.debug("Ignoring malformed %s=%r", name, raw)
    return value


def _bounds(params: Mapping) -> Tuple[float, float, float, float] | None:
    values = [parse_number(_text(params, name), signed=True) for name in ("north", "south", "east", "west")]
    if any(value is None for value in values):
        return None
    return tuple(values)


def _risk_level(params: Mapping) -> str | None:
    raw = _text(params, "riskLevel")
    if raw is None:
        return None
    level = raw.title()
    if level not in RISK_LEVELS:
        logger.debug("Ignoring unknown riskLevel=%r", raw)
        return None
    return level


def _strategy(params: Mapping) -> RiskStrategy:
    raw = (_text(params, "strategy") or "").lower()
    try:
        return RiskStrategy(raw) if raw else RiskStrategy.PRICE_TIER
    except ValueError:
        logger.debug("Ignoring unknown strategy=%r", raw)
        return RiskStrategy.PRICE_TIER


def snake_case(value: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", value).lower()


def resolve_choice(value: str | None, choices: Iterable[str], default: str) -> str:
    """Return ``value`` if it names one of ``choices``, otherwise ``default``."""
    if value and value in choices:
        return value
    if value:
        logger.debug("Ignoring unsupported choice %r, using %s", value, default)
    return default


def parse_filters(params: Mapping, config: AnalyticsConfig = DEFAULT_CONFIG) -> FilterSpec:
    """
    Build a FilterSpec from query parameters (camelCase names, string values).
    """
    budget_min = _number(params, "budgetMin")
    budget_max = _number(params, "budgetMax")
    if budget_min is not None and budget_max is not None and budget_min > budget_max:
        budget_min, budget_max = budget_max, budget_min

    sort_by = _text(params, "sortBy")
    raw_ids = _text(params, "ids") or ""

    return FilterSpec(
        city=_text(params, "city"),
        location_name=_text(params, "locationName"),
        area_name=_text(params, "areaName"),
        search=_text(params, "search"),
        bounds=_bounds(params),
        budget_min=budget_min,
        budget_max=budget_max,
        property_type=_text(params, "propertyType"),
        risk_level=_risk_level(params),
        location=_text(params, "location"),
        years=_bounded_int(
            params, "years", config.default_history_years, 0, config.max_history_years
        ),
        limit=_bounded_int(params, "limit", config.default_limit, 1, config.max_limit),
        sort_by=snake_case(sort_by) if sort_by else None,
        strategy=_strategy(params),
        min_members=_bounded_int(params, "minMembers", config.min_group_members, 1, 1000),
        ids=[value.strip() for value in raw_ids.split(",") if value.strip()],
    )


def _normalize(value: str | None) -> str:
    return (value or "").strip().lower()


def _within_bounds(record: PropertyRecord, bounds: Sequence[float]) -> bool:
    north, south, east, west = bounds
    if record.latitude is None or record.longitude is None:
        return False
    return south <= record.latitude <= north and west <= record.longitude <= east


def _search_fields(record: PropertyRecord) -> Tuple[str | None, ...]:
    return (
        record.title,
        record.project_name,
        record.location,
        record.area_name,
        record.city,
        record.locality,
        record.landmark,
    )


def filter_records(records: Iterable[PropertyRecord], filters: FilterSpec | None = None) -> List[PropertyRecord]:
    """
    Narrow records by map bounds, free-text search, city (exact) and
    location/area name (substring), all case-insensitive.
    """
    filters = filters or FilterSpec()
    selected = list(records)

    if filters.bounds:
        selected = [record for record in selected if _within_bounds(record, filters.bounds)]

    if filters.search:
        needle = _normalize(filters.search)
        selected = [
            record
            for record in selected
            if any(needle in _normalize(value) for value in _search_fields(record) if value)
        ]

    if filters.city:
        city = _normalize(filters.city)
        selected = [record for record in selected if _normalize(record.city) == city]

    if filters.location_name:
        needle = _normalize(filters.location_name)
        selected = [record for record in selected if record.location_name and needle in _normalize(record.location_name)]

    if filters.area_name:
        needle = _normalize(filters.area_name)
        selected = [record for record in selected if record.area_name and needle in _normalize(record.area_name)]

    return selected
