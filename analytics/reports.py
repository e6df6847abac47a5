"""
Analytics pipelines behind the API endpoints.

Each report scores a snapshot of records with MetricCalculator and then
groups, ranks or extrapolates the result. Risk buckets use the price-tier
strategy unless the caller passes ``strategy=possession``; the per-property
analysis reports both buckets side by side.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence

from .chart_builder import (
    build_bar_chart,
    build_group_chart,
    build_line_chart,
    build_multi_line_chart,
    history_frame,
)
from .config import DEFAULT_CONFIG, AnalyticsConfig
from .filters import FilterSpec, resolve_choice
from .grouping import (
    GROUP_SORTS,
    carpet_area_key,
    field_key,
    group_by,
    price_range_label,
    summarize_groups,
    top_groups,
)
from .metrics import MetricCalculator, RiskStrategy, growth_rate_for_price_per_area
from .models import RISK_LEVELS, PropertyRecord, ScoredProperty
from .ranking import DEFAULT_RANKING_KEY, RANKING_KEYS, rank_properties, select_properties
from .summary_generator import generate_summary
from .time_series import growth_percent, project_price, reconstruct_price_history


@dataclass(frozen=True)
class GroupDimension:
    label: str
    key: Callable[[AnalyticsConfig], Callable[[ScoredProperty], str]]
    sort_by: str
    chart_value: str = "average_price"
    distinct_field: str | None = None
    top_only: bool = False
    require_valid: bool = False


GROUP_DIMENSIONS: Dict[str, GroupDimension] = {
    "price-trends": GroupDimension(
        "locality", lambda config: field_key("area_name"), "average_price", require_valid=True
    ),
    "neighborhoods": GroupDimension(
        "locality", lambda config: field_key("area_name"), "amenities_score", chart_value="amenities_score"
    ),
    "cities": GroupDimension(
        "city", lambda config: field_key("city"), "average_price", distinct_field="area_name"
    ),
    "property-types": GroupDimension(
        "property type", lambda config: field_key("property_type"), "count", chart_value="count"
    ),
    "bedrooms": GroupDimension(
        "bedroom", lambda config: field_key("bedrooms"), "key", chart_value="count"
    ),
    "carpet-area": GroupDimension(
        "carpet area", carpet_area_key, "key", chart_value="average_price_per_area"
    ),
    "developers": GroupDimension(
        "developer",
        lambda config: field_key("developer"),
        "average_price",
        distinct_field="project_name",
        top_only=True,
    ),
}


def build_payload(summary: str, chart_type: str, chart_data: Dict, table_data: List, **extra) -> Dict:
    payload = {
        "summary": summary,
        "chart_type": chart_type,
        "chart_data": chart_data,
        "table_data": table_data,
    }
    payload.update(extra)
    return payload


def _display_name(record: PropertyRecord) -> str:
    return record.title or record.project_name or str(record.id)


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _filtered_scores(
    records: Sequence[PropertyRecord], filters: FilterSpec, config: AnalyticsConfig
) -> List[ScoredProperty]:
    return select_properties(MetricCalculator(config).score(records, filters.strategy), filters)


def _counts(scored: Sequence[ScoredProperty]) -> Dict[str, int]:
    valid = sum(1 for item in scored if item.record.has_valid_price)
    return {
        "totalProperties": len(scored),
        "validProperties": valid,
        "excludedProperties": len(scored) - valid,
    }


def group_report(
    records: Sequence[PropertyRecord],
    dimension: str,
    filters: FilterSpec | None = None,
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> Dict:
    filters = filters or FilterSpec()
    definition = GROUP_DIMENSIONS[dimension]
    scored = _filtered_scores(records, filters, config)
    sort_by = resolve_choice(filters.sort_by, GROUP_SORTS, definition.sort_by)

    groups = summarize_groups(
        scored, definition.key(config), sort_by=sort_by, distinct_field=definition.distinct_field
    )
    if definition.require_valid:
        groups = [group for group in groups if group.valid_count]
    if definition.top_only:
        groups = top_groups(groups, filters.limit, filters.min_members)

    valid_prices = [item.record.price for item in scored if item.record.has_valid_price]
    summary = generate_summary("groups", {"groups": groups, "sort_by": sort_by, "label": definition.label})
    return build_payload(
        summary,
        "bar",
        build_group_chart(groups, definition.chart_value),
        [group.to_dict() for group in groups],
        average=round(_mean(valid_prices)),
        groupCount=len(groups),
        sortBy=sort_by,
        **_counts(scored),
    )


def recommendations(
    records: Sequence[PropertyRecord],
    filters: FilterSpec | None = None,
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> Dict:
    filters = filters or FilterSpec()
    sort_by = resolve_choice(filters.sort_by, RANKING_KEYS, DEFAULT_RANKING_KEY)
    scored = MetricCalculator(config).score(records, filters.strategy)
    ranked = rank_properties(scored, sort_by, filters, filters.limit)

    table_data = []
    for rank, item in enumerate(ranked, start=1):
        row = item.to_dict(config.amenity_columns)
        row["rank"] = rank
        table_data.append(row)

    chart_data = build_bar_chart(
        [_display_name(item.record) for item in ranked],
        [round(getattr(item.metrics, sort_by), 2) for item in ranked],
    )
    summary = generate_summary("recommendations", {"ranked": ranked, "sort_by": sort_by})
    return build_payload(
        summary,
        "bar",
        chart_data,
        table_data,
        sortBy=sort_by,
        riskStrategy=filters.strategy.value,
        **_counts(scored),
    )


def market_overview(
    records: Sequence[PropertyRecord],
    filters: FilterSpec | None = None,
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> Dict:
    filters = filters or FilterSpec()
    scored = _filtered_scores(records, filters, config)
    valid = [item for item in scored if item.record.has_valid_price]
    per_area = [item.metrics.price_per_area for item in valid if item.metrics.price_per_area is not None]

    range_counts = group_by(
        valid,
        lambda item: price_range_label(item.record.price, config),
        reducer=lambda count, item: count + 1,
        initial=int,
    )
    price_ranges = [
        {"range": label, "count": range_counts.get(label, 0)} for _, label in config.price_ranges
    ]

    property_types = summarize_groups(scored, field_key("property_type"), sort_by="count")
    by_location = [
        group
        for group in summarize_groups(scored, field_key("area_name"), sort_by="average_price")
        if group.valid_count
    ]
    location_rankings = top_groups(
        summarize_groups(valid, field_key("area_name"), sort_by="average_price_per_area"),
        filters.limit,
        filters.min_members,
    )

    counts = _counts(scored)
    average_price = _mean([item.record.price for item in valid])
    average_per_area = _mean(per_area)
    summary = generate_summary(
        "overview",
        {
            "valid": counts["validProperties"],
            "total": counts["totalProperties"],
            "average_price": average_price,
            "average_price_per_area": average_per_area,
        },
    )
    return build_payload(
        summary,
        "bar",
        build_bar_chart([entry["range"] for entry in price_ranges], [entry["count"] for entry in price_ranges]),
        price_ranges,
        average=round(average_price),
        averagePricePerArea=round(average_per_area),
        averageRoi=round(_mean([item.metrics.roi for item in valid]), 2),
        averageYield=round(_mean([item.metrics.yield_percent for item in valid]), 2),
        propertyTypes=[{"key": group.key, "count": group.count} for group in property_types],
        priceByLocation=[group.to_dict() for group in by_location[: filters.limit]],
        locationRankings=[group.to_dict() for group in location_rankings],
        **counts,
    )


def risk_distribution(
    records: Sequence[PropertyRecord],
    filters: FilterSpec | None = None,
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> Dict:
    """
    Count properties per risk bucket. The price-tier strategy only counts
    priced listings; possession status does not need a price.
    """
    filters = filters or FilterSpec()
    scored = _filtered_scores(records, filters, config)
    if filters.strategy is RiskStrategy.PRICE_TIER:
        members = [item for item in scored if item.record.has_valid_price]
    else:
        members = scored

    buckets = group_by(members, lambda item: item.metrics.risk_level)
    table_data = []
    for level in RISK_LEVELS:
        items = buckets.get(level, [])
        priced = [item for item in items if item.record.has_valid_price]
        table_data.append(
            {
                "riskLevel": level,
                "count": len(items),
                "averagePrice": round(_mean([item.record.price for item in priced])),
                "averageRoi": round(_mean([item.metrics.roi for item in priced]), 2),
            }
        )

    counts = {row["riskLevel"]: row["count"] for row in table_data}
    summary = generate_summary("risk", {"counts": counts, "strategy": filters.strategy.value})
    return build_payload(
        summary,
        "bar",
        build_bar_chart(list(counts), list(counts.values())),
        table_data,
        riskStrategy=filters.strategy.value,
        **_counts(scored),
    )


def _history_payload(
    subject: str,
    current_price: float,
    growth_rate: float,
    years: int,
    current_year: int | None,
    **extra,
) -> Dict:
    points = reconstruct_price_history(current_price, years, growth_rate, current_year)
    summary = generate_summary(
        "history", {"points": points, "growth_rate": growth_rate, "subject": subject}
    )
    return build_payload(
        summary,
        "line",
        build_line_chart(history_frame(points), "price"),
        [point.to_dict() for point in points],
        synthetic=True,
        growthRate=round(growth_rate * 100, 2),
        **extra,
    )


def _empty_history(**extra) -> Dict:
    return build_payload(
        generate_summary("history", {}), "line", {"labels": [], "values": []}, [],
        synthetic=True, average=0, **extra,
    )


def market_price_history(
    records: Sequence[PropertyRecord],
    filters: FilterSpec | None = None,
    config: AnalyticsConfig = DEFAULT_CONFIG,
    current_year: int | None = None,
) -> Dict:
    """Synthetic history of the average valid price of the filtered market."""
    filters = filters or FilterSpec()
    selected = [item.record for item in _filtered_scores(records, filters, config)]
    valid = [record for record in selected if record.has_valid_price]
    if not valid:
        return _empty_history(totalProperties=len(selected), validProperties=0)

    average_price = _mean([record.price for record in valid])
    per_area = [record.price_per_area for record in valid if record.price_per_area is not None]
    average_per_area = _mean(per_area) if per_area else None
    rate = growth_rate_for_price_per_area(average_per_area, config)
    return _history_payload(
        "the selected market",
        average_price,
        rate,
        filters.years,
        current_year,
        average=round(average_price),
        totalProperties=len(selected),
        validProperties=len(valid),
    )


def property_price_history(
    record: PropertyRecord,
    filters: FilterSpec | None = None,
    config: AnalyticsConfig = DEFAULT_CONFIG,
    current_year: int | None = None,
) -> Dict:
    filters = filters or FilterSpec()
    if not record.has_valid_price:
        return _empty_history(propertyId=record.id)
    rate = growth_rate_for_price_per_area(record.price_per_area, config)
    return _history_payload(
        _display_name(record), record.price, rate, filters.years, current_year, propertyId=record.id
    )


def property_analysis(
    record: PropertyRecord,
    filters: FilterSpec | None = None,
    config: AnalyticsConfig = DEFAULT_CONFIG,
    current_year: int | None = None,
) -> Dict:
    filters = filters or FilterSpec()
    calculator = MetricCalculator(config)
    scored = ScoredProperty(record, calculator.calculate(record, RiskStrategy.PRICE_TIER))
    metrics = scored.metrics

    projection = None
    chart_data: Dict = {"labels": [], "values": []}
    if record.has_valid_price:
        projected = project_price(record.price, config.projection_years, metrics.growth_rate)
        projection = {
            "years": config.projection_years,
            "growthRate": round(metrics.growth_rate * 100, 2),
            "projectedValue": round(projected),
            "appreciationPercent": round(growth_percent(record.price, projected), 2),
            "synthetic": True,
        }
        points = reconstruct_price_history(record.price, filters.years, metrics.growth_rate, current_year)
        chart_data = build_line_chart(history_frame(points), "price")

    return build_payload(
        generate_summary("property", {"scored": scored}),
        "line",
        chart_data,
        [scored.to_dict(config.amenity_columns)],
        riskLevels={
            RiskStrategy.PRICE_TIER.value: metrics.risk_level,
            RiskStrategy.POSSESSION.value: calculator.risk_level(record, RiskStrategy.POSSESSION),
        },
        projection=projection,
    )


def _best(valid: Sequence[ScoredProperty], metric: str) -> str | None:
    if not valid:
        return None
    # max() returns the first maximal element, keeping ties in input order.
    return max(valid, key=lambda item: getattr(item.metrics, metric)).record.id


def compare_properties(
    records: Sequence[PropertyRecord],
    filters: FilterSpec | None = None,
    config: AnalyticsConfig = DEFAULT_CONFIG,
    current_year: int | None = None,
) -> Dict:
    filters = filters or FilterSpec()
    scored = MetricCalculator(config).score(records, filters.strategy)
    valid = [item for item in scored if item.record.has_valid_price]

    best = {metric: _best(valid, metric) for metric in RANKING_KEYS}
    names = {item.record.id: _display_name(item.record) for item in scored}

    frames = {}
    for item in valid:
        points = reconstruct_price_history(
            item.record.price, filters.years, item.metrics.growth_rate, current_year
        )
        frames[f"{_display_name(item.record)} ({item.record.id})"] = history_frame(points)
    chart_data = build_multi_line_chart(frames, "price") if frames else {"labels": [], "series": {}}

    return build_payload(
        generate_summary("comparison", {"best": best, "names": names}),
        "multi_line",
        chart_data,
        [item.to_dict(config.amenity_columns) for item in scored],
        best={
            "roi": best["roi"],
            "yieldPercent": best["yield_percent"],
            "compositeScore": best["composite_score"],
        },
        synthetic=True,
        **_counts(scored),
    )
