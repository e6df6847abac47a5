"""
Generate short deterministic summaries for analytics responses.
"""
from __future__ import annotations

from math import isfinite
from typing import Dict, List

METRIC_LABELS = {
    "average_price": "average price",
    "average_price_per_area": "average price per sq ft",
    "count": "listing count",
    "amenities_score": "amenities score",
    "average_roi": "average ROI",
    "key": "name",
    "roi": "ROI",
    "yield_percent": "rental yield",
    "composite_score": "investment score",
}

PERCENT_METRICS = ("average_roi", "roi", "yield_percent")

NO_DATA_MESSAGE = "No properties with a valid price matched the requested filters."


def _format_value(value: float | int | None) -> str:
    if value is None:
        return "N/A"
    if not isinstance(value, (int, float)):
        return str(value)
    if not isfinite(value):
        return "N/A"

    absolute = abs(value)
    if absolute >= 1_000_000_000:
        return f"{value / 1_000_000_000:.2f}B"
    if absolute >= 1_000_000:
        return f"{value / 1_000_000:.2f}M"
    if absolute >= 1_000:
        return f"{value / 1_000:.1f}K"
    if float(value).is_integer():
        return f"{int(value)}"
    return f"{value:.2f}"


def _format_metric(metric: str, value) -> str:
    if metric in PERCENT_METRICS and isinstance(value, (int, float)):
        return f"{value:.2f}%"
    return _format_value(value)


def _groups_sentence(context: Dict) -> str:
    groups = context.get("groups", [])
    if not groups:
        return NO_DATA_MESSAGE
    top = groups[0]
    metric = context.get("sort_by", "average_price")
    label = context.get("label", "group")
    if metric == "key":
        return f"Showing {len(groups)} {label} groups in order."
    value = getattr(top, metric, None)
    return (
        f"{top.key} leads {label} groups by {METRIC_LABELS.get(metric, metric)} "
        f"with {_format_metric(metric, value)} across {top.count} listings."
    )


def _recommendation_sentence(context: Dict) -> str:
    ranked = context.get("ranked", [])
    if not ranked:
        return NO_DATA_MESSAGE
    metric = context.get("sort_by", "composite_score")
    top = ranked[0]
    value = getattr(top.metrics, metric)
    name = top.record.title or top.record.project_name or top.record.id
    return (
        f"{name} tops {len(ranked)} recommendations by {METRIC_LABELS.get(metric, metric)} "
        f"at {_format_metric(metric, value)}."
    )


def _history_sentence(context: Dict) -> str:
    points = context.get("points", [])
    if not points:
        return NO_DATA_MESSAGE
    latest, earliest = points[0], points[-1]
    rate = context.get("growth_rate", 0.0) * 100
    subject = context.get("subject", "the selected properties")
    return (
        f"Estimated prices for {subject} move from {_format_value(earliest.price)} in {earliest.year} "
        f"to {_format_value(latest.price)} in {latest.year}, assuming {rate:.2f}% annual growth. "
        "These figures are synthetic, not recorded sales."
    )


def _overview_sentence(context: Dict) -> str:
    if not context.get("valid"):
        return NO_DATA_MESSAGE
    parts: List[str] = [
        f"{context['valid']} of {context['total']} listings have a valid price",
        f"average price {_format_value(context.get('average_price'))}",
    ]
    if context.get("average_price_per_area"):
        parts.append(f"average {_format_value(context['average_price_per_area'])} per sq ft")
    return "Market overview: " + "; ".join(parts) + "."


def _property_sentence(context: Dict) -> str:
    scored = context["scored"]
    metrics = scored.metrics
    name = scored.record.title or scored.record.id
    if not scored.record.has_valid_price:
        return f"{name} has no valid price, so financial metrics are not available."
    return (
        f"{name} projects {metrics.roi:.2f}% ROI with a {metrics.yield_percent:.2f}% rental yield "
        f"and {metrics.risk_level.lower()} price risk."
    )


def _comparison_sentence(context: Dict) -> str:
    best = context.get("best", {})
    names = context.get("names", {})
    if not best.get("composite_score"):
        return NO_DATA_MESSAGE
    return (
        f"{names.get(best['composite_score'])} has the best investment score; "
        f"{names.get(best['roi'])} leads on ROI and {names.get(best['yield_percent'])} on rental yield."
    )


def _risk_sentence(context: Dict) -> str:
    counts = context.get("counts", {})
    if not any(counts.values()):
        return NO_DATA_MESSAGE
    parts = [f"{count} {level.lower()}" for level, count in counts.items()]
    return f"Risk mix by {context.get('strategy', 'price')} strategy: " + ", ".join(parts) + "."


SENTENCE_BUILDERS = {
    "groups": _groups_sentence,
    "recommendations": _recommendation_sentence,
    "history": _history_sentence,
    "overview": _overview_sentence,
    "property": _property_sentence,
    "comparison": _comparison_sentence,
    "risk": _risk_sentence,
}


def generate_summary(report: str, context: Dict | None = None) -> str:
    """
    Produce a deterministic, human-readable summary for one report.
    """
    builder = SENTENCE_BUILDERS.get(report)
    if builder is None:
        raise ValueError(f"Unknown report '{report}'")
    return builder(context or {})
