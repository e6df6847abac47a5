from __future__ import annotations

import logging
from functools import wraps
from typing import List

from django.http import JsonResponse
from django.views.decorators.http import require_GET

from analytics.exceptions import AnalyticsError, PropertyNotFoundError
from analytics.filters import FilterSpec, parse_filters
from analytics.models import PropertyRecord
from analytics.record_store import get_config, load_all_records, load_record_by_id
from analytics.reports import (
    GROUP_DIMENSIONS,
    compare_properties,
    group_report,
    market_overview,
    market_price_history,
    property_analysis,
    property_price_history,
    recommendations,
    risk_distribution,
)

logger = logging.getLogger(__name__)

MAX_COMPARE = 5


def _analytics_view(view):
    """Run a GET view and turn analytics failures into JSON error bodies."""

    @require_GET
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except AnalyticsError as exc:
            logger.warning("%s %s failed: %s", request.method, request.path, exc.detail)
            return JsonResponse({"detail": exc.detail}, status=exc.status_code)

    return wrapper


def _parsed_filters(request) -> FilterSpec:
    return parse_filters(request.GET, get_config())


def _get_record(property_id: str) -> PropertyRecord:
    record = load_record_by_id(property_id)
    if record is None:
        raise PropertyNotFoundError(property_id)
    return record


@_analytics_view
def overview(request):
    filters = _parsed_filters(request)
    return JsonResponse(market_overview(load_all_records(filters), filters, get_config()))


@_analytics_view
def group_analytics(request, dimension: str):
    if dimension not in GROUP_DIMENSIONS:
        return JsonResponse({"detail": f"Unknown grouping '{dimension}'."}, status=404)
    filters = _parsed_filters(request)
    return JsonResponse(group_report(load_all_records(filters), dimension, filters, get_config()))


@_analytics_view
def recommended_properties(request):
    filters = _parsed_filters(request)
    return JsonResponse(recommendations(load_all_records(filters), filters, get_config()))


@_analytics_view
def risk_levels(request):
    filters = _parsed_filters(request)
    return JsonResponse(risk_distribution(load_all_records(filters), filters, get_config()))


@_analytics_view
def price_history(request):
    filters = _parsed_filters(request)
    return JsonResponse(market_price_history(load_all_records(filters), filters, get_config()))


@_analytics_view
def property_detail(request, property_id: str):
    filters = _parsed_filters(request)
    return JsonResponse(property_analysis(_get_record(property_id), filters, get_config()))


@_analytics_view
def property_history(request, property_id: str):
    filters = _parsed_filters(request)
    return JsonResponse(property_price_history(_get_record(property_id), filters, get_config()))


@_analytics_view
def compare(request):
    filters = _parsed_filters(request)
    if len(filters.ids) < 2:
        return JsonResponse({"detail": "Please pass at least two property ids to compare."}, status=400)
    if len(filters.ids) > MAX_COMPARE:
        return JsonResponse({"detail": f"At most {MAX_COMPARE} properties can be compared."}, status=400)

    records: List[PropertyRecord] = [_get_record(property_id) for property_id in filters.ids]
    return JsonResponse(compare_properties(records, filters, get_config()))
