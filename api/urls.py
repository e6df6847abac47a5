from django.urls import path

from . import views

urlpatterns = [
    path("analytics/overview/", views.overview, name="analytics-overview"),
    path("analytics/price-trends/", views.group_analytics, {"dimension": "price-trends"}, name="analytics-price-trends"),
    path("analytics/neighborhoods/", views.group_analytics, {"dimension": "neighborhoods"}, name="analytics-neighborhoods"),
    path("analytics/cities/", views.group_analytics, {"dimension": "cities"}, name="analytics-cities"),
    path("analytics/property-types/", views.group_analytics, {"dimension": "property-types"}, name="analytics-property-types"),
    path("analytics/bedrooms/", views.group_analytics, {"dimension": "bedrooms"}, name="analytics-bedrooms"),
    path("analytics/carpet-area/", views.group_analytics, {"dimension": "carpet-area"}, name="analytics-carpet-area"),
    path("analytics/developers/", views.group_analytics, {"dimension": "developers"}, name="analytics-developers"),
    path("analytics/recommendations/", views.recommended_properties, name="analytics-recommendations"),
    path("analytics/risk/", views.risk_levels, name="analytics-risk"),
    path("analytics/price-history/", views.price_history, name="analytics-price-history"),
    path("analytics/compare/", views.compare, name="analytics-compare"),
    path("analytics/properties/<str:property_id>/", views.property_detail, name="analytics-property"),
    path(
        "analytics/properties/<str:property_id>/price-history/",
        views.property_history,
        name="analytics-property-history",
    ),
]
