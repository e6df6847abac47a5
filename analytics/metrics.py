"""
Per-property financial metrics.

This is the single home of the rent, ROI, yield, score and risk formulas;
every report goes through MetricCalculator so the numbers agree across
endpoints. Values are kept at full precision here and only rounded when
serialized.
"""
from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple, TypeVar

from .config import DEFAULT_CONFIG, AnalyticsConfig
from .models import DerivedMetrics, PropertyRecord, ScoredProperty

T = TypeVar("T")


class RiskStrategy(str, Enum):
    PRICE_TIER = "price"
    POSSESSION = "possession"


def _first_match(text: str, table: Sequence[Tuple[str, T]], default: T) -> T:
    lowered = text.lower()
    for keyword, value in table:
        if keyword in lowered:
            return value
    return default


def _joined(parts: Iterable[Optional[str]]) -> str:
    # No keyword contains a newline, so matches stay inside one field.
    return "\n".join(part for part in parts if part)


def location_text(record: PropertyRecord) -> str:
    return _joined((record.locality, record.area_name, record.location))


def descriptive_text(record: PropertyRecord) -> str:
    return _joined(
        (
            record.title,
            record.project_name,
            record.property_uniqueness,
            record.facing,
            record.amenities_facing,
        )
    )


def compute_composite_score(
    roi: float,
    yield_percent: float,
    amenities_count: int,
    luxury_factor: int,
    location_score: int,
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> float:
    weights = config.weights
    return (
        weights["roi"] * roi
        + weights["yield_percent"] * yield_percent
        + weights["amenities_count"] * amenities_count
        + weights["luxury_factor"] * luxury_factor
        + weights["location_score"] * location_score
    )


def risk_by_price_per_area(price_per_area: float | None, config: AnalyticsConfig = DEFAULT_CONFIG) -> str:
    if price_per_area is None:
        return config.default_risk_level
    for threshold, level in config.risk_tiers:
        if price_per_area > threshold:
            return level
    return config.default_risk_level


def risk_by_possession(possession_status: str | None, config: AnalyticsConfig = DEFAULT_CONFIG) -> str:
    status = (possession_status or "").strip().lower()
    for label, level in config.possession_risk_levels:
        if status == label:
            return level
    return config.default_possession_risk


def growth_rate_for_price_per_area(
    price_per_area: float | None, config: AnalyticsConfig = DEFAULT_CONFIG
) -> float:
    """Annual appreciation assumed for a price-per-area tier."""
    if price_per_area is None:
        return config.default_growth_rate
    for threshold, rate in config.growth_rate_tiers:
        if price_per_area > threshold:
            return rate
    return config.default_growth_rate


class MetricCalculator:
    """Derive financial metrics for property records using one config."""

    def __init__(self, config: AnalyticsConfig = DEFAULT_CONFIG):
        self.config = config

    def locality_multiplier(self, record: PropertyRecord) -> float:
        return _first_match(
            location_text(record),
            self.config.locality_multipliers,
            self.config.default_locality_multiplier,
        )

    def location_score(self, record: PropertyRecord) -> int:
        return _first_match(
            location_text(record),
            self.config.location_scores,
            self.config.default_location_score,
        )

    def luxury_factor(self, record: PropertyRecord) -> int:
        text = descriptive_text(record).lower()
        return sum(1 for keyword in self.config.luxury_keywords if keyword in text)

    def monthly_rent(self, record: PropertyRecord) -> float:
        area = record.carpet_area
        if area is None or area <= 0:
            return 0.0
        return area * self.config.base_rent_per_area * self.locality_multiplier(record)

    def roi(self, record: PropertyRecord, annual_rent: float) -> float:
        if not record.has_valid_price:
            return 0.0
        price = record.price
        maintenance = record.maintenance_charges or 0.0
        appreciation = price * self.config.appreciation_rate / 100
        return (appreciation + annual_rent - maintenance) / price * 100

    def yield_percent(self, record: PropertyRecord, annual_rent: float) -> float:
        if not record.has_valid_price:
            return 0.0
        return annual_rent / record.price * 100

    def risk_level(self, record: PropertyRecord, strategy: RiskStrategy = RiskStrategy.PRICE_TIER) -> str:
        if RiskStrategy(strategy) is RiskStrategy.POSSESSION:
            return risk_by_possession(record.possession_status, self.config)
        return risk_by_price_per_area(record.price_per_area, self.config)

    def calculate(
        self, record: PropertyRecord, strategy: RiskStrategy = RiskStrategy.PRICE_TIER
    ) -> DerivedMetrics:
        monthly_rent = self.monthly_rent(record)
        annual_rent = monthly_rent * 12
        roi = self.roi(record, annual_rent)
        yield_percent = self.yield_percent(record, annual_rent)
        amenities_count = len(record.amenities)
        luxury_factor = self.luxury_factor(record)
        location_score = self.location_score(record)
        price_per_area = record.price_per_area

        payback_years = None
        if record.has_valid_price and annual_rent > 0:
            payback_years = record.price / annual_rent

        return DerivedMetrics(
            estimated_monthly_rent=monthly_rent,
            estimated_annual_rent=annual_rent,
            roi=roi,
            yield_percent=yield_percent,
            amenities_count=amenities_count,
            luxury_factor=luxury_factor,
            location_score=location_score,
            composite_score=compute_composite_score(
                roi, yield_percent, amenities_count, luxury_factor, location_score, self.config
            ),
            risk_level=self.risk_level(record, strategy),
            price_per_area=price_per_area,
            growth_rate=growth_rate_for_price_per_area(price_per_area, self.config),
            payback_years=payback_years,
        )

    def score(
        self,
        records: Iterable[PropertyRecord],
        strategy: RiskStrategy = RiskStrategy.PRICE_TIER,
    ) -> List[ScoredProperty]:
        return [ScoredProperty(record, self.calculate(record, strategy)) for record in records]
