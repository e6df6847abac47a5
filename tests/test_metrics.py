from dataclasses import replace

import pytest

from analytics.config import DEFAULT_CONFIG
from analytics.metrics import (
    MetricCalculator,
    RiskStrategy,
    compute_composite_score,
    growth_rate_for_price_per_area,
    risk_by_possession,
    risk_by_price_per_area,
)
from analytics.models import PropertyRecord


@pytest.fixture
def calculator():
    return MetricCalculator()


def test_weights_sum_to_one():
    assert sum(DEFAULT_CONFIG.weights.values()) == pytest.approx(1.0)


def test_weights_that_do_not_sum_to_one_are_rejected():
    with pytest.raises(ValueError):
        replace(DEFAULT_CONFIG, composite_weights=(("roi", 0.5), ("yield_percent", 0.3)))


def test_composite_score_known_values():
    assert compute_composite_score(10, 5, 2, 1, 5) == pytest.approx(6.3)


def test_monthly_rent_uses_first_matching_locality(calculator):
    downtown = PropertyRecord(carpet_area=1000, area_name="Downtown Baner")
    assert calculator.monthly_rent(downtown) == pytest.approx(37500)

    # "prime" is listed before "suburb", so it wins when both appear.
    mixed = PropertyRecord(carpet_area=1000, locality="Prime Suburb Road")
    assert calculator.locality_multiplier(mixed) == 1.3
    assert calculator.location_score(mixed) == 8


def test_default_multiplier_and_score(calculator):
    record = PropertyRecord(carpet_area=1000, area_name="Kothrud")
    assert calculator.locality_multiplier(record) == 1.0
    assert calculator.location_score(record) == 5


def test_keywords_do_not_span_location_fields(calculator):
    record = PropertyRecord(carpet_area=1000, locality="Old City", area_name="Center Point")
    assert calculator.locality_multiplier(record) == 1.0
    assert calculator.location_score(record) == 5


def test_annual_rent_is_twelve_months(calculator, sample_records):
    for record in sample_records:
        metrics = calculator.calculate(record)
        assert metrics.estimated_annual_rent == metrics.estimated_monthly_rent * 12


def test_roi_and_yield(calculator):
    record = PropertyRecord(price=10_000_000, carpet_area=1000, area_name="Kothrud")
    metrics = calculator.calculate(record)
    assert metrics.estimated_annual_rent == pytest.approx(300_000)
    assert metrics.roi == pytest.approx(10.0)
    assert metrics.yield_percent == pytest.approx(3.0)
    assert metrics.payback_years == pytest.approx(33.3333, rel=1e-4)


def test_maintenance_reduces_roi(calculator):
    record = PropertyRecord(price=10_000_000, carpet_area=1000, maintenance_charges=100_000)
    assert calculator.calculate(record).roi == pytest.approx(9.0)


@pytest.mark.parametrize("price", [0, -5, None])
def test_invalid_price_gives_zero_roi_and_yield(calculator, price):
    metrics = calculator.calculate(PropertyRecord(price=price, carpet_area=1000))
    assert metrics.roi == 0
    assert metrics.yield_percent == 0
    assert metrics.price_per_area is None
    assert metrics.payback_years is None


def test_missing_area_gives_zero_rent(calculator):
    metrics = calculator.calculate(PropertyRecord(price=1_000_000))
    assert metrics.estimated_monthly_rent == 0
    assert metrics.price_per_area is None


def test_luxury_factor_counts_keywords(calculator):
    record = PropertyRecord(
        title="Villa with infinity pool",
        project_name="Golf Greens",
        facing="Garden facing",
    )
    assert calculator.luxury_factor(record) == 4


def test_sample_composite_scores(calculator, sample_records):
    scores = {record.id: calculator.calculate(record).composite_score for record in sample_records}
    assert scores["1"] == pytest.approx(6.725)
    assert scores["2"] == pytest.approx(7.8375)
    assert scores["3"] == pytest.approx(4.55)
    assert scores["6"] == pytest.approx(6.802)


class TestRiskBuckets:
    @pytest.mark.parametrize(
        "price_per_area, expected",
        [(20000, "High"), (15001, "High"), (15000, "Medium"), (10000, "Medium"), (8000, "Low"), (None, "Low")],
    )
    def test_price_tiers(self, price_per_area, expected):
        assert risk_by_price_per_area(price_per_area) == expected

    @pytest.mark.parametrize(
        "status, expected",
        [("Ready to Move", "Low"), ("under construction", "Medium"), ("Resale", "High"), (None, "High")],
    )
    def test_possession(self, status, expected):
        assert risk_by_possession(status) == expected

    def test_strategies_do_not_mix(self, calculator):
        record = PropertyRecord(price=20_000_000, carpet_area=1000, possession_status="Ready to Move")
        assert calculator.calculate(record, RiskStrategy.PRICE_TIER).risk_level == "High"
        assert calculator.calculate(record, RiskStrategy.POSSESSION).risk_level == "Low"


@pytest.mark.parametrize(
    "price_per_area, expected", [(20000, 0.05), (10000, 0.07), (5000, 0.10), (None, 0.10)]
)
def test_growth_rate_tiers(price_per_area, expected):
    assert growth_rate_for_price_per_area(price_per_area) == expected


def test_swapped_config_changes_rent():
    config = replace(DEFAULT_CONFIG, base_rent_per_area=50.0)
    record = PropertyRecord(carpet_area=100)
    assert MetricCalculator(config).monthly_rent(record) == 2 * MetricCalculator().monthly_rent(record)


def test_output_rounding(calculator):
    record = PropertyRecord(price=3_000_000, carpet_area=333, area_name="Kothrud")
    payload = calculator.calculate(record).to_dict()
    assert payload["estimatedMonthlyRent"] == 8325
    assert payload["yieldPercent"] == round(8325 * 12 / 3_000_000 * 100, 2)
    assert payload["pricePerArea"] == 9009
    assert payload["riskLevel"] == "Medium"
