import pytest

from analytics.grouping import (
    carpet_area_bucket,
    field_key,
    group_by,
    price_range_label,
    sort_groups,
    summarize_groups,
    top_groups,
)
from analytics.metrics import MetricCalculator
from analytics.models import GroupSummary, PropertyRecord


def _scored(records):
    return MetricCalculator().score(records)


def test_group_by_keeps_first_seen_order():
    grouped = group_by(["b1", "a1", "b2", "c1", "a2"], lambda item: item[0])
    assert list(grouped) == ["b", "a", "c"]
    assert grouped["b"] == ["b1", "b2"]


def test_group_by_with_reducer():
    counts = group_by([3, 1, 4, 1, 5], lambda n: n % 2, reducer=lambda acc, n: acc + n, initial=int)
    assert counts == {1: 10, 0: 4}


def test_mixed_valid_and_invalid_prices():
    records = [
        PropertyRecord(id="1", area_name="X", price=100, carpet_area=10),
        PropertyRecord(id="2", area_name="X", price=200, carpet_area=20),
        PropertyRecord(id="3", area_name="X", price=0, carpet_area=10),
    ]
    scored = _scored(records)
    assert [item.metrics.price_per_area for item in scored] == [10, 10, None]

    (group,) = summarize_groups(scored, field_key("area_name"), sort_by="average_price")
    assert group.count == 3
    assert group.valid_count == 2
    assert group.average_price == 150
    assert group.average_price_per_area == 10
    assert group.min_price == 100
    assert group.max_price == 200


def test_price_per_area_average_skips_members_without_area():
    records = [
        PropertyRecord(area_name="X", price=100, carpet_area=10),
        PropertyRecord(area_name="X", price=300),
    ]
    (group,) = summarize_groups(_scored(records), field_key("area_name"), sort_by="count")
    assert group.average_price == 200
    assert group.average_price_per_area == 10


def test_amenities_score_sums_set_sizes():
    records = [
        PropertyRecord(area_name="X", amenities=frozenset({"Lift", "Park"})),
        PropertyRecord(area_name="X", amenities=frozenset({"Lift"})),
        PropertyRecord(area_name="Y", lift=True),
    ]
    groups = summarize_groups(_scored(records), field_key("area_name"), sort_by="amenities_score")
    assert [(group.key, group.amenities_score) for group in groups] == [("X", 3), ("Y", 0)]


def test_missing_key_groups_as_unknown():
    groups = summarize_groups(_scored([PropertyRecord(price=5)]), field_key("city"), sort_by="count")
    assert groups[0].key == "Unknown"


def test_distinct_values_collected_in_order(sample_records):
    groups = summarize_groups(
        _scored(sample_records), field_key("city"), sort_by="key", distinct_field="area_name"
    )
    mumbai, pune = groups
    assert mumbai.distinct == ["Prime Bandra"]
    assert pune.distinct == ["Downtown Baner", "Kothrud", "Hinjewadi Suburb"]


class TestSorting:
    def _groups(self):
        return [
            GroupSummary(key="b", count=5, average_price=100, amenities_score=1),
            GroupSummary(key="a", count=1, average_price=300, amenities_score=9),
            GroupSummary(key="c", count=3, average_price=200, amenities_score=4),
        ]

    @pytest.mark.parametrize(
        "sort_by, expected",
        [
            ("average_price", ["a", "c", "b"]),
            ("count", ["b", "c", "a"]),
            ("amenities_score", ["a", "c", "b"]),
            ("key", ["a", "b", "c"]),
        ],
    )
    def test_explicit_sort(self, sort_by, expected):
        assert [group.key for group in sort_groups(self._groups(), sort_by)] == expected

    def test_unknown_sort_is_rejected(self):
        with pytest.raises(ValueError):
            sort_groups(self._groups(), "price")

    def test_key_sort_is_numeric_aware(self):
        keys = ["5000+", "Unknown", "1000-1500", "500-1000", "0-500"]
        groups = [GroupSummary(key=key) for key in keys]
        assert [group.key for group in sort_groups(groups, "key")] == [
            "0-500",
            "500-1000",
            "1000-1500",
            "5000+",
            "Unknown",
        ]


def test_small_groups_dropped_from_top_listing_only():
    records = [PropertyRecord(developer="Small", price=900)] * 2 + [PropertyRecord(developer="Big", price=100)] * 3
    all_groups = summarize_groups(_scored(records), field_key("developer"), sort_by="average_price")
    assert [group.key for group in all_groups] == ["Small", "Big"]
    assert [group.key for group in top_groups(all_groups, limit=10, min_members=3)] == ["Big"]


def test_top_groups_limit():
    groups = [GroupSummary(key=str(idx), count=5) for idx in range(5)]
    assert len(top_groups(groups, limit=2, min_members=1)) == 2


@pytest.mark.parametrize(
    "area, expected",
    [
        (250, "0-500"),
        (500, "500-1000"),
        (1999.5, "1500-2000"),
        (3500, "3000-4000"),
        (4999, "4000-5000"),
        (5000, "5000+"),
        (12000, "5000+"),
        (0, "Unknown"),
        (None, "Unknown"),
    ],
)
def test_carpet_area_bucket(area, expected):
    assert carpet_area_bucket(area) == expected


@pytest.mark.parametrize(
    "price, expected",
    [(4_000_000, "Under 50L"), (5_000_000, "50L - 1Cr"), (15_000_000, "1Cr - 2Cr"), (60_000_000, "Above 5Cr"), (0, None)],
)
def test_price_range_label(price, expected):
    assert price_range_label(price) == expected
