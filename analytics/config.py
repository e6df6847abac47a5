"""
Immutable lookup tables and constants used by the analytics engine.

Every keyword table is an ordered tuple of pairs: matching walks the table in
order and the first hit wins, so the order below is part of the behaviour.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Mapping, Tuple

AMENITY_COLUMNS: Tuple[str, ...] = (
    "Power Back Up",
    "Lift",
    "Rain Water Harvesting",
    "Club House",
    "Swimming Pool",
    "Gymnasium",
    "Park",
    "Parking",
    "Security",
    "Water Storage",
    "Private Terrace/Garden",
    "Vaastu Compliant",
    "Service/Goods Lift",
    "Air Conditioned",
    "Visitor Parking",
    "Intercom Facility",
    "Maintenance Staff",
    "Waste Disposal",
    "Laundry Service",
    "Internet/Wi-Fi Connectivity",
    "DTH Television Facility",
    "RO Water System",
    "Banquet Hall",
    "Bar/Lounge",
    "Cafeteria/Food Court",
    "Conference Room",
    "Piped Gas",
    "Jogging and Strolling Track",
    "Outdoor Tennis Courts",
)

# Boolean infrastructure flags and the raw column each one is read from.
FLAG_COLUMNS: Tuple[Tuple[str, str], ...] = (
    ("power_backup", "Power Back Up"),
    ("lift", "Lift"),
    ("parking", "Parking"),
    ("security", "Security"),
    ("water_storage", "Water Storage"),
    ("swimming_pool", "Swimming Pool"),
    ("gymnasium", "Gymnasium"),
    ("park", "Park"),
    ("club_house", "Club House"),
    ("rain_water_harvesting", "Rain Water Harvesting"),
)

LOCALITY_RENT_MULTIPLIERS: Tuple[Tuple[str, float], ...] = (
    ("downtown", 1.5),
    ("city center", 1.5),
    ("prime", 1.3),
    ("central", 1.3),
    ("suburb", 0.9),
    ("rural", 0.7),
)

LOCATION_SCORES: Tuple[Tuple[str, int], ...] = (
    ("downtown", 10),
    ("city center", 10),
    ("prime", 8),
    ("suburb", 6),
)

LUXURY_KEYWORDS: Tuple[str, ...] = (
    "pool",
    "club",
    "gym",
    "helipad",
    "jacuzzi",
    "skydeck",
    "golf",
    "villa",
    "infinity",
)

# (threshold, label) pairs, checked top-down with a strict ">" comparison.
PRICE_PER_AREA_RISK_TIERS: Tuple[Tuple[float, str], ...] = (
    (15000, "High"),
    (8000, "Medium"),
)

POSSESSION_RISK_LEVELS: Tuple[Tuple[str, str], ...] = (
    ("ready to move", "Low"),
    ("under construction", "Medium"),
)

# (threshold, annual growth rate) pairs; cheaper segments appreciate faster.
GROWTH_RATE_TIERS: Tuple[Tuple[float, float], ...] = (
    (15000, 0.05),
    (8000, 0.07),
)

COMPOSITE_WEIGHTS: Tuple[Tuple[str, float], ...] = (
    ("roi", 0.4),
    ("yield_percent", 0.3),
    ("amenities_count", 0.1),
    ("luxury_factor", 0.1),
    ("location_score", 0.1),
)

CARPET_AREA_BOUNDARIES: Tuple[int, ...] = (0, 500, 1000, 1500, 2000, 2500, 3000, 4000, 5000)

PRICE_RANGE_BOUNDARIES: Tuple[Tuple[float, str], ...] = (
    (0, "Under 50L"),
    (5_000_000, "50L - 1Cr"),
    (10_000_000, "1Cr - 2Cr"),
    (20_000_000, "2Cr - 5Cr"),
    (50_000_000, "Above 5Cr"),
)


@dataclass(frozen=True)
class AnalyticsConfig:
    amenity_columns: Tuple[str, ...] = AMENITY_COLUMNS
    flag_columns: Tuple[Tuple[str, str], ...] = FLAG_COLUMNS
    base_rent_per_area: float = 25.0
    appreciation_rate: float = 7.0
    locality_multipliers: Tuple[Tuple[str, float], ...] = LOCALITY_RENT_MULTIPLIERS
    default_locality_multiplier: float = 1.0
    location_scores: Tuple[Tuple[str, int], ...] = LOCATION_SCORES
    default_location_score: int = 5
    luxury_keywords: Tuple[str, ...] = LUXURY_KEYWORDS
    risk_tiers: Tuple[Tuple[float, str], ...] = PRICE_PER_AREA_RISK_TIERS
    default_risk_level: str = "Low"
    possession_risk_levels: Tuple[Tuple[str, str], ...] = POSSESSION_RISK_LEVELS
    default_possession_risk: str = "High"
    growth_rate_tiers: Tuple[Tuple[float, float], ...] = GROWTH_RATE_TIERS
    default_growth_rate: float = 0.10
    composite_weights: Tuple[Tuple[str, float], ...] = COMPOSITE_WEIGHTS
    carpet_area_boundaries: Tuple[int, ...] = CARPET_AREA_BOUNDARIES
    price_ranges: Tuple[Tuple[float, str], ...] = PRICE_RANGE_BOUNDARIES
    projection_years: int = 5
    default_history_years: int = 5
    max_history_years: int = 30
    default_limit: int = 10
    max_limit: int = 100
    min_group_members: int = 3
    weights: Mapping[str, float] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        total = sum(weight for _, weight in self.composite_weights)
        if abs(total - 1.0) > 1e-9:
            raise ValueError(f"Composite weights must sum to 1.0, got {total}")
        object.__setattr__(self, "weights", dict(self.composite_weights))


DEFAULT_CONFIG = AnalyticsConfig()


def load_config(overrides: Mapping[str, object] | None = None) -> AnalyticsConfig:
    """Return the default config with the given field overrides applied."""
    if not overrides:
        return DEFAULT_CONFIG
    return replace(DEFAULT_CONFIG, **overrides)
