"""
Typed records flowing through the analytics pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional

RISK_LEVELS = ("Low", "Medium", "High")


@dataclass(frozen=True)
class PropertyRecord:
    id: Optional[str] = None
    title: Optional[str] = None
    project_name: Optional[str] = None
    developer: Optional[str] = None
    property_type: Optional[str] = None

    price: Optional[float] = None
    sqft_price: Optional[float] = None
    booking_amount: Optional[float] = None
    maintenance_charges: Optional[float] = None

    carpet_area: Optional[float] = None
    covered_area: Optional[float] = None
    land_area: Optional[float] = None

    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    balconies: Optional[int] = None
    floors: Optional[int] = None

    city: Optional[str] = None
    area_name: Optional[str] = None
    location: Optional[str] = None
    locality: Optional[str] = None
    landmark: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    amenities: FrozenSet[str] = frozenset()
    power_backup: bool = False
    lift: bool = False
    parking: bool = False
    security: bool = False
    water_storage: bool = False
    swimming_pool: bool = False
    gymnasium: bool = False
    park: bool = False
    club_house: bool = False
    rain_water_harvesting: bool = False

    possession_status: Optional[str] = None
    furnished_type: Optional[str] = None
    transaction_type: Optional[str] = None
    property_uniqueness: Optional[str] = None
    facing: Optional[str] = None
    amenities_facing: Optional[str] = None

    @property
    def location_name(self) -> Optional[str]:
        return self.area_name

    @property
    def has_valid_price(self) -> bool:
        return self.price is not None and self.price > 0

    @property
    def effective_area(self) -> Optional[float]:
        """Carpet area, falling back to covered area when carpet area is unusable."""
        for area in (self.carpet_area, self.covered_area):
            if area is not None and area > 0:
                return area
        return None

    @property
    def price_per_area(self) -> Optional[float]:
        area = self.effective_area
        if not self.has_valid_price or area is None:
            return None
        return self.price / area

    def to_dict(self, amenity_order: tuple = ()) -> Dict:
        order = {name: idx for idx, name in enumerate(amenity_order)}
        return {
            "id": self.id,
            "title": self.title,
            "projectName": self.project_name,
            "developer": self.developer,
            "propertyType": self.property_type,
            "price": self.price,
            "carpetArea": self.carpet_area,
            "coveredArea": self.covered_area,
            "landArea": self.land_area,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "balconies": self.balconies,
            "floors": self.floors,
            "city": self.city,
            "areaName": self.area_name,
            "locationName": self.location_name,
            "locality": self.locality,
            "landmark": self.landmark,
            "coordinates": {"lat": self.latitude, "lng": self.longitude},
            "amenities": sorted(self.amenities, key=lambda name: (order.get(name, len(order)), name)),
            "possessionStatus": self.possession_status,
            "maintenanceCharges": self.maintenance_charges,
        }


@dataclass(frozen=True)
class DerivedMetrics:
    estimated_monthly_rent: float
    estimated_annual_rent: float
    roi: float
    yield_percent: float
    amenities_count: int
    luxury_factor: int
    location_score: int
    composite_score: float
    risk_level: str
    price_per_area: Optional[float]
    growth_rate: float
    payback_years: Optional[float] = None

    def to_dict(self) -> Dict:
        """Round at the output boundary: currency to whole units, ratios to 2 places."""
        return {
            "estimatedMonthlyRent": round(self.estimated_monthly_rent),
            "estimatedAnnualRent": round(self.estimated_annual_rent),
            "roi": round(self.roi, 2),
            "yieldPercent": round(self.yield_percent, 2),
            "amenitiesCount": self.amenities_count,
            "luxuryFactor": self.luxury_factor,
            "locationScore": self.location_score,
            "compositeScore": round(self.composite_score, 2),
            "riskLevel": self.risk_level,
            "pricePerArea": round(self.price_per_area) if self.price_per_area is not None else None,
            "growthRate": round(self.growth_rate * 100, 2),
            "paybackYears": round(self.payback_years, 2) if self.payback_years is not None else None,
        }


@dataclass(frozen=True)
class ScoredProperty:
    record: PropertyRecord
    metrics: DerivedMetrics

    def to_dict(self, amenity_order: tuple = ()) -> Dict:
        payload = self.record.to_dict(amenity_order)
        payload.update(self.metrics.to_dict())
        return payload


@dataclass
class GroupSummary:
    key: str
    count: int = 0
    valid_count: int = 0
    average_price: float = 0.0
    average_price_per_area: float = 0.0
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    total_price: float = 0.0
    amenities_score: int = 0
    average_roi: float = 0.0
    average_yield: float = 0.0
    average_composite_score: float = 0.0
    distinct: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "key": self.key,
            "count": self.count,
            "validCount": self.valid_count,
            "averagePrice": round(self.average_price),
            "averagePricePerArea": round(self.average_price_per_area),
            "minPrice": round(self.min_price) if self.min_price is not None else None,
            "maxPrice": round(self.max_price) if self.max_price is not None else None,
            "totalPrice": round(self.total_price),
            "amenitiesScore": self.amenities_score,
            "averageRoi": round(self.average_roi, 2),
            "averageYield": round(self.average_yield, 2),
            "averageCompositeScore": round(self.average_composite_score, 2),
            "distinct": list(self.distinct),
        }


@dataclass(frozen=True)
class PricePoint:
    year: int
    price: float
    source: str = "estimated"

    def to_dict(self) -> Dict:
        return {"year": self.year, "price": round(self.price), "source": self.source}
