"""
Coerce raw tabular rows (string cells) into typed PropertyRecord objects.

The normalizer never raises on bad cells: anything that cannot be read is
treated as absent and left for the downstream stages to exclude.
"""
from __future__ import annotations

import re
from math import isfinite
from typing import Dict, FrozenSet, Mapping

import numpy as np

from .config import DEFAULT_CONFIG, AnalyticsConfig
from .models import PropertyRecord

ABSENT_MARKERS = ("", "NA")
TRUE_VALUES = ("1", "Y", "true")
AMENITY_PRESENT_VALUES = ("1", "Y")

_NON_NUMERIC = re.compile(r"[^0-9.]")
_NON_NUMERIC_SIGNED = re.compile(r"[^0-9.\-]")

TEXT_COLUMNS = {
    "id": "ID",
    "project_name": "Project Name",
    "developer": "Developer",
    "property_type": "Type of Property",
    "city": "City",
    "area_name": "Area Name",
    "location": "Location",
    "locality": "Locality",
    "landmark": "Landmark",
    "possession_status": "Possession Status",
    "furnished_type": "furnished Type",
    "transaction_type": "Transaction Type",
    "property_uniqueness": "Property Uniqueness",
    "facing": "Facing",
    "amenities_facing": "Amenities Facing",
}

NUMBER_COLUMNS = {
    "price": "Price",
    "sqft_price": "sqft Price ",
    "booking_amount": "Booking Amount",
    "maintenance_charges": "Maintenance Charges",
    "carpet_area": "Carpet Area",
    "covered_area": "Covered Area",
    "land_area": "Land Area / Covered Area",
}

INTEGER_COLUMNS = {
    "bedrooms": "bedroom",
    "bathrooms": "Bathroom",
    "balconies": "balconies",
    "floors": "floors",
}

COORDINATE_COLUMNS = {
    "latitude": ("latitude", "Latitude"),
    "longitude": ("longitude", "Longitude"),
}


def parse_number(value, signed: bool = False) -> float | None:
    """
    Read a numeric cell, stripping currency symbols, separators and stray text.

    "NA", empty cells and anything that does not parse to a finite number
    come back as None rather than zero.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, np.number)):
        number = float(value)
        return number if isfinite(number) else None

    text = str(value).strip()
    if text in ABSENT_MARKERS:
        return None
    pattern = _NON_NUMERIC_SIGNED if signed else _NON_NUMERIC
    cleaned = pattern.sub("", text)
    if signed and "-" in cleaned[1:]:
        return None
    try:
        number = float(cleaned)
    except ValueError:
        return None
    return number if isfinite(number) else None


def parse_integer(value) -> int | None:
    number = parse_number(value)
    return int(number) if number is not None else None


def parse_boolean(value) -> bool:
    # One-sided mapping: only the listed encodings mean True.
    return isinstance(value, str) and value in TRUE_VALUES


def parse_text(value) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_amenities(row: Mapping, config: AnalyticsConfig = DEFAULT_CONFIG) -> FrozenSet[str]:
    return frozenset(
        column for column in config.amenity_columns if row.get(column) in AMENITY_PRESENT_VALUES
    )


def _first_coordinate(row: Mapping, columns) -> float | None:
    for column in columns:
        value = parse_number(row.get(column), signed=True)
        if value is not None:
            return value
    return None


def normalize_record(row: Mapping, config: AnalyticsConfig = DEFAULT_CONFIG) -> PropertyRecord:
    """Map one raw row onto a PropertyRecord. Pure and deterministic."""
    fields: Dict = {name: parse_text(row.get(column)) for name, column in TEXT_COLUMNS.items()}
    fields.update({name: parse_number(row.get(column)) for name, column in NUMBER_COLUMNS.items()})
    fields.update({name: parse_integer(row.get(column)) for name, column in INTEGER_COLUMNS.items()})
    fields.update(
        {name: _first_coordinate(row, columns) for name, columns in COORDINATE_COLUMNS.items()}
    )
    fields.update({name: parse_boolean(row.get(column)) for name, column in config.flag_columns})

    title = parse_text(row.get("Property"))
    if title is None and fields["bedrooms"] is not None:
        title = f"{fields['bedrooms']} BHK Flat"
    fields["title"] = title
    fields["amenities"] = parse_amenities(row, config)
    return PropertyRecord(**fields)


def _format_number(value: float | int | None) -> str:
    if value is None:
        return ""
    if isinstance(value, int):
        return str(value)
    return np.format_float_positional(value, trim="-")


def serialize_record(record: PropertyRecord, config: AnalyticsConfig = DEFAULT_CONFIG) -> Dict[str, str]:
    """
    Write a record back into raw row form.

    Feeding the result to normalize_record yields an equal record.
    """
    row: Dict[str, str] = {"Property": record.title or ""}
    for name, column in TEXT_COLUMNS.items():
        row[column] = getattr(record, name) or ""
    for name, column in {**NUMBER_COLUMNS, **INTEGER_COLUMNS}.items():
        row[column] = _format_number(getattr(record, name))
    for name, columns in COORDINATE_COLUMNS.items():
        row[columns[0]] = _format_number(getattr(record, name))

    for column in config.amenity_columns:
        row[column] = "Y" if column in record.amenities else ""
    for name, column in config.flag_columns:
        if getattr(record, name) and column not in record.amenities:
            row[column] = "true"
    return row
