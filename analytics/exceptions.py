"""
Exceptions raised by the analytics engine and its record source.
"""
from __future__ import annotations


class AnalyticsError(Exception):
    """Base class for analytics failures surfaced to API callers."""

    status_code = 500
    default_detail = "Analytics computation failed."

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class DataUnavailableError(AnalyticsError):
    """The property records could not be loaded from the external source."""

    status_code = 503
    default_detail = "Property data is currently unavailable."


class PropertyNotFoundError(AnalyticsError):
    status_code = 404
    default_detail = "Requested property is missing in the data."

    def __init__(self, property_id: str):
        self.property_id = property_id
        super().__init__(f"Property '{property_id}' is missing in the data.")


class ImportFailedError(AnalyticsError):
    """A bulk import could not build a new snapshot; the previous one stays live."""

    status_code = 400
    default_detail = "Property import failed."
