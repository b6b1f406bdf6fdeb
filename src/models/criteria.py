"""Search filter criteria built from the client's filter controls."""

from __future__ import annotations

from datetime import timedelta

from pydantic import Field, field_validator

from src.models.pet import (
    GeoPoint,
    PetSize,
    ReportKind,
    ReportStatus,
    Species,
    _CamelModel,
    _CaseInsensitiveEnum,
)

DEFAULT_SEARCH_RADIUS_KM = 5.0
SEARCH_RADIUS_PRESETS_KM = (5, 10, 25, 50)

# Inactive sentinels accepted from the client for enum filters.
_ANY_VALUES = {"", "any", "all"}


class DateWindow(_CaseInsensitiveEnum):
    LAST_24_HOURS = "24h"
    LAST_3_DAYS = "3days"
    LAST_WEEK = "week"
    LAST_MONTH = "month"
    ALL = "all"

    @property
    def span(self) -> timedelta | None:
        """Look-back span, or None when the window is unbounded."""

        return _WINDOW_SPANS.get(self)


_WINDOW_SPANS = {
    DateWindow.LAST_24_HOURS: timedelta(hours=24),
    DateWindow.LAST_3_DAYS: timedelta(days=3),
    DateWindow.LAST_WEEK: timedelta(days=7),
    DateWindow.LAST_MONTH: timedelta(days=30),
}


class FilterCriteria(_CamelModel):
    """Value object for one search interaction.

    ``None`` enum filters and empty text filters are inactive. The radius
    filter is active only when ``center`` is set.
    """

    report_type: ReportKind | None = None
    species: Species | None = Field(default=None, alias="petType")
    size: PetSize | None = None
    breed: str = ""
    color: str = ""
    query: str = ""
    center: GeoPoint | None = None
    radius_km: float = Field(default=DEFAULT_SEARCH_RADIUS_KM, gt=0)
    date_window: DateWindow = DateWindow.ALL
    status: ReportStatus | None = None
    urgent_only: bool = False

    @field_validator("report_type", "species", "size", "status", mode="before")
    @classmethod
    def _any_to_none(cls, value):
        if value is None:
            return None
        if isinstance(value, str) and value.strip().lower() in _ANY_VALUES:
            return None
        return value

    @field_validator("breed", "color", "query", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value

    @field_validator("date_window", mode="before")
    @classmethod
    def _default_window(cls, value):
        if value is None or (isinstance(value, str) and value.strip().lower() in _ANY_VALUES):
            return DateWindow.ALL
        return value
