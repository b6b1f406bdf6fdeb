"""Home feed sections built from the report filter."""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, Field

from src.models.criteria import FilterCriteria
from src.models.pet import GeoPoint, PetReport, ReportKind, ReportStatus
from src.tools.filter_tools import filter_reports, sort_by_recent
from src.utils.geo import NEAR_ME_RADIUS_KM


class HomeFeed(BaseModel):
    urgent: list[PetReport] = Field(default_factory=list)
    recent: list[PetReport] = Field(default_factory=list)
    found: list[PetReport] = Field(default_factory=list)
    reunited: list[PetReport] = Field(default_factory=list)


def _open_nearby(
    reports: Sequence[PetReport], reference: GeoPoint, near_km: float
) -> list[PetReport]:
    """Active reports whose last-seen location is near the reference."""

    criteria = FilterCriteria(
        center=reference, radius_km=near_km, status=ReportStatus.ACTIVE
    )
    return filter_reports(reports, criteria)


def build_home_feed(
    reports: Sequence[PetReport],
    reference: GeoPoint | None,
    near_km: float = NEAR_ME_RADIUS_KM,
) -> HomeFeed:
    """Split reports into the home screen sections.

    Location-based sections stay empty until the user's position is known.
    Reunited cases are listed regardless of distance.
    """

    reunited = filter_reports(reports, FilterCriteria(status=ReportStatus.RESOLVED))
    if reference is None:
        return HomeFeed(reunited=reunited)

    nearby = _open_nearby(reports, reference, near_km)
    return HomeFeed(
        urgent=filter_reports(nearby, FilterCriteria(urgent_only=True)),
        recent=sort_by_recent(nearby),
        found=filter_reports(nearby, FilterCriteria(report_type=ReportKind.FOUND)),
        reunited=reunited,
    )
