"""Deterministic report filtering for search and feed views.

Each active criterion is an independent predicate and a report survives only
when all of them pass. Missing optional data (no breed, no location) makes
the relevant predicate fail rather than raise.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime, timezone

from src.models.criteria import FilterCriteria
from src.models.pet import PetReport
from src.utils.geo import distance_km
from src.utils.logging_config import logger

# Free-text search stays inactive until the query is longer than this.
MIN_QUERY_LENGTH = 2

Predicate = Callable[[PetReport], bool]


def tokenize(text: str) -> list[str]:
    """Lowercase whitespace tokens of ``text``."""

    return text.lower().split()


def contains_all_tokens(haystack: str | None, tokens: Iterable[str]) -> bool:
    """True when every token is a case-insensitive substring of ``haystack``."""

    if haystack is None:
        return False
    lowered = haystack.lower()
    return all(token in lowered for token in tokens)


def search_haystack(report: PetReport) -> str:
    """Concatenate the free-text searchable fields of a report."""

    address = report.last_seen_location.address if report.last_seen_location else None
    parts = [report.name, report.breed, report.color, report.description, address]
    return " ".join(part for part in parts if part).lower()


def date_cutoff(criteria: FilterCriteria, now: datetime) -> datetime | None:
    """Earliest accepted report timestamp, or None for an unbounded window."""

    span = criteria.date_window.span
    if span is None:
        return None
    return now - span


def build_predicates(
    criteria: FilterCriteria, now: datetime | None = None
) -> list[Predicate]:
    """Return one predicate per active criterion."""

    predicates: list[Predicate] = []

    if criteria.report_type is not None:
        kind = criteria.report_type
        predicates.append(lambda r: r.report_type == kind)

    if criteria.species is not None:
        species = criteria.species
        predicates.append(lambda r: r.species == species)

    if criteria.size is not None:
        size = criteria.size
        predicates.append(lambda r: r.size == size)

    if criteria.status is not None:
        status = criteria.status
        predicates.append(lambda r: r.status == status)

    if criteria.urgent_only:
        predicates.append(lambda r: r.is_urgent)

    breed_tokens = tokenize(criteria.breed)
    if breed_tokens:
        predicates.append(lambda r: contains_all_tokens(r.breed, breed_tokens))

    color_tokens = tokenize(criteria.color)
    if color_tokens:
        predicates.append(lambda r: contains_all_tokens(r.color, color_tokens))

    if criteria.center is not None:
        center = criteria.center
        radius_km = criteria.radius_km

        def within_radius(report: PetReport) -> bool:
            location = report.last_seen_location
            if location is None:
                return False
            return distance_km(location, center) <= radius_km

        predicates.append(within_radius)

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    cutoff = date_cutoff(criteria, now)
    if cutoff is not None:
        predicates.append(lambda r: r.date_reported >= cutoff)

    query = criteria.query.strip()
    if len(query) > MIN_QUERY_LENGTH:
        query_tokens = tokenize(query)
        predicates.append(
            lambda r: contains_all_tokens(search_haystack(r), query_tokens)
        )

    return predicates


def filter_reports(
    reports: Iterable[PetReport],
    criteria: FilterCriteria,
    now: datetime | None = None,
) -> list[PetReport]:
    """Return reports satisfying every active criterion, in input order.

    Args:
        reports: Candidate reports.
        criteria: Filter values; inactive values are skipped.
        now: Reference instant for the date window. Defaults to the current
            UTC time.

    Returns:
        The surviving reports. The input is never reordered or mutated.
    """

    predicates = build_predicates(criteria, now=now)
    filtered = [r for r in reports if all(p(r) for p in predicates)]
    logger.debug(
        "filter_reports active=%s result=%s", len(predicates), len(filtered)
    )
    return filtered


def sort_by_recent(reports: Iterable[PetReport]) -> list[PetReport]:
    """Sort by report creation time, newest first. Ties keep input order."""

    return sorted(reports, key=lambda r: r.date_reported, reverse=True)
