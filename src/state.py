"""Shared LangGraph state definitions.

All graph states are TypedDicts so state is explicit, serializable, and
consistent across graph nodes. Reports travel as camelCase JSON documents;
nodes parse them into models only for the duration of a computation.
"""

from __future__ import annotations

from typing import TypedDict

JsonDict = dict[str, object]
JsonList = list[JsonDict]


class SearchState(TypedDict, total=False):
    """State for the report search graph."""

    # Raw filter values from the client (camelCase keys).
    criteria: JsonDict
    # Optional ordering applied after filtering: "recent" or absent.
    sort: str
    # Caller-supplied reports; when present Firestore is not queried.
    reports: JsonList
    # Reports surviving the filter.
    results: JsonList
    # Error string if any node fails.
    error: str
    # Response metadata for observability.
    response_metadata: JsonDict


class ScanMatchState(TypedDict, total=False):
    """State for the photo scan matching graph."""

    # Requesting user; scan results are saved only when set.
    user_id: str
    # Photo to analyze when no probe is supplied.
    image_url: str
    # Precomputed probe (skips photo analysis).
    probe: JsonDict
    # Restrict candidates to "lost" or "found" reports.
    report_type: str
    # Caller-supplied candidates; when present Firestore is not queried.
    reports: JsonList
    # Candidates considered for scoring.
    candidates: JsonList
    # Ranked matches: report document plus score and breakdown.
    matches: JsonList
    # Error string if any node fails.
    error: str
    # Response metadata for observability.
    response_metadata: JsonDict


class HomeFeedState(TypedDict, total=False):
    """State for the home feed graph."""

    # User position as {"latitude": ..., "longitude": ...}.
    location: JsonDict
    # Override of the "near me" radius in kilometers.
    radius_km: float
    # Caller-supplied reports; when present Firestore is not queried.
    reports: JsonList
    # Section name -> report documents.
    sections: dict[str, JsonList]
    # Error string if any node fails.
    error: str
    # Response metadata for observability.
    response_metadata: JsonDict
