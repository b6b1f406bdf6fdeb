"""Deterministic scoring utilities for photo-scan matching."""

from __future__ import annotations

import re
from collections.abc import Iterable

from pydantic import BaseModel, Field

from src.models.pet import PetReport
from src.models.probe import MatchProbe
from src.utils.logging_config import logger

SPECIES_POINTS = 30
BREED_POINTS = 20
COLOR_POINTS = 15
FEATURE_POINTS = 20
SIZE_POINTS = 15

MATCH_SCORE_THRESHOLD = 60.0
MAX_MATCH_RESULTS = 3

_COLOR_SPLIT = re.compile(r"[,\s]+")


class ScoreBreakdown(BaseModel):
    """Per-factor points before confidence scaling."""

    species: float = 0.0
    breed: float = 0.0
    color: float = 0.0
    feature: float = 0.0
    size: float = 0.0

    @property
    def raw_total(self) -> float:
        return self.species + self.breed + self.color + self.feature + self.size


class MatchResult(BaseModel):
    """A candidate report with its confidence-scaled score."""

    report: PetReport
    score: float = Field(description="Raw total scaled by probe confidence")
    breakdown: ScoreBreakdown


def _proportion(matched: int, total: int) -> float:
    if total == 0:
        return 0.0
    return matched / total


def score_report(probe: MatchProbe, report: PetReport) -> ScoreBreakdown:
    """Score one candidate against the probe (maximum 100 raw points)."""

    breakdown = ScoreBreakdown()

    if report.species == probe.species:
        breakdown.species = SPECIES_POINTS

    if report.breed:
        breed = report.breed.lower()
        if any(name.lower() in breed for name in probe.breeds):
            breakdown.breed = BREED_POINTS

    color_tokens = [t for t in _COLOR_SPLIT.split(report.color.lower()) if t]
    color_hits = sum(
        1
        for term in probe.colors
        if any(term.lower() in token for token in color_tokens)
    )
    breakdown.color = COLOR_POINTS * _proportion(color_hits, len(probe.colors))

    description = report.description.lower()
    feature_hits = sum(1 for f in probe.features if f.lower() in description)
    breakdown.feature = FEATURE_POINTS * _proportion(
        feature_hits, len(probe.features)
    )

    if report.size == probe.size:
        breakdown.size = SIZE_POINTS

    return breakdown


def rank_matches(
    probe: MatchProbe,
    candidates: Iterable[PetReport],
    threshold: float = MATCH_SCORE_THRESHOLD,
    limit: int = MAX_MATCH_RESULTS,
) -> list[MatchResult]:
    """Score candidates and keep the best ones above ``threshold``.

    Scores are strictly compared (a score equal to the threshold is
    dropped). Ties keep the candidates' input order.
    """

    scored: list[MatchResult] = []
    for report in candidates:
        breakdown = score_report(probe, report)
        score = breakdown.raw_total * probe.confidence
        if score > threshold:
            scored.append(
                MatchResult(report=report, score=score, breakdown=breakdown)
            )

    ranked = sorted(scored, key=lambda m: m.score, reverse=True)[:limit]
    logger.debug(
        "rank_matches accepted=%s returned=%s", len(scored), len(ranked)
    )
    return ranked


def score_matches(
    probe: MatchProbe,
    candidates: Iterable[PetReport],
    threshold: float = MATCH_SCORE_THRESHOLD,
    limit: int = MAX_MATCH_RESULTS,
) -> list[PetReport]:
    """Return at most ``limit`` reports scoring above ``threshold``, best first."""

    return [
        m.report
        for m in rank_matches(probe, candidates, threshold=threshold, limit=limit)
    ]
