"""Probe describing an unidentified pet, as inferred from a photo."""

from __future__ import annotations

from pydantic import Field, field_validator

from src.models.pet import PetSize, Species, _CamelModel


class MatchProbe(_CamelModel):
    """Attributes produced by the image analysis step.

    Breeds are ranked by likelihood. Blank entries are dropped from every
    list so they never count towards a proportional score.
    """

    species: Species
    breeds: list[str] = Field(default_factory=list)
    colors: list[str] = Field(default_factory=list)
    size: PetSize
    features: list[str] = Field(default_factory=list)
    distinctive_marks: list[str] = Field(default_factory=list)
    confidence: float = Field(ge=0.0, le=1.0)

    @field_validator("breeds", "colors", "features", "distinctive_marks", mode="before")
    @classmethod
    def _clean_terms(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        return [str(v).strip() for v in value if v is not None and str(v).strip()]
