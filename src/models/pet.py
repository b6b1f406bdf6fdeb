"""Pet report entities shared by filtering, scoring and the report store.

Documents are exchanged in camelCase (as stored by the mobile client) while
attributes are snake_case. Enum values are matched case-insensitively.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _CaseInsensitiveEnum(str, Enum):
    """String enum that accepts any casing of its values."""

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None


class Species(_CaseInsensitiveEnum):
    DOG = "dog"
    CAT = "cat"


class PetSize(_CaseInsensitiveEnum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class Gender(_CaseInsensitiveEnum):
    MALE = "male"
    FEMALE = "female"
    UNKNOWN = "unknown"


class AgeCategory(_CaseInsensitiveEnum):
    BABY = "baby"
    ADULT = "adult"
    SENIOR = "senior"


class ReportKind(_CaseInsensitiveEnum):
    LOST = "lost"
    FOUND = "found"


class ReportStatus(_CaseInsensitiveEnum):
    ACTIVE = "active"
    RESOLVED = "resolved"

    @classmethod
    def _missing_(cls, value):
        # Older documents mark closed cases as "reunited".
        if isinstance(value, str) and value.strip().lower() == "reunited":
            return cls.RESOLVED
        return super()._missing_(value)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GeoPoint(_CamelModel):
    """Latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float


class Location(GeoPoint):
    """Last-seen location with a human-readable address."""

    address: str = ""


class ContactInfo(_CamelModel):
    name: str
    email: str
    phone: str | None = None


class Reward(_CamelModel):
    amount: float = Field(ge=0)
    description: str | None = None


class PetReport(_CamelModel):
    """One lost/found pet case.

    Color and description are always strings so matching code can read them
    without null checks. Breed, location and reward are optional; filters
    treat a missing value as "does not match".
    """

    id: str
    user_id: str
    name: str | None = None
    species: Species = Field(alias="type")
    breed: str | None = None
    color: str
    size: PetSize
    gender: Gender = Gender.UNKNOWN
    age: AgeCategory | None = None
    description: str = ""
    photos: list[str] = Field(default_factory=list)
    report_type: ReportKind
    status: ReportStatus = ReportStatus.ACTIVE
    is_urgent: bool = False
    date_reported: datetime
    last_seen_date: datetime | None = None
    last_seen_location: Location | None = None
    contact_info: ContactInfo
    tags: list[str] = Field(default_factory=list)
    reward: Reward | None = None

    @field_validator("breed", "name", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("gender", mode="before")
    @classmethod
    def _default_gender(cls, value):
        return value or Gender.UNKNOWN

    @field_validator("date_reported", "last_seen_date")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def to_document(self) -> dict:
        """Serialize to the camelCase JSON document shape."""

        return self.model_dump(mode="json", by_alias=True)
