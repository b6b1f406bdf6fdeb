"""
Unit tests for report, probe and criteria models.

These tests pin down the document shape exchanged with the mobile client
(camelCase keys, case-insensitive enums) and the normalization rules the
filter and scorer rely on.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from src.models.criteria import DEFAULT_SEARCH_RADIUS_KM, DateWindow, FilterCriteria
from src.models.pet import Gender, PetReport, PetSize, ReportKind, ReportStatus, Species
from src.models.probe import MatchProbe


class TestPetReport:
    """Test PetReport parsing."""

    def test_parses_camel_case_document(self, make_report):
        report = make_report()
        assert report.species is Species.DOG
        assert report.report_type is ReportKind.LOST
        assert report.size is PetSize.LARGE
        assert report.last_seen_location.address == "Central Park, New York"
        assert report.contact_info.phone is None

    def test_enums_case_insensitive(self, make_report):
        report = make_report(type="Dog", size="LARGE", reportType="Found")
        assert report.species is Species.DOG
        assert report.size is PetSize.LARGE
        assert report.report_type is ReportKind.FOUND

    def test_reunited_status_maps_to_resolved(self, make_report):
        assert make_report(status="reunited").status is ReportStatus.RESOLVED

    def test_unknown_species_rejected(self, make_report_doc):
        with pytest.raises(ValidationError):
            PetReport.model_validate(make_report_doc(type="rabbit"))

    def test_missing_color_rejected(self, make_report_doc):
        doc = make_report_doc()
        del doc["color"]
        with pytest.raises(ValidationError):
            PetReport.model_validate(doc)

    def test_blank_breed_becomes_none(self, make_report):
        assert make_report(breed="  ").breed is None

    def test_missing_gender_defaults_unknown(self, make_report):
        assert make_report(gender=None).gender is Gender.UNKNOWN

    def test_naive_timestamp_assumed_utc(self, make_report):
        report = make_report(dateReported="2024-06-01T12:00:00")
        assert report.date_reported == datetime(2024, 6, 1, 12, tzinfo=timezone.utc)

    def test_optional_fields_default(self, make_report):
        report = make_report(lastSeenLocation=None)
        assert report.last_seen_location is None
        assert report.reward is None
        assert report.age is None

    def test_to_document_round_trip_keys(self, make_report):
        doc = make_report(reward={"amount": 100}).to_document()
        assert doc["type"] == "dog"
        assert doc["reportType"] == "lost"
        assert doc["lastSeenLocation"]["latitude"] == pytest.approx(40.7128)
        assert doc["reward"]["amount"] == 100
        assert PetReport.model_validate(doc).id == "r1"


class TestMatchProbe:
    """Test MatchProbe normalization."""

    def test_blank_terms_dropped(self):
        probe = MatchProbe(
            species="dog",
            size="large",
            colors=["golden", " ", ""],
            features=[" collar "],
            confidence=0.5,
        )
        assert probe.colors == ["golden"]
        assert probe.features == ["collar"]
        assert probe.breeds == []

    def test_single_string_becomes_list(self):
        probe = MatchProbe(species="cat", size="small", breeds="Siamese", confidence=1)
        assert probe.breeds == ["Siamese"]

    @pytest.mark.parametrize("confidence", [-0.1, 1.01])
    def test_confidence_bounds(self, confidence):
        with pytest.raises(ValidationError):
            MatchProbe(species="dog", size="large", confidence=confidence)

    def test_camel_case_marks(self):
        probe = MatchProbe.model_validate(
            {
                "species": "dog",
                "size": "medium",
                "distinctiveMarks": ["white patch on chest"],
                "confidence": 0.9,
            }
        )
        assert probe.distinctive_marks == ["white patch on chest"]


class TestFilterCriteria:
    """Test FilterCriteria defaults and sentinels."""

    def test_defaults_inactive(self):
        criteria = FilterCriteria()
        assert criteria.report_type is None
        assert criteria.species is None
        assert criteria.size is None
        assert criteria.center is None
        assert criteria.date_window is DateWindow.ALL
        assert criteria.radius_km == DEFAULT_SEARCH_RADIUS_KM == 5

    @pytest.mark.parametrize("sentinel", ["any", "all", "", "ANY", None])
    def test_any_sentinels(self, sentinel):
        criteria = FilterCriteria.model_validate(
            {"reportType": sentinel, "petType": sentinel, "size": sentinel, "dateWindow": sentinel}
        )
        assert criteria.report_type is None
        assert criteria.species is None
        assert criteria.size is None
        assert criteria.date_window is DateWindow.ALL

    def test_client_field_names(self):
        criteria = FilterCriteria.model_validate(
            {
                "reportType": "lost",
                "petType": "cat",
                "center": {"latitude": 1, "longitude": 2},
                "radiusKm": 25,
                "dateWindow": "week",
            }
        )
        assert criteria.report_type is ReportKind.LOST
        assert criteria.species is Species.CAT
        assert criteria.radius_km == 25
        assert criteria.date_window is DateWindow.LAST_WEEK

    def test_non_positive_radius_rejected(self):
        with pytest.raises(ValidationError):
            FilterCriteria(radius_km=0)

    def test_window_spans(self):
        assert DateWindow.LAST_24_HOURS.span.total_seconds() == 24 * 3600
        assert DateWindow.LAST_3_DAYS.span.days == 3
        assert DateWindow.LAST_WEEK.span.days == 7
        assert DateWindow.LAST_MONTH.span.days == 30
        assert DateWindow.ALL.span is None
