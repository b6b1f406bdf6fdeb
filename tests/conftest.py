"""
Pytest configuration and shared fixtures for all tests.

This file is automatically loaded by pytest and provides:
  - Test configuration (env vars) set before any src module is imported
  - Report and probe factories shared by unit and integration tests
  - Mock Firebase app for Firestore wrapper tests
"""

import os
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

# Set before collection so src.config picks these up on first import.
TEST_ENV = {
    "FIREBASE_PROJECT_ID": "test-project",
    "GOOGLE_APPLICATION_CREDENTIALS": "/config/test-serviceAccountKey.json",
    "OPENAI_API_KEY": "test-openai-key",
    "DEBUG": "True",
}
for _key, _value in TEST_ENV.items():
    os.environ.setdefault(_key, _value)

from src.models.pet import PetReport
from src.models.probe import MatchProbe

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
NYC = {"latitude": 40.7128, "longitude": -74.0060}


def _report_doc(report_id: str = "r1", **overrides) -> dict:
    """Build a camelCase report document with sensible defaults."""

    doc = {
        "id": report_id,
        "userId": "user-1",
        "name": "Buddy",
        "type": "dog",
        "breed": "Golden Retriever",
        "color": "Golden",
        "size": "large",
        "gender": "male",
        "description": "Friendly dog wearing a red collar",
        "photos": ["https://example.com/buddy.jpg"],
        "reportType": "lost",
        "status": "active",
        "isUrgent": False,
        "dateReported": NOW.isoformat(),
        "lastSeenLocation": {**NYC, "address": "Central Park, New York"},
        "contactInfo": {"name": "Alex", "email": "alex@example.com"},
        "tags": [],
    }
    doc.update(overrides)
    return doc


def _make_report(report_id: str = "r1", **overrides) -> PetReport:
    return PetReport.model_validate(_report_doc(report_id, **overrides))


@pytest.fixture
def make_report_doc():
    """Factory for camelCase report documents."""
    return _report_doc


@pytest.fixture
def make_report():
    """Factory for validated PetReport models."""
    return _make_report


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def golden_probe() -> MatchProbe:
    """Probe from the reference golden retriever scan."""
    return MatchProbe(
        species="dog",
        breeds=["Golden Retriever"],
        colors=["golden"],
        size="large",
        features=["collar"],
        confidence=0.85,
    )


@pytest.fixture
def mixed_reports() -> list[PetReport]:
    """Three lost and two found reports, interleaved."""
    return [
        _make_report("lost-1", reportType="lost"),
        _make_report("found-1", reportType="found"),
        _make_report("lost-2", reportType="lost", type="cat", breed="Siamese", color="cream"),
        _make_report("found-2", reportType="found", size="small"),
        _make_report(
            "lost-3",
            reportType="lost",
            dateReported=(NOW - timedelta(days=10)).isoformat(),
        ),
    ]


@pytest.fixture
def mock_firebase_app(monkeypatch):
    """
    Provide a mock Firebase app and Firestore client.

    The cached client in firestore_tools is reset so get_db() picks up the
    mock.
    """
    mock_app = MagicMock()
    mock_db = MagicMock()

    monkeypatch.setattr("firebase_admin._apps", [mock_app])
    monkeypatch.setattr("firebase_admin.firestore.client", MagicMock(return_value=mock_db))
    monkeypatch.setattr("src.tools.firestore_tools._db", None)

    return {"app": mock_app, "db": mock_db}
