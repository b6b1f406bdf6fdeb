"""Firestore wrappers used by graph nodes.

These helpers centralize report queries, error handling, and logging so
graph nodes stay focused on orchestration logic.
"""

from __future__ import annotations

import os

import firebase_admin
from firebase_admin import credentials, firestore

from src.utils.errors import FirestoreUnavailableError
from src.utils.logging_config import logger

REPORTS_COLLECTION = "reports"
SCAN_RESULTS_COLLECTION = "scan_results"

_db: firestore.Client | None = None


def get_db() -> firestore.Client:
    """Get a Firestore client, initializing Firebase lazily."""
    global _db

    if _db is not None:
        return _db

    try:
        if not firebase_admin._apps:
            cred_path = os.environ.get("GOOGLE_APPLICATION_CREDENTIALS")
            if not cred_path:
                raise RuntimeError(
                    "GOOGLE_APPLICATION_CREDENTIALS is not set"
                )

            cred = credentials.Certificate(cred_path)
            firebase_admin.initialize_app(cred)

        _db = firestore.client()
        return _db

    except Exception as exc:
        logger.error("Failed to initialize Firestore: %s", exc)
        raise FirestoreUnavailableError(str(exc)) from exc


def _report_from_doc(doc) -> dict:
    """Return the document data with its id filled in."""

    data = doc.to_dict() or {}
    data.setdefault("id", doc.id)
    return data


def get_reports(
    report_kind: str | None = None,
    species: str | None = None,
    status: str | None = None,
    user_id: str | None = None,
    limit: int = 500,
) -> list[dict]:
    """Query report documents, newest first.

    Only equality filters run server-side; everything else is applied in
    memory by the report filter.
    """

    try:
        query = get_db().collection(REPORTS_COLLECTION)
        if report_kind:
            query = query.where("reportType", "==", report_kind)
        if species:
            query = query.where("type", "==", species)
        if status:
            query = query.where("status", "==", status)
        if user_id:
            query = query.where("userId", "==", user_id)
        query = query.order_by(
            "dateReported", direction=firestore.Query.DESCENDING
        ).limit(limit)

        return [_report_from_doc(doc) for doc in query.stream()]
    except Exception as exc:
        logger.error("Failed to query reports: %s", str(exc))
        raise FirestoreUnavailableError(str(exc)) from exc


def save_scan_result(user_id: str, probe: dict, matches: list[dict]) -> bool:
    """Record a photo scan and the reports it matched."""

    try:
        get_db().collection(SCAN_RESULTS_COLLECTION).add(
            {
                "userId": user_id,
                "probe": probe,
                "matches": [
                    {"reportId": m.get("id"), "score": m.get("score")}
                    for m in matches
                ],
                "createdAt": firestore.SERVER_TIMESTAMP,
            }
        )
        return True
    except Exception as exc:
        logger.error("Failed to save scan result: %s", str(exc))
        raise FirestoreUnavailableError(str(exc)) from exc
