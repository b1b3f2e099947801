from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from core.deps import get_attendance_store, get_current_user, get_site_lookup
from main import app
from models.site import SiteRecord
from services.check_in_service import CheckInService


class FakeSiteLookup:
    """In-memory stand-in for the `sites` collection."""

    def __init__(self, documents=None):
        self.documents = dict(documents or {})
        self.calls = []

    def get_site(self, site_id):
        self.calls.append(site_id)
        if site_id not in self.documents:
            return None
        return SiteRecord.from_document(site_id, self.documents[site_id])


class FakeAttendanceStore:
    """In-memory stand-in for the `attendance` collection."""

    def __init__(self):
        self.documents = {}

    def add(self, event):
        doc_id = f"att-{len(self.documents) + 1}"
        document = event.to_document()
        document["timestamp"] = datetime.now(timezone.utc)
        self.documents[doc_id] = document
        return doc_id

    def list_for_user(self, user_id, limit):
        mine = [(doc_id, data) for doc_id, data in self.documents.items() if data["userId"] == user_id]
        mine.sort(key=lambda item: item[1]["timestamp"], reverse=True)
        return mine[:limit]


TEST_USER = {"uid": "user-1", "email": "builder@example.com", "name": "Builder"}


@pytest.fixture
def sites():
    return FakeSiteLookup(
        {
            "HQ": {"name": "Head Office", "location": {"lat": 0.0, "lng": 0.0}, "geofenceRadiusMeters": 150},
            "YARD": {"name": "Yard", "location": {"lat": 0.0, "lng": 0.0}},
            "BROKEN": {"name": "Broken", "location": {"lat": "bad", "lng": 0.0}},
        }
    )


@pytest.fixture
def attendance():
    return FakeAttendanceStore()


@pytest.fixture(autouse=True)
def clear_in_flight():
    CheckInService._in_flight.clear()
    yield
    CheckInService._in_flight.clear()


@pytest.fixture
def client(sites, attendance):
    app.dependency_overrides[get_current_user] = lambda: TEST_USER
    app.dependency_overrides[get_site_lookup] = lambda: sites
    app.dependency_overrides[get_attendance_store] = lambda: attendance
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
