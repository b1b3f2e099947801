"""
HTTP tests for the check-in, history and site geofence endpoints.
"""

from datetime import datetime, timezone

from core.deps import get_current_user
from main import app


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_check_in_admitted(client, attendance):
    response = client.post(
        "/attendance/check-in",
        json={"payload": '{"siteId": "HQ"}', "latitude": 0.0, "longitude": 0.001},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["message"] == "Attendance recorded"
    assert body["data"]["siteId"] == "HQ"
    assert body["data"]["clientTimestamp"].endswith("Z")
    assert list(attendance.documents) == [body["data"]["id"]]


def test_check_in_out_of_range(client, attendance):
    response = client.post(
        "/attendance/check-in",
        json={"payload": "site:HQ", "latitude": 0.0, "longitude": 0.01},
    )

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["code"] == "out_of_range"
    assert detail["radiusMeters"] == 150
    assert attendance.documents == {}


def test_check_in_unknown_site(client):
    response = client.post(
        "/attendance/check-in",
        json={"payload": "site:GHOST", "latitude": 0.0, "longitude": 0.0},
    )

    assert response.status_code == 404
    assert response.json()["detail"]["message"] == "No site found for this QR."


def test_check_in_invalid_payload(client):
    response = client.post(
        "/attendance/check-in",
        json={"payload": "hello", "latitude": 0.0, "longitude": 0.0},
    )

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "invalid_payload"


def test_check_in_requires_position(client, sites):
    response = client.post("/attendance/check-in", json={"payload": "site:HQ"})

    assert response.status_code == 422
    assert sites.calls == []


def test_check_in_rejects_out_of_range_coordinates(client, sites):
    response = client.post(
        "/attendance/check-in",
        json={"payload": "site:HQ", "latitude": 120.0, "longitude": 0.0},
    )

    assert response.status_code == 422
    assert sites.calls == []


def test_check_in_requires_bearer_token(client):
    app.dependency_overrides.pop(get_current_user)

    response = client.post(
        "/attendance/check-in",
        json={"payload": "site:HQ", "latitude": 0.0, "longitude": 0.0},
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Missing or invalid Authorization header"


def test_history_lists_own_check_ins(client):
    for _ in range(2):
        client.post(
            "/attendance/check-in",
            json={"payload": "site:HQ", "latitude": 0.0, "longitude": 0.0005},
        )

    response = client.get("/attendance/history")

    assert response.status_code == 200
    records = response.json()
    assert len(records) == 2
    assert records[0]["siteName"] == "Head Office"
    assert records[0]["timestamp"].endswith("Z")


def test_history_limit_is_bounded(client):
    assert client.get("/attendance/history", params={"limit": 0}).status_code == 422
    assert client.get("/attendance/history", params={"limit": 101}).status_code == 422


def test_site_geofence(client):
    response = client.get("/sites/YARD/geofence")

    assert response.status_code == 200
    assert response.json() == {
        "siteId": "YARD",
        "name": "Yard",
        "latitude": 0.0,
        "longitude": 0.0,
        "radiusMeters": 150.0,
    }


def test_site_geofence_missing_and_misconfigured(client):
    assert client.get("/sites/GHOST/geofence").status_code == 404
    assert client.get("/sites/BROKEN/geofence").status_code == 409


def test_check_in_deeply_nested_payload_is_invalid(client, sites):
    response = client.post(
        "/attendance/check-in",
        json={"payload": "[" * 5000, "latitude": 0.0, "longitude": 0.0},
    )

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "invalid_payload"
    assert sites.calls == []


def test_history_with_null_site_id(client, attendance):
    attendance.documents["legacy"] = {
        "userId": "user-1",
        "siteId": None,
        "status": "check-in",
        "timestamp": datetime.now(timezone.utc),
    }

    response = client.get("/attendance/history")

    assert response.status_code == 200
    assert response.json()[0]["siteName"] == "Unknown Site"
