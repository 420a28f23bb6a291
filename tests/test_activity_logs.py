from datetime import datetime, timedelta, timezone

import pytest
from starlette.requests import Request

from app.activity import client_ip, log_user_activity
from app.config import settings
from app.schemas import ActivityLogIn


def make_request(headers: dict[str, str]) -> Request:
    raw = [(name.lower().encode(), value.encode()) for name, value in headers.items()]
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw})


@pytest.mark.parametrize(
    "headers, expected",
    [
        ({"X-Forwarded-For": "203.0.113.5, 10.0.0.1"}, "203.0.113.5"),
        ({"X-Real-IP": "198.51.100.2", "X-Client-IP": "192.0.2.9"}, "198.51.100.2"),
        ({"X-Client-IP": "192.0.2.9"}, "192.0.2.9"),
        ({}, None),
    ],
)
def test_client_ip_resolution(headers, expected):
    assert client_ip(make_request(headers)) == expected


@pytest.mark.parametrize("headers", [{}, {"Authorization": "Basic YWRtaW46YWRtaW4="}, {"Authorization": "Bearer junk"}])
def test_activity_logs_require_an_admin_token(client, headers):
    resp = client.get("/activity-logs", headers=headers)
    assert resp.status_code == 401
    assert resp.json() == {"error": "Unauthorized. Admin access required."}


def test_mutations_by_an_authenticated_caller_are_audited(client, auth_headers):
    road = client.post("/roads", json={"name": "Lake Road"}, headers=auth_headers).json()
    client.post("/roads", json={"name": "Anonymous Road"})

    resp = client.get("/activity-logs", params={"action_type": "create"}, headers=auth_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["count"] == 1
    entry = body["data"][0]
    assert entry["username"] == "admin"
    assert entry["resource_type"] == "road"
    assert entry["resource_id"] == str(road["id"])
    assert entry["description"] == "Created road Lake Road"
    assert body["filters"]["action_type"] == "create"
    assert body["filters"]["limit"] == 50


def test_logs_are_newest_first_and_paginated(client, auth_headers):
    for name in ("North Road", "South Road", "East Road"):
        client.post("/roads", json={"name": name}, headers=auth_headers)

    resp = client.get("/activity-logs", params={"limit": 2, "offset": 1}, headers=auth_headers)
    body = resp.json()
    assert body["count"] == 3
    assert [e["description"] for e in body["data"]] == ["Created road South Road", "Created road North Road"]


def test_date_filters_are_inclusive_bounds(client, auth_headers):
    client.post("/roads", json={"name": "Dated Road"}, headers=auth_headers)

    past = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
    future = (datetime.now(timezone.utc) + timedelta(days=1)).isoformat()

    within = client.get("/activity-logs", params={"start_date": past, "end_date": future}, headers=auth_headers)
    assert within.json()["count"] == 1

    after = client.get("/activity-logs", params={"start_date": future}, headers=auth_headers)
    assert after.json()["count"] == 0


def test_recent_logins(client, auth_headers):
    client.post("/auth/login", json={"username": "admin", "password": "wrong"})
    client.post("/auth/login", json={"username": "admin", "password": "admin"})
    client.post("/roads", json={"name": "Noise Road"}, headers=auth_headers)

    resp = client.get("/activity-logs", params={"recent_logins": "true", "limit": 10}, headers=auth_headers)
    body = resp.json()
    assert body["count"] == 2
    assert body["message"] == "Recent login activities retrieved successfully"
    assert [e["metadata"]["success"] for e in body["data"]] == [True, False]


def test_manual_log_entry(client, auth_headers):
    entry = {"username": "admin", "action_type": "export", "resource_type": "members", "description": "CSV export"}
    resp = client.post("/activity-logs", json=entry, headers=auth_headers)
    assert resp.status_code == 201

    logs = client.get("/activity-logs", params={"action_type": "export"}, headers=auth_headers).json()
    assert logs["data"][0]["description"] == "CSV export"

    bad = client.post("/activity-logs", json={**entry, "action_type": "explode"}, headers=auth_headers)
    assert bad.status_code == 400


def test_failed_audit_write_is_swallowed(client):
    class BrokenSessionmaker:
        def __call__(self):
            raise RuntimeError("store unavailable")

    entry = ActivityLogIn(username="admin", action_type="view")
    assert client.portal.call(log_user_activity, BrokenSessionmaker(), entry) is False


def test_writes_can_require_a_token(client, auth_headers, monkeypatch):
    monkeypatch.setattr(settings, "REQUIRE_AUTH_FOR_WRITES", True)

    assert client.get("/roads").status_code == 200
    assert client.post("/roads", json={"name": "Guarded Road"}).status_code == 401
    assert client.delete("/roads/4").status_code == 401
    assert client.post("/roads", json={"name": "Guarded Road"}, headers=auth_headers).status_code == 201


def test_date_filters_respect_utc_offsets(client, auth_headers):
    client.post("/roads", json={"name": "Offset Road"}, headers=auth_headers)

    colombo = timezone(timedelta(hours=5, minutes=30))
    now = datetime.now(timezone.utc)
    start = (now - timedelta(minutes=5)).astimezone(colombo).isoformat()
    end = (now + timedelta(minutes=5)).astimezone(colombo).isoformat()

    resp = client.get("/activity-logs", params={"start_date": start, "end_date": end}, headers=auth_headers)
    assert resp.json()["count"] == 1

    later = (now + timedelta(minutes=5)).astimezone(colombo).isoformat()
    resp = client.get("/activity-logs", params={"start_date": later}, headers=auth_headers)
    assert resp.json()["count"] == 0
