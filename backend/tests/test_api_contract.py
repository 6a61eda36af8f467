from __future__ import annotations

import uuid

import pytest


ANY_ID = str(uuid.uuid4())

PROTECTED = [
    ("get", "/api/auth/me"),
    ("get", "/api/events"),
    ("get", f"/api/events/{ANY_ID}"),
    ("post", "/api/events"),
    ("put", f"/api/events/{ANY_ID}"),
    ("delete", f"/api/events/{ANY_ID}"),
    ("get", "/api/calendar"),
    ("get", "/api/calendar/week"),
    ("post", "/api/rsvp"),
    ("get", f"/api/rsvp/user/{ANY_ID}"),
    ("get", f"/api/rsvp/event/{ANY_ID}"),
    ("delete", f"/api/rsvp/{ANY_ID}"),
    ("get", "/api/subscriptions"),
    ("get", "/api/subscriptions/sectors"),
    ("get", f"/api/subscriptions/{ANY_ID}"),
    ("post", "/api/subscriptions"),
    ("put", f"/api/subscriptions/{ANY_ID}"),
    ("delete", f"/api/subscriptions/{ANY_ID}"),
]


@pytest.mark.parametrize("method,path", PROTECTED)
def test_protected_routes_require_a_session(client, method, path):
    kwargs = {"json": {}} if method in ("post", "put") else {}
    r = getattr(client, method)(path, **kwargs)
    assert r.status_code == 401
    assert r.json() == {"error": "Access token required"}


def test_openapi_lists_every_route_family(client):
    spec = client.get("/openapi.json").json()
    paths = set(spec["paths"])
    expected = {
        "/api/health",
        "/api/test-db",
        "/api/auth/signup",
        "/api/auth/login",
        "/api/auth/me",
        "/api/events",
        "/api/events/{event_id}",
        "/api/calendar",
        "/api/calendar/week",
        "/api/rsvp",
        "/api/rsvp/user/{user_id}",
        "/api/rsvp/event/{event_id}",
        "/api/rsvp/{event_id}",
        "/api/subscriptions",
        "/api/subscriptions/sectors",
        "/api/subscriptions/{sub_id}",
    }
    assert expected <= paths


def test_wire_names_are_camel_case(client):
    spec = client.get("/openapi.json").json()
    schemas = spec["components"]["schemas"]
    assert set(schemas["RsvpUpsertRequest"]["properties"]) == {"eventID", "status"}
    assert "hasMore" in schemas["Pagination"]["properties"]
    assert "eventsByDate" in schemas["CalendarRow"]["properties"]
