from __future__ import annotations

from fastapi.testclient import TestClient

from resourcehub.analytics.events import get_events
from resourcehub.app import app

client = TestClient(app)


def _login_user(c):
    c.post("/auth/login", json={"email": "alice@example.com", "password": "alice123"})


def _login_admin(c):
    c.post("/auth/login", json={"email": "admin@example.com", "password": "admin123"})


def test_analytics_returns_empty_initially():
    _login_admin(client)
    resp = client.get("/analytics")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_searches"] == 0
    assert body["avg_response_time_ms"] == 0.0
    assert body["related_requests"]["total"] == 0


def test_analytics_tracks_search():
    client.get("/resources/search", params={"keyword": "Notes"})
    _login_admin(client)
    body = client.get("/analytics").json()
    assert body["total_searches"] == 1
    assert any(k["name"] == "notes" for k in body["top_keywords"])


def test_analytics_filter_usage():
    client.get("/resources/search", params={"keyword": "a", "tags": "physics"})
    client.get("/resources/search", params={"category": "Mathematics"})
    _login_admin(client)
    body = client.get("/analytics").json()
    assert body["filter_usage"] == {"keyword": 50.0, "category": 50.0, "tags": 50.0}
    assert body["top_tags"] == [{"name": "physics", "count": 1}]


def test_analytics_tracks_related_fallback():
    client.get("/resources/6/related")
    client.get("/resources/1/related")
    _login_admin(client)
    body = client.get("/analytics").json()
    assert body["related_requests"] == {
        "total": 2,
        "popularity_fallback": 1,
        "fallback_rate": 50.0,
    }


def test_failed_related_requests_are_not_recorded():
    client.get("/resources/999/related")
    client.get("/resources/1/related", params={"limit": 0})
    assert get_events("related") == []


def test_analytics_engagement_summary():
    _login_user(client)
    client.post("/resources/1/comments", json={"content": "Nice"})
    client.post("/resources/1/favorite")
    _login_admin(client)
    engagement = client.get("/analytics").json()["engagement"]
    assert engagement == {"ratings": 6, "comments": 1, "favorites": 1}


def test_blank_criteria_are_not_counted_as_filters():
    client.get("/resources/search", params={"keyword": "   ", "category": " ", "tags": "  "})
    client.get("/resources/search", params={"keyword": "notes"})
    _login_admin(client)
    body = client.get("/analytics").json()
    assert body["total_searches"] == 2
    assert body["filter_usage"] == {"keyword": 50.0, "category": 0.0, "tags": 0.0}
    assert body["top_keywords"] == [{"name": "notes", "count": 1}]
    assert body["top_categories"] == []
    assert body["top_tags"] == []
