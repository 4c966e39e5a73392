from __future__ import annotations

from fastapi.testclient import TestClient

from resourcehub.app import app

client = TestClient(app)


def _login_alice(c):
    c.post("/auth/login", json={"email": "alice@example.com", "password": "alice123"})


def _login_bob(c):
    c.post("/auth/login", json={"email": "bob@example.com", "password": "bob123"})


def test_all_tags():
    resp = client.get("/tags")
    assert resp.status_code == 200
    assert len(resp.json()) == 7


def test_predefined_tags_exclude_custom():
    names = [t["name"] for t in client.get("/tags/predefined").json()]
    assert "python" not in names
    assert "Mathematics" in names


def test_popular_tags_limit_and_order():
    tags = client.get("/tags/popular", params={"limit": 2}).json()
    assert len(tags) == 2
    assert tags[0]["name"] == "Machine Learning"


def test_search_tags():
    tags = client.get("/tags/search", params={"keyword": "prep"}).json()
    assert [t["name"] for t in tags] == ["Exam Prep"]


def test_tag_details():
    resp = client.get("/tags/3")
    assert resp.status_code == 200
    assert resp.json()["name"] == "Physics"
    assert client.get("/tags/999").status_code == 404


def test_create_tag_requires_login():
    c = TestClient(app)
    assert c.post("/tags", json={"name": "chemistry"}).status_code == 401


def test_create_tag():
    _login_alice(client)
    resp = client.post("/tags", json={"name": "  Chemistry ", "description": "Reactions"})
    assert resp.status_code == 201
    body = resp.json()
    assert body["name"] == "Chemistry"
    assert body["is_predefined"] is False
    assert body["usage_count"] == 0
    assert [t["name"] for t in client.get("/tags/mine").json()] == ["Chemistry"]


def test_create_tag_empty_name_is_400():
    _login_alice(client)
    assert client.post("/tags", json={"name": "   "}).status_code == 400


def test_create_duplicate_tag_is_409():
    _login_alice(client)
    assert client.post("/tags", json={"name": "MATHEMATICS"}).status_code == 409


def test_cannot_delete_predefined_tag():
    _login_alice(client)
    assert client.delete("/tags/1").status_code == 403


def test_only_creator_can_delete_tag():
    _login_alice(client)
    assert client.delete("/tags/7").status_code == 403
    _login_bob(client)
    resp = client.delete("/tags/7")
    assert resp.status_code == 200
    assert client.get("/tags/7").status_code == 404
