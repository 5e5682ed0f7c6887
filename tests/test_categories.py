# tests/test_categories.py
from datetime import datetime


def test_create_category_returns_201_with_id(client):
    r = client.post("/categories", json={"name": "Books"})
    assert r.status_code == 201
    assert r.json() == {"id": 1, "name": "Books"}


def test_list_categories_empty(client):
    r = client.get("/categories")
    assert r.status_code == 200
    assert r.json() == []


def test_list_contains_each_created_category_once(client):
    created = [client.post("/categories", json={"name": n}).json() for n in ("Books", "Games", "Music")]
    listed = client.get("/categories").json()
    assert listed == created
    assert len({c["id"] for c in listed}) == 3


def test_identical_creates_make_distinct_records(client):
    first = client.post("/categories", json={"name": "Books"}).json()
    second = client.post("/categories", json={"name": "Books"}).json()
    assert first["id"] != second["id"]
    assert [c["name"] for c in client.get("/categories").json()] == ["Books", "Books"]


def test_blank_name_is_rejected(client):
    r = client.post("/categories", json={"name": "   "})
    assert r.status_code == 400
    body = r.json()
    assert body["status"] == 400
    assert body["error"] == "Bad Request"
    assert body["message"].startswith("name:")
    assert client.get("/categories").json() == []


def test_missing_name_is_rejected(client):
    r = client.post("/categories", json={})
    assert r.status_code == 400
    assert "name" in r.json()["message"]


def test_name_is_trimmed(client):
    r = client.post("/categories", json={"name": "  Books "})
    assert r.json()["name"] == "Books"


def test_unknown_route_uses_error_body(client):
    r = client.get("/nope")
    assert r.status_code == 404
    body = r.json()
    assert set(body) == {"timestamp", "status", "error", "message"}
    assert body["error"] == "Not Found"
    datetime.fromisoformat(body["timestamp"])
