# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from app.database import MemoryStore, SQLiteStore
from app.main import create_app


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    if request.param == "memory":
        return MemoryStore()
    return SQLiteStore(str(tmp_path / "catalog.db"))


@pytest.fixture
def client(store):
    return TestClient(create_app(store))


@pytest.fixture
def books(client):
    return client.post("/categories", json={"name": "Books"}).json()
