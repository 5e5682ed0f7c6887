# tests/test_storage.py
from decimal import Decimal

from fastapi.testclient import TestClient

from app.database import MemoryStore, SQLiteStore, create_store
from app.main import create_app
from app.models import Category, Product


def test_create_store_picks_backend(tmp_path):
    assert isinstance(create_store("memory"), MemoryStore)
    assert isinstance(create_store(""), MemoryStore)
    assert isinstance(create_store(str(tmp_path / "a.db")), SQLiteStore)
    assert isinstance(create_store(f"sqlite:///{tmp_path / 'b.db'}"), SQLiteStore)
    assert (tmp_path / "b.db").exists()


def test_sqlite_data_survives_a_new_store(tmp_path):
    path = str(tmp_path / "catalog.db")
    first = SQLiteStore(path)
    books = first.categories.save(Category(name="Books"))
    first.products.save(Product(name="Clean Code", price="89.90", category=books))

    second = SQLiteStore(path)
    assert second.categories.find_all() == [books]
    [product] = second.products.find_by_category_id(books.id)
    assert product.price == Decimal("89.90")
    assert str(product.price) == "89.90"
    assert product.category.name == "Books"


def test_sqlite_keeps_large_prices_exact(tmp_path):
    store = SQLiteStore(str(tmp_path / "catalog.db"))
    cat = store.categories.save(Category(name="Assets"))
    saved = store.products.save(Product(name="Island", price="12345678901234567.89", category=cat))
    assert store.products.find_by_id(saved.id).price == Decimal("12345678901234567.89")


def test_find_by_id_on_products(store):
    cat = store.categories.save(Category(name="Books"))
    saved = store.products.save(Product(name="SICP", price=1, category=cat))
    assert store.products.find_by_id(saved.id) == saved
    assert store.products.find_by_id(saved.id + 1) is None


def test_http_over_sqlite_file_persists(tmp_path):
    path = str(tmp_path / "catalog.db")
    client = TestClient(create_app(SQLiteStore(path)))
    cat = client.post("/categories", json={"name": "Books"}).json()
    client.post(f"/categories/{cat['id']}/products", json={"name": "SICP", "price": "45.00"})

    restarted = TestClient(create_app(SQLiteStore(path)))
    products = restarted.get("/products").json()
    assert [(p["name"], p["price"], p["category"]["name"]) for p in products] == [("SICP", "45.00", "Books")]
