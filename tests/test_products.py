# tests/test_products.py
from decimal import Decimal


def test_create_product_under_category(client, books):
    r = client.post(f"/categories/{books['id']}/products", json={"name": "Clean Code", "price": 89.90})
    assert r.status_code == 201
    assert r.json() == {
        "id": 1,
        "name": "Clean Code",
        "price": "89.90",
        "category": {"id": 1, "name": "Books"},
    }


def test_create_product_via_query(client, books):
    r = client.post("/products", params={"categoryId": books["id"]}, json={"name": "Refactoring", "price": "129.90"})
    assert r.status_code == 201
    body = r.json()
    assert body["category"] == books
    assert Decimal(body["price"]) == Decimal("129.90")


def test_unknown_category_is_404_and_writes_nothing(client, books):
    r = client.post("/categories/99/products", json={"name": "X", "price": 10})
    assert r.status_code == 404
    body = r.json()
    assert body["status"] == 404
    assert body["error"] == "Not Found"
    assert body["message"] == "Category not found"
    assert "timestamp" in body

    names = [p["name"] for p in client.get("/products").json()]
    assert "X" not in names


def test_unknown_category_via_query_is_404(client):
    r = client.post("/products", params={"categoryId": 42}, json={"name": "X", "price": "1.00"})
    assert r.status_code == 404
    assert r.json()["message"] == "Category not found"
    assert client.get("/products").json() == []


def test_missing_category_query_parameter(client):
    r = client.post("/products", json={"name": "X", "price": "1.00"})
    assert r.status_code == 400
    assert "categoryId" in r.json()["message"]


def test_list_products_of_new_category_is_empty(client, books):
    r = client.get(f"/categories/{books['id']}/products")
    assert r.status_code == 200
    assert r.json() == []


def test_list_products_of_unknown_category_is_404(client):
    r = client.get("/categories/7/products")
    assert r.status_code == 404
    assert r.json()["message"] == "Category not found"


def test_list_by_category_only_returns_its_products(client, books):
    games = client.post("/categories", json={"name": "Games"}).json()
    book = client.post(f"/categories/{books['id']}/products", json={"name": "SICP", "price": "50"}).json()
    game = client.post(f"/categories/{games['id']}/products", json={"name": "Chess", "price": "15.5"}).json()

    in_books = client.get(f"/categories/{books['id']}/products").json()
    in_games = client.get(f"/categories/{games['id']}/products").json()
    assert in_books == [book]
    assert in_games == [game]
    assert client.get("/products").json() == [book, game]


def test_price_keeps_exact_cents(client, books):
    url = f"/categories/{books['id']}/products"
    prices = [client.post(url, json={"name": "p", "price": raw}).json()["price"]
              for raw in (89.90, "89.90", 10, "0.1", 0.3)]
    assert prices == ["89.90", "89.90", "10.00", "0.10", "0.30"]

    listed = [p["price"] for p in client.get("/products").json()]
    assert listed == prices


def test_negative_price_is_rejected(client, books):
    r = client.post(f"/categories/{books['id']}/products", json={"name": "Bad", "price": "-1"})
    assert r.status_code == 400
    assert r.json()["message"].startswith("price:")
    assert client.get("/products").json() == []


def test_more_than_two_decimals_is_rejected(client, books):
    r = client.post(f"/categories/{books['id']}/products", json={"name": "Bad", "price": "1.005"})
    assert r.status_code == 400


def test_blank_product_name_is_rejected(client, books):
    r = client.post(f"/categories/{books['id']}/products", json={"name": "", "price": "1.00"})
    assert r.status_code == 400
    assert r.json()["message"].startswith("name:")


def test_body_may_not_carry_a_category(client, books):
    other = client.post("/categories", json={"name": "Other"}).json()
    r = client.post(
        f"/categories/{books['id']}/products",
        json={"name": "Sneaky", "price": "1.00", "category": other},
    )
    assert r.status_code == 400
    assert r.json()["message"].startswith("category:")
    assert client.get(f"/categories/{other['id']}/products").json() == []


def test_non_numeric_category_id_is_rejected(client):
    r = client.get("/categories/abc/products")
    assert r.status_code == 400


def test_identical_product_creates_get_distinct_ids(client, books):
    url = f"/categories/{books['id']}/products"
    a = client.post(url, json={"name": "Same", "price": "1.00"}).json()
    b = client.post(url, json={"name": "Same", "price": "1.00"}).json()
    assert a["id"] != b["id"]
    assert len(client.get(url).json()) == 2


def test_price_with_too_many_digits_is_rejected(client, books):
    url = f"/categories/{books['id']}/products"
    for raw in ("1e30", "1" * 29):
        r = client.post(url, json={"name": "Big", "price": raw})
        assert r.status_code == 400
        assert r.json()["message"].startswith("price:")
    assert client.get("/products").json() == []


def test_largest_accepted_price_round_trips(client, books):
    r = client.post(f"/categories/{books['id']}/products", json={"name": "Big", "price": "999999999999999999.99"})
    assert r.status_code == 201
    assert r.json()["price"] == "999999999999999999.99"


def test_negative_zero_price_is_stored_as_zero(client, books):
    r = client.post(f"/categories/{books['id']}/products", json={"name": "Free", "price": "-0.00"})
    assert r.status_code == 201
    assert r.json()["price"] == "0.00"
    assert client.get("/products").json()[0]["price"] == "0.00"


def test_out_of_range_category_ids_are_rejected(client, books):
    huge = "99999999999999999999999"
    for method, url, params in (
        ("get", f"/categories/{huge}/products", None),
        ("post", f"/categories/{huge}/products", None),
        ("post", "/products", {"categoryId": huge}),
        ("get", "/categories/0/products", None),
    ):
        kwargs = {"params": params} if params else {}
        if method == "post":
            kwargs["json"] = {"name": "X", "price": "1.00"}
        r = getattr(client, method)(url, **kwargs)
        assert r.status_code == 400, url
        assert r.json()["status"] == 400
    assert client.get("/products").json() == []


def test_largest_category_id_is_a_plain_404(client):
    r = client.get(f"/categories/{2**63 - 1}/products")
    assert r.status_code == 404
    assert r.json()["message"] == "Category not found"
