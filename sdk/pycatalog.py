# sdk/pycatalog.py
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

import httpx
import requests
from rich import print

Price = Union[Decimal, str, int]


class CategoryNotFoundError(Exception):
    """The API answered 404 for the category a call referenced."""

    def __init__(self, category_id: int, body: Optional[Dict[str, Any]] = None):
        self.category_id = category_id
        self.body = body or {}
        super().__init__(self.body.get("message", "Category not found") + f" (id={category_id})")


class CatalogClient:
    def __init__(self, base_url: str = "http://localhost:8085", timeout: int = 10, session=None):
        self.base_url = base_url.rstrip("/")
        # any requests.Session-like object works, e.g. fastapi.testclient.TestClient
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    @staticmethod
    def _product_payload(name: str, price: Price) -> Dict[str, Any]:
        # send prices as text so they never pass through a float
        return {"name": name, "price": str(price)}

    def _check(self, r, category_id: Optional[int] = None):
        if r.status_code == 404 and category_id is not None:
            raise CategoryNotFoundError(category_id, r.json())
        r.raise_for_status()
        return r.json()

    # Categories
    def create_category(self, name: str) -> Dict[str, Any]:
        r = self.session.post(f"{self.base_url}/categories", json={"name": name}, timeout=self.timeout)
        return self._check(r)

    def list_categories(self) -> List[Dict[str, Any]]:
        r = self.session.get(f"{self.base_url}/categories", timeout=self.timeout)
        return self._check(r)

    def find_category(self, name: str) -> Optional[Dict[str, Any]]:
        """Return the first category with this exact name, if any."""
        for category in self.list_categories():
            if category["name"] == name:
                return category
        return None

    # Products
    def create_product(self, category_id: int, name: str, price: Price, via: str = "path") -> Dict[str, Any]:
        """Create a product in ``category_id``.

        ``via="path"`` posts to ``/categories/{id}/products``; ``via="query"``
        posts to ``/products?categoryId=``. Both behave the same server side.
        """
        payload = self._product_payload(name, price)
        if via == "path":
            r = self.session.post(f"{self.base_url}/categories/{category_id}/products",
                                  json=payload, timeout=self.timeout)
        elif via == "query":
            r = self.session.post(f"{self.base_url}/products", params={"categoryId": category_id},
                                  json=payload, timeout=self.timeout)
        else:
            raise ValueError(f"via must be 'path' or 'query', not {via!r}")
        return self._check(r, category_id)

    def list_products(self) -> List[Dict[str, Any]]:
        r = self.session.get(f"{self.base_url}/products", timeout=self.timeout)
        return self._check(r)

    def list_category_products(self, category_id: int) -> List[Dict[str, Any]]:
        r = self.session.get(f"{self.base_url}/categories/{category_id}/products", timeout=self.timeout)
        return self._check(r, category_id)

    # Async create (used by the concurrent demo)
    async def create_category_async(self, name: str, client: Optional[httpx.AsyncClient] = None) -> Dict[str, Any]:
        if client is not None:
            r = await client.post(f"{self.base_url}/categories", json={"name": name})
            return self._check(r)
        async with httpx.AsyncClient(timeout=self.timeout) as ac:
            r = await ac.post(f"{self.base_url}/categories", json={"name": name})
            return self._check(r)

    async def create_product_async(self, category_id: int, name: str, price: Price,
                                   client: Optional[httpx.AsyncClient] = None) -> Dict[str, Any]:
        url = f"{self.base_url}/categories/{category_id}/products"
        payload = self._product_payload(name, price)
        if client is not None:
            r = await client.post(url, json=payload)
            return self._check(r, category_id)
        async with httpx.AsyncClient(timeout=self.timeout) as ac:
            r = await ac.post(url, json=payload)
            return self._check(r, category_id)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="PyCatalog CLI")
    parser.add_argument("--base-url", default="http://127.0.0.1:8085", help="API base URL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ---------------------------
    # Category commands
    # ---------------------------
    subparsers.add_parser("list-categories", help="List all categories")

    cc = subparsers.add_parser("create-category", help="Create a category")
    cc.add_argument("--name", required=True, help="Category name")

    # ---------------------------
    # Product commands
    # ---------------------------
    lp = subparsers.add_parser("list-products", help="List products")
    lp.add_argument("--category-id", type=int, help="Only products of this category")

    cp = subparsers.add_parser("create-product", help="Create a product in a category")
    cp.add_argument("--category-id", type=int, required=True, help="Owning category ID")
    cp.add_argument("--name", required=True, help="Product name")
    cp.add_argument("--price", required=True, help="Price, e.g. 89.90")
    cp.add_argument("--via", choices=["path", "query"], default="path",
                    help="Which endpoint to post to")

    # ---------------------------
    # Parse and execute
    # ---------------------------
    args = parser.parse_args()
    c = CatalogClient(base_url=args.base_url)

    try:
        if args.command == "list-categories":
            print(c.list_categories())
        elif args.command == "create-category":
            print(c.create_category(args.name))
        elif args.command == "list-products":
            if args.category_id is not None:
                print(c.list_category_products(args.category_id))
            else:
                print(c.list_products())
        elif args.command == "create-product":
            print(c.create_product(args.category_id, args.name, args.price, via=args.via))
    except CategoryNotFoundError as e:
        print(f"[red]{e}[/red]")
        raise SystemExit(1)
