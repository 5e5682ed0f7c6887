"""
Storage for categories and products.

Each entity has a repository contract (``CategoryRepository``,
``ProductRepository``) and two backends implement them:

* ``MemoryStore`` keeps rows in dicts guarded by a lock.  Ids start at 1
  and are handed out in insertion order.
* ``SQLiteStore`` keeps rows in a SQLite file.  Ids come from
  ``AUTOINCREMENT`` and prices are stored as exact ``TEXT`` so they
  round-trip as ``Decimal`` rather than ``float``.

Products are stored with a ``category_id`` column only; reads re-attach
the owning ``Category`` so callers always get a complete entity.
"""

import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from .models import Category, Product

logger = logging.getLogger(__name__)


class CategoryRepository(ABC):
    """Contract for category data access."""

    @abstractmethod
    def save(self, category: Category) -> Category:
        """Persist a new category and return it with its assigned id."""

    @abstractmethod
    def find_all(self) -> List[Category]:
        """Return every category in storage order."""

    @abstractmethod
    def find_by_id(self, category_id: int) -> Optional[Category]:
        """Return the category or ``None``."""


class ProductRepository(ABC):
    """Contract for product data access."""

    @abstractmethod
    def save(self, product: Product) -> Product:
        """Persist a new product and return it with its assigned id."""

    @abstractmethod
    def find_all(self) -> List[Product]:
        """Return every product in storage order."""

    @abstractmethod
    def find_by_id(self, product_id: int) -> Optional[Product]:
        """Return the product or ``None``."""

    @abstractmethod
    def find_by_category_id(self, category_id: int) -> List[Product]:
        """Return the products whose owning category has this id."""


@dataclass
class Store:
    categories: CategoryRepository
    products: ProductRepository


def _require_category_id(product: Product) -> int:
    if product.category is None or product.category.id is None:
        raise ValueError("product must reference a saved category")
    return product.category.id


# ---------------------------
# In-memory backend
# ---------------------------
class _MemoryTables:
    def __init__(self):
        self.lock = threading.Lock()
        self.categories: Dict[int, Dict[str, Any]] = {}
        self.products: Dict[int, Dict[str, Any]] = {}
        self.last_ids = {"categories": 0, "products": 0}

    def next_id(self, table: str) -> int:
        self.last_ids[table] += 1
        return self.last_ids[table]


class MemoryCategoryRepository(CategoryRepository):
    def __init__(self, tables: _MemoryTables):
        self._t = tables

    def save(self, category: Category) -> Category:
        with self._t.lock:
            cid = self._t.next_id("categories")
            self._t.categories[cid] = {"id": cid, "name": category.name}
        return Category(id=cid, name=category.name)

    def find_all(self) -> List[Category]:
        with self._t.lock:
            rows = list(self._t.categories.values())
        return [Category(**row) for row in rows]

    def find_by_id(self, category_id: int) -> Optional[Category]:
        with self._t.lock:
            row = self._t.categories.get(category_id)
        return Category(**row) if row else None


class MemoryProductRepository(ProductRepository):
    def __init__(self, tables: _MemoryTables):
        self._t = tables

    def _hydrate(self, row: Dict[str, Any]) -> Product:
        category = Category(**self._t.categories[row["category_id"]])
        return Product(id=row["id"], name=row["name"], price=row["price"], category=category)

    def save(self, product: Product) -> Product:
        category_id = _require_category_id(product)
        with self._t.lock:
            # same foreign key rule the SQLite schema enforces
            if category_id not in self._t.categories:
                raise ValueError(f"unknown category {category_id}")
            pid = self._t.next_id("products")
            row = {"id": pid, "name": product.name, "price": product.price, "category_id": category_id}
            self._t.products[pid] = row
            return self._hydrate(row)

    def _select(self, keep) -> List[Product]:
        with self._t.lock:
            return [self._hydrate(row) for row in self._t.products.values() if keep(row)]

    def find_all(self) -> List[Product]:
        return self._select(lambda row: True)

    def find_by_id(self, product_id: int) -> Optional[Product]:
        found = self._select(lambda row: row["id"] == product_id)
        return found[0] if found else None

    def find_by_category_id(self, category_id: int) -> List[Product]:
        return self._select(lambda row: row["category_id"] == category_id)


class MemoryStore(Store):
    """Process-local storage; everything is lost on restart."""

    def __init__(self):
        tables = _MemoryTables()
        super().__init__(
            categories=MemoryCategoryRepository(tables),
            products=MemoryProductRepository(tables),
        )


# ---------------------------
# SQLite backend
# ---------------------------
def adapt_decimal(val: Decimal) -> str:
    return str(val)


sqlite3.register_adapter(Decimal, adapt_decimal)

# price is TEXT: a NUMERIC column would coerce "89.90" to REAL
SCHEMA = """
CREATE TABLE IF NOT EXISTS categories (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS products (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    price TEXT NOT NULL,
    category_id INTEGER NOT NULL,
    FOREIGN KEY (category_id) REFERENCES categories(id)
);

CREATE INDEX IF NOT EXISTS idx_products_category ON products(category_id);
"""

_PRODUCT_SELECT = """
SELECT p.id, p.name, p.price, c.id AS category_id, c.name AS category_name
FROM products p JOIN categories c ON c.id = p.category_id
"""


class SQLiteConnection:
    """Opens one connection per operation and commits or rolls back on exit."""

    def __init__(self, db_path: str):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self.get_connection() as conn:
            conn.executescript(SCHEMA)

    @contextmanager
    def get_connection(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()


class SQLiteCategoryRepository(CategoryRepository):
    def __init__(self, connection: SQLiteConnection):
        self._conn = connection

    def save(self, category: Category) -> Category:
        with self._conn.get_connection() as conn:
            cursor = conn.execute("INSERT INTO categories (name) VALUES (?)", (category.name,))
            return Category(id=cursor.lastrowid, name=category.name)

    def find_all(self) -> List[Category]:
        with self._conn.get_connection() as conn:
            rows = conn.execute("SELECT id, name FROM categories ORDER BY id").fetchall()
            return [Category(**dict(row)) for row in rows]

    def find_by_id(self, category_id: int) -> Optional[Category]:
        with self._conn.get_connection() as conn:
            row = conn.execute(
                "SELECT id, name FROM categories WHERE id = ?", (category_id,)
            ).fetchone()
            return Category(**dict(row)) if row else None


class SQLiteProductRepository(ProductRepository):
    def __init__(self, connection: SQLiteConnection):
        self._conn = connection

    @staticmethod
    def _row_to_product(row: sqlite3.Row) -> Product:
        return Product(
            id=row["id"],
            name=row["name"],
            price=Decimal(row["price"]),
            category=Category(id=row["category_id"], name=row["category_name"]),
        )

    def save(self, product: Product) -> Product:
        category_id = _require_category_id(product)
        with self._conn.get_connection() as conn:
            try:
                cursor = conn.execute(
                    "INSERT INTO products (name, price, category_id) VALUES (?, ?, ?)",
                    (product.name, product.price, category_id),
                )
            except sqlite3.IntegrityError as exc:
                raise ValueError(f"unknown category {category_id}") from exc
            row = conn.execute(_PRODUCT_SELECT + " WHERE p.id = ?", (cursor.lastrowid,)).fetchone()
            return self._row_to_product(row)

    def find_all(self) -> List[Product]:
        with self._conn.get_connection() as conn:
            rows = conn.execute(_PRODUCT_SELECT + " ORDER BY p.id").fetchall()
            return [self._row_to_product(row) for row in rows]

    def find_by_id(self, product_id: int) -> Optional[Product]:
        with self._conn.get_connection() as conn:
            row = conn.execute(_PRODUCT_SELECT + " WHERE p.id = ?", (product_id,)).fetchone()
            return self._row_to_product(row) if row else None

    def find_by_category_id(self, category_id: int) -> List[Product]:
        with self._conn.get_connection() as conn:
            rows = conn.execute(
                _PRODUCT_SELECT + " WHERE p.category_id = ? ORDER BY p.id", (category_id,)
            ).fetchall()
            return [self._row_to_product(row) for row in rows]


class SQLiteStore(Store):
    """File-backed storage; survives restarts."""

    def __init__(self, db_path: str):
        connection = SQLiteConnection(db_path)
        super().__init__(
            categories=SQLiteCategoryRepository(connection),
            products=SQLiteProductRepository(connection),
        )


def create_store(database_url: str) -> Store:
    """Pick the backend named by ``database_url``."""
    if not database_url or database_url == "memory":
        logger.info("Using in-memory store")
        return MemoryStore()
    path = database_url
    if path.startswith("sqlite:///"):
        path = path[len("sqlite:///"):]
    logger.info("Using SQLite store at %s", path)
    return SQLiteStore(path)
