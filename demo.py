#!/usr/bin/env python
import os
import sys

from sdk.pycatalog import CatalogClient, CategoryNotFoundError

SAMPLE_CATALOG = {
    "Informática": [("Mouse Logitech", "120.00"), ("Teclado Mecânico", "350.00")],
    "Livros": [("Clean Code", "89.90")],
}


def seed(c: CatalogClient) -> bool:
    """Load the sample catalog unless the API already holds data."""
    if c.list_categories() or c.list_products():
        print("Catalog not empty, skipping seed.")
        return False
    for category_name, items in SAMPLE_CATALOG.items():
        category = c.create_category(category_name)
        for name, price in items:
            c.create_product(category["id"], name, price)
    print("Seed loaded: categories", ", ".join(SAMPLE_CATALOG))
    return True


def main():
    c = CatalogClient(base_url=os.getenv("CATALOG_API_URL", "http://127.0.0.1:8085"))

    # -----------------------------
    # Seed sample data
    # -----------------------------
    print("Seeding catalog...")
    seed(c)

    # -----------------------------
    # Categories
    # -----------------------------
    print("\nListing categories...")
    categories = c.list_categories()
    print(categories)

    # -----------------------------
    # Create via both entry points
    # -----------------------------
    books = c.find_category("Livros")
    print("\nAdding a book through /categories/{id}/products...")
    print(c.create_product(books["id"], "Refactoring", "129.90"))
    print("Adding a book through /products?categoryId=...")
    print(c.create_product(books["id"], "The Pragmatic Programmer", "99.00", via="query"))

    print("\nProducts in 'Livros':")
    print(c.list_category_products(books["id"]))

    # -----------------------------
    # Unknown category is refused
    # -----------------------------
    missing_id = max(cat["id"] for cat in categories) + 1000
    print(f"\nCreating a product in missing category {missing_id}...")
    try:
        c.create_product(missing_id, "Ghost", "1.00")
    except CategoryNotFoundError as e:
        print("Refused as expected:", e.body)
    else:
        print("Unexpected: product was created")
        sys.exit(1)

    # -----------------------------
    # Everything
    # -----------------------------
    print("\nListing all products...")
    print(c.list_products())


if __name__ == "__main__":
    main()
