import asyncio
import os

import httpx

from sdk.pycatalog import CatalogClient, CategoryNotFoundError


async def add_product(client, ac, category_id, name, price):
    try:
        product = await client.create_product_async(category_id, name, price, client=ac)
        print(f"✅ {name} stored as #{product['id']} at {product['price']}")
        return product
    except CategoryNotFoundError as e:
        print(f"❌ {name} refused: {e}")
    except httpx.HTTPStatusError as e:
        print(f"❌ {name} failed with status {e.response.status_code}")
    return None


async def main():
    c = CatalogClient(base_url=os.getenv("CATALOG_API_URL", "http://127.0.0.1:8085"))

    async with httpx.AsyncClient(timeout=c.timeout) as ac:
        category = await c.create_category_async("Concurrent demo", client=ac)
        print(f"\n🏷️  Created category: {category}")

        # Identical bodies on purpose: creates are not idempotent
        print("\n⚡ Creating products concurrently...")
        results = await asyncio.gather(*[
            add_product(c, ac, category["id"], "Same name", "10.00") for _ in range(10)
        ])
        ids = [p["id"] for p in results if p]
        print(f"\n🔢 {len(ids)} products, {len(set(ids))} distinct ids")

        await add_product(c, ac, category["id"] + 10_000, "Orphan", "1.00")

    print("\n📦 Category contents:", c.list_category_products(category["id"]))


if __name__ == "__main__":
    asyncio.run(main())
