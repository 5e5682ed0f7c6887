import logging
from typing import List, Optional

from .database import CategoryRepository, ProductRepository
from .models import Category, Product

# Services sit between the routes and storage. They report absence as None
# and know nothing about HTTP status codes.

logger = logging.getLogger(__name__)


class CategoryService:
    def __init__(self, repository: CategoryRepository):
        self.repository = repository

    def create(self, category: Category) -> Category:
        saved = self.repository.save(category)
        logger.info("Created category %s (%s)", saved.id, saved.name)
        return saved

    def list(self) -> List[Category]:
        return self.repository.find_all()

    def find_by_id(self, category_id: int) -> Optional[Category]:
        return self.repository.find_by_id(category_id)


class ProductService:
    def __init__(self, repository: ProductRepository):
        self.repository = repository

    def create(self, product: Product) -> Product:
        """Persist a product whose category the caller has already resolved.

        No existence check happens here; storage refuses a dangling
        category id with ``ValueError``.
        """
        saved = self.repository.save(product)
        logger.info("Created product %s (%s) in category %s", saved.id, saved.name, saved.category_id)
        return saved

    def list(self) -> List[Product]:
        return self.repository.find_all()

    def list_by_category(self, category_id: int) -> List[Product]:
        # empty both for a bare category and for an unknown id
        return self.repository.find_by_category_id(category_id)
