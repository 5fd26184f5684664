"""
Catalog service - product listing, filtering and search.
"""
import logging
from typing import List, Optional

from storefront.exceptions import NotFoundError
from storefront.models import Product, ProductCreate
from storefront.storage import StorageInterface

logger = logging.getLogger(__name__)

# Category value the client sends to mean "no filter"
ALL_CATEGORIES = "All Categories"


class CatalogService:
    """Service for catalog products."""

    def __init__(self, storage: StorageInterface):
        self.storage = storage

    def list_products(self, category: Optional[str] = None, search: Optional[str] = None) -> List[Product]:
        """
        List products, optionally by category or search text.

        A non-blank ``search`` takes precedence over ``category``.
        """
        search = (search or "").strip()
        if search:
            return self.storage.products.search(search)

        category = (category or "").strip()
        if category and category != ALL_CATEGORIES:
            return self.storage.products.list_by_category(category)
        return self.storage.products.list_all()

    def get_product(self, product_id: str) -> Product:
        product = self.storage.products.get_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product {product_id} not found")
        return product

    def create_product(self, data: ProductCreate) -> Product:
        product = self.storage.products.create(data)
        logger.info(f"Added product {product.id} '{product.name}' to category {product.category}")
        return product
