"""
Product catalog API routes.
"""
from typing import List, Optional
import logging

from storefront.adapters.http_framework import HTTPFrameworkAdapter
from storefront.dependencies.services import get_catalog_service
from storefront.models import Product, ProductCreate
from storefront.services import CatalogService

# Initialize adapter
http_adapter = HTTPFrameworkAdapter()
Query = http_adapter.Query
Depends = http_adapter.Depends

# Create router using adapter, expose underlying router for compatibility
router_adapter = http_adapter.create_router(prefix="/products", tags=["products"])
router = router_adapter.router

logger = logging.getLogger(__name__)


@router.get("", response_model=List[Product])
def list_products(
    category: Optional[str] = Query(None, description="Category name; 'All Categories' means no filter"),
    search: Optional[str] = Query(None, description="Text searched in name, description and category"),
    catalog: CatalogService = Depends(get_catalog_service),
) -> List[Product]:
    """List products, optionally filtered by category or search text (search wins)."""
    return catalog.list_products(category=category, search=search)


@router.post("", response_model=Product, status_code=201)
def create_product(
    product: ProductCreate,
    catalog: CatalogService = Depends(get_catalog_service),
) -> Product:
    """Add a product to the catalog."""
    return catalog.create_product(product)


@router.get("/{product_id}", response_model=Product)
def get_product(
    product_id: str,
    catalog: CatalogService = Depends(get_catalog_service),
) -> Product:
    return catalog.get_product(product_id)
