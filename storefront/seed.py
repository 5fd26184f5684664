"""
Demonstration data inserted at startup.

Both functions are idempotent: products are only added to an empty catalog,
and the demo user is only created when no user has its username.
"""
import logging
from decimal import Decimal
from typing import List

from storefront.models import Product, ProductCreate, ProductVariant, User
from storefront.services.user_service import UserService
from storefront.storage import StorageInterface

logger = logging.getLogger(__name__)

SAMPLE_PRODUCTS = [
    ProductCreate(
        name="Premium Wireless Headphones",
        description="High-quality wireless headphones with noise cancellation and premium sound quality.",
        price=Decimal("199.99"),
        category="Electronics",
        images=["https://images.unsplash.com/photo-1505740420928-5e560c06d30e?w=500&h=500&fit=crop"],
        stock=50,
        variants=[ProductVariant(color="black", stock=25), ProductVariant(color="white", stock=25)],
    ),
    ProductCreate(
        name="Smart Fitness Watch",
        description="Advanced fitness tracking with heart rate monitoring and GPS capabilities.",
        price=Decimal("299.99"),
        category="Electronics",
        images=["https://images.unsplash.com/photo-1523275335684-37898b6baf30?w=500&h=500&fit=crop"],
        stock=30,
        variants=[ProductVariant(color="black", stock=15), ProductVariant(color="silver", stock=15)],
    ),
    ProductCreate(
        name="Ergonomic Office Chair",
        description="Comfortable ergonomic chair designed for long working hours with lumbar support.",
        price=Decimal("449.99"),
        category="Furniture",
        images=["https://images.unsplash.com/photo-1586023492125-27b2c045efd7?w=500&h=500&fit=crop"],
        stock=20,
    ),
    ProductCreate(
        name="Professional Camera Lens",
        description="High-quality camera lens for professional photography with excellent clarity.",
        price=Decimal("799.99"),
        category="Photography",
        images=["https://images.unsplash.com/photo-1606983340126-99ab4feaa64a?w=500&h=500&fit=crop"],
        stock=15,
    ),
]


def seed_products(storage: StorageInterface) -> List[Product]:
    """Insert the sample products if the catalog is empty. Returns what was inserted."""
    if storage.products.count() > 0:
        logger.info("Catalog already populated, skipping product seed")
        return []
    created = [storage.products.create(product) for product in SAMPLE_PRODUCTS]
    logger.info(f"Seeded {len(created)} sample products")
    return created


def ensure_demo_user(storage: StorageInterface, username: str = "demo") -> User:
    """Get or create the demo customer that anonymous requests act as."""
    return UserService(storage).ensure_user(
        username=username,
        email=f"{username}@example.com",
        full_name="Demo User",
    )
