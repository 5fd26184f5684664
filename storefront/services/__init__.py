"""
Service layer - business logic for each storefront flow.
Services take the storage object explicitly and contain no HTTP framework code.
"""
from .catalog_service import CatalogService, ALL_CATEGORIES
from .cart_service import CartService
from .order_service import OrderService
from .prototyping_service import PrototypingService
from .printing_service import PrintingService
from .user_service import UserService, hash_password, verify_password
from .quote import calculate_quote, QuoteResult

__all__ = [
    'CatalogService',
    'ALL_CATEGORIES',
    'CartService',
    'OrderService',
    'PrototypingService',
    'PrintingService',
    'UserService',
    'hash_password',
    'verify_password',
    'calculate_quote',
    'QuoteResult',
]
