"""
Pydantic models for records, request/response validation and quotes.
"""
from .common import FileDescriptor
from .user_models import Role, Address, UserRegister, UserCreate, User, UserResponse
from .product_models import ProductVariant, ProductCreate, Product
from .cart_models import CartItemRequest, CartItemUpdate, CartItemCreate, CartItem, CartLine
from .order_models import (
    OrderStatus,
    OrderItem,
    OrderLineRequest,
    OrderRequest,
    OrderStatusUpdate,
    OrderCreate,
    Order,
)
from .prototyping_models import (
    ProjectStatus,
    PrototypingProjectSubmit,
    ProjectStatusUpdate,
    PrototypingProjectCreate,
    PrototypingProject,
)
from .printing_models import (
    Material,
    QualityTier,
    PrintingStatus,
    PrintOptions,
    PrintingStatusUpdate,
    QuoteFileInfo,
    QuoteResponse,
    PrintingRequestCreate,
    PrintingRequest,
)
from .validation import ValidationResult, validate_input

__all__ = [
    "FileDescriptor",
    "Role",
    "Address",
    "UserRegister",
    "UserCreate",
    "User",
    "UserResponse",
    "ProductVariant",
    "ProductCreate",
    "Product",
    "CartItemRequest",
    "CartItemUpdate",
    "CartItemCreate",
    "CartItem",
    "CartLine",
    "OrderStatus",
    "OrderItem",
    "OrderLineRequest",
    "OrderRequest",
    "OrderStatusUpdate",
    "OrderCreate",
    "Order",
    "ProjectStatus",
    "PrototypingProjectSubmit",
    "ProjectStatusUpdate",
    "PrototypingProjectCreate",
    "PrototypingProject",
    "Material",
    "QualityTier",
    "PrintingStatus",
    "PrintOptions",
    "PrintingStatusUpdate",
    "QuoteFileInfo",
    "QuoteResponse",
    "PrintingRequestCreate",
    "PrintingRequest",
    "ValidationResult",
    "validate_input",
]
