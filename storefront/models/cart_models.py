"""
Pydantic models for cart items.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from storefront.models.product_models import Product


class CartItemRequest(BaseModel):
    """Request model for adding a product to the cart."""
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)


class CartItemUpdate(BaseModel):
    """Request model for changing a cart line's quantity."""
    quantity: int = Field(..., ge=1)


class CartItemCreate(BaseModel):
    """Storage input for a new cart line."""
    user_id: str
    product_id: str
    quantity: int = Field(1, ge=1)


class CartItem(CartItemCreate):
    """Stored cart line."""
    id: str
    created_at: datetime


class CartLine(CartItem):
    """Cart line joined with its product (None if the product was removed)."""
    product: Optional[Product] = None
