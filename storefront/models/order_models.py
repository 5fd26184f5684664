"""
Pydantic models for orders.
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List

from pydantic import BaseModel, Field, field_validator

from storefront.models.common import round_money


class OrderStatus(str, Enum):
    """Order status enumeration."""
    PENDING = "pending"
    SHIPPED = "shipped"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class OrderItem(BaseModel):
    """Line snapshot taken at purchase time; later product edits don't touch it."""
    product_id: str
    name: str
    quantity: int = Field(..., ge=1)
    price: Decimal = Field(..., ge=0)

    @field_validator('price')
    @classmethod
    def validate_price(cls, v: Decimal) -> Decimal:
        return round_money(v)


class OrderLineRequest(BaseModel):
    """One requested line when placing an order."""
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)


class OrderRequest(BaseModel):
    """Request model for placing an order. Empty items means "order my cart"."""
    items: List[OrderLineRequest] = Field(default_factory=list)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderCreate(BaseModel):
    """Storage input for a new order."""
    user_id: str
    total: Decimal = Field(..., ge=0)
    status: OrderStatus = OrderStatus.PENDING
    items: List[OrderItem]

    @field_validator('total')
    @classmethod
    def validate_total(cls, v: Decimal) -> Decimal:
        return round_money(v)


class Order(OrderCreate):
    """Stored order record."""
    id: str
    created_at: datetime
    updated_at: datetime
