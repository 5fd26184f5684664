"""
Pydantic models for catalog products.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field, field_validator

from storefront.models.common import round_money


class ProductVariant(BaseModel):
    """A color/size variant with its own stock and price adjustment."""
    color: Optional[str] = None
    size: Optional[str] = None
    stock: int = Field(0, ge=0)
    price_adjustment: Decimal = Decimal("0.00")

    @field_validator('price_adjustment')
    @classmethod
    def validate_price_adjustment(cls, v: Decimal) -> Decimal:
        return round_money(v)


class ProductCreate(BaseModel):
    """Request model for creating a product."""
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)
    category: str = Field(..., min_length=1)
    images: List[str] = Field(default_factory=list, description="Image URLs")
    stock: int = Field(0, ge=0, description="Units in stock")
    variants: List[ProductVariant] = Field(default_factory=list)

    @field_validator('name', 'description', 'category')
    @classmethod
    def validate_not_empty_or_whitespace(cls, v: str) -> str:
        """Validate that string fields are not empty or only whitespace."""
        if not v or not v.strip():
            raise ValueError("Field cannot be empty or contain only whitespace")
        return v.strip()

    @field_validator('price')
    @classmethod
    def validate_price(cls, v: Decimal) -> Decimal:
        return round_money(v)


class Product(ProductCreate):
    """Stored product record."""
    id: str
    created_at: datetime

    @computed_field
    @property
    def in_stock(self) -> bool:
        return self.stock > 0
