"""
Pydantic models for 3D-printing quotes and requests.
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from storefront.models.common import FileDescriptor, round_money


class Material(str, Enum):
    """Printable materials."""
    PLA = "PLA"
    ABS = "ABS"
    PETG = "PETG"
    METAL = "Metal"


class QualityTier(str, Enum):
    """Print quality tiers."""
    DRAFT = "draft"
    STANDARD = "standard"
    FINE = "fine"


class PrintingStatus(str, Enum):
    """Printing request status enumeration."""
    PENDING = "pending"
    QUOTED = "quoted"
    PRINTING = "printing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PrintOptions(BaseModel):
    """Print choices submitted with a model file."""
    material: Material
    quality: QualityTier
    infill_density: int = Field(20, ge=10, le=100, description="Infill percentage")
    color: str = Field("white", min_length=1)

    @field_validator('color')
    @classmethod
    def normalize_color(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field cannot be empty or contain only whitespace")
        return v.strip().lower()


class PrintingStatusUpdate(BaseModel):
    status: PrintingStatus


class QuoteFileInfo(BaseModel):
    original_name: str
    size: int
    mime_type: str


class QuoteResponse(BaseModel):
    """Quote returned to the client before a request is placed."""
    material_cost: Decimal
    print_time: str
    labor_cost: Decimal
    processing_fee: Decimal
    total: Decimal
    weight: str
    delivery_time: str
    selected_material: Material
    quality: QualityTier
    infill_density: int
    file_info: Optional[QuoteFileInfo] = None


class PrintingRequestCreate(PrintOptions):
    """Storage input for a new printing request."""
    user_id: str
    file: FileDescriptor
    estimated_cost: Decimal = Field(..., ge=0)
    estimated_time: str
    status: PrintingStatus = PrintingStatus.PENDING

    @field_validator('estimated_cost')
    @classmethod
    def validate_estimated_cost(cls, v: Decimal) -> Decimal:
        return round_money(v)


class PrintingRequest(PrintingRequestCreate):
    """Stored printing request record."""
    id: str
    created_at: datetime
