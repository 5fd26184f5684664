"""
Shared field types: money rounding, timestamps, ids and file descriptors.
"""
import uuid
from datetime import datetime, UTC
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN

from pydantic import BaseModel, Field


MONEY_QUANT = Decimal("0.01")


def round_money(amount: Decimal) -> Decimal:
    """Round to cents using banker's rounding."""
    try:
        return Decimal(amount).quantize(MONEY_QUANT, rounding=ROUND_HALF_EVEN)
    except InvalidOperation:
        # Too many digits to hold in cents, or not a finite number
        raise ValueError("Amount is out of range") from None


def new_record_id() -> str:
    """Generate a fresh record identifier (never reused)."""
    return uuid.uuid4().hex


def utc_now() -> datetime:
    return datetime.now(UTC)


class FileDescriptor(BaseModel):
    """Metadata for a file written to the uploads directory."""
    original_name: str = Field(..., description="File name as sent by the client")
    filename: str = Field(..., description="Generated name on disk")
    path: str = Field(..., description="Public URL path, e.g. /uploads/<filename>")
    size: int = Field(..., ge=0, description="Size in bytes")
    mime_type: str = Field("application/octet-stream")
