"""
Service exceptions and their HTTP mapping.
"""
from .errors import (
    StorefrontError,
    ValidationFailed,
    NotFoundError,
    ConflictError,
    DuplicateRecordError,
    UploadRejected,
    StorageError,
)

__all__ = [
    "StorefrontError",
    "ValidationFailed",
    "NotFoundError",
    "ConflictError",
    "DuplicateRecordError",
    "UploadRejected",
    "StorageError",
]
