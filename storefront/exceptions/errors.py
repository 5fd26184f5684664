"""
Exception taxonomy for the storefront service.

Services raise these; the HTTP layer maps each class to a status code in
``storefront.exceptions.handlers``.
"""
from typing import Any, Dict, List, Optional


class StorefrontError(Exception):
    """Base class for errors the service raises on purpose."""
    status_code = 500
    error = "Internal server error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationFailed(StorefrontError):
    """Input was malformed or missing required fields."""
    status_code = 400
    error = "Validation error"

    def __init__(self, detail: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(detail)
        self.errors = errors or []


class NotFoundError(StorefrontError):
    """A referenced record does not exist (or is not visible to the caller)."""
    status_code = 404
    error = "Not found"


class ConflictError(StorefrontError):
    """The request conflicts with existing state."""
    status_code = 409
    error = "Conflict"


class DuplicateRecordError(ConflictError):
    """A unique field already holds the given value."""

    def __init__(self, entity: str, field: str, value: Any = None):
        detail = f"{entity} with this {field} already exists"
        if value is not None:
            detail = f"{entity} with {field} '{value}' already exists"
        super().__init__(detail)
        self.entity = entity
        self.field = field


class UploadRejected(StorefrontError):
    """An uploaded file failed the extension allow-list or size ceiling."""
    status_code = 400
    error = "Upload rejected"

    def __init__(self, detail: str, status_code: int = 400):
        super().__init__(detail)
        self.status_code = status_code


class StorageError(StorefrontError):
    """The storage backend failed while executing an operation."""
    status_code = 500
    error = "Database error"
