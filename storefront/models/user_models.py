"""
Pydantic models for users.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


class Role(str, Enum):
    """User role enumeration."""
    CUSTOMER = "customer"
    ADMIN = "admin"


class Address(BaseModel):
    """Postal address."""
    line1: str = Field(..., min_length=1)
    line2: Optional[str] = None
    city: str = Field(..., min_length=1)
    postal_code: str = Field(..., min_length=1)
    country: str = Field(..., min_length=2)


class UserRegister(BaseModel):
    """Request model for registering a user."""
    username: str = Field(..., min_length=3, max_length=30)
    email: EmailStr
    password: str = Field(..., min_length=8, description="Plain password, hashed before storage")
    full_name: str = Field(..., min_length=1)
    address: Optional[Address] = None

    @field_validator('username', 'full_name')
    @classmethod
    def validate_not_empty_or_whitespace(cls, v: str) -> str:
        """Validate that string fields are not empty or only whitespace."""
        if not v or not v.strip():
            raise ValueError("Field cannot be empty or contain only whitespace")
        return v.strip()


class UserCreate(BaseModel):
    """Storage input for a new user."""
    username: str
    email: EmailStr
    password_hash: str
    full_name: str
    address: Optional[Address] = None
    role: Role = Role.CUSTOMER


class User(UserCreate):
    """Stored user record."""
    id: str
    created_at: datetime


class UserResponse(BaseModel):
    """User response model (never exposes the credential hash)."""
    id: str
    username: str
    email: EmailStr
    full_name: str
    address: Optional[Address]
    role: Role
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(**user.model_dump(exclude={"password_hash"}))
