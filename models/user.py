"""
User (profile) schemas.
"""

import re
from pydantic import Field, field_validator
from typing import Optional
from enum import Enum

from models.base import BaseSchema, PatchSchema, TimestampMixin

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class UserRole(str, Enum):
    """Dashboard roles."""
    ADMIN = "admin"
    EXECUTIVE = "executive"
    MANAGER = "manager"
    USER = "user"


def _check_email(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if not EMAIL_PATTERN.match(v):
        raise ValueError("Invalid email format")
    return v.lower()


class UserCreate(BaseSchema):
    """Create a new user."""

    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., max_length=254)
    role: UserRole
    avatar: Optional[str] = None
    is_active: bool = True

    @field_validator("email")
    @classmethod
    def email_format(cls, v: str) -> str:
        return _check_email(v)


class UserUpdate(PatchSchema):
    """Update a user; only provided fields change."""

    non_nullable = frozenset({"name", "email", "role", "is_active"})

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[str] = Field(None, max_length=254)
    role: Optional[UserRole] = None
    avatar: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def email_format(cls, v: Optional[str]) -> Optional[str]:
        return _check_email(v)


class UserResponse(BaseSchema, TimestampMixin):
    """User with all fields."""

    id: str
    name: str
    email: str
    role: UserRole
    avatar: Optional[str] = None
    is_active: bool = True
