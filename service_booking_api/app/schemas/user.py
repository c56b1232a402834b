"""
Pydantic models for user data.

Defines schemas for registering, authenticating and reading users.
The password hash is never part of a response model.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import EmailStr, Field

from .base import APIModel


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class UserRegister(APIModel):
    name: str = Field(..., min_length=1, example="Jane Doe")
    email: EmailStr = Field(..., example="jane@example.com")
    password: str = Field(..., min_length=6, example="strongpassword")
    phone: Optional[str] = Field(None, example="+1 555 0100")


class UserLogin(APIModel):
    email: EmailStr
    password: str


class UserRead(APIModel):
    """Schema for reading a user from the API."""

    id: str
    name: str
    email: str
    phone: Optional[str] = None
    role: Role
    created_at: datetime


class TokenResponse(APIModel):
    token: str
    token_type: str = "bearer"
    user: UserRead
