"""
Pydantic models for the service catalog.

``ServiceBase`` holds the fields an administrator provides;
``ServiceCreate`` is the creation payload, ``ServiceUpdate`` the
partial update payload and ``ServiceRead`` the API representation.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from .base import APIModel


class ServiceCategory(str, Enum):
    CAR_WASH = "car_wash"
    HOME_CLEANING = "home_cleaning"
    SALON = "salon"
    OTHER = "other"


class ServiceStatus(str, Enum):
    """Lifecycle of a catalog entry.  ``retired`` is the soft-deleted state."""

    ACTIVE = "active"
    RETIRED = "retired"


DEFAULT_IMAGE = "default-service.jpg"


class ServiceBase(APIModel):
    model_config = {"str_strip_whitespace": True}

    name: str = Field(..., min_length=1, example="Basic Car Wash")
    description: str = Field(..., min_length=1, example="Exterior wash and interior vacuum")
    category: ServiceCategory = Field(..., example="car_wash")
    price: float = Field(..., ge=0, example=29.99)
    duration: int = Field(..., gt=0, description="Duration in minutes", example=30)
    image: str = Field(DEFAULT_IMAGE, example="car-wash-basic.jpg")


class ServiceCreate(ServiceBase):
    """Schema for creating a service."""
    pass


class ServiceUpdate(APIModel):
    """Schema for updating a service.

    All fields are optional; only provided fields will be updated.
    Setting ``status`` to ``active`` brings a retired service back.
    """
    model_config = {"str_strip_whitespace": True}

    name: str | None = Field(None, min_length=1)
    description: str | None = Field(None, min_length=1)
    category: ServiceCategory | None = None
    price: float | None = Field(None, ge=0)
    duration: int | None = Field(None, gt=0)
    image: str | None = None
    status: ServiceStatus | None = None


class ServiceRead(ServiceBase):
    """Schema for reading a service from the API."""

    id: str
    status: ServiceStatus
    is_active: bool
    created_at: datetime


class ServiceUpdateResponse(APIModel):
    success: bool = True
    message: str
    service: ServiceRead
