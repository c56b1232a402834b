"""
Pydantic models for bookings.

A booking ties one customer to one service on a date and a named time
slot.  Responses embed a summary of the customer and the full service
so clients do not have to join them themselves.
"""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from .base import APIModel

from .service import ServiceRead


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Statuses that occupy a slot.  ``completed`` and ``cancelled`` are terminal.
ACTIVE_STATUSES = frozenset({BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value})


class BookingCreate(APIModel):
    model_config = {"str_strip_whitespace": True}

    service: str = Field(..., description="ID of the service to book")
    booking_date: date = Field(..., example="2025-06-01")
    time_slot: str = Field(..., min_length=1, example="10:00")
    address: str = Field(..., min_length=1, example="221B Baker Street")
    notes: Optional[str] = Field("", example="Gate code 1234")


class StatusUpdate(APIModel):
    # Validated by the service layer so an unknown value is a 400, not a 422.
    status: str = Field(..., example="confirmed")


class BookingUser(APIModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None


class BookingRead(APIModel):
    id: str
    user: Optional[BookingUser] = None
    service: Optional[ServiceRead] = None
    booking_date: date
    time_slot: str
    address: str
    notes: Optional[str] = ""
    status: BookingStatus
    total_price: float
    created_at: datetime
    completed_at: Optional[datetime] = None


class BookingStatusResponse(APIModel):
    success: bool = True
    message: str
    booking: BookingRead


class Availability(APIModel):
    date: date
    booked_slots: List[str]


class MessageResponse(APIModel):
    success: bool = True
    message: str
