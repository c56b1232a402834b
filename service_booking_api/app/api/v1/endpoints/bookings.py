"""
Booking endpoints for API v1.

Customers create bookings, list their own, fetch one, cancel, and
check which slots of a day are taken.  Availability is public; every
other route requires a logged-in user.
"""

from datetime import date
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, Path, Query, Request, status

from service_booking_api.app.api.deps import get_booking_service, get_notification_service
from service_booking_api.app.core.security import get_current_user
from service_booking_api.app.schemas.booking import Availability, BookingCreate, BookingRead
from service_booking_api.app.services.booking_service import BookingService
from service_booking_api.app.services.notification_service import NotificationService


router = APIRouter()


@router.post("", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking: BookingCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    bookings: BookingService = Depends(get_booking_service),
    notifier: NotificationService = Depends(get_notification_service),
    current_user: dict = Depends(get_current_user),
) -> BookingRead:
    """Book a service for a date and time slot.

    Returns 404 if the service does not exist and 409 if the slot is
    already held by a pending or confirmed booking.  When
    ``NOTIFY_ON_BOOKING_CREATED`` is enabled the customer and the
    administrator are emailed after the response is sent.
    """
    created = await bookings.create_booking(current_user, booking)
    if request.app.state.settings.notify_on_booking_created:
        background_tasks.add_task(notifier.notify_booking_created, created)
    return created


@router.get("/my-bookings", response_model=List[BookingRead])
async def list_my_bookings(
    bookings: BookingService = Depends(get_booking_service),
    current_user: dict = Depends(get_current_user),
) -> List[BookingRead]:
    """Return the caller's bookings, newest first."""
    return await bookings.list_my_bookings(current_user)


@router.get("/check-availability", response_model=Availability)
async def check_availability(
    day: date = Query(..., alias="date", description="Day to check, YYYY-MM-DD"),
    bookings: BookingService = Depends(get_booking_service),
) -> Availability:
    """List the time slots already taken on a day."""
    return await bookings.check_availability(day)


@router.get("/{booking_id}", response_model=BookingRead)
async def get_booking(
    booking_id: str = Path(..., description="ID of the booking"),
    bookings: BookingService = Depends(get_booking_service),
    current_user: dict = Depends(get_current_user),
) -> BookingRead:
    """Retrieve a single booking.

    Users may only access their own bookings unless they are an
    administrator.
    """
    return await bookings.get_booking(booking_id, current_user)


@router.patch("/{booking_id}/cancel", response_model=BookingRead)
async def cancel_booking(
    booking_id: str = Path(..., description="ID of the booking"),
    bookings: BookingService = Depends(get_booking_service),
    current_user: dict = Depends(get_current_user),
) -> BookingRead:
    return await bookings.cancel_booking(booking_id, current_user)
