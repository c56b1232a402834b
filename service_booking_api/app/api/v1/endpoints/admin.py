"""
Administrator endpoints for API v1.

Every route here is guarded by the admin role at router level.  They
cover booking management (filtering, status changes, hard delete),
the dashboard, the user list and catalog maintenance.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Path, Query

from service_booking_api.app.api.deps import (
    get_admin_service,
    get_catalog_service,
    get_notification_service,
    get_user_service,
)
from service_booking_api.app.core.security import require_role
from service_booking_api.app.schemas.booking import (
    BookingRead,
    BookingStatusResponse,
    MessageResponse,
    StatusUpdate,
)
from service_booking_api.app.schemas.dashboard import DashboardRead
from service_booking_api.app.schemas.service import ServiceRead, ServiceUpdate, ServiceUpdateResponse
from service_booking_api.app.schemas.user import Role, UserRead
from service_booking_api.app.services.admin_service import AdminService
from service_booking_api.app.services.catalog_service import CatalogService
from service_booking_api.app.services.notification_service import NotificationService
from service_booking_api.app.services.user_service import UserService


router = APIRouter(dependencies=[Depends(require_role(Role.ADMIN))])


@router.get("/bookings", response_model=List[BookingRead])
async def list_bookings(
    status: Optional[str] = Query(None, description="Exact status to match"),
    day: Optional[date] = Query(None, alias="date", description="Booking date, YYYY-MM-DD"),
    search: Optional[str] = Query(None, description="Customer name/email or service name"),
    admin: AdminService = Depends(get_admin_service),
) -> List[BookingRead]:
    """List all bookings, newest first, with optional filters."""
    return await admin.list_bookings(status=status, day=day, search=search)


@router.patch("/bookings/{booking_id}/status", response_model=BookingStatusResponse)
async def update_booking_status(
    body: StatusUpdate,
    background_tasks: BackgroundTasks,
    booking_id: str = Path(..., description="ID of the booking"),
    admin: AdminService = Depends(get_admin_service),
    notifier: NotificationService = Depends(get_notification_service),
) -> BookingStatusResponse:
    """Change a booking's status.

    Accepts ``pending``, ``confirmed``, ``completed`` or ``cancelled``;
    anything else is a 400.  When the status actually changes the
    customer is emailed after the response is sent, so a mail failure
    cannot undo or fail the update.
    """
    change = await admin.update_booking_status(booking_id, body.status)
    status_value = change.booking.status.value
    if change.changed:
        background_tasks.add_task(notifier.send_status_update, change.booking, status_value)
        message = f"Booking {status_value} successfully. Customer notification queued."
    else:
        message = f"Booking already {status_value}."
    return BookingStatusResponse(message=message, booking=change.booking)


@router.get("/dashboard", response_model=DashboardRead)
async def dashboard(admin: AdminService = Depends(get_admin_service)) -> DashboardRead:
    return await admin.get_dashboard()


@router.get("/users", response_model=List[UserRead])
async def list_users(users: UserService = Depends(get_user_service)) -> List[UserRead]:
    """All users, newest first.  Password hashes are never returned."""
    return await users.list_users()


@router.get("/services/all", response_model=List[ServiceRead])
async def list_all_services(catalog: CatalogService = Depends(get_catalog_service)) -> List[ServiceRead]:
    """All services including retired ones."""
    return await catalog.list_all_services()


@router.put("/services/{service_id}", response_model=ServiceUpdateResponse)
async def update_service(
    patch: ServiceUpdate,
    service_id: str = Path(..., description="ID of the service"),
    catalog: CatalogService = Depends(get_catalog_service),
) -> ServiceUpdateResponse:
    service = await catalog.update_service(service_id, patch)
    return ServiceUpdateResponse(message="Service updated successfully", service=service)


@router.delete("/services/{service_id}", response_model=MessageResponse)
async def delete_service(
    service_id: str = Path(..., description="ID of the service"),
    catalog: CatalogService = Depends(get_catalog_service),
) -> MessageResponse:
    """Retire a service.  It disappears from the public catalog but existing bookings keep it."""
    await catalog.deactivate_service(service_id)
    return MessageResponse(message="Service deleted successfully")


@router.delete("/bookings/{booking_id}", response_model=MessageResponse)
async def delete_booking(
    booking_id: str = Path(..., description="ID of the booking"),
    admin: AdminService = Depends(get_admin_service),
) -> MessageResponse:
    """Delete a booking permanently."""
    await admin.delete_booking(booking_id)
    return MessageResponse(message="Booking deleted successfully")
