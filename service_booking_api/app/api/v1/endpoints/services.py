"""
Public service catalog endpoints for API v1.

Listing and fetching services is open to everyone; creating a service
requires an administrator.  Updating and retiring services lives in
the admin router.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from service_booking_api.app.api.deps import get_catalog_service
from service_booking_api.app.core.security import require_role
from service_booking_api.app.schemas.service import ServiceCategory, ServiceCreate, ServiceRead
from service_booking_api.app.schemas.user import Role
from service_booking_api.app.services.catalog_service import CatalogService


router = APIRouter()


@router.get("", response_model=List[ServiceRead])
async def list_services(
    category: Optional[ServiceCategory] = Query(None),
    catalog: CatalogService = Depends(get_catalog_service),
) -> List[ServiceRead]:
    """List active services, optionally filtered by ``category``."""
    return await catalog.list_services(category)


@router.get("/{service_id}", response_model=ServiceRead)
async def get_service(
    service_id: str = Path(..., description="ID of the service"),
    catalog: CatalogService = Depends(get_catalog_service),
) -> ServiceRead:
    return await catalog.get_service(service_id)


@router.post("", response_model=ServiceRead, status_code=status.HTTP_201_CREATED)
async def create_service(
    service: ServiceCreate,
    catalog: CatalogService = Depends(get_catalog_service),
    current_user: dict = Depends(require_role(Role.ADMIN)),
) -> ServiceRead:
    """Create a new service.  Administrators only."""
    return await catalog.create_service(service)
