"""
Dependency providers for API routes.

Services are built per request around the database handle opened at
startup; the notification service is shared and lives on
``app.state``.
"""

from fastapi import Depends, Request
from pymongo.database import Database

from ..core.db import get_db
from ..services.admin_service import AdminService
from ..services.booking_service import BookingService
from ..services.catalog_service import CatalogService
from ..services.notification_service import NotificationService
from ..services.user_service import UserService


def get_catalog_service(db: Database = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_booking_service(db: Database = Depends(get_db)) -> BookingService:
    return BookingService(db)


def get_admin_service(db: Database = Depends(get_db)) -> AdminService:
    return AdminService(db)


def get_user_service(db: Database = Depends(get_db)) -> UserService:
    return UserService(db)


def get_notification_service(request: Request) -> NotificationService:
    return request.app.state.notifier
