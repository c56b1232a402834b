"""
Top‑level router for version 1 of the API.

This router aggregates the area routers (auth, services, bookings,
admin) under a unified prefix.
"""

from fastapi import APIRouter

from .endpoints import admin, auth, bookings, services

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(services.router, prefix="/services", tags=["services"])
router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
