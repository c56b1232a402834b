"""Pydantic models for the admin dashboard."""

from typing import List

from .base import APIModel

from .booking import BookingRead


class DashboardStatistics(APIModel):
    total_bookings: int
    pending_bookings: int
    confirmed_bookings: int
    completed_bookings: int
    cancelled_bookings: int
    total_users: int
    total_services: int
    total_revenue: float
    monthly_revenue: float
    today_bookings: int


class DashboardRead(APIModel):
    statistics: DashboardStatistics
    recent_bookings: List[BookingRead]
    upcoming_bookings: List[BookingRead]
