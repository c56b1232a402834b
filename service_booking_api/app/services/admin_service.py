"""
Service layer for administrator operations and reporting.

``AdminService`` lists and filters every booking, moves bookings
between statuses, hard-deletes them and computes the dashboard
figures.  Status changes only persist; sending the customer email is
left to the caller so a mail failure never undoes a committed change.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional

from pymongo import ASCENDING, DESCENDING
from pymongo.database import Database
from pymongo.errors import PyMongoError

from ..core.db import BOOKINGS, SERVICES, USERS, day_start, in_threadpool, utcnow
from ..core.errors import BadRequestError, ConflictError
from ..schemas.booking import ACTIVE_STATUSES, BookingRead, BookingStatus
from ..schemas.dashboard import DashboardRead, DashboardStatistics
from ..schemas.service import ServiceStatus
from ..schemas.user import Role
from .booking_service import claim_slot, find_booking, join_bookings, release_slot, write_status


logger = logging.getLogger(__name__)

RECENT_BOOKINGS_LIMIT = 10
UPCOMING_DAYS = 7


@dataclass
class StatusChange:
    booking: BookingRead
    previous_status: str

    @property
    def changed(self) -> bool:
        return self.previous_status != self.booking.status.value


class AdminService:
    """Booking administration and dashboard statistics."""

    def __init__(self, db: Database, clock: Callable[[], datetime] = utcnow) -> None:
        self.db = db
        self.bookings = db[BOOKINGS]
        self.clock = clock

    @in_threadpool
    def list_bookings(
        self,
        status: Optional[str] = None,
        day: Optional[date] = None,
        search: Optional[str] = None,
    ) -> List[BookingRead]:
        """List bookings, newest first.

        ``status`` and ``day`` are applied by the query.  ``search`` is
        matched afterwards, case-insensitively, against the customer's
        name and email and the service name.
        """
        query: dict = {}
        if status:
            query["status"] = status
        if day is not None:
            start = day_start(day)
            query["booking_date"] = {"$gte": start, "$lt": start + timedelta(days=1)}

        bookings = join_bookings(self.db, self.bookings.find(query).sort("created_at", DESCENDING))
        if search:
            needle = search.lower()
            bookings = [
                b for b in bookings
                if (b.user and (needle in b.user.name.lower() or needle in b.user.email.lower()))
                or (b.service and needle in b.service.name.lower())
            ]
        return bookings

    @in_threadpool
    def update_booking_status(self, booking_id: str, new_status: str) -> StatusChange:
        """Set a booking's status.

        Raises ``BadRequestError`` for a value outside the valid set,
        ``NotFoundError`` for an unknown booking and ``ConflictError``
        when reopening a booking whose slot has been taken since or
        when another request changed the status in the meantime.
        """
        try:
            target = BookingStatus(new_status)
        except ValueError:
            raise BadRequestError("Invalid status") from None

        doc = find_booking(self.db, booking_id)
        previous = doc["status"]
        was_active = previous in ACTIVE_STATUSES
        now_active = target.value in ACTIVE_STATUSES

        changes: dict = {"status": target.value}
        if target is BookingStatus.COMPLETED:
            if previous != BookingStatus.COMPLETED.value:
                changes["completed_at"] = self.clock()
        else:
            changes["completed_at"] = None

        reclaim = now_active and not was_active
        if reclaim:
            claim_slot(self.db, doc["_id"], doc["booking_date"], doc["time_slot"])
        try:
            updated = write_status(self.db, doc, changes)
        except (ConflictError, PyMongoError):
            if reclaim:
                release_slot(self.db, doc)
            raise

        if was_active and not now_active:
            release_slot(self.db, doc)

        if previous != target.value:
            logger.info("Booking %s status %s -> %s", booking_id, previous, target.value)
        return StatusChange(booking=join_bookings(self.db, [updated])[0], previous_status=previous)

    @in_threadpool
    def delete_booking(self, booking_id: str) -> None:
        doc = find_booking(self.db, booking_id)
        self.bookings.delete_one({"_id": doc["_id"]})
        release_slot(self.db, doc)
        logger.info("Deleted booking %s", booking_id)

    def _revenue(self, query: dict) -> float:
        pipeline = [
            {"$match": query},
            {"$group": {"_id": None, "total": {"$sum": "$total_price"}}},
        ]
        rows = list(self.bookings.aggregate(pipeline))
        return round(rows[0]["total"], 2) if rows else 0.0

    @in_threadpool
    def get_dashboard(self) -> DashboardRead:
        """Compute the dashboard as of now.

        Monthly revenue counts bookings completed since the first
        instant of the current month.  Bookings completed before
        completion times were recorded fall back to their creation
        time.
        """
        now = self.clock()
        today = datetime(now.year, now.month, now.day)
        tomorrow = today + timedelta(days=1)
        month_start = today.replace(day=1)

        def count(status: BookingStatus) -> int:
            return self.bookings.count_documents({"status": status.value})

        completed = BookingStatus.COMPLETED.value
        statistics = DashboardStatistics(
            total_bookings=self.bookings.count_documents({}),
            pending_bookings=count(BookingStatus.PENDING),
            confirmed_bookings=count(BookingStatus.CONFIRMED),
            completed_bookings=count(BookingStatus.COMPLETED),
            cancelled_bookings=count(BookingStatus.CANCELLED),
            total_users=self.db[USERS].count_documents({"role": Role.USER.value}),
            total_services=self.db[SERVICES].count_documents({"status": ServiceStatus.ACTIVE.value}),
            total_revenue=self._revenue({"status": completed}),
            monthly_revenue=self._revenue(
                {
                    "status": completed,
                    "$or": [
                        {"completed_at": {"$gte": month_start}},
                        {"completed_at": None, "created_at": {"$gte": month_start}},
                    ],
                }
            ),
            today_bookings=self.bookings.count_documents(
                {"booking_date": {"$gte": today, "$lt": tomorrow}}
            ),
        )

        recent = self.bookings.find().sort("created_at", DESCENDING).limit(RECENT_BOOKINGS_LIMIT)
        upcoming = self.bookings.find(
            {
                "booking_date": {"$gte": today, "$lte": today + timedelta(days=UPCOMING_DAYS)},
                "status": {"$in": sorted(ACTIVE_STATUSES)},
            }
        ).sort("booking_date", ASCENDING)

        return DashboardRead(
            statistics=statistics,
            recent_bookings=join_bookings(self.db, recent),
            upcoming_bookings=join_bookings(self.db, upcoming),
        )
