"""
Business logic for bookings.

The ``BookingService`` covers the customer side of the lifecycle:
creating a booking, listing and fetching bookings, cancelling and
checking which slots of a day are taken.

Slot occupation is arbitrated by the ``slot_claims`` collection.  A
claim document's ``_id`` is the ``(date, slot)`` pair, so inserting it
either succeeds or fails with a duplicate key; there is no window
between checking a slot and taking it.  A claim is held while its
booking is ``pending`` or ``confirmed`` and released when the booking
reaches a terminal status or is deleted.

Status writes go through ``write_status``, which only succeeds if the
booking still has the status the caller read.  Claiming or releasing
the slot is decided from that status, so two requests changing the
same booking cannot leave it active without a claim.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, List

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..core.db import BOOKINGS, SERVICES, SLOT_CLAIMS, USERS, day_start, in_threadpool, parse_object_id, utcnow
from ..core.errors import ConflictError, ForbiddenError, NotFoundError
from ..core.security import is_admin
from ..schemas.booking import (
    ACTIVE_STATUSES,
    Availability,
    BookingCreate,
    BookingRead,
    BookingStatus,
    BookingUser,
)
from .catalog_service import service_to_read


logger = logging.getLogger(__name__)


def slot_key(booking_date: datetime, time_slot: str) -> str:
    return f"{booking_date:%Y-%m-%d}|{time_slot}"


def claim_slot(db: Database, booking_id: ObjectId, booking_date: datetime, time_slot: str) -> None:
    """Occupy ``(booking_date, time_slot)`` for ``booking_id``.

    Raises ``ConflictError`` if another active booking holds the slot.
    """
    try:
        db[SLOT_CLAIMS].insert_one(
            {
                "_id": slot_key(booking_date, time_slot),
                "booking_id": booking_id,
                "booking_date": booking_date,
                "time_slot": time_slot,
                "claimed_at": utcnow(),
            }
        )
    except DuplicateKeyError:
        logger.info("Slot %s %s already booked", f"{booking_date:%Y-%m-%d}", time_slot)
        raise ConflictError("Time slot already booked") from None


def release_slot(db: Database, booking: dict) -> None:
    """Free the slot held by ``booking``.  A no-op if it holds none."""
    db[SLOT_CLAIMS].delete_one(
        {
            "_id": slot_key(booking["booking_date"], booking["time_slot"]),
            "booking_id": booking["_id"],
        }
    )


def join_bookings(db: Database, docs: Iterable[dict]) -> List[BookingRead]:
    """Attach user and service details to booking documents.

    Users and services are fetched with one query each, whatever the
    number of bookings.
    """
    docs = list(docs)
    user_ids = {doc["user_id"] for doc in docs}
    service_ids = {doc["service_id"] for doc in docs}
    users = {
        u["_id"]: u
        for u in db[USERS].find({"_id": {"$in": list(user_ids)}}, {"password": 0})
    } if user_ids else {}
    services = {
        s["_id"]: s for s in db[SERVICES].find({"_id": {"$in": list(service_ids)}})
    } if service_ids else {}

    result: List[BookingRead] = []
    for doc in docs:
        user = users.get(doc["user_id"])
        service = services.get(doc["service_id"])
        result.append(
            BookingRead(
                id=str(doc["_id"]),
                user=BookingUser(
                    id=str(user["_id"]),
                    name=user["name"],
                    email=user["email"],
                    phone=user.get("phone"),
                ) if user else None,
                service=service_to_read(service) if service else None,
                booking_date=doc["booking_date"].date(),
                time_slot=doc["time_slot"],
                address=doc["address"],
                notes=doc.get("notes") or "",
                status=doc["status"],
                total_price=doc["total_price"],
                created_at=doc["created_at"],
                completed_at=doc.get("completed_at"),
            )
        )
    return result


def find_booking(db: Database, booking_id: str) -> dict:
    oid = parse_object_id(booking_id)
    doc = db[BOOKINGS].find_one({"_id": oid}) if oid else None
    if not doc:
        raise NotFoundError("Booking not found")
    return doc


def write_status(db: Database, doc: dict, changes: dict) -> dict:
    """Apply ``changes`` only if the booking still has the status it was read with.

    Callers decide whether to claim or release the slot from that status,
    so a write against a newer status is refused with ``ConflictError``.
    Returns the updated document.
    """
    updated = db[BOOKINGS].find_one_and_update(
        {"_id": doc["_id"], "status": doc["status"]},
        {"$set": changes},
        return_document=ReturnDocument.AFTER,
    )
    if updated is None:
        logger.info("Booking %s changed since it was read; status write refused", doc["_id"])
        raise ConflictError("Booking was updated by another request, please retry")
    return updated


class BookingService:
    """Customer-facing booking operations."""

    def __init__(self, db: Database) -> None:
        self.db = db
        self.collection = db[BOOKINGS]

    def _joined(self, doc: dict) -> BookingRead:
        return join_bookings(self.db, [doc])[0]

    @in_threadpool
    def create_booking(self, user: dict, data: BookingCreate) -> BookingRead:
        """Create a ``pending`` booking for ``user``.

        The total price is a snapshot of the service price at this
        moment; later price edits do not touch it.  Raises
        ``NotFoundError`` for an unknown service and ``ConflictError``
        when the slot is already taken.
        """
        service_oid = parse_object_id(data.service)
        service = self.db[SERVICES].find_one({"_id": service_oid}) if service_oid else None
        if not service:
            raise NotFoundError("Service not found")

        booking_id = ObjectId()
        booking_date = day_start(data.booking_date)
        claim_slot(self.db, booking_id, booking_date, data.time_slot)

        doc = {
            "_id": booking_id,
            "user_id": user["_id"],
            "service_id": service["_id"],
            "booking_date": booking_date,
            "time_slot": data.time_slot,
            "address": data.address,
            "notes": data.notes or "",
            "status": BookingStatus.PENDING.value,
            "total_price": service["price"],
            "created_at": utcnow(),
            "completed_at": None,
        }
        try:
            self.collection.insert_one(doc)
        except PyMongoError:
            release_slot(self.db, doc)
            raise
        logger.info(
            "User %s booked service %s on %s at %s (booking %s)",
            user["_id"], service["_id"], data.booking_date, data.time_slot, booking_id,
        )
        return self._joined(doc)

    @in_threadpool
    def list_my_bookings(self, user: dict) -> List[BookingRead]:
        cursor = self.collection.find({"user_id": user["_id"]}).sort("created_at", DESCENDING)
        return join_bookings(self.db, cursor)

    @in_threadpool
    def get_booking(self, booking_id: str, requester: dict) -> BookingRead:
        doc = find_booking(self.db, booking_id)
        if doc["user_id"] != requester["_id"] and not is_admin(requester):
            raise ForbiddenError("Not authorized")
        return self._joined(doc)

    @in_threadpool
    def cancel_booking(self, booking_id: str, user: dict) -> BookingRead:
        """Cancel a booking on behalf of its owner.

        The current status is not checked, so completed bookings can
        be cancelled too.  Only the owner may cancel.  Raises
        ``ConflictError`` if the status changes while cancelling.
        """
        doc = find_booking(self.db, booking_id)
        if doc["user_id"] != user["_id"]:
            raise ForbiddenError("Not authorized")
        updated = write_status(
            self.db, doc, {"status": BookingStatus.CANCELLED.value, "completed_at": None}
        )
        if doc["status"] in ACTIVE_STATUSES:
            release_slot(self.db, doc)
        logger.info("User %s cancelled booking %s", user["_id"], booking_id)
        return self._joined(updated)

    @in_threadpool
    def check_availability(self, day: date) -> Availability:
        """Return the slot labels already taken on ``day``."""
        start = day_start(day)
        cursor = self.collection.find(
            {
                "booking_date": {"$gte": start, "$lt": start + timedelta(days=1)},
                "status": {"$in": sorted(ACTIVE_STATUSES)},
            },
            {"time_slot": 1},
        )
        return Availability(date=day, booked_slots=sorted({doc["time_slot"] for doc in cursor}))
