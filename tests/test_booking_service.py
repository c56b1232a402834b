"""
Service-layer tests that drive ``BookingService`` and ``AdminService``
directly against the in-memory database.

Requests that race each other are run on their own threads with their
own event loops, the way concurrent requests reach the threadpool in
the running app.
"""

import asyncio
import itertools
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime

import pytest
from bson import ObjectId
from mongomock.collection import Collection as MockCollection
from pymongo.errors import AutoReconnect

from service_booking_api.app.core.db import BOOKINGS, SERVICES, SLOT_CLAIMS, USERS
from service_booking_api.app.core.errors import BadRequestError, ConflictError
from service_booking_api.app.schemas.booking import BookingCreate
from service_booking_api.app.services import admin_service, booking_service
from service_booking_api.app.services.admin_service import AdminService
from service_booking_api.app.services.booking_service import BookingService, slot_key


NOW = datetime(2025, 6, 15, 12, 0)
SLOT_DAY = datetime(2025, 6, 1)


def insert_user(db, name, email):
    doc = {"name": name, "email": email, "phone": None, "role": "user", "created_at": NOW}
    doc["_id"] = db[USERS].insert_one(doc).inserted_id
    return doc


@pytest.fixture
def user(db):
    return insert_user(db, "Jane", "jane@example.com")


@pytest.fixture
def other_user(db):
    return insert_user(db, "Bob", "bob@example.com")


@pytest.fixture
def service_id(db):
    return db[SERVICES].insert_one(
        {
            "name": "Basic Car Wash",
            "description": "Exterior wash",
            "category": "car_wash",
            "price": 29.99,
            "duration": 30,
            "status": "active",
            "created_at": NOW,
        }
    ).inserted_id


def request(service_id, booking_date=date(2025, 6, 1), time_slot="10:00"):
    return BookingCreate(
        service=str(service_id), booking_date=booking_date, time_slot=time_slot, address="1 Main St"
    )


def run_in_own_thread(coro):
    with ThreadPoolExecutor(max_workers=1) as pool:
        return pool.submit(asyncio.run, coro).result(timeout=10)


def active_bookings_on(db, day, time_slot):
    return db[BOOKINGS].count_documents(
        {"booking_date": day, "time_slot": time_slot, "status": {"$in": ["pending", "confirmed"]}}
    )


def status_of(db, booking_id):
    return db[BOOKINGS].find_one({"_id": ObjectId(booking_id)})["status"]


def test_parallel_creations_for_one_slot_admit_exactly_one(db, monkeypatch, user, other_user, service_id):
    # Each request's first write waits until the other request has done
    # all of its reads too; writes are then applied one at a time.
    both_read = threading.Barrier(2)
    one_writer = threading.Lock()
    first_writes = itertools.count()
    insert_one = MockCollection.insert_one

    def insert_once_both_have_read(self, *args, **kwargs):
        if next(first_writes) < 2:
            both_read.wait(timeout=5)
        with one_writer:
            return insert_one(self, *args, **kwargs)

    monkeypatch.setattr(MockCollection, "insert_one", insert_once_both_have_read)

    bookings = BookingService(db)
    with ThreadPoolExecutor(max_workers=2) as pool:
        futures = [
            pool.submit(asyncio.run, bookings.create_booking(customer, request(service_id)))
            for customer in (user, other_user)
        ]
        outcomes = []
        for future in futures:
            try:
                outcomes.append(future.result(timeout=10))
            except ConflictError as exc:
                outcomes.append(exc)

    created = [o for o in outcomes if not isinstance(o, ConflictError)]
    assert len(created) == 1
    assert len(outcomes) - len(created) == 1
    assert active_bookings_on(db, SLOT_DAY, "10:00") == 1
    claim = db[SLOT_CLAIMS].find_one({"_id": slot_key(SLOT_DAY, "10:00")})
    assert str(claim["booking_id"]) == created[0].id


def test_cancel_between_read_and_write_of_status_change(db, monkeypatch, user, other_user, service_id):
    bookings = BookingService(db)
    booking = asyncio.run(bookings.create_booking(user, request(service_id)))
    read_booking = admin_service.find_booking

    def read_then_owner_cancels(database, booking_id):
        doc = read_booking(database, booking_id)
        run_in_own_thread(bookings.cancel_booking(booking_id, user))
        return doc

    monkeypatch.setattr(admin_service, "find_booking", read_then_owner_cancels)

    with pytest.raises(ConflictError):
        asyncio.run(AdminService(db).update_booking_status(booking.id, "confirmed"))

    assert status_of(db, booking.id) == "cancelled"
    asyncio.run(bookings.create_booking(other_user, request(service_id)))
    assert active_bookings_on(db, SLOT_DAY, "10:00") == 1


def test_status_change_between_read_and_write_of_cancel(db, monkeypatch, user, other_user, service_id):
    bookings = BookingService(db)
    booking = asyncio.run(bookings.create_booking(user, request(service_id)))
    read_booking = booking_service.find_booking

    def read_then_admin_confirms(database, booking_id):
        doc = read_booking(database, booking_id)
        run_in_own_thread(AdminService(db).update_booking_status(booking_id, "confirmed"))
        return doc

    monkeypatch.setattr(booking_service, "find_booking", read_then_admin_confirms)

    with pytest.raises(ConflictError):
        asyncio.run(bookings.cancel_booking(booking.id, user))

    assert status_of(db, booking.id) == "confirmed"
    assert db[SLOT_CLAIMS].count_documents({"booking_id": ObjectId(booking.id)}) == 1
    with pytest.raises(ConflictError):
        asyncio.run(bookings.create_booking(other_user, request(service_id)))


def test_reopen_gives_back_the_claim_when_status_write_fails(db, monkeypatch, user, service_id):
    booking = asyncio.run(BookingService(db).create_booking(user, request(service_id)))
    admin = AdminService(db)
    asyncio.run(admin.update_booking_status(booking.id, "cancelled"))

    def store_unavailable(self, *args, **kwargs):
        raise AutoReconnect("store unavailable")

    monkeypatch.setattr(MockCollection, "find_one_and_update", store_unavailable)

    with pytest.raises(AutoReconnect):
        asyncio.run(admin.update_booking_status(booking.id, "pending"))

    monkeypatch.undo()
    assert db[SLOT_CLAIMS].count_documents({}) == 0
    assert status_of(db, booking.id) == "cancelled"


def test_failed_claim_leaves_no_booking_behind(db, user, service_id):
    bookings = BookingService(db)
    asyncio.run(bookings.create_booking(user, request(service_id)))

    with pytest.raises(ConflictError):
        asyncio.run(bookings.create_booking(user, request(service_id)))

    assert db[BOOKINGS].count_documents({}) == 1


def test_invalid_status_leaves_document_untouched(db, user, service_id):
    booking = asyncio.run(BookingService(db).create_booking(user, request(service_id)))
    before = db[BOOKINGS].find_one({"_id": ObjectId(booking.id)})

    with pytest.raises(BadRequestError):
        asyncio.run(AdminService(db).update_booking_status(booking.id, "done"))

    assert db[BOOKINGS].find_one({"_id": ObjectId(booking.id)}) == before


def test_status_change_reports_previous_status(db, user, service_id):
    booking = asyncio.run(BookingService(db).create_booking(user, request(service_id)))
    admin = AdminService(db)

    change = asyncio.run(admin.update_booking_status(booking.id, "confirmed"))
    assert change.previous_status == "pending"
    assert change.changed

    again = asyncio.run(admin.update_booking_status(booking.id, "confirmed"))
    assert not again.changed


def test_dashboard_uses_the_injected_clock(db, user, service_id):
    bookings = BookingService(db)
    admin = AdminService(db, clock=lambda: NOW)

    today = asyncio.run(bookings.create_booking(user, request(service_id, date(2025, 6, 15), "09:00")))
    soon = asyncio.run(bookings.create_booking(user, request(service_id, date(2025, 6, 22), "09:00")))
    asyncio.run(bookings.create_booking(user, request(service_id, date(2025, 6, 23), "09:00")))
    done = asyncio.run(bookings.create_booking(user, request(service_id, date(2025, 6, 10), "09:00")))
    asyncio.run(admin.update_booking_status(done.id, "completed"))

    # Completed last month, and an older record without a completion time.
    db[BOOKINGS].insert_many(
        [
            {
                "user_id": user["_id"], "service_id": service_id, "booking_date": datetime(2025, 5, 20),
                "time_slot": "09:00", "address": "x", "notes": "", "status": "completed",
                "total_price": 50.0, "created_at": datetime(2025, 5, 1), "completed_at": datetime(2025, 5, 20),
            },
            {
                "user_id": user["_id"], "service_id": service_id, "booking_date": datetime(2025, 5, 21),
                "time_slot": "09:00", "address": "x", "notes": "", "status": "completed",
                "total_price": 20.0, "created_at": datetime(2025, 5, 2), "completed_at": None,
            },
        ]
    )

    dashboard = asyncio.run(admin.get_dashboard())

    stats = dashboard.statistics
    assert stats.total_bookings == 6
    assert stats.completed_bookings == 3
    assert stats.pending_bookings == 3
    assert stats.total_revenue == pytest.approx(99.99)
    assert stats.monthly_revenue == pytest.approx(29.99)
    assert stats.today_bookings == 1
    assert stats.total_users == 1
    assert stats.total_services == 1
    assert [b.id for b in dashboard.upcoming_bookings] == [today.id, soon.id]
    assert len(dashboard.recent_bookings) == 6


def test_recent_bookings_are_capped(db, user, service_id):
    bookings = BookingService(db)
    for hour in range(12):
        asyncio.run(bookings.create_booking(user, request(service_id, time_slot=f"{hour:02d}:00")))

    dashboard = asyncio.run(AdminService(db, clock=lambda: NOW).get_dashboard())

    assert len(dashboard.recent_bookings) == 10


def test_store_work_runs_off_the_event_loop_thread(db, monkeypatch, user, service_id):
    booking = asyncio.run(BookingService(db).create_booking(user, request(service_id)))
    reader_threads = []
    read_booking = booking_service.find_booking

    def recording_read(database, booking_id):
        reader_threads.append(threading.get_ident())
        return read_booking(database, booking_id)

    monkeypatch.setattr(booking_service, "find_booking", recording_read)

    async def fetch():
        await BookingService(db).get_booking(booking.id, user)
        return threading.get_ident()

    loop_thread = asyncio.run(fetch())

    assert len(reader_threads) == 1
    assert reader_threads[0] != loop_thread
