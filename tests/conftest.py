"""
Shared test configuration.

The application runs against ``mongomock``'s in-memory client and a
recording mail client, so no MongoDB server or SMTP relay is needed.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import mongomock
import pytest
from fastapi.testclient import TestClient

from service_booking_api.app.core.config import Settings
from service_booking_api.app.core.db import USERS, init_db, utcnow
from service_booking_api.app.core.security import hash_password
from service_booking_api.app.main import create_app
from tests.support import RecordingMailer, auth_headers, build_settings, make_service, register

ADMIN_EMAIL = "admin@servicebooking.com"
ADMIN_PASSWORD = "admin-secret"


@pytest.fixture
def settings() -> Settings:
    return build_settings()


@pytest.fixture
def mongo_client() -> mongomock.MongoClient:
    return mongomock.MongoClient()


@pytest.fixture
def db(mongo_client: mongomock.MongoClient, settings: Settings):
    database = mongo_client[settings.mongo_db_name]
    init_db(database)
    return database


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def client(settings: Settings, mongo_client: mongomock.MongoClient, mailer: RecordingMailer) -> Iterator[TestClient]:
    app = create_app(settings, mongo_client=mongo_client, mailer=mailer)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def customer(client: TestClient) -> dict[str, str]:
    return register(client, "Jane Customer", "jane@example.com")


@pytest.fixture
def other_customer(client: TestClient) -> dict[str, str]:
    return register(client, "Bob Other", "bob@example.com")


@pytest.fixture
def admin(client: TestClient, db) -> dict[str, str]:
    db[USERS].insert_one(
        {
            "name": "Admin User",
            "email": ADMIN_EMAIL,
            "password": hash_password(ADMIN_PASSWORD),
            "phone": None,
            "role": "admin",
            "created_at": utcnow(),
        }
    )
    response = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200, response.text
    return auth_headers(response.json()["token"])


@pytest.fixture
def service(client: TestClient, admin: dict[str, str]) -> dict[str, Any]:
    return make_service(client, admin)
