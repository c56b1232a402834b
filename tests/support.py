# Shared helpers for API and service tests.
# Keeps request payloads and the recording mail client in one place so
# test modules stay focused on behaviour.

from __future__ import annotations

from typing import Any

from fastapi.testclient import TestClient

from service_booking_api.app.core.config import Settings


class RecordingMailer:
    """Stands in for ``FastMail``; keeps every message it is asked to send."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[Any] = []

    async def send_message(self, message: Any) -> None:
        if self.fail:
            raise ConnectionError("SMTP relay unavailable")
        self.sent.append(message)

    @property
    def subjects(self) -> list[str]:
        return [message.subject for message in self.sent]


def build_settings(**overrides: Any) -> Settings:
    values = {
        "mongo_db_name": "service_booking_test",
        "cors_origin": "",
        "email_user": "support@servicebooking.com",
        "admin_email": "alerts@servicebooking.com",
        "frontend_url": "https://frontend.test",
        "notify_on_booking_created": False,
    }
    values.update(overrides)
    return Settings(**values)


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def register(client: TestClient, name: str, email: str, phone: str | None = "+1 555 0100") -> dict[str, str]:
    response = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": "password123", "phone": phone},
    )
    assert response.status_code == 201, response.text
    return auth_headers(response.json()["token"])


def make_service(client: TestClient, admin: dict[str, str], **overrides: Any) -> dict[str, Any]:
    payload = {
        "name": "Basic Car Wash",
        "description": "Exterior wash, interior vacuum, tire shine, and window cleaning.",
        "category": "car_wash",
        "price": 29.99,
        "duration": 30,
    }
    payload.update(overrides)
    response = client.post("/api/services", json=payload, headers=admin)
    assert response.status_code == 201, response.text
    return response.json()


def make_booking(
    client: TestClient,
    headers: dict[str, str],
    service_id: str,
    booking_date: str = "2025-06-01",
    time_slot: str = "10:00",
    **overrides: Any,
):
    payload = {
        "service": service_id,
        "bookingDate": booking_date,
        "timeSlot": time_slot,
        "address": "221B Baker Street",
        "notes": "Ring twice",
    }
    payload.update(overrides)
    return client.post("/api/bookings", json=payload, headers=headers)
