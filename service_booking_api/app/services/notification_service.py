"""
Transactional email notifications.

``NotificationService`` renders and sends three emails through
``fastapi-mail``: the "booking received" confirmation, the status
update sent when an administrator changes a booking, and the alert
that tells the administrator a new booking is waiting.

Sending never raises.  Every method returns a ``DeliveryResult`` and
logs failures, so callers can fire notifications after the booking
change has been committed without risking the request.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType

from ..core.config import Settings
from ..schemas.booking import BookingRead
from .email_templates import (
    STATUS_TEMPLATES,
    render_admin_alert,
    render_booking_received,
    render_status_update,
)


logger = logging.getLogger(__name__)


class Mailer(Protocol):
    async def send_message(self, message: MessageSchema) -> None:
        ...


@dataclass
class DeliveryResult:
    success: bool
    error: Optional[str] = None


def build_mailer(settings: Settings) -> FastMail:
    """Create the SMTP client from ``settings``.

    Port 465 uses implicit TLS, any other port STARTTLS.
    """
    implicit_tls = settings.email_port == 465
    conf = ConnectionConfig(
        MAIL_USERNAME=settings.email_user,
        MAIL_PASSWORD=settings.email_password,
        MAIL_FROM=settings.email_user,
        MAIL_FROM_NAME=settings.email_from_name,
        MAIL_PORT=settings.email_port,
        MAIL_SERVER=settings.email_host,
        MAIL_STARTTLS=not implicit_tls,
        MAIL_SSL_TLS=implicit_tls,
        USE_CREDENTIALS=bool(settings.email_password),
    )
    return FastMail(conf)


class NotificationService:
    """Render and dispatch booking emails."""

    def __init__(self, settings: Settings, mailer: Mailer) -> None:
        self.settings = settings
        self.mailer = mailer

    async def _send(self, recipient: str, subject: str, body: str, kind: str) -> DeliveryResult:
        message = MessageSchema(
            subject=subject,
            recipients=[recipient],
            body=body,
            subtype=MessageType.html,
        )
        try:
            await self.mailer.send_message(message)
        except Exception as exc:
            logger.error("Failed to send %s email to %s: %s", kind, recipient, exc)
            return DeliveryResult(success=False, error=str(exc))
        logger.info("Sent %s email to %s", kind, recipient)
        return DeliveryResult(success=True)

    async def send_booking_received(self, booking: BookingRead) -> DeliveryResult:
        if booking.user is None:
            return DeliveryResult(success=False, error="Booking has no customer")
        return await self._send(
            booking.user.email,
            "🎉 Booking Received - Service Booking Platform",
            render_booking_received(booking, self.settings.email_user),
            "booking received",
        )

    async def send_status_update(self, booking: BookingRead, status: str) -> DeliveryResult:
        """Tell the customer their booking moved to ``status``.

        Unknown statuses are refused rather than sent with another
        status's wording.
        """
        if booking.user is None:
            return DeliveryResult(success=False, error="Booking has no customer")
        template = STATUS_TEMPLATES.get(status)
        if template is None:
            logger.warning("No email template for status %r, booking %s", status, booking.id)
            return DeliveryResult(success=False, error=f"No template for status {status}")
        return await self._send(
            booking.user.email,
            f"{template['title']} - Service Booking Platform",
            render_status_update(booking, status, self.settings.email_user),
            f"status update ({status})",
        )

    async def send_admin_alert(self, booking: BookingRead) -> DeliveryResult:
        admin_url = f"{self.settings.frontend_url.rstrip('/')}/admin/bookings"
        return await self._send(
            self.settings.admin_recipient,
            "🔔 New Booking Received - Action Required",
            render_admin_alert(booking, admin_url),
            "admin alert",
        )

    async def notify_booking_created(self, booking: BookingRead) -> None:
        await self.send_booking_received(booking)
        await self.send_admin_alert(booking)
