"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
API can start against a local MongoDB without any setup.  In a
production deployment you should override these via environment
variables (for example from a ``.env`` file loaded by your process
manager).
"""

import os
from dataclasses import dataclass


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Service Booking API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    api_prefix: str = os.getenv("API_PREFIX", "/api")
    debug: bool = _flag("DEBUG")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 30)))

    # MongoDB connection string and database name.
    mongo_uri: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    mongo_db_name: str = os.getenv("MONGO_DB_NAME", "service_booking")

    # Outbound SMTP.  ``email_user`` doubles as the sender address and
    # the fallback recipient for admin alerts when ``admin_email`` is empty.
    email_host: str = os.getenv("EMAIL_HOST", "smtp.gmail.com")
    email_port: int = int(os.getenv("EMAIL_PORT", "587"))
    email_user: str = os.getenv("EMAIL_USER", "noreply@example.com")
    email_password: str = os.getenv("EMAIL_PASSWORD", "")
    email_from_name: str = os.getenv("EMAIL_FROM_NAME", "Service Booking")
    admin_email: str = os.getenv("ADMIN_EMAIL", "")

    # Public URL of the web front end, used for links in emails.
    frontend_url: str = os.getenv("FRONTEND_URL", "http://localhost:3000")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "5000"))

    # Browser origin allowed to make cross-origin calls.  Empty disables CORS.
    cors_origin: str = os.getenv("CORS_ORIGIN", "https://services-booking.netlify.app")

    # When enabled, creating a booking emails the customer and alerts the
    # admin.  Off by default: only status changes notify.
    notify_on_booking_created: bool = _flag("NOTIFY_ON_BOOKING_CREATED")

    @property
    def admin_recipient(self) -> str:
        return self.admin_email or self.email_user


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
