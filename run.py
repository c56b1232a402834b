"""Entry point for running the Service Booking API.

Host and port are read from the ``HOST`` and ``PORT`` environment
variables via ``Settings``.  Defaults are ``0.0.0.0`` and ``5000``.

Usage:
    python run.py
"""
from uvicorn import Config, Server

from service_booking_api.app.core.config import settings
from service_booking_api.app.main import app


def main() -> None:
    config = Config(app=app, host=settings.host, port=settings.port, reload=False, log_level=settings.log_level.lower())
    Server(config).run()


if __name__ == "__main__":
    main()
