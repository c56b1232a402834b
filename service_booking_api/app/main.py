"""
Main entrypoint for the Service Booking API.

This module assembles the FastAPI application: logging, CORS, error
handlers, the MongoDB connection lifecycle and the versioned routers.
``create_app`` builds and configures the app, which is then
instantiated at module import time as ``app``::

    uvicorn service_booking_api.app.main:app --reload

``create_app`` also accepts a ready-made Mongo client and mail client
so tests can run the whole application against in-memory doubles.
"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from pymongo import MongoClient

from .api.v1.router import router as v1_router
from .core import db as database
from .core.config import Settings, settings as default_settings
from .core.errors import register_error_handlers
from .core.logging_config import setup_logging
from .services.notification_service import Mailer, NotificationService, build_mailer


def create_app(
    settings: Optional[Settings] = None,
    mongo_client: Optional[MongoClient] = None,
    mailer: Optional[Mailer] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration; the environment-derived settings by default.
    mongo_client : Optional[MongoClient]
        Client to use instead of connecting to ``settings.mongo_uri``.
    mailer : Optional[Mailer]
        Object with an async ``send_message``; an SMTP ``FastMail``
        built from ``settings`` by default.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    app.state.settings = settings
    app.state.notifier = NotificationService(settings, mailer or build_mailer(settings))

    if settings.cors_origin:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[settings.cors_origin],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_error_handlers(app)
    app.include_router(v1_router, prefix=settings.api_prefix)

    @app.on_event("startup")
    async def startup_event() -> None:
        client = mongo_client or database.connect(settings)
        app.state.mongo_client = client
        app.state.db = client[settings.mongo_db_name]
        database.init_db(app.state.db)

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        database.close(getattr(app.state, "mongo_client", None))

    @app.get("/health", tags=["health"])
    # Plain def: ``ping`` blocks, so it runs in the threadpool.
    def health(request: Request) -> dict:
        request.app.state.db.command("ping")
        return {"status": "ok", "database": request.app.state.db.name}

    return app


# Create the application instance at import time so that ASGI servers
# can reference ``service_booking_api.app.main:app``.
app = create_app()
