# booking_admin/main.py
"""
FastAPI application exposing the admin integrity endpoints.

The host admin application either mounts these routers on its own app or runs
this one behind its auth layer, which must populate ``request.state.actor_id``.
"""

import logging
from typing import Awaitable, Callable
import uuid

from fastapi import FastAPI, Request, Response

from .core.config import settings
from .core.request_context import configure_logging, reset_request_id, set_request_id
from .monitoring.prometheus_metrics import prometheus_metrics
from .routes import admin_audit, admin_blocked_dates

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging(settings.log_level)

    app = FastAPI(title="Booking Admin Integrity API", version="0.1.0")

    @app.middleware("http")
    async def bind_request_id(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        token = set_request_id(request_id)
        try:
            response = await call_next(request)
        finally:
            reset_request_id(token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    app.include_router(admin_blocked_dates.router)
    app.include_router(admin_audit.router)

    @app.get("/metrics", include_in_schema=False)
    def metrics() -> Response:
        return Response(
            content=prometheus_metrics.get_metrics(),
            media_type=prometheus_metrics.get_content_type(),
        )

    logger.info(f"Booking admin API configured (environment={settings.environment})")
    return app
