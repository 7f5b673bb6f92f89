"""FastAPI application entrypoint for reqcheck."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from reqcheck.api.middleware import AccessMiddleware
from reqcheck.api.middleware import LoggingMiddleware
from reqcheck.api.middleware import RecoveryMiddleware
from reqcheck.core.config import Settings
from reqcheck.core.config import get_settings
from reqcheck.core.errors import register_error_handlers

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build an app with the shared error envelope and middleware chain installed.

    Middleware runs access control first, then fault recovery, then request
    logging, then the handler.
    """
    settings = settings or get_settings()
    logging.getLogger("reqcheck").setLevel(settings.log_level)
    logger.info("Creating app with settings=%s", settings.safe_for_logging())

    app = FastAPI(title="reqcheck")
    register_error_handlers(app)

    # add_middleware wraps, so the last one added runs first
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RecoveryMiddleware)
    if settings.access_control_enabled:
        app.add_middleware(
            AccessMiddleware,
            secret=settings.access_secret,
            header=settings.secret_header,
            exempt_paths=settings.exempt_paths,
        )

    @app.get("/health")
    def health() -> dict[str, str]:
        """Health check endpoint for service readiness."""
        return {"status": "ok"}

    return app


app = create_app()
