"""Request middleware: shared-secret access control, fault recovery and access logs."""

from __future__ import annotations

from collections.abc import Callable
from collections.abc import Sequence
import hmac
import logging
import time

from fastapi import Request
from fastapi import Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from reqcheck.core.errors import forbidden
from reqcheck.core.errors import internal_error
from reqcheck.core.errors import write_error

logger = logging.getLogger(__name__)


class AccessMiddleware(BaseHTTPMiddleware):
    """Reject requests whose shared-secret header does not match the configured value."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        secret: str,
        header: str = "Secret",
        exempt_paths: Sequence[str] = (),
    ) -> None:
        super().__init__(app)
        if not secret:
            raise ValueError("secret is required")
        self._secret = secret.encode()
        self._header = header
        self._exempt_paths = frozenset(exempt_paths)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in self._exempt_paths:
            return await call_next(request)

        provided = request.headers.get(self._header, "").encode()
        if not hmac.compare_digest(provided, self._secret):
            logger.warning("Denied %s %s: shared secret mismatch", request.method, request.url.path)
            return write_error(forbidden())
        return await call_next(request)


class RecoveryMiddleware(BaseHTTPMiddleware):
    """Convert any exception escaping a handler into a single 500 response."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception("Unhandled exception for %s %s", request.method, request.url.path)
            return write_error(internal_error(exc))


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log method, URL and elapsed time for every request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "[%s] %r %d %.2fms",
            request.method,
            str(request.url),
            response.status_code,
            elapsed_ms,
        )
        return response
