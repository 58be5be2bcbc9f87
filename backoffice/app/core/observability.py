"""
Request correlation and logging setup.

Every request gets a correlation id (taken from the `X-Correlation-ID`
header when the caller sends one). The id is kept in a context variable so
ledger log lines written deep inside an atomic unit carry it too.
"""

import time
import uuid
import logging
from contextvars import ContextVar
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("backoffice")

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="-")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s %(message)s"


class CorrelationIdFilter(logging.Filter):
    """Stamp the current request's correlation id on each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get()
        return True


def configure_logging(level: str = "INFO") -> None:
    """Attach a correlated stream handler to the service logger."""
    if not any(isinstance(f, CorrelationIdFilter) for h in logger.handlers for f in h.filters):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.addFilter(CorrelationIdFilter())
        logger.addHandler(handler)
    logger.setLevel(level.upper())


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        token = correlation_id_var.set(correlation_id)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            correlation_id_var.reset(token)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

        response.headers["X-Correlation-ID"] = correlation_id
        response.headers["X-Process-Time"] = str(elapsed_ms)

        summary = "%s %s -> %s (%.2f ms)"
        args = (request.method, request.url.path, response.status_code, elapsed_ms)
        if response.status_code >= 500:
            logger.error(summary, *args)
        elif response.status_code >= 400:
            logger.warning(summary, *args)
        else:
            logger.info(summary, *args)

        return response
