"""
Request middleware for the Stash API.

RequestLoggingMiddleware tags every request with a correlation id and the
calling owner, logs the outcome and feeds the metrics collector. CSV
transfers (import and export) are additionally counted under their own
operation name so `/api/metrics` shows them apart from plain reads.

RequestTimeoutMiddleware bounds request time; CSV transfers get the longer
`STASH_SLOW_REQUEST_TIMEOUT` budget.
"""
import asyncio
import time
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from stash.config import config
from stash.observability import (
    generate_correlation_id,
    get_correlation_id,
    get_logger,
    metrics,
    set_correlation_id,
)

logger = get_logger(__name__)

HEALTH_PATHS = ("/api/health", "/health")

CSV_OPERATIONS = {
    ("POST", "/api/collections/import"): "csv_import",
    ("GET", "/api/collections/export"): "csv_export",
    ("GET", "/api/collections/export/csv"): "csv_download",
}


def csv_operation(request: Request) -> Optional[str]:
    """Operation name of a CSV transfer request, None for anything else."""
    return CSV_OPERATIONS.get((request.method, request.url.path))


def request_timeout(request: Request) -> float:
    if csv_operation(request):
        return config.web.slow_request_timeout
    return config.web.request_timeout


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Correlation id, owner-tagged request log and metrics."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = request.headers.get("X-Request-ID") or generate_correlation_id()
        set_correlation_id(correlation_id)

        path = request.url.path
        if path in HEALTH_PATHS:
            response = await call_next(request)
            response.headers["X-Request-ID"] = correlation_id
            return response

        endpoint = f"{request.method} {path}"
        operation = csv_operation(request)
        context = {
            "method": request.method,
            "path": path,
            "owner_id": (request.headers.get("X-Owner-Id") or "").strip() or None,
        }
        if operation:
            context["operation"] = operation

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"{endpoint} raised {type(e).__name__}",
                extra={**context, "error": str(e)},
            )
            metrics.record_error(type(e).__name__)
            raise
        duration_ms = (time.perf_counter() - start) * 1000

        response.headers["X-Request-ID"] = correlation_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

        failed = response.status_code >= 400
        log = logger.warning if failed else logger.info
        log(
            f"{endpoint} -> {response.status_code}",
            extra={**context, "status_code": response.status_code, "duration_ms": round(duration_ms, 2)},
        )

        metrics.record_request(endpoint)
        metrics.record_timing(endpoint, duration_ms)
        if operation:
            metrics.record_request(operation)
            metrics.record_timing(operation, duration_ms)
        if failed:
            metrics.record_error(f"{operation}_failed" if operation else f"HTTP_{response.status_code}")

        return response


class RequestTimeoutMiddleware(BaseHTTPMiddleware):
    """Answer 504 when a request outlives its time budget."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in HEALTH_PATHS:
            return await call_next(request)

        timeout = request_timeout(request)
        try:
            return await asyncio.wait_for(call_next(request), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"{request.method} {request.url.path} timed out after {timeout}s",
                extra={"operation": csv_operation(request), "timeout": timeout},
            )
            metrics.record_error("REQUEST_TIMEOUT")
            return JSONResponse(
                status_code=504,
                content={
                    "error": "Request Timeout",
                    "detail": f"Request exceeded {timeout}s timeout",
                    "correlation_id": get_correlation_id(),
                },
            )
