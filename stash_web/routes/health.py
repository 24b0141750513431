"""Health check and metrics endpoints."""
import time

from fastapi import APIRouter, Request

from stash.config import VERSION
from stash.observability import get_correlation_id, metrics, Timer
from stash_web.schemas import HealthResponse
from ._deps import limiter, get_store, get_logger, START_TIME

router = APIRouter(tags=["health"])
logger = get_logger(__name__)


@router.get("/health", response_model=HealthResponse)
@limiter.limit("60/minute")
async def health_check(request: Request):
    """Health check endpoint for Docker/load balancer monitoring."""
    uptime_seconds = int(time.time() - START_TIME)

    latency_ms = None
    try:
        with Timer("health_check_db") as timer:
            store = await get_store()
            stats = await store.get_stats()
        latency_ms = round(timer.elapsed_ms, 2)
        status = "connected"
    except Exception as e:
        logger.warning(f"Health check store query failed: {e}")
        stats = {}
        status = f"error: {e}"

    return {
        "status": "healthy" if stats else "degraded",
        "version": VERSION,
        "uptime_seconds": uptime_seconds,
        "correlation_id": get_correlation_id(),
        "store": {
            "status": status,
            "latency_ms": latency_ms,
            "collections": stats.get("collections"),
            "items": stats.get("items"),
            "total_queries": stats.get("total_queries"),
        },
    }


@router.get("/metrics")
@limiter.limit("30/minute")
async def get_metrics(request: Request):
    """Request counts, error counts and timing samples since startup."""
    return metrics.get_stats()
