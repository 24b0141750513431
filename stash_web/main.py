"""
FastAPI web application for Stash.
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from stash.config import config, validate_config, ConfigurationError, VERSION
from stash.exceptions import StashError, ValidationError
from stash.observability import setup_logging, get_logger, metrics
from stash.store import get_store, close_store
from stash_web.middleware import RequestLoggingMiddleware, RequestTimeoutMiddleware
from stash_web.routes import router as api_router
from stash_web.routes._deps import limiter

# Use JSON format in production (LOG_FORMAT=json), human-readable otherwise
setup_logging(level=config.logging.level, json_format=config.logging.json_format)
logger = get_logger(__name__)

app = FastAPI(
    title="Stash",
    description="Collection inventory tracker: CSV export/import and revenue",
    version=VERSION,
)

app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    logger.warning(f"Rate limit exceeded for {get_remote_address(request)}")
    return JSONResponse(
        status_code=429,
        content={
            "error": "Rate limit exceeded",
            "detail": "Too many requests. Please try again later.",
            "retry_after": exc.detail
        }
    )


@app.exception_handler(StashError)
async def stash_error_handler(request: Request, exc: StashError):
    level = logger.error if exc.status_code >= 500 else logger.info
    level(
        f"{type(exc).__name__}: {exc}",
        extra={"path": request.url.path, "status_code": exc.status_code},
    )
    metrics.record_error(type(exc).__name__)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    metrics.record_error("ValidationError")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Correlation IDs and timing, then request timeout protection
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(RequestTimeoutMiddleware)

app.include_router(api_router, prefix="/api")


@app.on_event("startup")
async def startup_event():
    logger.info("Stash API starting...")

    try:
        validate_config()
        logger.info("Configuration validated")
    except ConfigurationError as e:
        logger.critical(f"Configuration error: {e}")
        raise SystemExit(1)

    store = await get_store()
    stats = await store.get_stats()
    logger.info(
        f"DuckDB ready: {stats['collections']} collections, {stats['items']} items",
        extra={"db_path": stats["db_path"]},
    )


@app.on_event("shutdown")
async def shutdown_event():
    await close_store()
    logger.info("Stash API stopped")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=config.web.host, port=config.web.port)
