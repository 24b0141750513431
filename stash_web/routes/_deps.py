"""Shared dependencies for API route modules."""
import time
from typing import Optional

from fastapi import Header
from slowapi import Limiter
from slowapi.util import get_remote_address

from stash.config import config
from stash.exceptions import AuthRequiredError
from stash.observability import get_logger
from stash.store import get_store

# Shared limiter instance
limiter = Limiter(key_func=get_remote_address)

DEFAULT_LIMIT = f"{config.web.rate_limit_per_minute}/minute"
IMPORT_LIMIT = f"{config.web.import_rate_limit_per_minute}/minute"

# Track startup time for uptime calculation
START_TIME = time.time()


async def get_owner_id(
    owner_id: Optional[str] = Header(None, alias=config.web.owner_header),
) -> str:
    """
    Caller identity as supplied by the upstream auth layer.

    Raises:
        AuthRequiredError: If the header is missing or blank
    """
    if owner_id is None or not owner_id.strip():
        raise AuthRequiredError()
    return owner_id.strip()


__all__ = [
    "limiter",
    "get_store",
    "get_owner_id",
    "get_logger",
    "DEFAULT_LIMIT",
    "IMPORT_LIMIT",
    "START_TIME",
]
