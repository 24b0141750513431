"""
API routes split by domain.

Each sub-module defines its own APIRouter which is composed
into the top-level router exposed by this package.
"""
from fastapi import APIRouter

from .health import router as health_router
from .collections import router as collections_router
from .items import router as items_router
from .revenue import router as revenue_router

router = APIRouter()

router.include_router(health_router)
router.include_router(collections_router)
router.include_router(items_router)
router.include_router(revenue_router)
