"""
Pydantic request and response models for API endpoints.

Provides type-safe models with automatic validation and documentation.
"""
from typing import Optional, List, Union
from pydantic import BaseModel, Field


# ═══════════════════════════════════════════════════════════════════════════════
# HEALTH CHECK
# ═══════════════════════════════════════════════════════════════════════════════

class StoreStats(BaseModel):
    """DuckDB store statistics."""
    status: str
    latency_ms: Optional[float] = None
    collections: Optional[int] = None
    items: Optional[int] = None
    total_queries: Optional[int] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(description="Service status: healthy or degraded")
    version: str = Field(description="Application version")
    uptime_seconds: int = Field(description="Uptime in seconds")
    correlation_id: Optional[str] = Field(None, description="Request correlation ID")
    store: StoreStats


# ═══════════════════════════════════════════════════════════════════════════════
# COLLECTIONS AND ITEMS
# ═══════════════════════════════════════════════════════════════════════════════

class CollectionCreate(BaseModel):
    """New collection; acquired date is set to today."""
    name: str = Field(description="Collection name")
    category: str = Field(description="Free-text category")


class CollectionRename(BaseModel):
    """New name for an existing collection."""
    name: str = Field(description="Collection name")


class CollectionResponse(BaseModel):
    """Collection data."""
    id: int
    owner_id: str
    name: str
    category: Optional[str] = None
    acquired_date: Optional[str] = Field(None, description="As imported; YYYY-MM-DD when set by the app")


class ItemPayload(BaseModel):
    """Item fields for create/update. Profit is always derived."""
    name: str
    condition: Optional[str] = None
    cost: Optional[float] = None
    price: Optional[float] = None
    source: Optional[str] = None
    status: Optional[Union[int, str]] = Field(None, description="0/1/2 or Listed/In Stock/Sold")
    quantity: Optional[int] = Field(None, description="Defaults to 1")
    image_url: Optional[str] = Field(None, description="Kept unchanged on update when omitted")


class ItemResponse(BaseModel):
    """Item data."""
    id: int
    collection_id: int
    name: str
    condition: Optional[str] = None
    cost: Optional[float] = None
    price: Optional[float] = None
    profit: Optional[float] = None
    source: Optional[str] = None
    status: int
    status_label: str
    quantity: Optional[int] = None
    image_url: Optional[str] = None
    created_at: Optional[str] = None


# ═══════════════════════════════════════════════════════════════════════════════
# EXPORT / IMPORT
# ═══════════════════════════════════════════════════════════════════════════════

class ExportResponse(BaseModel):
    """Serialized export document."""
    document: str = Field(description="CSV text, header plus one row per item")
    rowCount: int = Field(description="Number of data rows")


class ImportRequest(BaseModel):
    """CSV document to import."""
    document: str = Field(description="CSV text in the export layout")


class ImportResponse(BaseModel):
    """Aggregate import outcome."""
    success: bool
    message: str
    created: int
    updated: int


# ═══════════════════════════════════════════════════════════════════════════════
# REVENUE
# ═══════════════════════════════════════════════════════════════════════════════

class RevenuePointResponse(BaseModel):
    """Revenue and profit of one time bucket."""
    date: str = Field(description="Bucket start, YYYY-MM-DD")
    revenue: float
    profit: float


class RevenueResponse(BaseModel):
    """Revenue series of one collection."""
    collection_id: int
    granularity: str
    points: List[RevenuePointResponse]
