"""
Core library for Stash, a personal collection inventory tracker.

This package holds the logic shared by the CLI and the stash_web API:
- exceptions: Custom exception hierarchy
- coercion: Lenient CSV cell conversion
- tabular: CSV codec for flat records
- export_service / import_service: CSV export and merge-by-key import
- store: DuckDB persistence (collections, items, revenue)
- config: Centralized configuration
"""

# Import in dependency order
from stash.exceptions import (
    StashError,
    AuthRequiredError,
    NotFoundError,
    EmptyInputError,
    FormatError,
    PersistenceError,
    QueryTimeoutError,
    ValidationError,
)

from stash.config import config

from stash.models import (
    ItemStatus,
    Granularity,
    Item,
    Collection,
    ExportResult,
    ImportSummary,
    RevenuePoint,
)

from stash.export_service import export_collections
from stash.import_service import import_collections
from stash.store import DuckDBStore, get_store, close_store

__all__ = [
    # Exceptions
    "StashError",
    "AuthRequiredError",
    "NotFoundError",
    "EmptyInputError",
    "FormatError",
    "PersistenceError",
    "QueryTimeoutError",
    "ValidationError",
    # Config
    "config",
    # Models
    "ItemStatus",
    "Granularity",
    "Item",
    "Collection",
    "ExportResult",
    "ImportSummary",
    "RevenuePoint",
    # Operations
    "export_collections",
    "import_collections",
    # Store
    "DuckDBStore",
    "get_store",
    "close_store",
]
