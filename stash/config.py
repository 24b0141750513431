"""
Centralized configuration for Stash.

Configuration is loaded from environment variables (and a `.env` file, if
present) with sensible defaults.

Usage:
    from stash.config import config

    db_path = config.store.db_path
    separator = config.imports.group_key_separator
"""

import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class StoreConfig:
    """DuckDB store configuration."""

    db_path: str = field(default_factory=lambda: os.getenv("STASH_DB_PATH", "data/stash.duckdb"))
    query_timeout: float = field(
        default_factory=lambda: float(os.getenv("STASH_QUERY_TIMEOUT", "30"))
    )


@dataclass(frozen=True)
class ImportConfig:
    """CSV import reconciliation settings."""

    # Joins collection name and acquired date into the natural-key group id
    group_key_separator: str = field(
        default_factory=lambda: os.getenv("STASH_GROUP_KEY_SEPARATOR", "_")
    )
    # Run lookup/upsert/delete/insert of each group inside one transaction
    atomic_groups: bool = field(
        default_factory=lambda: _env_bool("STASH_IMPORT_ATOMIC_GROUPS", "true")
    )


@dataclass(frozen=True)
class ExportConfig:
    """CSV export settings."""

    # Fixed column set and order of the export document
    fields: List[str] = field(default_factory=lambda: [
        "collection_name",
        "collection_category",
        "collection_acquired_date",
        "item_name",
        "item_condition",
        "item_cost",
        "item_price",
        "item_profit",
        "item_source",
        "item_status",
        "item_quantity",
        "item_image_url",
    ])
    filename_prefix: str = "collections_export"


@dataclass(frozen=True)
class WebConfig:
    """Web API configuration."""

    host: str = field(default_factory=lambda: os.getenv("WEB_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("WEB_PORT", "8080")))
    owner_header: str = "X-Owner-Id"

    # Rate limiting
    rate_limit_per_minute: int = 30
    import_rate_limit_per_minute: int = 10

    # Request timeout (seconds); import/export get the extended one
    request_timeout: float = 30.0
    slow_request_timeout: float = 120.0


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    format: str = field(default_factory=lambda: os.getenv("LOG_FORMAT", "text"))

    @property
    def json_format(self) -> bool:
        return self.format.lower() == "json"


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""

    version: str = "0.3.0"
    timezone: str = field(default_factory=lambda: os.getenv("STASH_TIMEZONE", "UTC"))
    store: StoreConfig = field(default_factory=StoreConfig)
    imports: ImportConfig = field(default_factory=ImportConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    web: WebConfig = field(default_factory=WebConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Global config instance
config = AppConfig()


# ─── Convenience Exports ──────────────────────────────────────────────────────
VERSION = config.version
DEFAULT_TIMEZONE = config.timezone
DB_PATH = config.store.db_path
EXPORT_FIELDS = tuple(config.export.fields)
GROUP_KEY_SEPARATOR = config.imports.group_key_separator


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


def validate_config(app_config: AppConfig = config) -> None:
    """
    Validate configuration values.

    Call this on application startup to fail fast with clear error messages
    instead of cryptic runtime failures.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

    errors = []

    if not app_config.store.db_path:
        errors.append("STASH_DB_PATH must not be empty")

    if app_config.store.query_timeout <= 0:
        errors.append("STASH_QUERY_TIMEOUT must be positive")

    if not app_config.imports.group_key_separator:
        errors.append("STASH_GROUP_KEY_SEPARATOR must not be empty")

    try:
        ZoneInfo(app_config.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        errors.append(f"STASH_TIMEZONE is not a known timezone: {app_config.timezone}")

    if app_config.logging.level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        errors.append(f"LOG_LEVEL is invalid: {app_config.logging.level}")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)
