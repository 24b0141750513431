"""
Lenient conversion of untyped CSV cells into typed domain values.

Imported spreadsheets are hand-edited, so nothing here raises: malformed
cells degrade to a default instead of aborting the whole import.
"""
import math
from datetime import date, datetime
from typing import Any
from zoneinfo import ZoneInfo

from stash.config import DEFAULT_TIMEZONE
from stash.models import ItemStatus

DEFAULT_TZ = ZoneInfo(DEFAULT_TIMEZONE)

# Accepted spellings per status, compared lower-cased and trimmed
_STATUS_ALIASES = {
    "listed": ItemStatus.LISTED,
    "0": ItemStatus.LISTED,
    "in stock": ItemStatus.IN_STOCK,
    "1": ItemStatus.IN_STOCK,
    "sold": ItemStatus.SOLD,
    "2": ItemStatus.SOLD,
}


def to_number(raw: Any, default: float = 0.0) -> float:
    """
    Parse a cell as a float, falling back to `default`.

    Empty, missing, non-numeric and non-finite values all yield the default.
    """
    if raw is None or isinstance(raw, bool):
        return default
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip()
        if not text:
            return default
        try:
            value = float(text)
        except ValueError:
            return default
    if not math.isfinite(value):
        return default
    return value


def to_quantity(raw: Any, default: int = 1) -> int:
    """Parse a cell as a quantity rounded half-up; non-positive gives `default`."""
    value = math.floor(to_number(raw, float(default)) + 0.5)
    if value <= 0:
        return default
    return int(value)


def status_to_code(raw: Any) -> ItemStatus:
    """Map a status label or code to ItemStatus; unknown values are LISTED."""
    if raw is None:
        return ItemStatus.LISTED
    return _STATUS_ALIASES.get(str(raw).strip().lower(), ItemStatus.LISTED)


def code_to_label(code: Any) -> str:
    """Map a status code to its export label; unknown codes give ''."""
    try:
        return ItemStatus(code).label
    except (ValueError, TypeError):
        return ""


def derive_profit(cost: float, price: float, quantity: int) -> float:
    """Profit is always (price - cost) * quantity, never taken from input."""
    return (price - cost) * quantity


def today() -> date:
    """Current calendar date in the configured timezone."""
    return datetime.now(DEFAULT_TZ).date()


def today_iso() -> str:
    """Current calendar date as YYYY-MM-DD."""
    return today().isoformat()
