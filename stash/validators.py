"""
Input validation functions for API and CLI parameters.

All validators raise ValidationError on invalid input. CSV cell coercion
lives in stash.coercion and never raises.
"""

from typing import Iterable, List, Optional

from stash.exceptions import ValidationError
from stash.models import Granularity

VALID_SORT_FIELDS = ("name", "category", "acquired_date")
VALID_SORT_ORDERS = ("asc", "desc")

MAX_NAME_LENGTH = 255
MAX_COLLECTION_IDS = 500


def validate_owner_id(value: Optional[str], field: str = "owner_id") -> str:
    """Owner id must be a non-blank string."""
    if value is None or not str(value).strip():
        raise ValidationError(field, "Owner id is required")
    return str(value).strip()


def validate_required_text(
    value: Optional[str],
    field: str,
    max_length: int = MAX_NAME_LENGTH,
) -> str:
    """
    Validate a required free-text field.

    Returns:
        The trimmed value

    Raises:
        ValidationError: If missing, blank, or too long
    """
    if value is None or not isinstance(value, str):
        raise ValidationError(field, "Must be a string", value)
    value = value.strip()
    if not value:
        raise ValidationError(field, "Value is required")
    if len(value) > max_length:
        raise ValidationError(field, f"Must be at most {max_length} characters", len(value))
    return value


def validate_granularity(value: Optional[str], field: str = "granularity") -> Granularity:
    """
    Validate a revenue granularity selector.

    Raises:
        ValidationError: If not one of day, week, month
    """
    if isinstance(value, Granularity):
        return value
    try:
        return Granularity(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(g.value for g in Granularity)
        raise ValidationError(field, f"Must be one of: {allowed}", value)


def validate_collection_ids(
    values: Optional[Iterable[int]],
    field: str = "collection_ids",
) -> List[int]:
    """
    Validate an optional list of collection ids.

    Returns:
        De-duplicated ids in given order; empty list when none supplied
    """
    if not values:
        return []
    ids: List[int] = []
    for value in values:
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValidationError(field, "Ids must be positive integers", value)
        if value not in ids:
            ids.append(value)
    if len(ids) > MAX_COLLECTION_IDS:
        raise ValidationError(field, f"At most {MAX_COLLECTION_IDS} ids allowed", len(ids))
    return ids


def validate_sort(sort_by: str, sort_order: str) -> tuple:
    """Validate collection sort field and direction."""
    if sort_by not in VALID_SORT_FIELDS:
        raise ValidationError("sort_by", f"Must be one of: {', '.join(VALID_SORT_FIELDS)}", sort_by)
    order = (sort_order or "asc").lower()
    if order not in VALID_SORT_ORDERS:
        raise ValidationError("sort_order", "Must be 'asc' or 'desc'", sort_order)
    return sort_by, order
