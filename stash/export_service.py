"""
CSV export of collections and their items.

Flattens the collection -> items tree into one row per item (or one row per
empty collection) and serializes it with the tabular codec.
"""
from typing import Any, Dict, List, Optional, Sequence

from stash import tabular
from stash.coercion import code_to_label
from stash.config import EXPORT_FIELDS
from stash.exceptions import NotFoundError
from stash.models import Collection, ExportResult, Item
from stash.observability import get_logger, timed

logger = get_logger(__name__)


def _text(value: Optional[Any]) -> Any:
    """Missing values render as empty cells, never as 0 or 'None'."""
    return "" if value is None else value


def _date_text(value) -> str:
    if value is None:
        return ""
    return value.isoformat() if hasattr(value, "isoformat") else str(value)


def project_row(collection: Collection, item: Optional[Item]) -> Dict[str, Any]:
    """Flatten one (collection, item) pair; item=None gives empty item cells."""
    row = {
        "collection_name": collection.name,
        "collection_category": _text(collection.category),
        "collection_acquired_date": _date_text(collection.acquired_date),
    }
    if item is None:
        row.update({name: "" for name in EXPORT_FIELDS if name.startswith("item_")})
        return row

    row.update({
        "item_name": _text(item.name),
        "item_condition": _text(item.condition),
        "item_cost": _text(item.cost),
        "item_price": _text(item.price),
        "item_profit": _text(item.profit),
        "item_source": _text(item.source),
        "item_status": code_to_label(item.status),
        "item_quantity": _text(item.quantity),
        "item_image_url": _text(item.image_url),
    })
    return row


def project_rows(collections: Sequence[Collection]) -> List[Dict[str, Any]]:
    """Flatten collections in order; a collection without items yields one row."""
    rows: List[Dict[str, Any]] = []
    for collection in collections:
        if not collection.items:
            rows.append(project_row(collection, None))
            continue
        for item in collection.items:
            rows.append(project_row(collection, item))
    return rows


@timed("export_collections")
async def export_collections(
    store,
    owner_id: str,
    collection_ids: Optional[List[int]] = None,
) -> ExportResult:
    """
    Export the owner's collections (or the given subset) as CSV.

    Args:
        store: DuckDBStore (or anything with list_collections_with_items)
        owner_id: Caller whose collections are exported
        collection_ids: Optional subset; empty or None means all

    Returns:
        ExportResult with rows, document and row count

    Raises:
        NotFoundError: If no collection matches
        PersistenceError: If the store query fails
    """
    collections = await store.list_collections_with_items(owner_id, collection_ids or None)
    if not collections:
        raise NotFoundError("No collections to export")

    rows = project_rows(collections)
    document = tabular.serialize(rows, fieldnames=EXPORT_FIELDS)

    logger.info(
        f"Exported {len(collections)} collections as {len(rows)} rows",
        extra={"owner_id": owner_id, "collections": len(collections), "rows": len(rows)},
    )
    return ExportResult(rows=rows, document=document)
