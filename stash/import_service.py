"""
CSV import with merge-by-natural-key reconciliation.

Pipeline:
1. Parse the document into rows (tabular codec)
2. Group rows by collection name + acquired date, in first-seen order
3. Derive item drafts (lenient coercion, profit recomputed, dated today)
4. Per group: update the matching collection's category or create it,
   then replace its items when the group carries any

Groups are applied one after another. A store failure stops the import
at that group and propagates. With atomic groups enabled each group runs
in its own transaction, so a failing group leaves no partial writes.
"""
from contextlib import nullcontext
from typing import Dict, List, Mapping, Optional

from stash import tabular
from stash.coercion import (
    derive_profit,
    status_to_code,
    to_number,
    to_quantity,
    today_iso,
)
from stash.config import config
from stash.exceptions import EmptyInputError, PersistenceError
from stash.models import CollectionDraft, ImportSummary, ItemDraft
from stash.observability import get_logger, timed

logger = get_logger(__name__)


def _cell(row: Mapping[str, str], name: str) -> str:
    value = row.get(name)
    return "" if value is None else str(value)


def _optional(value: str) -> Optional[str]:
    return value if value.strip() else None


def group_key(row: Mapping[str, str], separator: str = None) -> str:
    """Natural-key group id: collection name + separator + trimmed acquired date."""
    if separator is None:
        separator = config.imports.group_key_separator
    acquired_date = _cell(row, "collection_acquired_date").strip()
    return f"{_cell(row, 'collection_name')}{separator}{acquired_date}"


def derive_item(row: Mapping[str, str], created_at: str) -> ItemDraft:
    """
    Build an item draft from one row.

    Any supplied item_profit is ignored; profit is recomputed.
    """
    cost = to_number(row.get("item_cost"), 0)
    price = to_number(row.get("item_price"), 0)
    quantity = to_quantity(row.get("item_quantity"), 1)
    return ItemDraft(
        name=_cell(row, "item_name").strip(),
        condition=_cell(row, "item_condition"),
        cost=cost,
        price=price,
        profit=derive_profit(cost, price, quantity),
        source=_cell(row, "item_source"),
        status=status_to_code(row.get("item_status")),
        quantity=quantity,
        image_url=_optional(_cell(row, "item_image_url")),
        created_at=created_at,
    )


def group_rows(
    rows: List[Mapping[str, str]],
    separator: str = None,
    created_at: str = None,
) -> Dict[str, CollectionDraft]:
    """
    Group rows into collection drafts keyed by natural key.

    Keys keep first-seen order, so non-contiguous rows of one collection
    still land in a single group. Collection fields are rewritten by every
    row of the group; only rows with a non-blank item name add an item.
    """
    created_at = created_at or today_iso()
    drafts: Dict[str, CollectionDraft] = {}

    for row in rows:
        key = group_key(row, separator)
        name = _cell(row, "collection_name")
        category = _cell(row, "collection_category")
        acquired_date = _optional(_cell(row, "collection_acquired_date").strip())

        draft = drafts.get(key)
        if draft is None:
            draft = drafts[key] = CollectionDraft(
                name=name, category=category, acquired_date=acquired_date,
            )
        else:
            draft.category = category

        if _cell(row, "item_name").strip():
            draft.items.append(derive_item(row, created_at))

    return drafts


async def apply_group(store, owner_id: str, draft: CollectionDraft) -> bool:
    """
    Upsert one collection draft and replace its items.

    Returns:
        True if the collection was created, False if it was updated
    """
    collection_id = await store.find_collection_id(owner_id, draft.name, draft.acquired_date)
    created = collection_id is None

    if created:
        collection_id = await store.insert_collection(
            owner_id, draft.name, draft.category, draft.acquired_date,
        )
    else:
        await store.update_collection_category(collection_id, draft.category)

    # No item drafts means the group only asserts the collection exists
    if draft.items:
        await store.replace_items(collection_id, draft.items)

    logger.debug(
        f"{'Created' if created else 'Updated'} collection '{draft.name}'",
        extra={"collection_id": collection_id, "items": len(draft.items)},
    )
    return created


@timed("import_collections")
async def import_collections(
    store,
    owner_id: str,
    document: str,
    atomic: Optional[bool] = None,
) -> ImportSummary:
    """
    Import a CSV document into the owner's collections.

    Args:
        store: DuckDBStore
        owner_id: Caller who will own created collections
        document: CSV text in the export layout; unknown columns are ignored
        atomic: Wrap each group in a transaction (defaults to config)

    Returns:
        ImportSummary with created/updated counts

    Raises:
        FormatError: If the document is malformed
        EmptyInputError: If it is blank or has no data rows
        PersistenceError: If the store rejects a write; earlier groups stay applied
    """
    if atomic is None:
        atomic = config.imports.atomic_groups

    if not document or not document.strip():
        raise EmptyInputError()

    rows = tabular.deserialize(document)
    if not rows:
        raise EmptyInputError()

    drafts = group_rows(rows)
    summary = ImportSummary()

    for draft in drafts.values():
        scope = store.transaction() if atomic else nullcontext()
        try:
            async with scope:
                created = await apply_group(store, owner_id, draft)
        except PersistenceError as e:
            logger.error(
                f"Import aborted at collection '{draft.name}': {e}",
                extra={
                    "owner_id": owner_id,
                    "groups_created": summary.created,
                    "groups_updated": summary.updated,
                },
            )
            raise

        if created:
            summary.created += 1
        else:
            summary.updated += 1

    logger.info(
        summary.message,
        extra={"owner_id": owner_id, "rows": len(rows), "groups": len(drafts)},
    )
    return summary
