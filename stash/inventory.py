"""
Single-item create/update on top of the store.

Items added or edited by hand follow the same derivation rules as imported
ones: profit is recomputed and never taken from the caller.
"""
from typing import Any, List, Optional

from stash.coercion import derive_profit, status_to_code, to_number, to_quantity, today_iso
from stash.models import Item, ItemDraft
from stash.observability import get_logger
from stash.validators import validate_required_text

logger = get_logger(__name__)


def build_item_draft(
    name: Optional[str],
    condition: Optional[str] = None,
    cost: Any = None,
    price: Any = None,
    source: Optional[str] = None,
    status: Any = None,
    quantity: Any = None,
    image_url: Optional[str] = None,
    created_at: Optional[str] = None,
) -> ItemDraft:
    """
    Validate and normalize caller-supplied item fields.

    Raises:
        ValidationError: If name is blank
    """
    name = validate_required_text(name, "name")
    cost = to_number(cost, 0)
    price = to_number(price, 0)
    quantity = to_quantity(quantity, 1)
    return ItemDraft(
        name=name,
        condition=condition,
        cost=cost,
        price=price,
        profit=derive_profit(cost, price, quantity),
        source=source,
        status=status_to_code(status),
        quantity=quantity,
        image_url=image_url if image_url and image_url.strip() else None,
        created_at=created_at or today_iso(),
    )


async def list_items(store, owner_id: str, collection_id: int) -> List[Item]:
    """Items of a collection the owner can access."""
    await store.get_collection(collection_id, owner_id)
    return await store.list_items(collection_id)


async def add_item(store, owner_id: str, collection_id: int, **fields) -> Item:
    """
    Add an item to one of the owner's collections.

    Raises:
        NotFoundError: If the collection is missing or not owned
        ValidationError: If name is blank
    """
    await store.get_collection(collection_id, owner_id)
    draft = build_item_draft(**fields)
    item = await store.create_item(collection_id, draft)
    logger.info(
        f"Item added: {item.name}",
        extra={"collection_id": collection_id, "item_id": item.id},
    )
    return item


async def edit_item(store, owner_id: str, collection_id: int, item_id: int, **fields) -> Item:
    """
    Overwrite an item's fields.

    The stored image is replaced only when a non-blank image_url is given.

    Raises:
        NotFoundError: If the collection or item is missing
        ValidationError: If name is blank
    """
    await store.get_collection(collection_id, owner_id)
    draft = build_item_draft(**fields)
    item = await store.update_item(
        item_id, collection_id, draft, replace_image=draft.image_url is not None,
    )
    logger.info(
        f"Item updated: {item.name}",
        extra={"collection_id": collection_id, "item_id": item.id},
    )
    return item
