"""Item endpoints of one collection."""
from typing import List

from fastapi import APIRouter, Depends, Request

from stash import inventory
from stash_web.schemas import ItemPayload, ItemResponse
from ._deps import limiter, get_store, get_owner_id, DEFAULT_LIMIT

router = APIRouter(prefix="/collections/{collection_id}/items", tags=["items"])


@router.get("", response_model=List[ItemResponse])
@limiter.limit(DEFAULT_LIMIT)
async def list_items(
    request: Request,
    collection_id: int,
    owner_id: str = Depends(get_owner_id),
):
    """Items of a collection, oldest first."""
    store = await get_store()
    items = await inventory.list_items(store, owner_id, collection_id)
    return [item.to_dict() for item in items]


@router.post("", response_model=ItemResponse, status_code=201)
@limiter.limit(DEFAULT_LIMIT)
async def create_item(
    request: Request,
    collection_id: int,
    payload: ItemPayload,
    owner_id: str = Depends(get_owner_id),
):
    """Add an item; profit is derived from cost, price and quantity."""
    store = await get_store()
    item = await inventory.add_item(store, owner_id, collection_id, **payload.model_dump())
    return item.to_dict()


@router.put("/{item_id}", response_model=ItemResponse)
@limiter.limit(DEFAULT_LIMIT)
async def update_item(
    request: Request,
    collection_id: int,
    item_id: int,
    payload: ItemPayload,
    owner_id: str = Depends(get_owner_id),
):
    """Overwrite an item's fields; the image is kept unless a new one is given."""
    store = await get_store()
    item = await inventory.edit_item(
        store, owner_id, collection_id, item_id, **payload.model_dump(),
    )
    return item.to_dict()
