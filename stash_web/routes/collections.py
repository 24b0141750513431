"""Collection endpoints: list, create, rename, CSV export and import."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse

from stash.coercion import today_iso
from stash.config import config
from stash.export_service import export_collections
from stash.import_service import import_collections
from stash.validators import validate_collection_ids
from stash_web.schemas import (
    CollectionCreate,
    CollectionRename,
    CollectionResponse,
    ExportResponse,
    ImportRequest,
    ImportResponse,
)
from ._deps import limiter, get_store, get_owner_id, get_logger, DEFAULT_LIMIT, IMPORT_LIMIT

router = APIRouter(prefix="/collections", tags=["collections"])
logger = get_logger(__name__)


@router.get("", response_model=List[CollectionResponse])
@limiter.limit(DEFAULT_LIMIT)
async def list_collections(
    request: Request,
    sort_by: str = Query("acquired_date", description="name, category or acquired_date"),
    sort_order: str = Query("desc", description="asc or desc"),
    search: Optional[str] = Query(None, description="Case-insensitive name substring"),
    category: Optional[str] = Query(None, description="Exact category"),
    owner_id: str = Depends(get_owner_id),
):
    """List the caller's collections."""
    store = await get_store()
    collections = await store.list_collections(owner_id, sort_by, sort_order, search, category)
    return [c.to_dict() for c in collections]


@router.post("", response_model=CollectionResponse, status_code=201)
@limiter.limit(DEFAULT_LIMIT)
async def create_collection(
    request: Request,
    payload: CollectionCreate,
    owner_id: str = Depends(get_owner_id),
):
    """Create a collection acquired today."""
    store = await get_store()
    collection = await store.create_collection(owner_id, payload.name, payload.category)
    logger.info(f"Collection created: {collection.name}", extra={"collection_id": collection.id})
    return collection.to_dict()


@router.patch("/{collection_id}", response_model=CollectionResponse)
@limiter.limit(DEFAULT_LIMIT)
async def rename_collection(
    request: Request,
    collection_id: int,
    payload: CollectionRename,
    owner_id: str = Depends(get_owner_id),
):
    """Rename a collection; imports then match it under the new name."""
    store = await get_store()
    collection = await store.rename_collection(collection_id, owner_id, payload.name)
    logger.info(f"Collection renamed: {collection.name}", extra={"collection_id": collection.id})
    return collection.to_dict()


@router.get("/export", response_model=ExportResponse)
@limiter.limit(DEFAULT_LIMIT)
async def export_collections_json(
    request: Request,
    ids: Optional[List[int]] = Query(None, description="Collection ids; default all"),
    owner_id: str = Depends(get_owner_id),
):
    """Export collections as a CSV document wrapped in JSON."""
    store = await get_store()
    result = await export_collections(store, owner_id, validate_collection_ids(ids))
    return result.to_dict()


@router.get("/export/csv")
@limiter.limit(DEFAULT_LIMIT)
async def export_collections_csv(
    request: Request,
    ids: Optional[List[int]] = Query(None, description="Collection ids; default all"),
    owner_id: str = Depends(get_owner_id),
):
    """Export collections as a downloadable CSV file."""
    store = await get_store()
    result = await export_collections(store, owner_id, validate_collection_ids(ids))
    filename = f"{config.export.filename_prefix}_{today_iso()}.csv"
    return StreamingResponse(
        iter([result.document]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.post("/import", response_model=ImportResponse)
@limiter.limit(IMPORT_LIMIT)
async def import_collections_csv(
    request: Request,
    payload: ImportRequest,
    owner_id: str = Depends(get_owner_id),
):
    """Import a CSV document, merging collections by name and acquired date."""
    store = await get_store()
    summary = await import_collections(store, owner_id, payload.document)
    return summary.to_dict()
