"""Revenue series endpoint."""
from fastapi import APIRouter, Depends, Query, Request

from stash.validators import validate_granularity
from stash_web.schemas import RevenueResponse
from ._deps import limiter, get_store, get_owner_id, DEFAULT_LIMIT

router = APIRouter(tags=["revenue"])


@router.get("/collections/{collection_id}/revenue", response_model=RevenueResponse)
@limiter.limit(DEFAULT_LIMIT)
async def get_revenue(
    request: Request,
    collection_id: int,
    granularity: str = Query("day", description="day, week or month"),
    owner_id: str = Depends(get_owner_id),
):
    """Revenue and profit of sold items per day, week or month."""
    granularity = validate_granularity(granularity)
    store = await get_store()
    await store.get_collection(collection_id, owner_id)
    points = await store.get_revenue_series(collection_id, granularity)
    return {
        "collection_id": collection_id,
        "granularity": granularity.value,
        "points": [point.to_dict() for point in points],
    }
