"""DuckDBStore revenue methods."""
from __future__ import annotations

from typing import List

from stash.models import Granularity, ItemStatus, RevenuePoint
from stash.validators import validate_granularity

# DATE_TRUNC parts per granularity; 'week' truncates to the ISO Monday
_TRUNC_PARTS = {
    Granularity.DAY: "day",
    Granularity.WEEK: "week",
    Granularity.MONTH: "month",
}


class RevenueMixin:

    async def get_revenue_series(
        self,
        collection_id: int,
        granularity: Granularity | str = Granularity.DAY,
    ) -> List[RevenuePoint]:
        """
        Revenue and profit of a collection's sold items per time bucket.

        Revenue is price * quantity; profit is the stored (derived) profit.
        The item's created_at date stands in for the sale date, and items
        without one are skipped. Buckets come back oldest first; a
        collection with nothing sold gives an empty list.

        Args:
            collection_id: Collection whose access was already checked
            granularity: day, week or month

        Raises:
            ValidationError: If granularity is unknown
        """
        part = _TRUNC_PARTS[validate_granularity(granularity)]

        rows = await self._fetch_all(
            f"""
            SELECT
                CAST(DATE_TRUNC('{part}', created_at) AS DATE) AS bucket,
                SUM(COALESCE(price, 0) * quantity) AS revenue,
                SUM(COALESCE(profit, 0)) AS profit
            FROM items
            WHERE collection_id = ?
              AND status = ?
              AND created_at IS NOT NULL
            GROUP BY bucket
            ORDER BY bucket
            """,
            [collection_id, int(ItemStatus.SOLD)],
        )
        return [
            RevenuePoint(date=row[0], revenue=float(row[1] or 0), profit=float(row[2] or 0))
            for row in rows
        ]
