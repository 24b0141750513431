"""
Integration tests for revenue series bucketing.
"""
from datetime import date

import pytest

from stash.exceptions import ValidationError
from stash.inventory import build_item_draft
from stash.models import Granularity


@pytest.fixture
def sales():
    """Sold items across two months plus an unsold one."""
    return [
        # name, cost, price, quantity, status, created_at
        ("A", 4, 10, 2, "Sold", "2024-03-04"),      # Monday
        ("B", 1, 5, 1, "Sold", "2024-03-06"),       # same ISO week
        ("C", 2, 7, 1, "Sold", "2024-03-11"),       # next Monday
        ("D", 0, 100, 1, "Listed", "2024-03-04"),   # not sold
        ("E", 1, 3, 3, "sold", "2024-04-02"),       # Tuesday, new month
    ]


async def _seed(store, sales):
    collection_id = await store.insert_collection("alice", "Cards", "TCG", "2024-01-15")
    drafts = [
        build_item_draft(name, cost=cost, price=price, quantity=qty, status=status, created_at=when)
        for name, cost, price, qty, status, when in sales
    ]
    await store.insert_items(collection_id, drafts)
    return collection_id


def _series(points):
    return [(p.date, p.revenue, p.profit) for p in points]


class TestRevenueSeries:
    """Tests for get_revenue_series."""

    @pytest.mark.asyncio
    async def test_daily(self, store, sales):
        """Day buckets are calendar dates, ascending."""
        collection_id = await _seed(store, sales)
        points = await store.get_revenue_series(collection_id, "day")
        assert _series(points) == [
            (date(2024, 3, 4), 20.0, 12.0),
            (date(2024, 3, 6), 5.0, 4.0),
            (date(2024, 3, 11), 7.0, 5.0),
            (date(2024, 4, 2), 9.0, 6.0),
        ]

    @pytest.mark.asyncio
    async def test_weekly_iso_monday(self, store, sales):
        """Week buckets start on the ISO Monday."""
        collection_id = await _seed(store, sales)
        points = await store.get_revenue_series(collection_id, Granularity.WEEK)
        assert _series(points) == [
            (date(2024, 3, 4), 25.0, 16.0),
            (date(2024, 3, 11), 7.0, 5.0),
            (date(2024, 4, 1), 9.0, 6.0),
        ]

    @pytest.mark.asyncio
    async def test_monthly(self, store, sales):
        """Month buckets start on the first of the month."""
        collection_id = await _seed(store, sales)
        points = await store.get_revenue_series(collection_id, "month")
        assert _series(points) == [
            (date(2024, 3, 1), 32.0, 21.0),
            (date(2024, 4, 1), 9.0, 6.0),
        ]

    @pytest.mark.asyncio
    async def test_nothing_sold(self, store):
        """A collection without sales gives an empty series."""
        collection_id = await store.insert_collection("alice", "Coins", "N", "2023-06-01")
        await store.insert_items(collection_id, [build_item_draft("Penny", price=1)])
        assert await store.get_revenue_series(collection_id, "day") == []

    @pytest.mark.asyncio
    async def test_other_collections_excluded(self, store, sales):
        """Only the requested collection's items count."""
        await _seed(store, sales)
        other = await store.insert_collection("alice", "Coins", "N", "2023-06-01")
        assert await store.get_revenue_series(other, "month") == []

    @pytest.mark.asyncio
    async def test_unknown_granularity(self, store):
        """Granularity outside day/week/month is rejected."""
        with pytest.raises(ValidationError):
            await store.get_revenue_series(1, "year")

    @pytest.mark.asyncio
    async def test_to_dict_rounding(self, store):
        """Serialized points use ISO dates and 2-decimal amounts."""
        collection_id = await store.insert_collection("alice", "Cards", "TCG", "2024-01-15")
        await store.insert_items(collection_id, [
            build_item_draft("X", cost=0.1, price=0.335, status="Sold", created_at="2024-05-05"),
        ])
        (point,) = await store.get_revenue_series(collection_id, "day")
        data = point.to_dict()
        assert data["date"] == "2024-05-05"
        assert data["revenue"] == round(0.335, 2)
