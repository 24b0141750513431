"""
Tests for row projection in stash.export_service.
"""
from stash.config import EXPORT_FIELDS
from stash.export_service import project_row, project_rows
from stash.models import Collection, Item, ItemStatus


def _collection(**kwargs) -> Collection:
    data = {"id": 1, "owner_id": "alice", "name": "Cards", "category": "TCG",
            "acquired_date": "2024-01-15"}
    data.update(kwargs)
    return Collection(**data)


class TestProjectRow:
    """Tests for project_row."""

    def test_item_row(self):
        """Item fields fill the item columns."""
        item = Item(id=1, collection_id=1, name="Charizard", condition="Mint", cost=10.0,
                    price=25.0, profit=30.0, source="eBay", status=ItemStatus.SOLD, quantity=2)
        row = project_row(_collection(), item)
        assert list(row) == list(EXPORT_FIELDS)
        assert row["collection_acquired_date"] == "2024-01-15"
        assert row["item_status"] == "Sold"
        assert row["item_quantity"] == 2
        assert row["item_image_url"] == ""

    def test_missing_numbers_are_empty(self):
        """Missing numeric fields render as '' rather than 0."""
        item = Item(id=1, collection_id=1, name="Mew", cost=None, price=None, profit=None)
        row = project_row(_collection(), item)
        assert row["item_cost"] == ""
        assert row["item_price"] == ""
        assert row["item_profit"] == ""

    def test_zero_is_kept(self):
        """Zero is a value, not a missing field."""
        item = Item(id=1, collection_id=1, name="Gift", cost=0.0, price=0.0, profit=0.0)
        assert project_row(_collection(), item)["item_cost"] == 0.0

    def test_empty_collection_row(self):
        """No item gives empty item columns."""
        row = project_row(_collection(category=None, acquired_date=None), None)
        assert row["collection_category"] == ""
        assert row["collection_acquired_date"] == ""
        assert all(row[name] == "" for name in EXPORT_FIELDS if name.startswith("item_"))


class TestProjectRows:
    """Tests for project_rows."""

    def test_one_row_per_item_or_collection(self):
        """Collections with items yield one row each; empty ones yield one row."""
        full = _collection(items=[
            Item(id=1, collection_id=1, name="A"),
            Item(id=2, collection_id=1, name="B"),
        ])
        empty = _collection(id=2, name="Coins")
        rows = project_rows([full, empty])
        assert [r["item_name"] for r in rows] == ["A", "B", ""]
        assert rows[2]["collection_name"] == "Coins"
