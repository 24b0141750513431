"""
Tests for stash.models dataclasses.
"""
from datetime import date

from stash.models import (
    ItemStatus,
    Item,
    Collection,
    ItemDraft,
    ExportResult,
    ImportSummary,
    RevenuePoint,
)


class TestItemStatus:
    """Tests for ItemStatus enum."""

    def test_codes(self):
        assert [int(s) for s in ItemStatus] == [0, 1, 2]

    def test_labels(self):
        assert ItemStatus.LISTED.label == "Listed"
        assert ItemStatus.IN_STOCK.label == "In Stock"
        assert ItemStatus.SOLD.label == "Sold"


class TestItem:
    """Tests for Item model."""

    def test_from_row(self):
        """Row in COLUMNS order maps to fields."""
        row = (1, 7, "Charizard", "Mint", 10.0, 25.0, 30.0, "eBay", 2, 2, None, date(2024, 1, 20))
        item = Item.from_row(row)
        assert item.collection_id == 7
        assert item.status is ItemStatus.SOLD
        assert item.created_at == date(2024, 1, 20)

    def test_to_dict(self):
        """Dict carries status code and label."""
        item = Item(id=1, collection_id=7, name="Pikachu", status=ItemStatus.IN_STOCK)
        data = item.to_dict()
        assert data["status"] == 1
        assert data["status_label"] == "In Stock"
        assert data["created_at"] is None


class TestCollection:
    """Tests for Collection model."""

    def test_from_row_and_key(self):
        collection = Collection.from_row((3, "alice", "Cards", "TCG", "2024-01-15"))
        assert collection.items == []
        assert collection.natural_key == ("alice", "Cards", "2024-01-15")

    def test_to_dict(self):
        collection = Collection(id=3, owner_id="alice", name="Cards", acquired_date="2024-01-15")
        assert collection.to_dict()["acquired_date"] == "2024-01-15"
        assert "items" not in collection.to_dict()
        assert collection.to_dict(include_items=True)["items"] == []


class TestItemDraft:
    """Tests for ItemDraft model."""

    def test_params_follow_insert_columns(self):
        draft = ItemDraft(name="Mew", status=ItemStatus.SOLD, created_at="2024-02-01")
        params = dict(zip(ItemDraft.INSERT_COLUMNS, draft.as_params()))
        assert params["status"] == 2
        assert params["quantity"] == 1
        assert params["created_at"] == "2024-02-01"


class TestResults:
    """Tests for operation result models."""

    def test_export_result(self):
        result = ExportResult(rows=[{}, {}], document="h\n\n\n")
        assert result.row_count == 2
        assert result.to_dict() == {"document": "h\n\n\n", "rowCount": 2}

    def test_import_summary_message(self):
        summary = ImportSummary(created=2, updated=1)
        assert summary.message == "Import complete! Created: 2, Updated: 1"
        assert summary.to_dict()["success"] is True

    def test_revenue_point_rounding(self):
        point = RevenuePoint(date=date(2024, 3, 4), revenue=10.005, profit=1 / 3)
        data = point.to_dict()
        assert data["date"] == "2024-03-04"
        assert data["profit"] == 0.33
