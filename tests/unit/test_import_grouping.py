"""
Tests for row grouping and item derivation in stash.import_service.
"""
import pytest

from stash.import_service import group_key, group_rows, derive_item
from stash.models import ItemStatus


class TestGroupKey:
    """Tests for natural-key group ids."""

    def test_joins_name_and_date(self):
        row = {"collection_name": "Cards", "collection_acquired_date": "2024-01-15"}
        assert group_key(row, "_") == "Cards_2024-01-15"

    def test_missing_date(self):
        assert group_key({"collection_name": "Cards"}, "_") == "Cards_"

    def test_date_whitespace_ignored(self):
        """Padding around the date does not change the key."""
        padded = {"collection_name": "Cards", "collection_acquired_date": " 2024-01-15 "}
        assert group_key(padded, "_") == "Cards_2024-01-15"


class TestGroupRows:
    """Tests for group_rows."""

    def test_first_seen_order(self, sample_rows):
        """Groups keep first-seen order."""
        drafts = group_rows(sample_rows, "_", created_at="2024-05-01")
        assert list(drafts) == ["Cards_2024-01-15", "Coins_2023-06-01"]

    def test_non_contiguous_rows_merge(self, sample_rows):
        """Rows of one collection merge even when interleaved."""
        drafts = group_rows(sample_rows, "_", created_at="2024-05-01")
        assert [i.name for i in drafts["Cards_2024-01-15"].items] == ["Charizard", "Pikachu"]

    def test_blank_item_row_adds_no_item(self, sample_rows):
        """Blank item names only assert the collection exists."""
        drafts = group_rows(sample_rows, "_", created_at="2024-05-01")
        assert drafts["Coins_2023-06-01"].items == []
        assert len(drafts["Cards_2024-01-15"].items) == 2

    def test_last_category_wins(self, sample_rows):
        """Collection fields are rewritten by every row of the group."""
        drafts = group_rows(sample_rows, "_", created_at="2024-05-01")
        assert drafts["Cards_2024-01-15"].category == "Pokemon"

    def test_blank_date_is_none(self):
        """Missing acquired date is stored as null."""
        drafts = group_rows([{"collection_name": "Loose", "collection_acquired_date": " "}], "_")
        assert next(iter(drafts.values())).acquired_date is None

    def test_dates_distinguish_groups(self):
        """Same name on different dates gives two groups."""
        rows = [
            {"collection_name": "Cards", "collection_acquired_date": "2024-01-15"},
            {"collection_name": "Cards", "collection_acquired_date": "2024-02-15"},
        ]
        assert len(group_rows(rows, "_")) == 2

    def test_padded_date_joins_group(self):
        """Rows differing only in date padding share one group."""
        rows = [
            {"collection_name": "Cards", "collection_acquired_date": "2024-01-15", "item_name": "A"},
            {"collection_name": "Cards", "collection_acquired_date": " 2024-01-15", "item_name": "B"},
        ]
        drafts = group_rows(rows, "_", created_at="2024-05-01")
        assert [i.name for i in drafts["Cards_2024-01-15"].items] == ["A", "B"]


class TestDeriveItem:
    """Tests for derive_item."""

    def test_profit_recomputed(self):
        """Supplied profit is ignored."""
        row = {"item_name": "Charizard", "item_cost": "10", "item_price": "25",
               "item_quantity": "2", "item_profit": "999"}
        draft = derive_item(row, "2024-05-01")
        assert draft.profit == 30
        assert draft.created_at == "2024-05-01"

    def test_defaults(self):
        """Malformed cells degrade to defaults."""
        row = {"item_name": " Mew ", "item_cost": "abc", "item_price": "",
               "item_quantity": "-1", "item_status": "pending", "item_image_url": ""}
        draft = derive_item(row, "2024-05-01")
        assert draft.name == "Mew"
        assert (draft.cost, draft.price, draft.quantity, draft.profit) == (0, 0, 1, 0)
        assert draft.status == ItemStatus.LISTED
        assert draft.image_url is None

    def test_fractional_quantity_rounds(self):
        """A fractional quantity is rounded, and profit uses the rounded value."""
        row = {"item_name": "Charizard", "item_cost": "10", "item_price": "15", "item_quantity": "3.5"}
        draft = derive_item(row, "2024-05-01")
        assert draft.quantity == 4
        assert draft.profit == 20

    @pytest.mark.parametrize("label,status", [
        ("Sold", ItemStatus.SOLD),
        ("in stock", ItemStatus.IN_STOCK),
        ("0", ItemStatus.LISTED),
    ])
    def test_status(self, label, status):
        draft = derive_item({"item_name": "x", "item_status": label}, "2024-05-01")
        assert draft.status == status
