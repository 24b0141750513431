"""DuckDBStore item methods."""
from __future__ import annotations

from typing import Dict, List

from stash.exceptions import NotFoundError
from stash.models import Item, ItemDraft

_COLUMNS_SQL = ", ".join(Item.COLUMNS)
_INSERT_SQL = (
    f"INSERT INTO items (collection_id, {', '.join(ItemDraft.INSERT_COLUMNS)}) "
    f"VALUES (?, {', '.join('?' * len(ItemDraft.INSERT_COLUMNS))})"
)


class ItemsMixin:

    async def list_items(self, collection_id: int) -> List[Item]:
        """Items of one collection in insertion order."""
        rows = await self._fetch_all(
            f"SELECT {_COLUMNS_SQL} FROM items WHERE collection_id = ? ORDER BY id",
            [collection_id],
        )
        return [Item.from_row(row) for row in rows]

    async def list_items_for_collections(self, collection_ids: List[int]) -> Dict[int, List[Item]]:
        """Items of several collections, grouped by collection id."""
        if not collection_ids:
            return {}
        placeholders = ",".join("?" * len(collection_ids))
        rows = await self._fetch_all(
            f"""
            SELECT {_COLUMNS_SQL}
            FROM items
            WHERE collection_id IN ({placeholders})
            ORDER BY collection_id, id
            """,
            list(collection_ids),
        )
        grouped: Dict[int, List[Item]] = {}
        for row in rows:
            item = Item.from_row(row)
            grouped.setdefault(item.collection_id, []).append(item)
        return grouped

    async def delete_items(self, collection_id: int) -> None:
        """Delete every item of a collection."""
        await self._execute("DELETE FROM items WHERE collection_id = ?", [collection_id])

    async def insert_items(self, collection_id: int, drafts: List[ItemDraft]) -> int:
        """Bulk insert item drafts attributed to collection_id."""
        rows = [[collection_id, *draft.as_params()] for draft in drafts]
        await self._executemany(_INSERT_SQL, rows)
        return len(rows)

    async def replace_items(self, collection_id: int, drafts: List[ItemDraft]) -> int:
        """
        Replace a collection's whole item set with drafts.

        Delete and insert are separate statements; call inside
        `transaction()` for them to be atomic.
        """
        await self.delete_items(collection_id)
        return await self.insert_items(collection_id, drafts)

    async def create_item(self, collection_id: int, draft: ItemDraft) -> Item:
        """Insert one item and return it as stored."""
        row = await self._fetch_one(
            f"{_INSERT_SQL} RETURNING {_COLUMNS_SQL}",
            [collection_id, *draft.as_params()],
        )
        return Item.from_row(row)

    async def update_item(
        self,
        item_id: int,
        collection_id: int,
        draft: ItemDraft,
        replace_image: bool = False,
    ) -> Item:
        """
        Overwrite an item's fields with draft values.

        The stored image_url is kept unless replace_image is set.

        Raises:
            NotFoundError: If the item does not exist in that collection
        """
        columns = [c for c in ItemDraft.INSERT_COLUMNS if replace_image or c != "image_url"]
        values = dict(zip(ItemDraft.INSERT_COLUMNS, draft.as_params()))
        assignments = ", ".join(f"{column} = ?" for column in columns)
        params = [values[column] for column in columns] + [item_id, collection_id]

        row = await self._fetch_one(
            f"""
            UPDATE items SET {assignments}
            WHERE id = ? AND collection_id = ?
            RETURNING {_COLUMNS_SQL}
            """,
            params,
        )
        if row is None:
            raise NotFoundError("Item not found", f"id={item_id}")
        return Item.from_row(row)
