"""DuckDBStore collection methods."""
from __future__ import annotations

from typing import Optional, List

from stash.coercion import today
from stash.exceptions import NotFoundError
from stash.models import Collection
from stash.validators import validate_required_text, validate_sort

_COLUMNS_SQL = ", ".join(Collection.COLUMNS)


class CollectionsMixin:

    async def find_collection_id(
        self,
        owner_id: str,
        name: str,
        acquired_date: Optional[str],
    ) -> Optional[int]:
        """Look up a collection by its natural key (owner, name, acquired date)."""
        row = await self._fetch_one(
            """
            SELECT id
            FROM collections
            WHERE owner_id = ?
              AND name = ?
              AND acquired_date IS NOT DISTINCT FROM ?
            ORDER BY id
            LIMIT 1
            """,
            [owner_id, name, acquired_date],
        )
        return row[0] if row else None

    async def insert_collection(
        self,
        owner_id: str,
        name: str,
        category: Optional[str],
        acquired_date: Optional[str],
    ) -> int:
        """Insert a collection and return its assigned id."""
        row = await self._fetch_one(
            """
            INSERT INTO collections (owner_id, name, category, acquired_date)
            VALUES (?, ?, ?, ?)
            RETURNING id
            """,
            [owner_id, name, category, acquired_date],
        )
        return row[0]

    async def update_collection_category(self, collection_id: int, category: Optional[str]) -> None:
        """Update only the category of an existing collection."""
        await self._execute(
            "UPDATE collections SET category = ? WHERE id = ?",
            [category, collection_id],
        )

    async def create_collection(self, owner_id: str, name: str, category: str) -> Collection:
        """
        Create a collection acquired today.

        Raises:
            ValidationError: If name or category is blank
        """
        name = validate_required_text(name, "name")
        category = validate_required_text(category, "category")
        collection_id = await self.insert_collection(owner_id, name, category, today().isoformat())
        return await self.get_collection(collection_id, owner_id)

    async def rename_collection(self, collection_id: int, owner_id: str, name: str) -> Collection:
        """
        Rename one of the owner's collections.

        The name is part of the natural key, so later imports match the
        collection under its new name.

        Raises:
            ValidationError: If name is blank
            NotFoundError: If it does not exist or belongs to someone else
        """
        name = validate_required_text(name, "name")
        row = await self._fetch_one(
            f"UPDATE collections SET name = ? WHERE id = ? AND owner_id = ? RETURNING {_COLUMNS_SQL}",
            [name, collection_id, owner_id],
        )
        if row is None:
            raise NotFoundError("Collection not found", f"id={collection_id}")
        return Collection.from_row(row)

    async def get_collection(self, collection_id: int, owner_id: str) -> Collection:
        """
        Fetch one collection owned by owner_id.

        Raises:
            NotFoundError: If it does not exist or belongs to someone else
        """
        row = await self._fetch_one(
            f"SELECT {_COLUMNS_SQL} FROM collections WHERE id = ? AND owner_id = ?",
            [collection_id, owner_id],
        )
        if row is None:
            raise NotFoundError("Collection not found", f"id={collection_id}")
        return Collection.from_row(row)

    async def list_collections(
        self,
        owner_id: str,
        sort_by: str = "acquired_date",
        sort_order: str = "desc",
        search: Optional[str] = None,
        category: Optional[str] = None,
    ) -> List[Collection]:
        """List the owner's collections with optional name search and category filter."""
        sort_by, sort_order = validate_sort(sort_by, sort_order)

        params: list = [owner_id]
        where_clauses = ["owner_id = ?"]

        if search:
            where_clauses.append("name ILIKE ?")
            params.append(f"%{search}%")

        if category:
            where_clauses.append("category = ?")
            params.append(category)

        where_sql = " AND ".join(where_clauses)
        rows = await self._fetch_all(
            f"""
            SELECT {_COLUMNS_SQL}
            FROM collections
            WHERE {where_sql}
            ORDER BY {sort_by} {sort_order.upper()} NULLS LAST, id {sort_order.upper()}
            """,
            params,
        )
        return [Collection.from_row(row) for row in rows]

    async def list_collections_with_items(
        self,
        owner_id: str,
        collection_ids: Optional[List[int]] = None,
    ) -> List[Collection]:
        """
        Load the owner's collections with their items attached.

        Ordered by acquired date, newest first. When collection_ids is given,
        only those ids (that the owner actually owns) are returned.
        """
        params: list = [owner_id]
        where_sql = "owner_id = ?"
        if collection_ids:
            where_sql += f" AND id IN ({','.join('?' * len(collection_ids))})"
            params.extend(collection_ids)

        rows = await self._fetch_all(
            f"""
            SELECT {_COLUMNS_SQL}
            FROM collections
            WHERE {where_sql}
            ORDER BY acquired_date DESC NULLS LAST, id DESC
            """,
            params,
        )
        collections = [Collection.from_row(row) for row in rows]
        if not collections:
            return collections

        items_by_collection = await self.list_items_for_collections([c.id for c in collections])
        for collection in collections:
            collection.items = items_by_collection.get(collection.id, [])
        return collections
