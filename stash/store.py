"""
DuckDB store for collections and items.

Provides the persistence collaborator for export, import and revenue:
equality lookups, inserts returning ids, updates, deletes by filter and
ordered selects. Domain-specific queries live in repository mixins:
- CollectionsMixin: natural-key lookup, collection create/list/update
- ItemsMixin: item listing, bulk replace, create/update
- RevenueMixin: revenue/profit series over sold items
"""
import asyncio
import functools
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Optional, List, Dict, Any, Callable

import duckdb

from stash.config import config
from stash.exceptions import PersistenceError, QueryTimeoutError
from stash.observability import get_logger
from stash.repositories import CollectionsMixin, ItemsMixin, RevenueMixin

logger = get_logger(__name__)

# Store whose transaction the current task is running inside, if any
_active_transaction: ContextVar[Optional["DuckDBStore"]] = ContextVar(
    "stash_active_transaction", default=None
)

SCHEMA_SQL = """
CREATE SEQUENCE IF NOT EXISTS collections_id_seq START 1;
CREATE SEQUENCE IF NOT EXISTS items_id_seq START 1;

CREATE TABLE IF NOT EXISTS collections (
    id INTEGER PRIMARY KEY DEFAULT nextval('collections_id_seq'),
    owner_id VARCHAR NOT NULL,
    name VARCHAR NOT NULL,
    category VARCHAR,
    acquired_date VARCHAR,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS items (
    id INTEGER PRIMARY KEY DEFAULT nextval('items_id_seq'),
    collection_id INTEGER NOT NULL,
    name VARCHAR NOT NULL,
    condition VARCHAR,
    cost DOUBLE,
    price DOUBLE,
    profit DOUBLE,
    source VARCHAR,
    status INTEGER NOT NULL DEFAULT 0 CHECK (status IN (0, 1, 2)),
    quantity INTEGER NOT NULL DEFAULT 1,
    image_url VARCHAR,
    created_at DATE
);

CREATE INDEX IF NOT EXISTS idx_collections_owner_name ON collections(owner_id, name);
CREATE INDEX IF NOT EXISTS idx_items_collection_id ON items(collection_id);
"""


class DuckDBStore(CollectionsMixin, ItemsMixin, RevenueMixin):
    """
    Async-compatible DuckDB store.

    All access is serialized by an asyncio lock and blocking calls run on a
    single-worker thread pool, since a DuckDB connection must not be used
    from two threads at once. `transaction()` holds the lock for its whole
    body so that several statements commit or roll back together.
    """

    def __init__(self, db_path: Optional[str] = None, query_timeout: Optional[float] = None):
        self.db_path = str(db_path or config.store.db_path)
        self.query_timeout = query_timeout or config.store.query_timeout
        self._connection: Optional[duckdb.DuckDBPyConnection] = None
        self._lock = asyncio.Lock()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._total_queries = 0

    async def connect(self) -> None:
        """Open the database, create the schema, start the worker thread."""
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        async with self._lock:
            if self._connection is not None:
                return
            try:
                self._connection = duckdb.connect(self.db_path)
                self._connection.execute(SCHEMA_SQL)
            except duckdb.Error as e:
                raise PersistenceError("Could not open store", str(e)) from e
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="duckdb")
            logger.info(f"DuckDB connected: {self.db_path}")

    async def close(self) -> None:
        """Close database connection and thread pool."""
        async with self._lock:
            if self._executor:
                self._executor.shutdown(wait=True)
                self._executor = None
            if self._connection:
                self._connection.close()
                self._connection = None
                logger.info("DuckDB connection closed")

    @asynccontextmanager
    async def connection(self):
        """Get the connection, holding the access lock while in use."""
        if self._connection is None:
            await self.connect()
        async with self._lock:
            yield self._connection

    # ─── Query Execution ─────────────────────────────────────────────────────

    async def _dispatch(self, conn: duckdb.DuckDBPyConnection, fn: Callable, label: str) -> Any:
        """Run fn(conn) on the worker thread with timeout and error mapping."""
        self._total_queries += 1
        loop = asyncio.get_running_loop()
        try:
            return await asyncio.wait_for(
                loop.run_in_executor(self._executor, functools.partial(fn, conn)),
                timeout=self.query_timeout,
            )
        except asyncio.TimeoutError:
            conn.interrupt()
            raise QueryTimeoutError(label, self.query_timeout, "Statement interrupted")
        except duckdb.Error as e:
            logger.error(f"Store rejected statement: {e}", extra={"statement": label[:200]})
            raise PersistenceError("Store rejected the operation", str(e)) from e

    async def _run(self, fn: Callable, label: str) -> Any:
        """Run fn(conn), joining the current task's transaction if there is one."""
        if _active_transaction.get() is self:
            return await self._dispatch(self._connection, fn, label)
        async with self.connection() as conn:
            return await self._dispatch(conn, fn, label)

    async def _execute(self, query: str, params: list = None) -> None:
        """Execute a statement without a result (UPDATE/DELETE)."""
        await self._run(lambda conn: conn.execute(query, params or []), query)

    async def _executemany(self, query: str, rows: List[list]) -> None:
        """Execute one statement per parameter row."""
        if rows:
            await self._run(lambda conn: conn.executemany(query, rows), query)

    async def _fetch_one(self, query: str, params: list = None) -> Optional[tuple]:
        """Execute query and fetch one row."""
        return await self._run(lambda conn: conn.execute(query, params or []).fetchone(), query)

    async def _fetch_all(self, query: str, params: list = None) -> List[tuple]:
        """Execute query and fetch all rows."""
        return await self._run(lambda conn: conn.execute(query, params or []).fetchall(), query)

    @asynccontextmanager
    async def transaction(self):
        """
        Run the enclosed store calls as one atomic unit.

        Nested use joins the outer transaction. Any exception rolls the
        whole unit back and is re-raised.
        """
        if _active_transaction.get() is self:
            yield self
            return

        async with self.connection() as conn:
            await self._dispatch(conn, lambda c: c.execute("BEGIN TRANSACTION"), "BEGIN TRANSACTION")
            token = _active_transaction.set(self)
            try:
                yield self
            except BaseException:
                _active_transaction.reset(token)
                try:
                    await self._dispatch(conn, lambda c: c.execute("ROLLBACK"), "ROLLBACK")
                except PersistenceError as rollback_error:
                    logger.error(f"Rollback failed: {rollback_error}")
                raise
            else:
                _active_transaction.reset(token)
                await self._dispatch(conn, lambda c: c.execute("COMMIT"), "COMMIT")

    # ─── Monitoring ──────────────────────────────────────────────────────────

    async def get_stats(self) -> Dict[str, Any]:
        """Row counts and connection info for health checks."""
        row = await self._fetch_one(
            "SELECT (SELECT COUNT(*) FROM collections), (SELECT COUNT(*) FROM items)"
        )
        return {
            "collections": int(row[0]),
            "items": int(row[1]),
            "total_queries": self._total_queries,
            "db_path": self.db_path,
        }


# ═══════════════════════════════════════════════════════════════════════════════
# SINGLETON INSTANCE
# ═══════════════════════════════════════════════════════════════════════════════

_store_instance: Optional[DuckDBStore] = None
_store_lock = asyncio.Lock()


async def get_store() -> DuckDBStore:
    """Get singleton DuckDB store instance (coroutine-safe)."""
    global _store_instance
    async with _store_lock:
        if _store_instance is None:
            _store_instance = DuckDBStore()
            await _store_instance.connect()
    return _store_instance


async def close_store() -> None:
    """Close singleton store instance."""
    global _store_instance
    if _store_instance:
        await _store_instance.close()
        _store_instance = None
