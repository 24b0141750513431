"""
Repository mixins for the DuckDB store.

Each mixin groups the queries of one domain and relies on the query
helpers provided by DuckDBStore (_fetch_one, _fetch_all, _execute,
_executemany):
- CollectionsMixin: natural-key lookup, create/list/update collections
- ItemsMixin: item listing, bulk replacement, create/update
- RevenueMixin: revenue and profit series over sold items
"""
from stash.repositories.collections import CollectionsMixin
from stash.repositories.items import ItemsMixin
from stash.repositories.revenue import RevenueMixin

__all__ = [
    "CollectionsMixin",
    "ItemsMixin",
    "RevenueMixin",
]
