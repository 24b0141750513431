"""
Pytest configuration and shared fixtures.
"""
import pytest
import pytest_asyncio
from typing import Dict, List

from stash.config import EXPORT_FIELDS
from stash.store import DuckDBStore

HEADER = ",".join(EXPORT_FIELDS)


def make_document(*lines: str) -> str:
    """CSV document in export layout: header plus the given data lines."""
    return "\n".join((HEADER,) + lines) + "\n"


@pytest.fixture
def document():
    """Factory building a CSV document from data lines."""
    return make_document


@pytest_asyncio.fixture
async def store(tmp_path):
    """Empty DuckDB store in a temporary file."""
    db = DuckDBStore(db_path=str(tmp_path / "stash.duckdb"))
    await db.connect()
    yield db
    await db.close()


@pytest.fixture
def sample_document() -> str:
    """Two collections: one with two items, one without items."""
    return make_document(
        "Cards,TCG,2024-01-15,Charizard,Mint,10,25,999,eBay,Sold,2,",
        "Cards,TCG,2024-01-15,Pikachu,Good,1,3,,Shop,Listed,1,http://img.example/p.png",
        "Coins,Numismatics,2023-06-01,,,,,,,,,",
    )


@pytest.fixture
def sample_rows() -> List[Dict[str, str]]:
    """Parsed rows with a non-contiguous duplicate key and a blank-item row."""
    blank = {name: "" for name in EXPORT_FIELDS}
    return [
        {**blank, "collection_name": "Cards", "collection_category": "TCG",
         "collection_acquired_date": "2024-01-15", "item_name": "Charizard",
         "item_cost": "10", "item_price": "25", "item_status": "Sold", "item_quantity": "2"},
        {**blank, "collection_name": "Coins", "collection_category": "Numismatics",
         "collection_acquired_date": "2023-06-01"},
        {**blank, "collection_name": "Cards", "collection_category": "Pokemon",
         "collection_acquired_date": "2024-01-15", "item_name": "Pikachu",
         "item_cost": "1", "item_price": "3"},
        {**blank, "collection_name": "Cards", "collection_category": "Pokemon",
         "collection_acquired_date": "2024-01-15", "item_name": "   "},
    ]
