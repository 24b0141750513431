"""
Domain models for collections, items and derived tabular/revenue results.

Store rows are mapped into these dataclasses by the repositories; import
drafts are the not-yet-persisted counterparts built while parsing a CSV.
"""
from dataclasses import dataclass, field
from datetime import date
from enum import Enum, IntEnum
from typing import Optional, List, Dict, Any


# ═══════════════════════════════════════════════════════════════════════════════
# ENUMS
# ═══════════════════════════════════════════════════════════════════════════════

class ItemStatus(IntEnum):
    """Item lifecycle status as stored in `items.status`."""
    LISTED = 0
    IN_STOCK = 1
    SOLD = 2

    @property
    def label(self) -> str:
        """Human-readable label used in CSV exports."""
        labels = {
            self.LISTED: "Listed",
            self.IN_STOCK: "In Stock",
            self.SOLD: "Sold",
        }
        return labels[self]


class Granularity(str, Enum):
    """Time bucket width for revenue series."""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


# ═══════════════════════════════════════════════════════════════════════════════
# PERSISTED ENTITIES
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class Item:
    """Inventory entry belonging to exactly one collection."""
    id: int
    collection_id: int
    name: str
    condition: Optional[str] = None
    cost: Optional[float] = None
    price: Optional[float] = None
    profit: Optional[float] = None
    source: Optional[str] = None
    status: ItemStatus = ItemStatus.LISTED
    quantity: Optional[int] = 1
    image_url: Optional[str] = None
    created_at: Optional[date] = None

    COLUMNS = (
        "id", "collection_id", "name", "condition", "cost", "price", "profit",
        "source", "status", "quantity", "image_url", "created_at",
    )

    @classmethod
    def from_row(cls, row: tuple) -> "Item":
        """Create Item from a row selected in COLUMNS order."""
        data = dict(zip(cls.COLUMNS, row))
        data["status"] = ItemStatus(data["status"])
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return {
            "id": self.id,
            "collection_id": self.collection_id,
            "name": self.name,
            "condition": self.condition,
            "cost": self.cost,
            "price": self.price,
            "profit": self.profit,
            "source": self.source,
            "status": int(self.status),
            "status_label": self.status.label,
            "quantity": self.quantity,
            "image_url": self.image_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass
class Collection:
    """Named grouping of items owned by one user."""
    id: int
    owner_id: str
    name: str
    category: Optional[str] = None
    acquired_date: Optional[str] = None
    items: List[Item] = field(default_factory=list)

    COLUMNS = ("id", "owner_id", "name", "category", "acquired_date")

    @classmethod
    def from_row(cls, row: tuple) -> "Collection":
        """Create Collection from a row selected in COLUMNS order."""
        return cls(**dict(zip(cls.COLUMNS, row)))

    @property
    def natural_key(self) -> tuple:
        return (self.owner_id, self.name, self.acquired_date)

    def to_dict(self, include_items: bool = False) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        data = {
            "id": self.id,
            "owner_id": self.owner_id,
            "name": self.name,
            "category": self.category,
            "acquired_date": self.acquired_date,
        }
        if include_items:
            data["items"] = [item.to_dict() for item in self.items]
        return data


# ═══════════════════════════════════════════════════════════════════════════════
# DRAFTS (not yet persisted)
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class ItemDraft:
    """Item values ready to be inserted; profit is already derived."""
    name: str
    condition: Optional[str] = None
    cost: float = 0.0
    price: float = 0.0
    profit: float = 0.0
    source: Optional[str] = None
    status: ItemStatus = ItemStatus.LISTED
    quantity: int = 1
    image_url: Optional[str] = None
    created_at: Optional[str] = None

    INSERT_COLUMNS = (
        "name", "condition", "cost", "price", "profit", "source",
        "status", "quantity", "image_url", "created_at",
    )

    def as_params(self) -> list:
        """Positional parameters in INSERT_COLUMNS order."""
        return [
            self.name,
            self.condition,
            self.cost,
            self.price,
            self.profit,
            self.source,
            int(self.status),
            self.quantity,
            self.image_url,
            self.created_at,
        ]


@dataclass
class CollectionDraft:
    """One natural-key group of import rows."""
    name: str
    category: str
    acquired_date: Optional[str]
    items: List[ItemDraft] = field(default_factory=list)


# ═══════════════════════════════════════════════════════════════════════════════
# OPERATION RESULTS
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class ExportResult:
    """Flattened export rows plus their serialized document."""
    rows: List[Dict[str, Any]]
    document: str

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def to_dict(self) -> Dict[str, Any]:
        return {"document": self.document, "rowCount": self.row_count}


@dataclass
class ImportSummary:
    """Outcome of one import call."""
    created: int = 0
    updated: int = 0
    success: bool = True

    @property
    def message(self) -> str:
        return f"Import complete! Created: {self.created}, Updated: {self.updated}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "created": self.created,
            "updated": self.updated,
        }


@dataclass
class RevenuePoint:
    """Revenue and profit summed over one time bucket."""
    date: date
    revenue: float
    profit: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "revenue": round(self.revenue, 2),
            "profit": round(self.profit, 2),
        }
