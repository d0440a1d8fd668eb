"""Inventory item data model."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Dict, Any

OUT_OF_STOCK = "out-of-stock"
LOW_STOCK = "low-stock"
IN_STOCK = "in-stock"


def utc_now() -> datetime:
    """Current time in UTC, truncated to milliseconds."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def format_timestamp(value: datetime) -> str:
    """Format a datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z``."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def stock_status(quantity: int, low_stock_threshold: int = 5) -> str:
    """Classify a quantity as out of stock, low stock or in stock."""
    if quantity <= 0:
        return OUT_OF_STOCK
    if quantity <= low_stock_threshold:
        return LOW_STOCK
    return IN_STOCK


@dataclass
class InventoryItem:
    """A single inventory record as stored in the JSON document."""

    id: int
    product_name: str
    sku: str
    quantity: int
    price: float
    category: Optional[str] = None
    supplier: Optional[str] = None
    location: Optional[str] = None
    last_updated: Optional[datetime] = None

    def matches_search(self, term: str) -> bool:
        """Case-insensitive substring match on name, SKU, supplier and location."""
        needle = term.lower()
        for value in (self.product_name, self.sku, self.supplier, self.location):
            if value and needle in value.lower():
                return True
        return False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase representation used on disk and on the wire."""
        return {
            "id": self.id,
            "productName": self.product_name,
            "sku": self.sku,
            "category": self.category,
            "quantity": self.quantity,
            "price": self.price,
            "supplier": self.supplier,
            "location": self.location,
            "lastUpdated": format_timestamp(self.last_updated) if self.last_updated else None
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InventoryItem":
        """Create instance from a camelCase dictionary."""
        last_updated = data.get("lastUpdated")
        if isinstance(last_updated, str):
            last_updated = parse_timestamp(last_updated)

        item_id = data["id"]
        if isinstance(item_id, bool) or not isinstance(item_id, int):
            raise ValueError(f"id must be an integer, got {item_id!r}")

        return cls(
            id=item_id,
            product_name=data["productName"],
            sku=data["sku"],
            quantity=data["quantity"],
            price=data["price"],
            category=data.get("category"),
            supplier=data.get("supplier"),
            location=data.get("location"),
            last_updated=last_updated
        )
