from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from ..money import money_json, money_str, to_decimal, to_int
from ..time_utils import from_epoch_ms, to_epoch_ms, to_utc_z


@dataclass(frozen=True)
class SaleItem:
    """
    One line of a committed sale.

    name and price are copies taken at checkout, so later catalog edits or
    deletes never change historical figures.
    """
    product_id: str
    name: str
    price: Decimal
    quantity: int

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "price": money_json(self.price),
            "quantity": self.quantity,
            "subtotal": money_json(self.subtotal),
        }

    def to_snapshot(self) -> dict:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "price": money_str(self.price),
            "quantity": self.quantity,
            "subtotal": money_str(self.subtotal),
        }

    @classmethod
    def from_snapshot(cls, data: dict) -> "SaleItem":
        # subtotal is derived; a stored value is informational only
        return cls(
            product_id=str(data["product_id"]),
            name=str(data.get("name", "")),
            price=to_decimal(data.get("price")),
            quantity=to_int(data.get("quantity")),
        )


@dataclass(frozen=True)
class Sale:
    """Committed sale. Immutable once created; the ledger only prepends."""
    id: str
    timestamp: datetime
    items: tuple[SaleItem, ...]
    total: Decimal
    profit: Decimal

    def item_summary(self) -> str:
        return "; ".join(f"{item.name} ({item.quantity}x)" for item in self.items)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": to_utc_z(self.timestamp),
            "items": [item.to_dict() for item in self.items],
            "total": money_json(self.total),
            "profit": money_json(self.profit),
        }

    def to_snapshot(self) -> dict:
        return {
            "id": self.id,
            "timestamp": to_epoch_ms(self.timestamp),
            "items": [item.to_snapshot() for item in self.items],
            "total": money_str(self.total),
            "profit": money_str(self.profit),
        }

    @classmethod
    def from_snapshot(cls, data: dict) -> "Sale":
        items = tuple(SaleItem.from_snapshot(raw) for raw in data.get("items", []))
        return cls(
            id=str(data["id"]),
            timestamp=from_epoch_ms(to_int(data.get("timestamp"))),
            items=items,
            total=to_decimal(data.get("total")),
            profit=to_decimal(data.get("profit")),
        )
