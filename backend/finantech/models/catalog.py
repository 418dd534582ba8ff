from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal

from ..money import money_json, money_str, to_decimal, to_int


@dataclass(frozen=True)
class Product:
    """
    Catalog entry for one sellable product.

    Prices are Decimal with no minor-unit scaling (15000 means 15000).
    stock is expected to stay >= 0 but the model does not enforce it; the
    cart rules are what keep checkout from overselling.
    """
    id: str
    name: str
    category: str
    price: Decimal
    cost_price: Decimal
    stock: int
    min_stock: int

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.min_stock

    def with_stock(self, stock: int) -> "Product":
        return replace(self, stock=stock)

    def __repr__(self) -> str:
        return f"<Product id={self.id!r} name={self.name!r} stock={self.stock}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "price": money_json(self.price),
            "cost_price": money_json(self.cost_price),
            "stock": self.stock,
            "min_stock": self.min_stock,
            "low_stock": self.is_low_stock,
        }

    def to_snapshot(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "price": money_str(self.price),
            "cost_price": money_str(self.cost_price),
            "stock": self.stock,
            "min_stock": self.min_stock,
        }

    @classmethod
    def from_snapshot(cls, data: dict) -> "Product":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            category=str(data.get("category", "")),
            price=to_decimal(data.get("price")),
            cost_price=to_decimal(data.get("cost_price")),
            stock=to_int(data.get("stock")),
            min_stock=to_int(data.get("min_stock")),
        )
