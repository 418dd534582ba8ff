# Overview: Transient cart of product lines awaiting checkout.

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..models import Product
from ..money import money_json
from .catalog_service import CatalogStore
from .errors import InsufficientStockError, NotFoundError


@dataclass
class CartLine:
    product_id: str
    name: str
    price: Decimal
    quantity: int = 1

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


class Cart:
    """
    Pre-commit selection of product lines.

    Name and price are captured when a product is first added; the captured
    price is what checkout charges even if the catalog price changes later.
    Stock is checked against the live catalog on every mutation and is not
    re-validated at commit time.
    """

    def __init__(self):
        self._lines: list[CartLine] = []

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def lines(self) -> list[CartLine]:
        return list(self._lines)

    def line_for(self, product_id: str) -> CartLine | None:
        for line in self._lines:
            if line.product_id == product_id:
                return line
        return None

    def quantity_of(self, product_id: str) -> int:
        line = self.line_for(product_id)
        return line.quantity if line else 0

    @property
    def total(self) -> Decimal:
        return sum((line.subtotal for line in self._lines), Decimal("0"))

    def add(self, product: Product) -> CartLine:
        """Add one unit of product."""
        if product.stock <= 0:
            raise InsufficientStockError(
                "Product is out of stock",
                details={"product_id": product.id, "stock": product.stock},
            )

        existing = self.line_for(product.id)
        if existing:
            if existing.quantity >= product.stock:
                raise InsufficientStockError(
                    "Cart already holds all available stock",
                    details={"product_id": product.id, "stock": product.stock, "in_cart": existing.quantity},
                )
            existing.quantity += 1
            return existing

        line = CartLine(product_id=product.id, name=product.name, price=product.price, quantity=1)
        self._lines.append(line)
        return line

    def change_quantity(self, product_id: str, delta: int, catalog: CatalogStore) -> CartLine:
        """
        Shift a line's quantity by delta, clamped to a minimum of 1.

        Going to zero does not drop the line; use remove(). An increase past
        the product's current catalog stock is refused and the line is left
        as it was. Lines whose product has left the catalog are not checked.
        """
        line = self.line_for(product_id)
        if line is None:
            raise NotFoundError("Product is not in the cart", details={"product_id": product_id})

        new_qty = max(1, line.quantity + delta)
        product = catalog.get(product_id)
        if product is not None and new_qty > product.stock:
            raise InsufficientStockError(
                "Requested quantity exceeds available stock",
                details={"product_id": product_id, "stock": product.stock, "requested_quantity": new_qty},
            )

        line.quantity = new_qty
        return line

    def remove(self, product_id: str) -> bool:
        before = len(self._lines)
        self._lines = [line for line in self._lines if line.product_id != product_id]
        return len(self._lines) != before

    def clear(self) -> None:
        self._lines = []

    def to_dict(self) -> dict:
        return {
            "items": [line.to_dict() for line in self._lines],
            "count": len(self._lines),
            "total": money_json(self.total),
        }
