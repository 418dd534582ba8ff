# Overview: In-memory catalog store; owns Product records for one outlet.

from __future__ import annotations

import logging
import uuid
from typing import Callable, Iterable, Optional

from ..models import Product
from .errors import DuplicateIdError, NotFoundError

logger = logging.getLogger(__name__)


def new_product_id() -> str:
    return f"PROD-{uuid.uuid4().hex[:12].upper()}"


class CatalogStore:
    """
    Exclusive owner of Product records.

    Products are kept in insertion order; update() replaces a record in place
    so its position is preserved. on_change, when set, is called after every
    successful mutation and is how the catalog is written through to the
    snapshot store.
    """

    def __init__(self, products: Iterable[Product] = (), on_change: Optional[Callable[[], None]] = None):
        self._products: dict[str, Product] = {}
        for p in products:
            if p.id in self._products:
                raise DuplicateIdError(f"Duplicate product id {p.id!r}", details={"id": p.id})
            self._products[p.id] = p
        self.on_change = on_change

    def __len__(self) -> int:
        return len(self._products)

    def __contains__(self, product_id: str) -> bool:
        return product_id in self._products

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def list(self) -> list[Product]:
        return list(self._products.values())

    def get(self, product_id: str) -> Product | None:
        return self._products.get(product_id)

    def require(self, product_id: str) -> Product:
        p = self._products.get(product_id)
        if p is None:
            raise NotFoundError("Product not found", details={"id": product_id})
        return p

    def add(self, product: Product) -> Product:
        if product.id in self._products:
            raise DuplicateIdError("Product id already exists", details={"id": product.id})
        self._products[product.id] = product
        logger.info("Added product %s (%s)", product.id, product.name)
        self._changed()
        return product

    def update(self, product: Product) -> Product:
        if product.id not in self._products:
            raise NotFoundError("Product not found", details={"id": product.id})
        # dict assignment to an existing key keeps its position
        self._products[product.id] = product
        logger.info("Updated product %s", product.id)
        self._changed()
        return product

    def delete(self, product_id: str) -> bool:
        if self._products.pop(product_id, None) is None:
            return False
        logger.info("Deleted product %s", product_id)
        self._changed()
        return True

    def adjust_stock(self, product_id: str, delta: int, *, notify: bool = True) -> bool:
        """
        stock = stock - delta for the matching product.

        No floor at zero; a missing product is skipped and False returned.
        notify=False lets the checkout engine batch several adjustments into
        one save.
        """
        p = self._products.get(product_id)
        if p is None:
            return False
        self._products[product_id] = p.with_stock(p.stock - delta)
        if notify:
            self._changed()
        return True

    def replace_all(self, products: Iterable[Product]) -> None:
        """Swap in a whole catalog (seed/reset)."""
        fresh: dict[str, Product] = {}
        for p in products:
            if p.id in fresh:
                raise DuplicateIdError(f"Duplicate product id {p.id!r}", details={"id": p.id})
            fresh[p.id] = p
        self._products = fresh
        self._changed()

    def search(self, term: str | None) -> list[Product]:
        if not term:
            return self.list()
        needle = term.strip().lower()
        return [
            p for p in self._products.values()
            if needle in p.name.lower() or needle in p.category.lower()
        ]

    def low_stock(self) -> list[Product]:
        return [p for p in self._products.values() if p.is_low_stock]

    def total_stock(self) -> int:
        return sum(p.stock for p in self._products.values())

    def to_snapshot(self) -> list[dict]:
        return [p.to_snapshot() for p in self._products.values()]
