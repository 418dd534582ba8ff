"""
Checkout Engine - turns a cart into a committed Sale

The only place where catalog and ledger change together. Everything that
can fail (empty cart, id generation, totals) happens before the first
mutation; the stock decrements and the ledger prepend then run under the
shared state lock so no reader sees one without the other.
"""

from __future__ import annotations

import logging
import threading
import uuid
from decimal import Decimal
from typing import Callable, Optional

from ..models import Sale, SaleItem
from ..money import to_decimal
from ..time_utils import to_epoch_ms, utcnow
from .cart_service import Cart, CartLine
from .catalog_service import CatalogStore
from .errors import EmptyCartError
from .ledger_service import TransactionLedger

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_COST_RATIO = Decimal("0.8")


class CheckoutEngine:
    def __init__(
        self,
        catalog: CatalogStore,
        ledger: TransactionLedger,
        *,
        fallback_cost_ratio=DEFAULT_FALLBACK_COST_RATIO,
        lock=None,
        on_commit: Optional[Callable[[], None]] = None,
        clock: Callable = utcnow,
    ):
        self.catalog = catalog
        self.ledger = ledger
        self.fallback_cost_ratio = to_decimal(fallback_cost_ratio, DEFAULT_FALLBACK_COST_RATIO)
        self._lock = lock if lock is not None else threading.RLock()
        self.on_commit = on_commit
        self._clock = clock

    def unit_cost(self, line: CartLine) -> Decimal:
        """
        Cost price from the live catalog record.

        When the product has been deleted since it was added to the cart the
        cost is estimated as price * fallback_cost_ratio.
        """
        product = self.catalog.get(line.product_id)
        if product is not None:
            return product.cost_price
        logger.warning(
            "Product %s missing at checkout; estimating cost at %s of price",
            line.product_id,
            self.fallback_cost_ratio,
        )
        return line.price * self.fallback_cost_ratio

    def compute_profit(self, lines: list[CartLine]) -> Decimal:
        profit = Decimal("0")
        for line in lines:
            profit += (line.price - self.unit_cost(line)) * line.quantity
        return profit

    def _next_sale_id(self, timestamp) -> str:
        base = f"TRX-{to_epoch_ms(timestamp)}"
        if base not in self.ledger:
            return base
        while True:
            candidate = f"{base}-{uuid.uuid4().hex[:4].upper()}"
            if candidate not in self.ledger:
                return candidate

    def checkout(self, cart: Cart) -> Sale:
        """
        Commit the cart.

        Raises EmptyCartError without touching catalog or ledger when the cart
        has no lines. On success the stock of every product still in the
        catalog is reduced by the sold quantity (missing products are
        skipped), the sale is placed at the head of the ledger, the cart is
        cleared and on_commit is invoked to persist both snapshots.
        """
        with self._lock:
            if cart.is_empty:
                raise EmptyCartError("Cannot check out an empty cart")

            lines = cart.lines()
            items = tuple(
                SaleItem(product_id=line.product_id, name=line.name, price=line.price, quantity=line.quantity)
                for line in lines
            )
            total = sum((item.subtotal for item in items), Decimal("0"))
            profit = self.compute_profit(lines)

            timestamp = self._clock()
            sale = Sale(
                id=self._next_sale_id(timestamp),
                timestamp=timestamp,
                items=items,
                total=total,
                profit=profit,
            )

            for item in items:
                self.catalog.adjust_stock(item.product_id, item.quantity, notify=False)
            self.ledger.append(sale)
            cart.clear()

            logger.info("Checkout %s: %d line(s), total=%s profit=%s", sale.id, len(items), total, profit)

            if self.on_commit is not None:
                self.on_commit()

        return sale
