# Overview: Owned store instances (catalog, ledger, cart, checkout) for one application.

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager

from flask import Flask, current_app

from ..models import Product, Sale
from .cart_service import Cart
from .catalog_service import CatalogStore
from .checkout_service import CheckoutEngine
from .errors import PersistenceError
from .ledger_service import TransactionLedger
from .seed import seed_catalog
from .snapshot_service import PRODUCTS_KEY, SALES_KEY, SnapshotStore

logger = logging.getLogger(__name__)

EXTENSION_KEY = "finantech"


class PosState:
    """
    Process-local POS state.

    Holds exactly one catalog, ledger and cart. Every mutation goes through
    the store contracts; after a successful mutation save() writes the
    products and sales snapshots together.
    """

    def __init__(
        self,
        *,
        products: list[Product] | None = None,
        sales: list[Sale] | None = None,
        snapshots: SnapshotStore | None = None,
        fallback_cost_ratio="0.8",
    ):
        self.lock = threading.RLock()
        self.snapshots = snapshots
        self.catalog = CatalogStore(products or [], on_change=self.save)
        self.ledger = TransactionLedger(sales or [])
        self.cart = Cart()
        self.checkout_engine = CheckoutEngine(
            self.catalog,
            self.ledger,
            fallback_cost_ratio=fallback_cost_ratio,
            lock=self.lock,
            on_commit=self.save,
        )

    @contextmanager
    def locked(self):
        with self.lock:
            yield self

    def save(self) -> bool:
        """
        Write-through of both snapshots after a mutation.

        Fire-and-forget: the in-memory change has already happened and
        stands, so a failed write is logged and reported as False instead of
        being raised into the caller.
        """
        if self.snapshots is None:
            return False
        with self.lock:
            try:
                self.snapshots.save(**{
                    PRODUCTS_KEY: self.catalog.to_snapshot(),
                    SALES_KEY: self.ledger.to_snapshot(),
                })
            except PersistenceError:
                logger.exception("Snapshot save failed; in-memory state kept")
                return False
        return True

    def checkout(self) -> Sale:
        return self.checkout_engine.checkout(self.cart)

    @classmethod
    def load(cls, snapshots: SnapshotStore, *, seed_if_empty: bool = True, fallback_cost_ratio="0.8") -> "PosState":
        """
        Read both snapshots once.

        A missing products snapshot falls back to the seed catalog (when
        enabled); a missing sales snapshot means an empty ledger.
        """
        raw_products = snapshots.load(PRODUCTS_KEY)
        raw_sales = snapshots.load(SALES_KEY)

        if raw_products is None:
            products = seed_catalog() if seed_if_empty else []
            logger.info("No products snapshot found; starting with %d seed product(s)", len(products))
        else:
            products = [Product.from_snapshot(item) for item in raw_products]

        sales = [Sale.from_snapshot(item) for item in (raw_sales or [])]

        return cls(
            products=products,
            sales=sales,
            snapshots=snapshots,
            fallback_cost_ratio=fallback_cost_ratio,
        )


def init_state(app: Flask) -> PosState:
    state = PosState.load(
        SnapshotStore(),
        seed_if_empty=app.config.get("SEED_CATALOG_ENABLED", True),
        fallback_cost_ratio=app.config.get("FALLBACK_COST_RATIO", "0.8"),
    )
    app.extensions[EXTENSION_KEY] = state
    return state


def get_state() -> PosState:
    state = current_app.extensions.get(EXTENSION_KEY)
    if state is None:
        state = init_state(current_app._get_current_object())
    return state
