# Overview: Error taxonomy for catalog, cart, checkout and persistence operations.

from __future__ import annotations


class PosError(Exception):
    """Base for policy-level refusals raised by the stores."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class NotFoundError(PosError):
    """Operation referenced a product, cart line or sale that does not exist."""


class DuplicateIdError(PosError):
    """An id collided with an existing catalog product or ledger sale."""


class InsufficientStockError(PosError):
    """Cart growth refused because the live catalog stock is exhausted."""


class EmptyCartError(PosError):
    """Checkout attempted with no cart lines."""


class PersistenceError(PosError):
    """The snapshot store could not be written."""
