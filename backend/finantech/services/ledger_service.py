# Overview: Append-only transaction ledger of completed sales.

from __future__ import annotations

from typing import Iterable

from ..models import Sale
from .errors import DuplicateIdError

"""
Ledger invariants

- Append-only: sales are prepended, never updated or removed.
- list() is most-recent-first.
- Sale ids are unique within the ledger.
"""


class TransactionLedger:
    def __init__(self, sales: Iterable[Sale] = ()):
        # stored newest first, as loaded from the snapshot
        self._sales: list[Sale] = list(sales)
        self._ids: set[str] = {s.id for s in self._sales}

    def __len__(self) -> int:
        return len(self._sales)

    def __contains__(self, sale_id: str) -> bool:
        return sale_id in self._ids

    def append(self, sale: Sale) -> Sale:
        if sale.id in self._ids:
            raise DuplicateIdError("Sale id already recorded", details={"id": sale.id})
        self._sales.insert(0, sale)
        self._ids.add(sale.id)
        return sale

    def list(self) -> list[Sale]:
        return list(self._sales)

    def get(self, sale_id: str) -> Sale | None:
        for s in self._sales:
            if s.id == sale_id:
                return s
        return None

    def search(self, term: str | None) -> list[Sale]:
        """Match on sale id or any item name, case-insensitive."""
        if not term:
            return self.list()
        needle = term.strip().lower()
        return [
            s for s in self._sales
            if needle in s.id.lower() or any(needle in item.name.lower() for item in s.items)
        ]

    def to_snapshot(self) -> list[dict]:
        return [s.to_snapshot() for s in self._sales]
