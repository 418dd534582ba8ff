# Overview: Durable key-value snapshot store behind the in-memory catalog and ledger.

from __future__ import annotations

import json
import logging
import time
from typing import Any

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from ..extensions import db
from ..models import Snapshot
from .errors import PersistenceError

logger = logging.getLogger(__name__)

PRODUCTS_KEY = "products"
SALES_KEY = "sales"


class SnapshotStore:
    """
    Loads and saves named JSON snapshots.

    save() writes every key it is given inside one transaction, so a
    products/sales pair is either stored together or not at all.
    """

    def __init__(self, attempts: int = 3, backoff: float = 0.1):
        self.attempts = max(1, attempts)
        self.backoff = backoff

    def load(self, key: str) -> Any | None:
        row = db.session.get(Snapshot, key)
        if row is None:
            return None
        try:
            return json.loads(row.payload)
        except ValueError as exc:
            raise PersistenceError(f"Snapshot {key!r} is not valid JSON", details={"key": key}) from exc

    def _write(self, encoded: dict[str, str]) -> None:
        for key, text in encoded.items():
            row = db.session.get(Snapshot, key)
            if row is None:
                db.session.add(Snapshot(key=key, payload=text))
            else:
                row.payload = text
        db.session.commit()

    def save(self, **payloads: Any) -> None:
        """
        Upsert every given key and commit once.

        A locked database or stale row is retried up to `attempts` times with
        a short linear backoff, rolling the session back in between. Any other
        database error, or the last failed attempt, raises PersistenceError.
        """
        if not payloads:
            return

        encoded = {key: json.dumps(value, ensure_ascii=False) for key, value in payloads.items()}
        keys = sorted(encoded)

        for attempt in range(1, self.attempts + 1):
            try:
                self._write(encoded)
                return
            except (OperationalError, StaleDataError) as exc:
                db.session.rollback()
                if attempt >= self.attempts:
                    raise PersistenceError("Could not save snapshots", details={"keys": keys}) from exc
                logger.warning("Snapshot write for %s failed (attempt %d/%d), retrying", ", ".join(keys), attempt, self.attempts)
                time.sleep(self.backoff * attempt)
            except SQLAlchemyError as exc:
                db.session.rollback()
                raise PersistenceError("Could not save snapshots", details={"keys": keys}) from exc

    def status(self) -> list[dict]:
        return [row.to_dict() for row in db.session.query(Snapshot).order_by(Snapshot.key.asc()).all()]
