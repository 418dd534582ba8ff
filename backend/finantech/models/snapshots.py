from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z


class Snapshot(db.Model):
    """
    Named, whole-state snapshot.

    The application keeps its catalog and ledger in memory; this table is the
    durable key-value store behind them. Each row holds the full JSON payload
    for one key ("products", "sales") and is overwritten on every save.
    """
    __tablename__ = "snapshots"

    key = db.Column(db.String(64), primary_key=True)
    payload = db.Column(db.Text, nullable=False)

    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    def __repr__(self) -> str:
        return f"<Snapshot key={self.key!r} bytes={len(self.payload or '')}>"

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "bytes": len(self.payload or ""),
            "updated_at": to_utc_z(self.updated_at),
        }
