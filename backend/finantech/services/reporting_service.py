# Overview: Read-only dashboard aggregates over catalog and ledger snapshots.

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from ..models import Product, Sale
from ..money import money_json
from ..time_utils import to_utc_z


def total_revenue(sales: Iterable[Sale]) -> Decimal:
    return sum((s.total for s in sales), Decimal("0"))


def total_profit(sales: Iterable[Sale]) -> Decimal:
    return sum((s.profit for s in sales), Decimal("0"))


def recent_activity(sales: list[Sale], limit: int = 7) -> list[dict]:
    """
    Last `limit` sales for charting.

    sales is most-recent-first (ledger order); the series comes back
    oldest-to-newest.
    """
    if limit <= 0:
        return []
    window = list(reversed(sales[:limit]))
    return [
        {
            "sale_id": s.id,
            "time": s.timestamp.strftime("%H:%M"),
            "timestamp": to_utc_z(s.timestamp),
            "total": money_json(s.total),
            "profit": money_json(s.profit),
        }
        for s in window
    ]


def dashboard_summary(
    products: list[Product],
    sales: list[Sale],
    *,
    recent_limit: int = 7,
    low_stock_limit: int = 6,
) -> dict:
    low = [p for p in products if p.is_low_stock]
    return {
        "total_revenue": money_json(total_revenue(sales)),
        "total_profit": money_json(total_profit(sales)),
        "total_stock": sum(p.stock for p in products),
        "low_stock_count": len(low),
        "low_stock_products": [p.to_dict() for p in low[:low_stock_limit]],
        "sales_count": len(sales),
        "recent_activity": recent_activity(sales, recent_limit),
    }
