# Overview: CSV report of sales for download.

from __future__ import annotations

import csv
import io
from datetime import date
from typing import Iterable

from ..models import Sale
from ..money import money_str
from ..time_utils import to_utc_z

CSV_HEADERS = ["Transaction ID", "Timestamp", "Total", "Profit", "Items"]


def sales_to_csv(sales: Iterable[Sale]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for s in sales:
        writer.writerow([
            s.id,
            to_utc_z(s.timestamp),
            money_str(s.total),
            money_str(s.profit),
            s.item_summary(),
        ])
    return buf.getvalue()


def export_filename(today: date) -> str:
    return f"sales_report_{today.isoformat()}.csv"
