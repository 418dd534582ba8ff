from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Any


ZERO = Decimal("0")


def to_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    """
    Coerce a price-like value to Decimal.

    - Decimal -> unchanged
    - int / numeric str -> exact Decimal
    - float -> via str() so 15000.5 stays 15000.5
    - bool, None, blank or garbage -> default
    """
    if isinstance(value, Decimal):
        return value if value.is_finite() else default
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        value = str(value)
    try:
        d = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return default
    return d if d.is_finite() else default


_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def to_int(value: Any, default: int = 0) -> int:
    """
    Integer coercion for form input.

    Reads the leading integer and drops the rest, so "12.5" -> 12,
    12.5 -> 12 and " 7 pcs" -> 7. Anything without a leading digit falls
    back to default.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)):
        try:
            return int(value)
        except (OverflowError, ValueError, InvalidOperation):
            return default
    match = _LEADING_INT.match(str(value))
    if match is None:
        return default
    return int(match.group(1))


def money_json(value: Decimal) -> int | float:
    """JSON representation: integral amounts as int, the rest as float."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def money_str(value: Decimal) -> str:
    """Lossless text form used in snapshots and CSV output."""
    if value == value.to_integral_value():
        return str(value.quantize(Decimal(1)))
    return str(value.normalize())
