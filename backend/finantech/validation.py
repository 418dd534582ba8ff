from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from .money import to_decimal, to_int


# Maximum price: 999,999,999,999 in outlet currency
# This keeps nonsensical amounts out of the catalog
MAX_PRICE = Decimal("999999999999")

MAX_TEXT_LENGTH = 255


class ValidationError(ValueError):
    """400-level input problem."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - field_types: "text" | "money" | "int" per writable field (security boundary)
    - required_on_create: fields required for POST
    """
    field_types: dict[str, str]
    required_on_create: frozenset[str] = frozenset()

    @property
    def writable_fields(self) -> set[str]:
        return set(self.field_types)


PRODUCT_POLICY = ModelValidationPolicy(
    field_types={
        "name": "text",
        "category": "text",
        "price": "money",
        "cost_price": "money",
        "stock": "int",
        "min_stock": "int",
    },
    required_on_create=frozenset({"name", "category", "price", "cost_price", "stock", "min_stock"}),
)


def _coerce_value(key: str, kind: str, value: Any):
    # Numeric form fields fall back to zero on unparseable input
    if kind == "money":
        return to_decimal(value)
    if kind == "int":
        return to_int(value)

    if value is None:
        raise ValidationError(f"{key} cannot be null")
    text = str(value).strip()
    if text == "":
        raise ValidationError(f"{key} cannot be blank")
    if len(text) > MAX_TEXT_LENGTH:
        raise ValidationError(f"{key} exceeds max length {MAX_TEXT_LENGTH}")
    return text


def validate_payload(*, payload: dict, policy: ModelValidationPolicy, partial: bool) -> dict:
    """
    Validates + normalizes incoming JSON against the policy.
    Returns a cleaned patch dict with only writable fields.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    if not partial:
        missing = sorted(f for f in policy.required_on_create if f not in payload)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    for k in payload.keys():
        if k not in policy.field_types:
            raise ValidationError(f"Field not allowed: {k}")

    return {k: _coerce_value(k, policy.field_types[k], raw) for k, raw in payload.items()}


def enforce_rules_product(patch: dict) -> None:
    """
    Business rules beyond type coercion.
    Keep these small and centralized.
    """
    for key in ("price", "cost_price"):
        if key in patch:
            value = patch[key]
            if value < 0:
                raise ValidationError(f"{key} must be >= 0")
            if value > MAX_PRICE:
                raise ValidationError(f"{key} cannot exceed {MAX_PRICE:,}")
