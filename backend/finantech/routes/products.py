# Overview: Flask API routes for catalog operations; parses input and returns JSON responses.

"""
Product management routes.

Create/update accept the inventory form fields (name, category, price,
cost_price, stock, min_stock). The server generates product ids.
"""
from dataclasses import replace

from flask import Blueprint, request

from ..models import Product
from ..services.catalog_service import new_product_id
from ..services.errors import DuplicateIdError, NotFoundError
from ..services.state import get_state
from ..validation import (
    PRODUCT_POLICY,
    validate_payload,
    enforce_rules_product,
    ValidationError,
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
def list_products():
    """
    List products in catalog order.

    Query params:
    - search: str (optional) - case-insensitive match on name or category
    """
    search = request.args.get("search")
    state = get_state()
    with state.locked():
        products = state.catalog.search(search)
    return {
        "items": [p.to_dict() for p in products],
        "count": len(products),
    }


@products_bp.get("/low-stock")
def list_low_stock():
    state = get_state()
    with state.locked():
        products = state.catalog.low_stock()
    return {
        "items": [p.to_dict() for p in products],
        "count": len(products),
    }


@products_bp.get("/<product_id>")
def get_product(product_id: str):
    state = get_state()
    with state.locked():
        product = state.catalog.get(product_id)
    if product is None:
        return {"error": "Product not found"}, 404
    return product.to_dict()


@products_bp.post("")
def create_product_route():
    """Create a new product from the inventory form."""
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(payload=payload, policy=PRODUCT_POLICY, partial=False)
        enforce_rules_product(patch)
    except ValidationError as e:
        return {"error": str(e)}, 400

    state = get_state()
    product = Product(id=new_product_id(), **patch)

    try:
        with state.locked():
            state.catalog.add(product)
    except DuplicateIdError as e:
        return {"error": str(e)}, 409

    return product.to_dict(), 201


@products_bp.put("/<product_id>")
def update_product_route(product_id: str):
    """
    Update a product.

    Only the fields present in the payload change; the record keeps its
    position in the catalog.
    """
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(payload=payload, policy=PRODUCT_POLICY, partial=True)
        enforce_rules_product(patch)
    except ValidationError as e:
        return {"error": str(e)}, 400

    state = get_state()
    try:
        with state.locked():
            current = state.catalog.require(product_id)
            updated = state.catalog.update(replace(current, **patch))
    except NotFoundError:
        return {"error": "Product not found"}, 404

    return updated.to_dict(), 200


@products_bp.delete("/<product_id>")
def delete_product_route(product_id: str):
    """Delete a product. Past sales keep their own copy of name and price."""
    state = get_state()
    with state.locked():
        deleted = state.catalog.delete(product_id)

    if not deleted:
        return {"error": "Product not found"}, 404

    return {"ok": True}, 200
