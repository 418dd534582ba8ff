# Overview: Flask API routes for the checkout cart; parses input and returns JSON responses.

"""
Cart routes.

Each change is checked against the live catalog stock at the moment it is
made. Refusals come back as 409 and leave the cart unchanged.
"""

from flask import Blueprint, request, jsonify

from ..money import to_int
from ..services.errors import InsufficientStockError, NotFoundError
from ..services.state import get_state


cart_bp = Blueprint("cart", __name__, url_prefix="/api/cart")


@cart_bp.get("")
def get_cart():
    state = get_state()
    with state.locked():
        return jsonify(state.cart.to_dict()), 200


@cart_bp.post("/items")
def add_item_route():
    """Add one unit of a product to the cart."""
    data = request.get_json(silent=True) or {}
    product_id = data.get("product_id")

    if not product_id:
        return jsonify({"error": "product_id required"}), 400

    state = get_state()
    try:
        with state.locked():
            product = state.catalog.require(str(product_id))
            line = state.cart.add(product)
            cart = state.cart.to_dict()
    except NotFoundError as e:
        return jsonify({"error": str(e), "details": e.details}), 404
    except InsufficientStockError as e:
        return jsonify({"error": str(e), "details": e.details}), 409

    return jsonify({"line": line.to_dict(), "cart": cart}), 200


@cart_bp.patch("/items/<product_id>")
def change_quantity_route(product_id: str):
    """
    Change a line's quantity by `delta` (e.g. +1 / -1).

    The quantity never drops below 1; remove the line explicitly instead.
    """
    data = request.get_json(silent=True) or {}
    if "delta" not in data:
        return jsonify({"error": "delta required"}), 400
    delta = to_int(data.get("delta"))

    state = get_state()
    try:
        with state.locked():
            line = state.cart.change_quantity(product_id, delta, state.catalog)
            cart = state.cart.to_dict()
    except NotFoundError as e:
        return jsonify({"error": str(e), "details": e.details}), 404
    except InsufficientStockError as e:
        return jsonify({"error": str(e), "details": e.details}), 409

    return jsonify({"line": line.to_dict(), "cart": cart}), 200


@cart_bp.delete("/items/<product_id>")
def remove_item_route(product_id: str):
    state = get_state()
    with state.locked():
        removed = state.cart.remove(product_id)
        cart = state.cart.to_dict()
    if not removed:
        return jsonify({"error": "Product is not in the cart"}), 404
    return jsonify({"cart": cart}), 200


@cart_bp.delete("")
def clear_cart_route():
    state = get_state()
    with state.locked():
        state.cart.clear()
        cart = state.cart.to_dict()
    return jsonify({"cart": cart}), 200
