# Overview: Flask API routes for checkout and sales history; parses input and returns JSON responses.

"""Checkout and sales history routes"""

from flask import Blueprint, Response, request, jsonify, current_app

from ..services import export_service
from ..services.errors import EmptyCartError
from ..services.state import get_state
from ..time_utils import utcnow


sales_bp = Blueprint("sales", __name__, url_prefix="/api")


@sales_bp.post("/checkout")
def checkout_route():
    """
    Commit the current cart as a sale.

    Deducts stock, prepends the sale to the ledger and clears the cart.
    An empty cart is refused with 400 and nothing changes. A committed sale
    answers 201 even when the snapshot write afterwards fails.
    """
    state = get_state()
    try:
        sale = state.checkout()
        return jsonify({"sale": sale.to_dict()}), 201

    except EmptyCartError as e:
        return jsonify({"error": str(e), "details": e.details}), 400
    except Exception:
        current_app.logger.exception("Failed to check out")
        return jsonify({"error": "Internal server error"}), 500


@sales_bp.get("/sales")
def list_sales_route():
    """
    Sales history, most recent first.

    Query params:
    - search: str (optional) - match on transaction id or item name
    """
    search = request.args.get("search")
    state = get_state()
    with state.locked():
        sales = state.ledger.search(search)
    return jsonify({
        "items": [s.to_dict() for s in sales],
        "count": len(sales),
    }), 200


@sales_bp.get("/sales/export")
def export_sales_route():
    """Download the (optionally filtered) sales history as CSV."""
    search = request.args.get("search")
    state = get_state()
    with state.locked():
        sales = state.ledger.search(search)

    body = export_service.sales_to_csv(sales)
    filename = export_service.export_filename(utcnow().date())
    return Response(
        body,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@sales_bp.get("/sales/<sale_id>")
def get_sale_route(sale_id: str):
    state = get_state()
    with state.locked():
        sale = state.ledger.get(sale_id)
    if sale is None:
        return jsonify({"error": "Sale not found"}), 404
    return jsonify({"sale": sale.to_dict()}), 200
