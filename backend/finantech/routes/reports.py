from flask import Blueprint, current_app, jsonify, request

from ..services import reporting_service
from ..services.state import get_state


reports_bp = Blueprint("reports", __name__, url_prefix="/api")


@reports_bp.get("/dashboard")
def dashboard():
    recent = request.args.get("recent", type=int)
    if recent is None:
        recent = current_app.config.get("DASHBOARD_RECENT_SALES", 7)
    if recent < 0:
        return jsonify({"error": "recent must be >= 0"}), 400

    state = get_state()
    with state.locked():
        products = state.catalog.list()
        sales = state.ledger.list()

    summary = reporting_service.dashboard_summary(
        products,
        sales,
        recent_limit=recent,
        low_stock_limit=current_app.config.get("DASHBOARD_LOW_STOCK_LIMIT", 6),
    )
    return jsonify(summary), 200
