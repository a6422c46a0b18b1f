# Overview: Flask API routes for dashboard views.

from flask import Blueprint, request

from ..services import reporting_service
from ..services.register_service import get_register

reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/summary")
def summary():
    """Today's sales, inventory value at cost/retail, low-stock count."""
    return reporting_service.summary(get_register())


@reports_bp.get("/low-stock")
def low_stock():
    """
    Variants at or below the low-stock threshold.

    Query params:
    - threshold: int (optional) - overrides the store setting
    """
    register = get_register()
    with register.lock:
        threshold = request.args.get("threshold", type=int)
        if threshold is None:
            threshold = register.settings.low_stock_threshold
        items = reporting_service.low_stock(register.catalog.products, threshold)
    return {"items": items, "count": len(items), "threshold": threshold}
