# Overview: Flask API routes for checkout and sale history.

from flask import Blueprint, current_app, request

from ..services import checkout_service
from ..services.register_service import get_register, save_register
from . import KNOWN_ERRORS, error_response, json_body

sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


@sales_bp.post("/checkout")
def checkout_route():
    """
    Settle the open cart.

    Optional JSON overrides for the terms staged on the cart:
    discount, taxRate, paymentMethod, customerId, notes
    """
    register = get_register()
    try:
        data = json_body()
        sale = checkout_service.checkout(
            register,
            discount=data.get("discount"),
            tax_rate=data.get("taxRate"),
            payment_method=data.get("paymentMethod"),
            customer_id=data.get("customerId"),
            notes=str(data["notes"]) if data.get("notes") is not None else None,
        )
        save_register(register)
        return {"sale": sale.to_dict()}, 201
    except KNOWN_ERRORS as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to complete sale")
        return {"error": "Internal server error"}, 500


@sales_bp.get("")
def list_sales():
    """
    Sale history, newest first.

    Query params:
    - date: YYYY-MM-DD (optional) - only sales on that day
    - limit: int (optional)
    """
    register = get_register()
    day = (request.args.get("date") or "").strip()
    limit = request.args.get("limit", type=int)
    with register.lock:
        sales = register.history.newest_first()
    if day:
        sales = [s for s in sales if s.created_at.startswith(day)]
    if limit is not None and limit >= 0:
        sales = sales[:limit]
    return {"items": [s.to_dict() for s in sales], "count": len(sales)}


@sales_bp.get("/<sale_id>")
def get_sale(sale_id: str):
    register = get_register()
    try:
        with register.lock:
            return {"sale": register.history.require(sale_id).to_dict()}
    except KNOWN_ERRORS as e:
        return error_response(e)
