# Overview: Flask API routes for the open cart.

"""
Cart edits are transient: the cart is not part of the persisted snapshot,
so these routes never save the register.
"""
from flask import Blueprint, current_app

from ..services.register_service import get_register
from ..validation import NotFoundError, ValidationError
from . import KNOWN_ERRORS, error_response, json_body

cart_bp = Blueprint("cart", __name__, url_prefix="/api/cart")


def _qty(payload: dict, default: int = 1):
    value = payload.get("qty", default)
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValidationError("qty must be an integer")
    return value


@cart_bp.get("")
def get_cart():
    register = get_register()
    with register.lock:
        return {"cart": register.cart.to_dict()}


@cart_bp.patch("")
def update_cart_terms():
    """Set discount, taxRate, paymentMethod, customerId or notes for the pending sale."""
    register = get_register()
    try:
        patch = json_body()
        with register.lock:
            register.cart.update_terms(patch)
            return {"cart": register.cart.to_dict()}
    except KNOWN_ERRORS as e:
        return error_response(e)


@cart_bp.delete("")
def clear_cart():
    register = get_register()
    with register.lock:
        register.cart.clear()
        return {"cart": register.cart.to_dict()}


@cart_bp.post("/lines")
def add_line():
    """
    Add a product (and optional variant) to the cart.

    Unknown product/variant ids are ignored: the cart comes back unchanged
    with "added": false.
    """
    register = get_register()
    try:
        payload = json_body()
        product_id = str(payload.get("productId") or "")
        variant_id = payload.get("variantId") or None
        with register.lock:
            line = register.cart.add(product_id, variant_id, _qty(payload))
            return {
                "added": line is not None,
                "line": line.to_dict() if line else None,
                "cart": register.cart.to_dict(),
            }, (201 if line else 200)
    except KNOWN_ERRORS as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to add cart line")
        return {"error": "Internal server error"}, 500


@cart_bp.post("/scan")
def scan_sku():
    """Add by bare or composite SKU (barcode scan / typed code)."""
    register = get_register()
    try:
        payload = json_body()
        with register.lock:
            line = register.cart.add_by_sku(str(payload.get("sku") or ""), _qty(payload))
            return {"line": line.to_dict(), "cart": register.cart.to_dict()}, 201
    except KNOWN_ERRORS as e:
        return error_response(e)


@cart_bp.patch("/lines/<line_id>")
def update_line(line_id: str):
    register = get_register()
    try:
        payload = json_body()
        if "qty" not in payload:
            raise ValidationError("qty is required")
        with register.lock:
            line = register.cart.update_quantity(line_id, _qty(payload))
            if line is None:
                raise NotFoundError(f"Cart line {line_id} not found")
            return {"line": line.to_dict(), "cart": register.cart.to_dict()}
    except KNOWN_ERRORS as e:
        return error_response(e)


@cart_bp.delete("/lines/<line_id>")
def remove_line(line_id: str):
    register = get_register()
    with register.lock:
        removed = register.cart.remove(line_id)
        return {"removed": removed, "cart": register.cart.to_dict()}
