# Overview: Flask API routes for customers.

from flask import Blueprint, current_app

from ..services.register_service import get_register, save_register
from . import KNOWN_ERRORS, error_response, json_body

customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")


@customers_bp.get("")
def list_customers():
    register = get_register()
    with register.lock:
        items = register.customers.to_list()
    return {"items": items, "count": len(items)}


@customers_bp.post("")
def create_customer():
    """Create a customer. Required: name. Optional: phone, email, notes."""
    register = get_register()
    try:
        payload = json_body()
        with register.lock:
            customer = register.customers.create(payload)
        save_register(register)
        return {"customer": customer.to_dict()}, 201
    except KNOWN_ERRORS as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to create customer")
        return {"error": "Internal server error"}, 500


@customers_bp.get("/<customer_id>")
def get_customer(customer_id: str):
    register = get_register()
    try:
        with register.lock:
            return {"customer": register.customers.require(customer_id).to_dict()}
    except KNOWN_ERRORS as e:
        return error_response(e)


@customers_bp.patch("/<customer_id>")
def update_customer(customer_id: str):
    register = get_register()
    try:
        patch = json_body()
        with register.lock:
            customer = register.customers.update(customer_id, patch)
        save_register(register)
        return {"customer": customer.to_dict()}
    except KNOWN_ERRORS as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to update customer")
        return {"error": "Internal server error"}, 500
