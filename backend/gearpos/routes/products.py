# Overview: Flask API routes for the product catalog; parses input and returns JSON responses.

from flask import Blueprint, current_app, request

from ..services.register_service import get_register, save_register
from . import KNOWN_ERRORS, error_response, json_body

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
def list_products():
    """
    List products with their variants.

    Query params:
    - q: str (optional) - case-insensitive match on name, SKU or category
    """
    register = get_register()
    query = (request.args.get("q") or "").strip().casefold()
    with register.lock:
        products = register.catalog.products
        if query:
            products = [
                p for p in products
                if query in p.name.casefold() or query in p.sku.casefold() or query in p.category.casefold()
            ]
        items = [p.to_dict() for p in products]
    return {"items": items, "count": len(items)}


@products_bp.post("")
def create_product():
    """
    Create a product.

    Required: name, sku
    Optional: category, cost, price, notes, imageUrl,
              variants: [{size, color, stock, price}]
    """
    register = get_register()
    try:
        payload = json_body()
        with register.lock:
            product = register.catalog.create_product(payload)
        save_register(register)
        return {"product": product.to_dict()}, 201
    except KNOWN_ERRORS as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to create product")
        return {"error": "Internal server error"}, 500


@products_bp.get("/lookup")
def lookup_product():
    """Resolve a bare or composite SKU (?sku=TEE-001-M-Black)."""
    register = get_register()
    try:
        with register.lock:
            product, variant = register.catalog.resolve_sku(request.args.get("sku", ""))
            return {
                "product": product.to_dict(),
                "variant": variant.to_dict() if variant else None,
                "sku": variant.display_sku(product) if variant else product.sku,
                "price": variant.effective_price(product) if variant else product.price,
            }
    except KNOWN_ERRORS as e:
        return error_response(e)


@products_bp.get("/<product_id>")
def get_product(product_id: str):
    register = get_register()
    try:
        with register.lock:
            return {"product": register.catalog.require(product_id).to_dict()}
    except KNOWN_ERRORS as e:
        return error_response(e)


@products_bp.patch("/<product_id>")
def update_product(product_id: str):
    register = get_register()
    try:
        patch = json_body()
        with register.lock:
            product = register.catalog.update_product(product_id, patch)
        save_register(register)
        return {"product": product.to_dict()}
    except KNOWN_ERRORS as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to update product")
        return {"error": "Internal server error"}, 500


@products_bp.post("/<product_id>/variants")
def add_variant(product_id: str):
    register = get_register()
    try:
        payload = json_body()
        with register.lock:
            variant = register.catalog.add_variant(product_id, payload)
        save_register(register)
        return {"variant": variant.to_dict()}, 201
    except KNOWN_ERRORS as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to add variant")
        return {"error": "Internal server error"}, 500


@products_bp.patch("/<product_id>/variants/<variant_id>")
def update_variant(product_id: str, variant_id: str):
    """Restock or edit a variant (size, color, stock, price override)."""
    register = get_register()
    try:
        patch = json_body()
        with register.lock:
            variant = register.catalog.update_variant(product_id, variant_id, patch)
        save_register(register)
        return {"variant": variant.to_dict()}
    except KNOWN_ERRORS as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to update variant")
        return {"error": "Internal server error"}, 500
