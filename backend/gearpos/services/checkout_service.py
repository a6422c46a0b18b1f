"""
Checkout: turn the open cart into an immutable Sale.

Validate, price, build and commit all happen under ``register.lock``. Every
check runs before the first mutation, so a failed checkout leaves stock,
sale history and the cart exactly as they were.
"""
from __future__ import annotations

import logging
from datetime import datetime

from ..models import CartLine, Sale, SaleItem
from ..time_utils import format_sale_timestamp, localnow
from ..validation import ConflictError, NotFoundError, coerce_number
from .catalog_service import CatalogStore
from .document_service import next_invoice_number
from .pricing_service import compute_totals, format_money
from .register_service import Register
from .settings_service import normalize_payment_method

logger = logging.getLogger(__name__)


class CheckoutError(Exception):
    """Raised for checkout failures."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class EmptyCartError(CheckoutError):
    """Checkout attempted with no cart lines."""


class StockError(CheckoutError):
    """A variant does not have enough stock for the requested quantity."""
    def __init__(
        self,
        message: str,
        *,
        product_id: str,
        variant_id: str,
        requested: int,
        available: int,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.product_id = product_id
        self.variant_id = variant_id
        self.requested = requested
        self.available = available


def _validate_lines(catalog: CatalogStore, lines: list[CartLine]) -> None:
    for line in lines:
        if catalog.get(line.product_id) is None:
            raise NotFoundError(f"Product {line.product_id} is no longer in the catalog")

    requested: dict[tuple[str, str], int] = {}
    for line in lines:
        if line.variant_id is None:
            continue
        key = (line.product_id, line.variant_id)
        requested[key] = requested.get(key, 0) + line.quantity

    insufficient = []
    for (product_id, variant_id), qty in requested.items():
        found = catalog.find_variant(product_id, variant_id)
        available = found[1].stock if found else 0
        if available < qty:
            product = catalog.get(product_id)
            insufficient.append({
                "product_id": product_id,
                "variant_id": variant_id,
                "name": product.name if product else "",
                "variant": found[1].label() if found else "",
                "requested_quantity": qty,
                "available": available,
            })

    if insufficient:
        first = insufficient[0]
        label = f" ({first['variant']})" if first["variant"] else ""
        raise StockError(
            f"Insufficient stock for {first['name'] or first['product_id']}{label}: "
            f"requested {first['requested_quantity']}, available {first['available']}",
            product_id=first["product_id"],
            variant_id=first["variant_id"],
            requested=first["requested_quantity"],
            available=first["available"],
            details={"items": insufficient},
        )


def _build_item(catalog: CatalogStore, line: CartLine) -> SaleItem:
    product = catalog.require(line.product_id)
    variant = product.find_variant(line.variant_id)
    return SaleItem(
        id=line.id,
        product_id=product.id,
        variant_id=variant.id if variant else None,
        sku=variant.display_sku(product) if variant else product.sku,
        name=product.name,
        size=variant.size if variant else "",
        color=variant.color if variant else "",
        qty=line.quantity,
        price=line.unit_price,
    )


def _apply_stock(catalog: CatalogStore, lines: list[CartLine]) -> None:
    for line in lines:
        if line.variant_id is None:
            continue
        found = catalog.find_variant(line.product_id, line.variant_id)
        if found is None:
            continue
        variant = found[1]
        # Floor at zero; validation already guaranteed enough stock
        variant.stock = max(0, variant.stock - line.quantity)


def checkout(
    register: Register,
    *,
    discount: float | None = None,
    tax_rate: float | None = None,
    payment_method: str | None = None,
    customer_id: str | None = None,
    notes: str | None = None,
    now: datetime | None = None,
) -> Sale:
    """
    Settle the register's cart.

    Arguments left as None fall back to the terms staged on the cart.

    Raises:
        EmptyCartError: no lines in the cart
        StockError: a variant cannot cover the summed line quantities
        ValidationError: bad discount/tax rate or payment method outside the profile
        NotFoundError: unknown customer, or a line's product vanished
        ConflictError: the derived invoice id is already in history
    """
    with register.lock:
        cart = register.cart
        lines = list(cart.lines)
        if not lines:
            raise EmptyCartError("Cannot check out an empty cart")

        discount = coerce_number(cart.discount if discount is None else discount, "discount")
        tax_rate = coerce_number(cart.tax_rate if tax_rate is None else tax_rate, "taxRate")
        method = normalize_payment_method(
            cart.payment_method if payment_method is None else payment_method,
            register.settings,
        )
        customer_id = cart.customer_id if customer_id is None else (customer_id or None)
        snapshot = register.customers.snapshot(customer_id) if customer_id else None

        _validate_lines(register.catalog, lines)

        now = now or localnow()
        invoice_id = next_invoice_number(register.history.count(), now)
        if register.history.get(invoice_id) is not None:
            raise ConflictError(
                f"Invoice {invoice_id} already exists in sale history; "
                f"history holds {register.history.count()} sales but this id is taken. "
                "Reconcile sale history (pull or import a complete copy) before checking out"
            )

        totals = compute_totals(((line.unit_price, line.quantity) for line in lines), discount, tax_rate)
        sale = Sale(
            id=invoice_id,
            created_at=format_sale_timestamp(now),
            items=tuple(_build_item(register.catalog, line) for line in lines),
            subtotal=totals.subtotal,
            discount=discount,
            tax_rate=tax_rate,
            tax_amount=totals.tax_amount,
            total=totals.total,
            payment_method=method,
            customer_id=customer_id,
            customer_snapshot=snapshot,
            notes=(cart.notes if notes is None else notes).strip(),
        )

        _apply_stock(register.catalog, lines)
        register.history.append(sale)
        cart.clear()
        currency = register.settings.currency

    logger.info(
        "Sale %s completed: %d items, total %s (%s)",
        sale.id, len(sale.items), format_money(sale.total, currency), sale.payment_method,
    )
    return sale
