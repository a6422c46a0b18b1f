# Overview: Mutable cart (staging area for the sale being rung up).

from __future__ import annotations

import uuid
from typing import Any, Callable

from ..models import CartLine
from ..validation import NotFoundError, ValidationError, coerce_number, optional_text
from .catalog_service import CatalogStore
from .pricing_service import Totals, compute_totals

CART_TERMS_FIELDS = {"discount", "taxRate", "paymentMethod", "customerId", "notes"}


def _clamp_quantity(value: Any) -> int:
    try:
        qty = int(value)
    except (TypeError, ValueError):
        raise ValidationError("qty must be an integer")
    return max(1, qty)


class Cart:
    """
    Ordered cart lines plus the pending sale terms (discount, tax rate,
    payment method, customer, notes).

    Lines reference catalog entries by id only. The unit price is captured on
    add and never re-read from the catalog afterwards.
    """

    def __init__(self, catalog: CatalogStore, default_tax_rate: Callable[[], float] = lambda: 0.0):
        self.catalog = catalog
        self._default_tax_rate = default_tax_rate
        self.lines: list[CartLine] = []
        self.discount: float = 0.0
        self.tax_rate: float = default_tax_rate()
        self.payment_method: str = "cash"
        self.customer_id: str | None = None
        self.notes: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def get_line(self, line_id: str) -> CartLine | None:
        for line in self.lines:
            if line.id == line_id:
                return line
        return None

    def add(self, product_id: str, variant_id: str | None = None, quantity: int = 1) -> CartLine | None:
        """
        Append a new line. Unknown product (or unknown variant when one is
        given) is a silent no-op and returns None. Without a variant id, a
        product that has variants is sold as its first variant, like a bare
        SKU scan.
        """
        product = self.catalog.get(product_id)
        if product is None:
            return None
        variant = None
        if variant_id is not None:
            variant = product.find_variant(variant_id)
            if variant is None:
                return None
        elif product.variants:
            variant = product.variants[0]

        price = variant.effective_price(product) if variant else product.price
        line = CartLine(
            id=str(uuid.uuid4()),
            product_id=product.id,
            variant_id=variant.id if variant else None,
            quantity=_clamp_quantity(quantity),
            unit_price=price or 0.0,
        )
        self.lines.append(line)
        return line

    def add_by_sku(self, sku: str, quantity: int = 1) -> CartLine:
        """Scan/type a SKU; raises NotFoundError when nothing matches."""
        product, variant = self.catalog.resolve_sku(sku)
        line = self.add(product.id, variant.id if variant else None, quantity)
        if line is None:
            raise NotFoundError(f"No product or variant matches SKU '{sku}'")
        return line

    def update_quantity(self, line_id: str, new_qty: Any) -> CartLine | None:
        """Set a line's quantity, clamped to >= 1. Never removes the line."""
        line = self.get_line(line_id)
        if line is None:
            return None
        line.quantity = _clamp_quantity(new_qty)
        return line

    def remove(self, line_id: str) -> bool:
        before = len(self.lines)
        self.lines = [line for line in self.lines if line.id != line_id]
        return len(self.lines) != before

    def clear(self) -> None:
        """Empty the cart and reset the per-sale terms to store defaults."""
        self.lines = []
        self.discount = 0.0
        self.tax_rate = self._default_tax_rate()
        self.customer_id = None
        self.notes = ""

    def update_terms(self, patch: dict) -> None:
        if not isinstance(patch, dict):
            raise ValidationError("Invalid JSON payload")
        for key in patch:
            if key not in CART_TERMS_FIELDS:
                raise ValidationError(f"Field not allowed: {key}")

        discount = coerce_number(patch["discount"], "discount") if "discount" in patch else self.discount
        tax_rate = coerce_number(patch["taxRate"], "taxRate") if "taxRate" in patch else self.tax_rate

        self.discount = discount
        self.tax_rate = tax_rate
        if "paymentMethod" in patch:
            self.payment_method = optional_text(patch, "paymentMethod").lower()
        if "customerId" in patch:
            self.customer_id = optional_text(patch, "customerId") or None
        if "notes" in patch:
            self.notes = optional_text(patch, "notes")

    def totals(self) -> Totals:
        return compute_totals(
            ((line.unit_price, line.quantity) for line in self.lines),
            self.discount,
            self.tax_rate,
        )

    def _describe(self, line: CartLine) -> dict:
        row = line.to_dict()
        product = self.catalog.get(line.product_id)
        variant = product.find_variant(line.variant_id) if product else None
        if product is not None:
            row["name"] = product.name
            row["sku"] = variant.display_sku(product) if variant else product.sku
        row["size"] = variant.size if variant else ""
        row["color"] = variant.color if variant else ""
        row["lineTotal"] = line.unit_price * line.quantity
        return row

    def to_dict(self) -> dict:
        return {
            "lines": [self._describe(line) for line in self.lines],
            "discount": self.discount,
            "taxRate": self.tax_rate,
            "paymentMethod": self.payment_method,
            "customerId": self.customer_id,
            "notes": self.notes,
            "totals": self.totals().to_dict(),
        }
