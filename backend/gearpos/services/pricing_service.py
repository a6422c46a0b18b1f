# Overview: Money/total calculator for carts and sales.

"""
Sale money rules:

    subtotal          = sum(unit_price * quantity)
    discounted_amount = max(0, subtotal - discount)
    tax_amount        = discounted_amount * tax_rate / 100
    total             = discounted_amount + tax_amount

The discount is an absolute amount applied before tax, and the tax rate is a
percentage. No rounding happens here; amounts are plain floats and rounding is a
display concern (see format_money).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class Totals:
    subtotal: float
    discounted_amount: float
    tax_amount: float
    total: float

    def to_dict(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "discountedAmount": self.discounted_amount,
            "taxAmount": self.tax_amount,
            "total": self.total,
        }


def compute_totals(
    lines: Iterable[tuple[float, int]],
    discount: float = 0.0,
    tax_rate: float = 0.0,
) -> Totals:
    """Compute totals from (unit_price, quantity) pairs."""
    subtotal = sum(unit_price * quantity for unit_price, quantity in lines)
    discounted = max(0.0, subtotal - discount)
    tax_amount = discounted * tax_rate / 100
    return Totals(
        subtotal=subtotal,
        discounted_amount=discounted,
        tax_amount=tax_amount,
        total=discounted + tax_amount,
    )


def format_money(amount: float, currency: str) -> str:
    """Two-decimal display string, e.g. ``format_money(1017, "NPR") -> "NPR 1,017.00"``."""
    return f"{currency} {amount:,.2f}"
