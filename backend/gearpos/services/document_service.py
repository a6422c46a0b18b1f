# Overview: Invoice numbering for completed sales.

from __future__ import annotations

from datetime import datetime

INVOICE_PREFIX = "INV"


class DocumentSequenceError(ValueError):
    """Raised when an invoice number cannot be derived."""


def next_invoice_number(
    prior_sale_count: int,
    now: datetime,
    *,
    prefix: str = INVOICE_PREFIX,
    pad: int = 4,
) -> str:
    """
    Derive the next invoice id from the running sale count and today's date.

    Format: ``INV-YYMM-NNNN`` where NNNN is prior_sale_count + 1.

    The sequence comes from the local sale history only, so two registers
    writing at once could produce the same number. A single active register
    per store is assumed.
    """
    if prior_sale_count < 0:
        raise DocumentSequenceError("prior_sale_count must be >= 0")
    return f"{prefix}-{now:%y%m}-{prior_sale_count + 1:0{pad}d}"
