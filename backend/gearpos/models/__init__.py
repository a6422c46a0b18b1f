# Overview: Domain entities (plain dataclasses) and the snapshot table model.

from .catalog import Product, Variant
from .customers import Customer
from .sales import CartLine, CustomerSnapshot, Sale, SaleItem
from .snapshots import StateSnapshot

__all__ = [
    "Product",
    "Variant",
    "Customer",
    "CartLine",
    "CustomerSnapshot",
    "Sale",
    "SaleItem",
    "StateSnapshot",
]
