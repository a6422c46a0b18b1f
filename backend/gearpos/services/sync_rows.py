# Overview: Translation between nested local entities and flat remote table rows.

"""
Remote schema (one row set per table, children linked by foreign key):

    products          (id, name, sku, category, cost, price, notes, image_url)
    product_variants  (id, product_id, size, color, stock, price)
    customers         (id, name, phone, email, notes)
    sales             (id, created_at, subtotal, discount, tax_rate, tax_amount,
                       total, payment_method, customer_id, notes, customer_snapshot)
    sale_items        (id, sale_id, product_id, variant_id, sku, name, size,
                       color, qty, price)

Rows coming back from the remote may be partially populated: numbers
default to 0 and strings to "". A variant price override and the nullable
reference ids keep None. Children whose parent row is missing are dropped.
"""
from __future__ import annotations

import json
from typing import Iterable, Mapping

from ..coerce import as_float, as_int, as_optional_float, as_optional_str, as_str
from ..models import Customer, CustomerSnapshot, Product, Sale, SaleItem, Variant

# Push order respects foreign keys (parents before children)
TABLES = ("products", "product_variants", "customers", "sales", "sale_items")


def product_row(product: Product) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "sku": product.sku,
        "category": product.category,
        "cost": product.cost,
        "price": product.price,
        "notes": product.notes,
        "image_url": product.image_url,
    }


def variant_row(product: Product, variant: Variant) -> dict:
    return {
        "id": variant.id,
        "product_id": product.id,
        "size": variant.size,
        "color": variant.color,
        "stock": variant.stock,
        "price": variant.price,
    }


def customer_row(customer: Customer) -> dict:
    return {
        "id": customer.id,
        "name": customer.name,
        "phone": customer.phone,
        "email": customer.email,
        "notes": customer.notes,
    }


def sale_row(sale: Sale) -> dict:
    return {
        "id": sale.id,
        "created_at": sale.created_at,
        "subtotal": sale.subtotal,
        "discount": sale.discount,
        "tax_rate": sale.tax_rate,
        "tax_amount": sale.tax_amount,
        "total": sale.total,
        "payment_method": sale.payment_method,
        "customer_id": sale.customer_id,
        "notes": sale.notes,
        "customer_snapshot": sale.customer_snapshot.to_dict() if sale.customer_snapshot else None,
    }


def sale_item_row(sale: Sale, item: SaleItem) -> dict:
    return {
        "id": item.id,
        "sale_id": sale.id,
        "product_id": item.product_id,
        "variant_id": item.variant_id,
        "sku": item.sku,
        "name": item.name,
        "size": item.size,
        "color": item.color,
        "qty": item.qty,
        "price": item.price,
    }


def flatten_state(
    products: Iterable[Product],
    customers: Iterable[Customer],
    sales: Iterable[Sale],
) -> dict[str, list[dict]]:
    """Nested local state -> {table: rows} in push order."""
    tables: dict[str, list[dict]] = {name: [] for name in TABLES}
    for product in products:
        tables["products"].append(product_row(product))
        for variant in product.variants:
            tables["product_variants"].append(variant_row(product, variant))
    for customer in customers:
        tables["customers"].append(customer_row(customer))
    for sale in sales:
        tables["sales"].append(sale_row(sale))
        for item in sale.items:
            tables["sale_items"].append(sale_item_row(sale, item))
    return tables


def _snapshot_from_row(value) -> CustomerSnapshot | None:
    if isinstance(value, str):
        value = json.loads(value) if value.strip() else None
    return CustomerSnapshot.from_dict(value)


def rebuild_state(tables: Mapping[str, list[dict]]) -> tuple[list[Product], list[Customer], list[Sale]]:
    """{table: rows} -> nested (products, customers, sales)."""
    products: list[Product] = []
    by_product: dict[str, Product] = {}
    for row in tables.get("products") or []:
        product = Product(
            id=as_str(row, "id"),
            name=as_str(row, "name"),
            sku=as_str(row, "sku"),
            category=as_str(row, "category"),
            cost=as_float(row, "cost"),
            price=as_float(row, "price"),
            notes=as_str(row, "notes"),
            image_url=as_str(row, "image_url"),
        )
        products.append(product)
        by_product[product.id] = product

    for row in tables.get("product_variants") or []:
        parent = by_product.get(as_str(row, "product_id"))
        if parent is None:
            continue
        parent.variants.append(Variant(
            id=as_str(row, "id"),
            size=as_str(row, "size"),
            color=as_str(row, "color"),
            stock=max(0, as_int(row, "stock")),
            price=as_optional_float(row, "price"),
        ))

    customers = [
        Customer(
            id=as_str(row, "id"),
            name=as_str(row, "name"),
            phone=as_str(row, "phone"),
            email=as_str(row, "email"),
            notes=as_str(row, "notes"),
        )
        for row in tables.get("customers") or []
    ]

    items_by_sale: dict[str, list[SaleItem]] = {}
    for row in tables.get("sale_items") or []:
        items_by_sale.setdefault(as_str(row, "sale_id"), []).append(SaleItem(
            id=as_str(row, "id"),
            product_id=as_str(row, "product_id"),
            variant_id=as_optional_str(row, "variant_id"),
            sku=as_str(row, "sku"),
            name=as_str(row, "name"),
            size=as_str(row, "size"),
            color=as_str(row, "color"),
            qty=as_int(row, "qty"),
            price=as_float(row, "price"),
        ))

    # Items whose sale_id matches no sale row are simply never picked up
    sales = []
    for row in tables.get("sales") or []:
        sale_id = as_str(row, "id")
        sales.append(Sale(
            id=sale_id,
            created_at=as_str(row, "created_at"),
            items=tuple(items_by_sale.get(sale_id, ())),
            subtotal=as_float(row, "subtotal"),
            discount=as_float(row, "discount"),
            tax_rate=as_float(row, "tax_rate"),
            tax_amount=as_float(row, "tax_amount"),
            total=as_float(row, "total"),
            payment_method=as_str(row, "payment_method"),
            customer_id=as_optional_str(row, "customer_id"),
            customer_snapshot=_snapshot_from_row(row.get("customer_snapshot")),
            notes=as_str(row, "notes"),
        ))

    return products, customers, sales
