# Overview: Read-only derived views (today's takings, inventory value, low stock).

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from ..models import Product, Sale
from ..time_utils import day_prefix, is_same_day, localnow


def today_sales(sales: Iterable[Sale], today: datetime | None = None) -> dict:
    """Count and total of sales whose timestamp starts with today's date."""
    today = today or localnow()
    todays = [s for s in sales if is_same_day(s.created_at, today)]
    return {
        "date": day_prefix(today),
        "count": len(todays),
        "total": sum(s.total for s in todays),
    }


def inventory_value(products: Iterable[Product]) -> dict:
    """
    Stock valued at cost and at retail.

    Variants contribute stock * cost and stock * effective price. A product
    without variants has no stock counter and counts as one implicit unit.
    """
    cost = 0.0
    retail = 0.0
    for product in products:
        if not product.variants:
            cost += product.cost
            retail += product.price
            continue
        for variant in product.variants:
            cost += variant.stock * product.cost
            retail += variant.stock * variant.effective_price(product)
    return {"cost": cost, "retail": retail}


def low_stock(products: Iterable[Product], threshold: int) -> list[dict]:
    rows = []
    for product in products:
        for variant in product.variants:
            if variant.stock <= threshold:
                rows.append({
                    "productId": product.id,
                    "variantId": variant.id,
                    "name": product.name,
                    "sku": variant.display_sku(product),
                    "size": variant.size,
                    "color": variant.color,
                    "stock": variant.stock,
                })
    return rows


def summary(register, today: datetime | None = None) -> dict:
    with register.lock:
        products = register.catalog.products
        sales = register.history.sales
        threshold = register.settings.low_stock_threshold
        currency = register.settings.currency
        low = low_stock(products, threshold)
    return {
        "currency": currency,
        "today": today_sales(sales, today),
        "inventoryValue": inventory_value(products),
        "lowStockCount": len(low),
        "lowStockThreshold": threshold,
        "salesCount": len(sales),
    }
