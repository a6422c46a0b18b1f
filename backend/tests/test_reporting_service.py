from datetime import datetime

import pytest

from gearpos.models import Sale
from gearpos.services import reporting_service


def _sale(sale_id, created_at, total):
    return Sale(
        id=sale_id, created_at=created_at, items=(), subtotal=total, discount=0,
        tax_rate=0, tax_amount=0, total=total, payment_method="cash",
    )


def test_today_sales_matches_by_date_prefix():
    sales = [
        _sale("INV-1", "2025-06-14 23:59", 100),
        _sale("INV-2", "2025-06-15 08:00", 250),
        _sale("INV-3", "2025-06-15T17:30:00+05:45", 50),
    ]

    today = reporting_service.today_sales(sales, datetime(2025, 6, 15, 12, 0))

    assert today == {"date": "2025-06-15", "count": 2, "total": 300}


def test_inventory_value(register):
    value = reporting_service.inventory_value(register.catalog.products)

    # tee: 3*300 + 10*300 + 0; retail 3*500 + 10*550; cap counts as one unit
    assert value["cost"] == pytest.approx(3900 + 100)
    assert value["retail"] == pytest.approx(1500 + 5500 + 250)


def test_low_stock(register):
    rows = reporting_service.low_stock(register.catalog.products, 5)

    assert [r["variantId"] for r in rows] == ["v-m-black", "v-m-red"]
    assert rows[0]["sku"] == "TEE-001-M-Black"
    assert reporting_service.low_stock(register.catalog.products, 0)[0]["variantId"] == "v-m-red"


def test_summary(register):
    register.history.append(_sale("INV-1", "2025-06-15 08:00", 400))

    data = reporting_service.summary(register, datetime(2025, 6, 15))

    assert data["currency"] == "NPR"
    assert data["today"]["total"] == 400
    assert data["lowStockCount"] == 2
    assert data["salesCount"] == 1
