import dataclasses
import logging
from datetime import datetime

import pytest

from gearpos.models import Sale
from gearpos.services import checkout_service
from gearpos.services.checkout_service import EmptyCartError, StockError
from gearpos.services.pricing_service import compute_totals
from gearpos.validation import ConflictError, NotFoundError, ValidationError

NOW = datetime(2025, 6, 15, 14, 5)


def _stock(register):
    return {v.id: v.stock for _, v in register.catalog.iter_variants()}


def test_checkout_builds_sale_and_decrements_stock(register):
    register.cart.add("p-tee", "v-m-black", 2)
    register.cart.add("p-cap")
    register.cart.update_terms({"discount": 100, "taxRate": 13, "paymentMethod": "card"})

    sale = checkout_service.checkout(register, now=NOW)

    assert sale.id == "INV-2506-0001"
    assert sale.created_at == "2025-06-15 14:05"
    assert sale.subtotal == 1250
    assert sale.total == pytest.approx((1250 - 100) * 1.13)
    assert sale.payment_method == "card"
    assert [i.sku for i in sale.items] == ["TEE-001-M-Black", "CAP-9"]
    assert sale.items[0].size == "M" and sale.items[0].color == "Black"
    assert _stock(register)["v-m-black"] == 1
    assert register.history.sales == (sale,)
    assert register.cart.is_empty
    assert register.cart.discount == 0


def test_insufficient_stock_is_atomic(register):
    register.cart.add("p-cap")
    register.cart.add("p-tee", "v-m-black", 5)
    before = register.to_snapshot()
    lines_before = list(register.cart.lines)

    with pytest.raises(StockError) as excinfo:
        checkout_service.checkout(register, now=NOW)

    err = excinfo.value
    assert err.available == 3
    assert err.requested == 5
    assert err.variant_id == "v-m-black"
    assert "Logo Tee" in str(err)
    assert register.to_snapshot() == before
    assert register.cart.lines == lines_before


def test_quantities_for_same_variant_are_summed(register):
    register.cart.add("p-tee", "v-m-black", 2)
    register.cart.add("p-tee", "v-m-black", 2)

    with pytest.raises(StockError) as excinfo:
        checkout_service.checkout(register, now=NOW)
    assert excinfo.value.requested == 4
    assert _stock(register)["v-m-black"] == 3


def test_zero_stock_variant_cannot_be_sold(register):
    register.cart.add("p-tee", "v-m-red")
    with pytest.raises(StockError):
        checkout_service.checkout(register, now=NOW)


def test_variant_removed_after_add_counts_as_unavailable(register):
    register.cart.add("p-tee", "v-l-black")
    register.catalog.get("p-tee").variants.pop(1)

    with pytest.raises(StockError) as excinfo:
        checkout_service.checkout(register, now=NOW)
    assert excinfo.value.available == 0


def test_empty_cart(register):
    with pytest.raises(EmptyCartError):
        checkout_service.checkout(register, now=NOW)
    assert register.history.count() == 0


def test_payment_method_outside_profile_rejected(register):
    register.cart.add("p-cap")
    with pytest.raises(ValidationError):
        checkout_service.checkout(register, payment_method="upi", now=NOW)
    assert register.history.count() == 0

    register.settings.payment_profile = "upi"
    sale = checkout_service.checkout(register, payment_method="UPI", now=NOW)
    assert sale.payment_method == "upi"


def test_unknown_customer_rejected(register):
    register.cart.add("p-cap")
    with pytest.raises(NotFoundError):
        checkout_service.checkout(register, customer_id="ghost", now=NOW)
    assert len(register.cart.lines) == 1


def test_customer_snapshot_is_frozen(register):
    register.cart.add("p-cap")
    sale = checkout_service.checkout(register, customer_id="c-1", now=NOW)

    register.customers.update("c-1", {"name": "Asha R.", "phone": "1"})

    assert sale.customer_id == "c-1"
    assert sale.customer_snapshot.name == "Asha Rai"
    assert sale.customer_snapshot.phone == "9800000000"


def test_sale_is_immutable(register):
    register.cart.add("p-cap")
    sale = checkout_service.checkout(register, now=NOW)

    with pytest.raises(dataclasses.FrozenInstanceError):
        sale.total = 0
    with pytest.raises(dataclasses.FrozenInstanceError):
        sale.items[0].qty = 9
    assert isinstance(sale.items, tuple)


def test_invoice_collision_aborts_before_mutation(register):
    register.history.append(Sale(
        id="INV-2506-0002", created_at="2025-06-01 10:00", items=(), subtotal=0, discount=0,
        tax_rate=0, tax_amount=0, total=0, payment_method="cash",
    ))
    register.cart.add("p-tee", "v-m-black")

    with pytest.raises(ConflictError):
        checkout_service.checkout(register, now=NOW)
    assert _stock(register)["v-m-black"] == 3
    assert register.history.count() == 1


def test_stock_invariant_over_many_checkouts(register):
    initial = _stock(register)
    sold = {}
    for variant_id, qty in [("v-m-black", 1), ("v-l-black", 4), ("v-m-black", 2), ("v-l-black", 6), ("v-m-black", 1)]:
        register.cart.add("p-tee", variant_id, qty)
        try:
            checkout_service.checkout(register, now=NOW)
        except StockError:
            register.cart.clear()
            continue
        sold[variant_id] = sold.get(variant_id, 0) + qty

    after = _stock(register)
    for variant_id, stock in after.items():
        assert stock >= 0
        assert stock == initial[variant_id] - sold.get(variant_id, 0)
    assert [s.id for s in register.history.sales] == ["INV-2506-0001", "INV-2506-0002", "INV-2506-0003", "INV-2506-0004"]


def test_sale_total_recomputable_from_items(register):
    register.cart.add("p-tee", "v-l-black", 3)
    sale = checkout_service.checkout(register, discount=50, tax_rate=7.5, now=NOW)

    recomputed = compute_totals(((i.price, i.qty) for i in sale.items), sale.discount, sale.tax_rate)
    assert recomputed.total == pytest.approx(sale.total)


def test_product_line_added_without_variant_still_decrements_stock(register):
    register.cart.add("p-tee", quantity=2)

    sale = checkout_service.checkout(register, now=NOW)

    assert sale.items[0].variant_id == "v-m-black"
    assert _stock(register)["v-m-black"] == 1


def test_invoice_collision_message_asks_for_reconcile(register):
    register.history.append(Sale(
        id="INV-2506-0002", created_at="2025-06-01 10:00", items=(), subtotal=0, discount=0,
        tax_rate=0, tax_amount=0, total=0, payment_method="cash",
    ))
    register.cart.add("p-cap")

    with pytest.raises(ConflictError, match="Reconcile sale history"):
        checkout_service.checkout(register, now=NOW)


def test_completed_sale_is_logged_with_store_currency(register, caplog):
    caplog.set_level(logging.INFO, logger="gearpos.services.checkout_service")
    register.cart.add("p-tee", "v-m-black", 2)

    checkout_service.checkout(register, discount=100, tax_rate=13, now=NOW)

    assert "total NPR 1,017.00" in caplog.text
