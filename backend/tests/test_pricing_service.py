import itertools

import pytest

from gearpos.services.pricing_service import compute_totals, format_money


def test_discount_then_tax():
    totals = compute_totals([(500, 2)], discount=100, tax_rate=13)

    assert totals.subtotal == 1000
    assert totals.discounted_amount == 900
    assert totals.tax_amount == pytest.approx(117)
    assert totals.total == pytest.approx(1017)


def test_discount_larger_than_subtotal_floors_at_zero():
    totals = compute_totals([(50, 1)], discount=80, tax_rate=13)

    assert totals.discounted_amount == 0
    assert totals.tax_amount == 0
    assert totals.total == 0


def test_empty_lines():
    assert compute_totals([]).total == 0


@pytest.mark.parametrize(
    "price,qty,discount,tax_rate",
    list(itertools.product([0, 19.99, 500], [1, 3], [0, 25, 10_000], [0, 13, 7.5])),
)
def test_total_matches_closed_form(price, qty, discount, tax_rate):
    lines = [(price, qty), (price / 2, qty + 1)]
    subtotal = sum(p * q for p, q in lines)

    totals = compute_totals(lines, discount, tax_rate)

    assert totals.total == pytest.approx(max(0, subtotal - discount) * (1 + tax_rate / 100))


def test_format_money():
    assert format_money(1017, "NPR") == "NPR 1,017.00"
    assert format_money(0.5, "USD") == "USD 0.50"
