import pytest

from gearpos.services.cart_service import Cart
from gearpos.services.catalog_service import CatalogStore
from gearpos.validation import NotFoundError, ValidationError

from conftest import build_catalog


@pytest.fixture
def cart():
    return Cart(CatalogStore(build_catalog()), lambda: 13.0)


def test_add_by_composite_sku_resolves_exact_variant(cart):
    line = cart.add_by_sku("TEE-001-M-Black")

    assert line.product_id == "p-tee"
    assert line.variant_id == "v-m-black"
    assert line.quantity == 1
    assert line.unit_price == 500


def test_add_by_sku_is_case_insensitive(cart):
    assert cart.add_by_sku("tee-001-l-black").variant_id == "v-l-black"


def test_add_by_unknown_sku_raises(cart):
    with pytest.raises(NotFoundError):
        cart.add_by_sku("UNKNOWN")
    assert cart.is_empty


def test_bare_sku_picks_first_variant(cart):
    assert cart.add_by_sku("TEE-001").variant_id == "v-m-black"


def test_partial_composite_by_color(cart):
    assert cart.add_by_sku("TEE-001-Red").variant_id == "v-m-red"


def test_product_without_variants(cart):
    line = cart.add_by_sku("CAP-9")

    assert line.variant_id is None
    assert line.unit_price == 250


def test_variant_price_override_is_captured(cart):
    line = cart.add("p-tee", "v-l-black", 2)

    assert line.unit_price == 550
    cart.catalog.get("p-tee").variants[1].price = 999
    assert cart.lines[0].unit_price == 550


def test_add_unknown_product_or_variant_is_noop(cart):
    assert cart.add("nope") is None
    assert cart.add("p-tee", "nope") is None
    assert cart.is_empty


def test_quantity_is_clamped_to_one(cart):
    line = cart.add("p-cap", quantity=0)
    assert line.quantity == 1

    cart.update_quantity(line.id, -4)
    assert line.quantity == 1

    cart.update_quantity(line.id, "3")
    assert line.quantity == 3


def test_update_quantity_rejects_garbage(cart):
    line = cart.add("p-cap")
    with pytest.raises(ValidationError):
        cart.update_quantity(line.id, "lots")


def test_update_unknown_line_returns_none(cart):
    assert cart.update_quantity("missing", 2) is None


def test_remove(cart):
    line = cart.add("p-cap")

    assert cart.remove(line.id) is True
    assert cart.remove(line.id) is False
    assert cart.is_empty


def test_terms_and_totals(cart):
    cart.add("p-tee", "v-m-black", 2)
    cart.update_terms({"discount": 100, "taxRate": 13, "paymentMethod": "Card", "notes": " gift "})

    totals = cart.totals()
    assert totals.total == pytest.approx(1017)
    assert cart.payment_method == "card"
    assert cart.notes == "gift"

    data = cart.to_dict()
    assert data["lines"][0]["sku"] == "TEE-001-M-Black"
    assert data["lines"][0]["lineTotal"] == 1000


def test_terms_reject_unknown_fields_and_negative_discount(cart):
    with pytest.raises(ValidationError):
        cart.update_terms({"price": 1})
    with pytest.raises(ValidationError):
        cart.update_terms({"discount": -5})
    assert cart.discount == 0


def test_clear_resets_terms_to_store_default(cart):
    cart.add("p-cap")
    cart.update_terms({"discount": 10, "taxRate": 0, "customerId": "c-1", "paymentMethod": "card"})

    cart.clear()

    assert cart.is_empty
    assert cart.discount == 0
    assert cart.tax_rate == 13.0
    assert cart.customer_id is None
    assert cart.payment_method == "card"


def test_add_without_variant_uses_first_variant(cart):
    line = cart.add("p-tee")

    assert line.variant_id == "v-m-black"
    assert line.unit_price == 500
