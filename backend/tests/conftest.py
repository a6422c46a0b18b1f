"""
Pytest fixtures for GearPOS backend tests.

Provides an in-memory app + client, a seeded register, and a fake remote
store for sync tests.
"""
import copy

import pytest

from gearpos import create_app
from gearpos.extensions import db
from gearpos.models import Customer, Product, Variant
from gearpos.services.register_service import Register, set_register
from gearpos.services.settings_service import StoreSettings


@pytest.fixture(scope='function')
def app():
    """Create application for testing (fresh in-memory DB per test)."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'BASIC_AUTH_USER': '',
        'BASIC_AUTH_PASS': '',
        'SUPABASE_URL': '',
        'SUPABASE_ANON_KEY': '',
    })

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


def build_catalog():
    """Two products: a tee with three variants and a cap without variants."""
    tee = Product(
        id="p-tee",
        name="Logo Tee",
        sku="TEE-001",
        category="apparel",
        cost=300.0,
        price=500.0,
        variants=[
            Variant(id="v-m-black", size="M", color="Black", stock=3),
            Variant(id="v-l-black", size="L", color="Black", stock=10, price=550.0),
            Variant(id="v-m-red", size="M", color="Red", stock=0),
        ],
    )
    cap = Product(id="p-cap", name="Trail Cap", sku="CAP-9", cost=100.0, price=250.0)
    return [tee, cap]


def build_settings(**overrides):
    values = dict(store_name="JOHNY GEAR STORE", currency="NPR", tax_rate_default=0.0, low_stock_threshold=5)
    values.update(overrides)
    return StoreSettings(**values)


@pytest.fixture
def register():
    """Seeded register not attached to any app."""
    return Register(
        settings=build_settings(),
        products=build_catalog(),
        customers=[Customer(id="c-1", name="Asha Rai", phone="9800000000", email="asha@example.com")],
    )


@pytest.fixture
def app_register(app, register):
    """The seeded register installed as the app's register."""
    set_register(register)
    return register


class FakeRemoteStore:
    """
    In-memory stand-in for the Supabase transport.

    Tables are dicts keyed by row id; upsert merges by id like PostgREST's
    merge-duplicates. Tables listed in ``fail_on`` raise on any access.
    """

    def __init__(self, tables=None):
        self.tables = {name: {} for name in ("products", "product_variants", "customers", "sales", "sale_items")}
        for name, rows in (tables or {}).items():
            self.tables[name] = {row["id"]: dict(row) for row in rows}
        self.fail_on = set()
        self.upsert_calls = []

    def _check(self, table):
        if table in self.fail_on:
            raise RuntimeError(f"{table} unavailable")

    def select_all(self, table):
        self._check(table)
        return [copy.deepcopy(row) for row in self.tables[table].values()]

    def upsert(self, table, rows):
        self._check(table)
        self.upsert_calls.append((table, len(rows)))
        for row in rows:
            merged = dict(self.tables[table].get(row["id"], {}))
            merged.update(copy.deepcopy(row))
            self.tables[table][row["id"]] = merged


@pytest.fixture
def remote():
    return FakeRemoteStore()
