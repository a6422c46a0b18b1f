# Overview: Register state owner (settings, catalog, customers, sale history, cart).

"""
One Register per running app. It is the only owner of mutable POS state and
is passed explicitly to checkout, sync and backup operations.

Locking:
- ``register.lock`` serializes every state transition (cart edits, catalog
  edits, checkout, pull/import replaces) within the process.
- Checkout's stock check and stock decrement run inside one lock hold, and so
  does a pull's wholesale replace. A pull therefore never interleaves with
  a checkout.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Iterable, Mapping

from flask import current_app

from ..models import Customer, Product, Sale
from . import persistence_service
from .cart_service import Cart
from .catalog_service import CatalogStore
from .customer_service import CustomerDirectory
from .sales_service import SaleHistory
from .settings_service import StoreSettings, default_settings

logger = logging.getLogger(__name__)

_EXTENSION_KEY = "gearpos.register"
_init_lock = threading.Lock()


class Register:
    def __init__(
        self,
        settings: StoreSettings,
        products: Iterable[Product] = (),
        customers: Iterable[Customer] = (),
        sales: Iterable[Sale] = (),
    ):
        self.lock = threading.RLock()
        self.settings = settings
        self.catalog = CatalogStore(products)
        self.customers = CustomerDirectory(customers)
        self.history = SaleHistory(sales)
        self.cart = Cart(self.catalog, lambda: self.settings.tax_rate_default)

    def to_snapshot(self) -> dict:
        with self.lock:
            return {
                "settings": self.settings.to_dict(),
                "products": self.catalog.to_list(),
                "customers": self.customers.to_list(),
                "sales": self.history.to_list(),
            }

    def replace_state(
        self,
        *,
        settings: StoreSettings | None = None,
        products: Iterable[Product] | None = None,
        customers: Iterable[Customer] | None = None,
        sales: Iterable[Sale] | None = None,
    ) -> None:
        """
        Wholesale replace of any given collection (pull/import).

        This is not a merge: local changes that were never pushed are lost.
        The open cart is kept; lines pointing at vanished variants fail
        checkout's stock check.
        """
        with self.lock:
            if settings is not None:
                self.settings = settings
            if products is not None:
                self.catalog.replace_all(products)
            if customers is not None:
                self.customers.replace_all(customers)
            if sales is not None:
                self.history.replace_all(sales)

    @classmethod
    def from_snapshot(cls, snapshot: Mapping[str, Any] | None, defaults: StoreSettings) -> "Register":
        """Build a register from a stored snapshot; missing parts fall back to defaults."""
        snapshot = snapshot or {}
        settings = defaults
        if snapshot.get("settings"):
            settings = StoreSettings.from_dict(snapshot["settings"], defaults)
        return cls(
            settings=settings,
            products=[Product.from_dict(p) for p in snapshot.get("products") or []],
            customers=[Customer.from_dict(c) for c in snapshot.get("customers") or []],
            sales=[Sale.from_dict(s) for s in snapshot.get("sales") or []],
        )


def get_register() -> Register:
    """Return the app's register, loading it from the snapshot store on first use."""
    app = current_app._get_current_object()
    register = app.extensions.get(_EXTENSION_KEY)
    if register is not None:
        return register
    with _init_lock:
        register = app.extensions.get(_EXTENSION_KEY)
        if register is None:
            snapshot = persistence_service.load_snapshot()
            register = Register.from_snapshot(snapshot, default_settings(app.config))
            app.extensions[_EXTENSION_KEY] = register
            logger.info(
                "Register loaded: %d products, %d customers, %d sales",
                len(register.catalog), len(register.customers), len(register.history),
            )
    return register


def set_register(register: Register) -> None:
    current_app.extensions[_EXTENSION_KEY] = register


def save_register(register: Register) -> None:
    """
    Persist the whole register snapshot (called after each state transition).

    The snapshot is taken and written inside one lock hold, so writes land in
    the same order as the transitions they record.
    """
    with register.lock:
        persistence_service.save_snapshot(register.to_snapshot())
