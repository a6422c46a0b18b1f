from gearpos.extensions import db
from gearpos.models import StateSnapshot
from gearpos.services import persistence_service
from gearpos.services.register_service import get_register, save_register, set_register


def test_empty_store_loads_none(app):
    assert persistence_service.load_snapshot() is None


def test_save_and_load(app):
    persistence_service.save_snapshot({"settings": {"storeName": "X"}, "products": []})
    persistence_service.save_snapshot({"products": [{"id": "p1"}]})

    snapshot = persistence_service.load_snapshot()

    assert snapshot == {"settings": {"storeName": "X"}, "products": [{"id": "p1"}]}
    assert db.session.query(StateSnapshot).count() == 2


def test_corrupt_key_falls_back(app):
    db.session.add(StateSnapshot(key="customers", payload_json="{oops"))
    db.session.add(StateSnapshot(key="settings", payload_json='{"currency": "USD"}'))
    db.session.commit()

    snapshot = persistence_service.load_snapshot()

    assert snapshot == {"settings": {"currency": "USD"}}


def test_register_survives_reload(app, register):
    set_register(register)
    register.customers.create({"name": "Persisted"})
    save_register(register)

    app.extensions.pop("gearpos.register")
    reloaded = get_register()

    assert reloaded is not register
    assert reloaded.to_snapshot() == register.to_snapshot()


def test_clear_snapshot(app):
    persistence_service.save_snapshot({"sales": []})
    persistence_service.clear_snapshot()
    assert persistence_service.load_snapshot() is None
