import json
from datetime import datetime

import pytest

from gearpos.services import backup_service, checkout_service
from gearpos.services.backup_service import ParseError
from gearpos.services.register_service import Register

from conftest import build_settings


def test_export_then_import_restores_state(register):
    register.cart.add("p-tee", "v-m-black")
    checkout_service.checkout(register, now=datetime(2025, 6, 15, 9, 0))
    document = backup_service.export_document(register)

    restored = Register(settings=build_settings(store_name="Other"))
    imported = backup_service.import_document(restored, document)

    assert imported == ["settings", "products", "customers", "sales"]
    assert restored.to_snapshot() == register.to_snapshot()


def test_missing_fields_are_left_untouched(register):
    doc = json.dumps({"customers": [{"id": "c-9", "name": "New Person"}]})

    imported = backup_service.import_document(register, doc)

    assert imported == ["customers"]
    assert [c.id for c in register.customers.customers] == ["c-9"]
    assert len(register.catalog) == 2
    assert register.settings.store_name == "JOHNY GEAR STORE"


def test_partial_settings_keep_existing_values(register):
    backup_service.import_document(register, json.dumps({"settings": {"taxRateDefault": 13}}))

    assert register.settings.tax_rate_default == 13
    assert register.settings.currency == "NPR"


@pytest.mark.parametrize("text", [
    "not json",
    "[1, 2]",
    json.dumps({"products": {"id": "x"}}),
    json.dumps({"products": [{"name": "no id"}]}),
    json.dumps({"sales": ["nope"]}),
])
def test_malformed_documents_raise_parse_error_and_change_nothing(register, text):
    before = register.to_snapshot()

    with pytest.raises(ParseError):
        backup_service.import_document(register, text)

    assert register.to_snapshot() == before


def test_backup_filename():
    assert backup_service.backup_filename(datetime(2025, 6, 15, 9, 5, 7)) == "gearpos-backup-20250615-090507.json"
