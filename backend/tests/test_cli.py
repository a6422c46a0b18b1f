import json

from gearpos.routes.sync import REMOTE_STORE_KEY


def test_low_stock_command(app, app_register):
    result = app.test_cli_runner().invoke(args=["catalog", "low-stock"])

    assert result.exit_code == 0
    assert "TEE-001-M-Black" in result.output
    assert "TEE-001-L-Black" not in result.output


def test_backup_export_import_commands(app, app_register, tmp_path):
    runner = app.test_cli_runner()
    path = tmp_path / "backup.json"

    result = runner.invoke(args=["backup", "export", str(path)])
    assert result.exit_code == 0
    assert json.loads(path.read_text(encoding="utf-8"))["products"][0]["sku"] == "TEE-001"

    path.write_text(json.dumps({"customers": []}), encoding="utf-8")
    result = runner.invoke(args=["backup", "import", str(path)])
    assert result.exit_code == 0
    assert len(app_register.customers) == 0


def test_sync_push_command(app, app_register, remote):
    runner = app.test_cli_runner()

    result = runner.invoke(args=["sync", "push"])
    assert result.exit_code != 0
    assert "not configured" in result.output

    app.extensions[REMOTE_STORE_KEY] = remote
    result = runner.invoke(args=["sync", "push"])
    assert result.exit_code == 0
    assert "sale_items" in result.output
