# Overview: Flask CLI command groups for sync, backup, and maintenance.

# backend/gearpos/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to gearpos (PowerShell: $env:FLASK_APP="gearpos").
# - Use: python -m flask <group> <command> [options]
#
# Cloud sync:
# - python -m flask sync push
#   Upsert all local products, variants, customers, sales and sale items to Supabase.
# - python -m flask sync pull
#   Replace local products, customers and sales with the Supabase copy.
#
# Backup:
# - python -m flask backup export [PATH]
#   Write the whole register state as JSON (default: gearpos-backup-<timestamp>.json).
# - python -m flask backup import PATH
#   Replace state from a backup file (absent top-level fields are left untouched).
#
# Inventory inspection:
# - python -m flask catalog low-stock [--threshold 5]
#   List variants at or below the low-stock threshold.
#
# System repair:
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .services import backup_service, reporting_service, sync_service
from .services.register_service import get_register, save_register


@click.group('sync')
def sync_group():
    """Cloud push/pull commands."""


def _run_sync(direction):
    from .routes.sync import current_remote_store

    register = get_register()
    try:
        result = sync_service.sync(direction, register, current_remote_store(register))
    except sync_service.SyncError as e:
        raise click.ClickException(str(e))
    if direction == sync_service.PULL:
        save_register(register)
    for table, count in result.counts.items():
        click.echo(f"  {table:<18} {count}")
    click.echo(f"PASS {direction.capitalize()} complete")


@sync_group.command('push')
@with_appcontext
def sync_push():
    """Upsert local state to the cloud (idempotent)."""
    _run_sync(sync_service.PUSH)


@sync_group.command('pull')
@with_appcontext
def sync_pull():
    """Replace local state with the cloud copy (unpushed edits are lost)."""
    _run_sync(sync_service.PULL)


@click.group('backup')
def backup_group():
    """JSON backup commands."""


@backup_group.command('export')
@click.argument('path', required=False, type=click.Path(dir_okay=False, writable=True))
@with_appcontext
def backup_export(path):
    """Write the register state to PATH."""
    path = path or backup_service.backup_filename()
    document = backup_service.export_document(get_register())
    with open(path, 'w', encoding='utf-8') as fh:
        fh.write(document)
    click.echo(f"PASS Backup written to {path}")


@backup_group.command('import')
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@with_appcontext
def backup_import(path):
    """Replace register state from the backup at PATH."""
    register = get_register()
    with open(path, 'rb') as fh:
        text = fh.read()
    try:
        imported = backup_service.import_document(register, text)
    except backup_service.ParseError as e:
        raise click.ClickException(str(e))
    save_register(register)
    click.echo(f"PASS Imported: {', '.join(imported) or 'nothing'}")


@click.group('catalog')
def catalog_group():
    """Inventory inspection commands."""


@catalog_group.command('low-stock')
@click.option('--threshold', type=int, default=None, help='Override the store threshold')
@with_appcontext
def catalog_low_stock(threshold):
    """List variants at or below the low-stock threshold."""
    register = get_register()
    with register.lock:
        if threshold is None:
            threshold = register.settings.low_stock_threshold
        rows = reporting_service.low_stock(register.catalog.products, threshold)

    if not rows:
        click.echo(f"No variants at or below {threshold}.")
        return
    click.echo(f"\n{'SKU':<28} {'Name':<28} {'Stock':>5}")
    click.echo("-" * 63)
    for row in rows:
        click.echo(f"{row['sku']:<28} {row['name'][:28]:<28} {row['stock']:>5}")
    click.echo(f"\nTotal: {len(rows)} variant(s)")


@click.group('system')
def system_group():
    """System repair commands."""


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    # Next access reloads an empty register from the fresh tables
    current_app.extensions.pop("gearpos.register", None)
    click.echo("PASS Database reset complete.")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(sync_group)
    app.cli.add_command(backup_group)
    app.cli.add_command(catalog_group)
    app.cli.add_command(system_group)
