# Overview: Flask CLI command groups for bootstrap, inspection and export.

# backend/finantech/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to finantech (PowerShell: $env:FLASK_APP="finantech").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Create tables and write the current catalog/ledger snapshots.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Catalog:
# - python -m flask catalog list
#   List products with stock and low-stock markers.
# - python -m flask catalog seed --force
#   Replace the catalog with the demo seed products.
#
# Sales:
# - python -m flask sales list --limit 20
#   List recent sales, newest first.
# - python -m flask sales export --search kopi --output report.csv
#   Write the (filtered) sales history as CSV.

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .services import export_service
from .services.seed import seed_catalog
from .services.state import get_state, init_state
from .time_utils import utcnow, to_utc_z


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """Create tables (idempotent) and persist the in-memory state."""
    db.create_all()
    state = init_state(current_app._get_current_object())
    if not state.save():
        click.echo("FAIL Could not write snapshots; see log")
        return
    click.echo(f"PASS Snapshot tables ready: {len(state.catalog)} product(s), {len(state.ledger)} sale(s)")


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
    init_state(current_app._get_current_object())

    click.echo("PASS Database reset complete.")


@click.group('catalog')
def catalog_group():
    """Catalog inspection and seeding."""


@catalog_group.command('list')
@with_appcontext
def list_catalog():
    """List all products."""
    products = get_state().catalog.list()

    if not products:
        click.echo("No products found.")
        return

    click.echo("\n" + "="*80)
    click.echo(f"{'ID':<18} {'Name':<30} {'Category':<12} {'Price':>10} {'Stock':>6} {'Min':>5}")
    click.echo("="*80)

    for p in products:
        flag = " LOW" if p.is_low_stock else ""
        click.echo(f"{p.id:<18} {p.name[:30]:<30} {p.category[:12]:<12} {p.price:>10} {p.stock:>6} {p.min_stock:>5}{flag}")

    click.echo("="*80)
    click.echo(f"Total stock: {get_state().catalog.total_stock()}\n")


@catalog_group.command('seed')
@click.option('--force', is_flag=True, help='Replace a non-empty catalog')
@with_appcontext
def seed(force):
    """Load the demo seed catalog."""
    state = get_state()
    if len(state.catalog) and not force:
        click.echo("WARN Catalog is not empty; use --force to replace it.")
        return

    with state.locked():
        state.catalog.replace_all(seed_catalog())
    click.echo(f"PASS Seeded {len(state.catalog)} product(s)")


@click.group('sales')
def sales_group():
    """Sales history inspection and export."""


@sales_group.command('list')
@click.option('--limit', type=int, default=20, show_default=True, help='Number of sales to show')
@with_appcontext
def list_sales(limit):
    """List recent sales, newest first."""
    sales = get_state().ledger.list()[:limit]

    if not sales:
        click.echo("No sales recorded.")
        return

    for s in sales:
        click.echo(f"{s.id:<24} {to_utc_z(s.timestamp):<22} total={s.total} profit={s.profit}  {s.item_summary()}")


@sales_group.command('export')
@click.option('--search', default=None, help='Filter by transaction id or item name')
@click.option('--output', type=click.Path(dir_okay=False, writable=True), default=None,
              help='Destination file (default: sales_report_<date>.csv)')
@with_appcontext
def export_sales(search, output):
    """Export sales history as CSV."""
    sales = get_state().ledger.search(search)
    path = output or export_service.export_filename(utcnow().date())

    with open(path, "w", encoding="utf-8", newline="") as fh:
        fh.write(export_service.sales_to_csv(sales))

    click.echo(f"PASS Exported {len(sales)} sale(s) to {path}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(catalog_group)
    app.cli.add_command(sales_group)
