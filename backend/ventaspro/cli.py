# Overview: Flask CLI command groups for bootstrap, session close-out and inspection.

# backend/ventaspro/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# Database bootstrap:
# - python -m flask ledger init-db
#   Create all tables (idempotent) and open the first session.
# - python -m flask ledger reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Sessions (business days):
# - python -m flask sessions current
# - python -m flask sessions close
#   Close the open session and open its successor.
# - python -m flask sessions history --limit 10
#
# Catalog:
# - python -m flask products list [--all]
# - python -m flask products add --name "Empanada" --price 2.50 --stock 40
#
# Reports:
# - python -m flask reports session 5 [--csv]

import click
from flask.cli import with_appcontext

from .extensions import db
from .services import session_service, products_service, reporting_service
from .validation import ValidationError, NotFoundError, cents_to_decimal


@click.group('ledger')
def ledger_group():
    """Database bootstrap commands."""


@ledger_group.command('init-db')
@with_appcontext
def init_db():
    """Create tables if missing and make sure a session is open."""
    db.create_all()
    session = session_service.get_current_session()
    click.echo(f"PASS Schema ready. Open session: {session.id}")


@ledger_group.command('reset-db')
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
    session = session_service.get_current_session()
    click.echo(f"PASS Database reset complete. Open session: {session.id}")


@click.group('sessions')
def sessions_group():
    """Business-day session commands."""


@sessions_group.command('current')
@with_appcontext
def current_session():
    session = session_service.get_current_session()
    click.echo(f"Session {session.id} OPEN since {session.start_time}")


@sessions_group.command('close')
@with_appcontext
def close_session():
    """Close the open session and open the next one."""
    result = session_service.close_session()
    click.echo(f"PASS Session {result['closed_id']} closed. New session: {result['new_id']}")


@sessions_group.command('history')
@click.option('--limit', default=20, show_default=True, help='Max sessions to show')
@with_appcontext
def session_history(limit):
    sessions = session_service.list_closed_sessions(limit=limit)
    if not sessions:
        click.echo("No closed sessions.")
        return
    for s in sessions:
        click.echo(f"{s.id:>5}  {s.start_time} -> {s.end_time}")


@click.group('products')
def products_group():
    """Catalog inspection commands."""


@products_group.command('list')
@click.option('--all', 'include_deleted', is_flag=True, help='Include soft-deleted products')
@with_appcontext
def list_products(include_deleted):
    products = products_service.list_products(include_deleted=include_deleted)
    if not products:
        click.echo("No products.")
        return
    for p in products:
        flag = " (deleted)" if p.deleted else ""
        click.echo(f"{p.id:>5}  {p.name:<30} {cents_to_decimal(p.price_cents):>10.2f}  stock={p.stock}{flag}")


@products_group.command('add')
@click.option('--name', required=True)
@click.option('--price', required=True, help='Unit price, e.g. 2.50')
@click.option('--stock', 'initial_stock', required=True, help='Initial stock')
@with_appcontext
def add_product(name, price, initial_stock):
    try:
        product_id = products_service.add_product(name=name, price=price, initial_stock=initial_stock)
    except ValidationError as e:
        raise click.ClickException(str(e))
    click.echo(f"PASS Created product {product_id}: {name}")


@click.group('reports')
def reports_group():
    """Session report commands."""


@reports_group.command('session')
@click.argument('session_id', type=int)
@click.option('--csv', 'as_csv', is_flag=True, help='Print the CSV export instead of the summary')
@with_appcontext
def session_report(session_id, as_csv):
    try:
        if as_csv:
            click.echo(reporting_service.export_session_csv(session_id), nl=False)
            return
        summary = reporting_service.session_summary(session_id)
    except NotFoundError as e:
        raise click.ClickException(str(e))

    totals = summary["totals"]
    click.echo(f"Session {session_id}: {summary['sales_count']} sales")
    click.echo(f"  Cash:     {totals['cash']:.2f}")
    click.echo(f"  Transfer: {totals['transfer']:.2f}")
    click.echo(f"  TOTAL:    {totals['total']:.2f}")
    for row in summary["products"]:
        click.echo(f"  {row['name']:<30} x{row['quantity_sold']:<5} {row['revenue']:.2f}")
    for row in summary["waste"]:
        click.echo(f"  WASTE {row['name']:<24} x{row['quantity']:<5} {row['reason'] or ''}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(ledger_group)
    app.cli.add_command(sessions_group)
    app.cli.add_command(products_group)
    app.cli.add_command(reports_group)
