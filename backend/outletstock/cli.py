# Overview: Flask CLI command groups for bootstrap, inspection, and reference data.

# backend/outletstock/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Idempotent bootstrap: creates tables, the three outlets, five default users and sample products.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# User inspection/bootstrap:
# - python -m flask users list [--role OWNER]
#   List all users with role and outlet.
# - python -m flask users create --email cafe2@inventory.com --name "Cafe Staff 2" --role OUTLET_CAFE --outlet-id 1
#   Create a user (prompts for the password).
#
# Reference data:
# - python -m flask outlets list
# - python -m flask outlets create --name "Campus Kiosk" --type CAFE
# - python -m flask products list
# - python -m flask products create --name "Milk" --unit liters --category Dairy [--fixed]

import click
from flask.cli import with_appcontext

from .errors import ValidationError
from .extensions import db
from .models import User
from .permissions import ALL_ROLES, ALL_OUTLET_TYPES
from .services.auth_service import create_user, hash_password, PasswordValidationError
from .services import catalog_service


DEFAULT_PASSWORD = "Password123!"


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Initialize the system: schema, outlets, default users and products.

    Creates (skipping anything that already exists):
    - Outlets: University Cafe, University Restaurant, Mini Market
    - Users: owner@, purchasing@, cafe@, restaurant@, minimarket@inventory.com
    - Products: Coffee Beans, Sugar, Bread, Bottled Water
    - All passwords default to: "Password123!"

    SECURITY: Change passwords immediately in production!
    """
    click.echo("START Initializing outlet stock system...")

    db.create_all()
    click.echo("PASS Schema ready")

    created = catalog_service.seed_defaults(hash_password(DEFAULT_PASSWORD))
    click.echo(f"PASS Outlets created: {created['outlets']}")
    click.echo(f"PASS Users created: {created['users']}")
    click.echo(f"PASS Products created: {created['products']}")

    if created["users"]:
        click.echo(f"\nDefault password for new users: {DEFAULT_PASSWORD}")
        click.echo("WARN Change default passwords before going live")

    click.echo("\nPASS System initialization complete!")


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

    click.echo("PASS Database reset complete. Run 'python -m flask system init' to initialize.")


@click.group('users')
def users_group():
    """User inspection and creation."""


@users_group.command('list')
@click.option('--role', type=click.Choice(sorted(ALL_ROLES)), help='Filter by role')
@with_appcontext
def list_users(role):
    """List all users with their role and outlet."""
    query = db.session.query(User)
    if role:
        query = query.filter_by(role=role)

    users = query.order_by(User.id.asc()).all()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "=" * 100)
    click.echo(f"{'ID':<5} {'Email':<32} {'Name':<24} {'Role':<20} {'Outlet'}")
    click.echo("=" * 100)

    for user in users:
        outlet_name = user.outlet.name if user.outlet else "-"
        click.echo(f"{user.id:<5} {user.email:<32} {user.name:<24} {user.role:<20} {outlet_name}")

    click.echo("=" * 100)
    click.echo(f"Total: {len(users)} users\n")


@users_group.command('create')
@click.option('--email', prompt=True, help='Email address')
@click.option('--name', prompt=True, help='Display name')
@click.option('--role', prompt=True, type=click.Choice(sorted(ALL_ROLES)), help='Role')
@click.option('--outlet-id', type=int, default=None, help='Outlet ID (outlet roles only)')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@with_appcontext
def create_user_cli(email, name, role, outlet_id, password):
    """Create a user (password hashed with bcrypt)."""
    try:
        user = create_user(
            email=email,
            password=password,
            name=name,
            role=role,
            outlet_id=outlet_id,
        )
    except PasswordValidationError as e:
        click.echo(f"FAIL Password validation failed: {e.message}")
        click.echo("Requirements: 8+ chars, uppercase, lowercase, digit, special char")
        return
    except ValidationError as e:
        click.echo(f"FAIL Failed to create user: {e.message}")
        return

    click.echo(f"PASS Created user: {user.email} with role '{user.role}' (ID: {user.id})")
    click.echo("SECURITY Password securely hashed with bcrypt")


@click.group('outlets')
def outlets_group():
    """Outlet reference data."""


@outlets_group.command('list')
@with_appcontext
def list_outlets_cli():
    outlets = catalog_service.list_outlets()
    if not outlets:
        click.echo("No outlets found.")
        return
    for outlet in outlets:
        click.echo(f"{outlet.id:<5} {outlet.name:<32} {outlet.type}")


@outlets_group.command('create')
@click.option('--name', prompt=True, help='Outlet name')
@click.option('--type', 'outlet_type', prompt=True, type=click.Choice(sorted(ALL_OUTLET_TYPES)))
@with_appcontext
def create_outlet_cli(name, outlet_type):
    try:
        outlet = catalog_service.create_outlet(name, outlet_type)
    except ValidationError as e:
        click.echo(f"FAIL {e.message}")
        return
    click.echo(f"PASS Created outlet: {outlet.name} ({outlet.type}, ID: {outlet.id})")


@click.group('products')
def products_group():
    """Product reference data."""


@products_group.command('list')
@with_appcontext
def list_products_cli():
    products = catalog_service.list_products()
    if not products:
        click.echo("No products found.")
        return
    for product in products:
        fixed = "fixed" if product.is_fixed else ""
        click.echo(f"{product.id:<5} {product.name:<32} {product.unit:<10} {product.category or '-':<16} {fixed}")


@products_group.command('create')
@click.option('--name', prompt=True, help='Product name')
@click.option('--unit', prompt=True, help='Unit of measure (kg, pieces, ...)')
@click.option('--category', default=None, help='Category')
@click.option('--fixed', is_flag=True, help='Fixed-stock staple')
@with_appcontext
def create_product_cli(name, unit, category, fixed):
    try:
        product = catalog_service.create_product(name, unit, category, fixed)
    except ValidationError as e:
        click.echo(f"FAIL {e.message}")
        return
    click.echo(f"PASS Created product: {product.name} ({product.unit}, ID: {product.id})")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(outlets_group)
    app.cli.add_command(products_group)
