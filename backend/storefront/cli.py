# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/storefront/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System:
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Admin accounts:
# - python -m flask admins create --email admin@tienda.co --password "Password123!"
#   Create a sign-in account and add it to the admin list.
# - python -m flask admins grant --email someone@tienda.co
# - python -m flask admins revoke --email someone@tienda.co
# - python -m flask admins list
#
# Maintenance:
# - python -m flask sessions cleanup
#   Delete expired/revoked admin sessions older than 30 days.
#
# Orders:
# - python -m flask orders list --status pending --limit 20

import click
from flask.cli import with_appcontext

from .extensions import db
from .formatting import format_datetime, format_price
from .models import AdminUser, User
from .models.orders import ORDER_STATUSES, STATUS_LABELS
from .services import auth_service, order_service, session_service
from .services.auth_service import PasswordValidationError


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


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

    click.echo("PASS Database reset complete. Run 'python -m flask admins create' to add an admin.")


@click.group('admins')
def admins_group():
    """Admin account management."""


@admins_group.command('create')
@click.option('--email', prompt=True, help='Email address')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@with_appcontext
def create_admin_cli(email, password):
    """
    Create a sign-in account and authorize it as an admin.

    Password must meet strength requirements:
    - Minimum 8 characters
    - At least one uppercase letter
    - At least one lowercase letter
    - At least one digit
    - At least one special character
    """
    try:
        user = auth_service.create_user(email=email, password=password)
        auth_service.grant_admin(user.email)

        click.echo(f"PASS Created admin: {user.email}")
        click.echo("SECURITY Password securely hashed with bcrypt")

    except PasswordValidationError as e:
        click.echo(f"FAIL Password validation failed: {str(e)}")
        click.echo("Requirements: 8+ chars, uppercase, lowercase, digit, special char")
    except ValueError as e:
        click.echo(f"FAIL Failed to create admin: {str(e)}")


@admins_group.command('grant')
@click.option('--email', required=True, help='Email address')
@with_appcontext
def grant_admin_cli(email):
    """Add an email to the admin list (the account may be created later)."""
    admin = auth_service.grant_admin(email)
    click.echo(f"PASS {admin.email} is an authorized admin")


@admins_group.command('revoke')
@click.option('--email', required=True, help='Email address')
@with_appcontext
def revoke_admin_cli(email):
    """Remove an email from the admin list. Open sessions are rejected on their next request."""
    if auth_service.revoke_admin(email):
        click.echo(f"PASS Revoked admin access for {auth_service.normalize_email(email)}")
    else:
        click.echo(f"FAIL {email} is not an authorized admin")


@admins_group.command('list')
@with_appcontext
def list_admins():
    """List authorized admins and whether they have a sign-in account."""
    admins = db.session.query(AdminUser).order_by(AdminUser.email.asc()).all()

    if not admins:
        click.echo("No admins found.")
        return

    click.echo("\n" + "="*70)
    click.echo(f"{'ID':<5} {'Email':<40} {'Account':<10} {'Active'}")
    click.echo("="*70)

    for admin in admins:
        user = db.session.query(User).filter_by(email=admin.email).first()
        has_account = "yes" if user else "no"
        active = ("yes" if user.is_active else "no") if user else "-"
        click.echo(f"{admin.id:<5} {admin.email:<40} {has_account:<10} {active}")

    click.echo("="*70 + "\n")


@click.group('sessions')
def sessions_group():
    """Admin session maintenance."""


@sessions_group.command('cleanup')
@with_appcontext
def cleanup_sessions():
    """Delete expired and revoked sessions older than 30 days."""
    deleted = session_service.cleanup_expired_sessions()
    click.echo(f"PASS Deleted {deleted} session(s)")


@click.group('orders')
def orders_group():
    """Order inspection."""


@orders_group.command('list')
@click.option('--status', type=click.Choice(ORDER_STATUSES), help='Filter by status')
@click.option('--limit', type=int, default=20, show_default=True, help='Max rows')
@with_appcontext
def list_orders_cli(status, limit):
    """List recent orders, newest first."""
    orders = order_service.list_orders(status=status, limit=limit)

    if not orders:
        click.echo("No orders found.")
        return

    click.echo("\n" + "="*100)
    click.echo(f"{'#':<6} {'Customer':<30} {'Phone':<12} {'Total':<15} {'Status':<12} {'Created'}")
    click.echo("="*100)

    for order in orders:
        created = format_datetime(order.created_at) if order.created_at else "-"
        click.echo(
            f"{order.order_number:<6} {order.customer_name[:30]:<30} {order.customer_phone:<12} "
            f"{format_price(order.total):<15} {STATUS_LABELS[order.status]:<12} {created}"
        )

    click.echo("="*100 + "\n")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(admins_group)
    app.cli.add_command(sessions_group)
    app.cli.add_command(orders_group)
