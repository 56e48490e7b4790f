# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/tooladmin/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Create the schema (if missing) and the default super_admin (if no user exists).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# User inspection/bootstrap:
# - python -m flask users list
#   List all users with role and active status.
# - python -m flask users create --username jdoe --email jdoe@toolstech.local --role product_manager
#   Create a staff user (prompts for anything omitted).
#
# Maintenance:
# - python -m flask warranties expire
#   Store status=expired on active warranties past their end date. Reads
#   already report them as expired; this only updates the stored column.

import click
from flask.cli import with_appcontext

from .errors import ApiError
from .extensions import db
from .models import UserRole
from .services import user_service, warranty_service


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Initialize the back office: schema and default admin.

    Idempotent. The admin account comes from DEFAULT_ADMIN_USERNAME /
    DEFAULT_ADMIN_EMAIL / DEFAULT_ADMIN_PASSWORD.

    SECURITY: Change the default password immediately in production!
    """
    click.echo("START Initializing tooladmin...")

    db.create_all()
    click.echo("PASS Schema ready")

    admin = user_service.ensure_default_admin()
    if admin is not None:
        click.echo(f"PASS Created default admin: {admin.username} ({admin.email})")
    else:
        click.echo("PASS Users already exist, default admin not created")


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
    """User inspection and bootstrap commands."""


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users with their roles."""
    users = user_service.list_users()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "=" * 90)
    click.echo(f"{'Username':<20} {'Email':<35} {'Role':<22} {'Active'}")
    click.echo("=" * 90)
    for user in users:
        click.echo(f"{user.username:<20} {user.email:<35} {user.role.value:<22} {'yes' if user.is_active else 'no'}")
    click.echo("=" * 90 + "\n")


@users_group.command('create')
@click.option('--username', prompt=True, help='Username')
@click.option('--email', prompt=True, help='Email address')
@click.option('--first-name', prompt=True, help='First name')
@click.option('--last-name', prompt=True, help='Last name')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--role', type=click.Choice([r.value for r in UserRole]), prompt=True, help='Role')
@with_appcontext
def create_user_cli(username, email, first_name, last_name, password, role):
    """
    Create a new staff user.

    Password must meet strength requirements:
    - Minimum 8 characters
    - At least one uppercase letter
    - At least one lowercase letter
    - At least one digit
    - At least one special character
    """
    try:
        user = user_service.create_user(
            patch={
                "username": username,
                "email": email,
                "first_name": first_name,
                "last_name": last_name,
                "role": UserRole(role),
            },
            password=password,
        )
    except ApiError as e:
        raise click.ClickException(e.message)

    click.echo(f"PASS Created user: {user.username} ({user.role.value})")


@click.group('warranties')
def warranties_group():
    """Warranty maintenance commands."""


@warranties_group.command('expire')
@with_appcontext
def expire_warranties():
    """Persist status=expired on active warranties whose end date has passed."""
    changed = warranty_service.expire_overdue()
    click.echo(f"PASS Marked {changed} warranty(ies) as expired")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(warranties_group)
