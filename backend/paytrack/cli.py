# Overview: Flask CLI command groups for bootstrap, user management and notifications.

# backend/paytrack/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Set FLASK_APP=paytrack, or pass --app paytrack (uses the create_app factory).
#   wsgi.py is the serving entrypoint and starts the overdue scanner.
#
# System bootstrap:
# - flask system init
#   Create any missing tables (users, customers, payments, notifications).
# - flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Users:
# - flask users create --name "Ops" --email ops@example.com --password "secret"
#   Create a login (prompts if options are omitted).
#
# Notifications:
# - flask notifications scan-overdue
#   Run one overdue scan now and print how many notifications were stored.
# - flask notifications list --limit 20
#   Print the most recent notifications.

import click
from flask.cli import with_appcontext

from .components import get_components
from .extensions import db
from .services import auth_service, notification_service
from .validation import StorageError, ValidationError


@click.group('system')
def system_group():
    """Database bootstrap commands."""


@system_group.command('init')
@with_appcontext
def init_command():
    """Create all tables that do not exist yet."""
    db.create_all()
    click.echo("Database tables created.")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Confirm destructive reset')
@with_appcontext
def reset_db_command(yes):
    """Drop and recreate every table."""
    if not yes:
        click.echo("Refusing to reset without --yes.")
        raise SystemExit(1)
    db.drop_all()
    db.create_all()
    click.echo("Database reset complete.")


@click.group('users')
def users_group():
    """User management commands."""


@users_group.command('create')
@click.option('--name', prompt=True, help='Display name')
@click.option('--email', prompt=True, help='Email address (login)')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@with_appcontext
def create_user_command(name, email, password):
    """Create a login."""
    try:
        user = auth_service.register_user(get_components().storage, name, email, password)
    except (ValidationError, StorageError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    click.echo(f"Created user {user.email} (id={user.id})")


@click.group('notifications')
def notifications_group():
    """Notification and overdue scan commands."""


@notifications_group.command('scan-overdue')
@with_appcontext
def scan_overdue_command():
    """Run one overdue scan immediately."""
    emitted = get_components().scanner.scan_once()
    click.echo(f"Overdue scan stored {emitted} notification(s).")


@notifications_group.command('list')
@click.option('--limit', type=int, default=20, show_default=True, help='Number of notifications')
@with_appcontext
def list_notifications_command(limit):
    """Print the most recent notifications, newest first."""
    try:
        notifications = notification_service.list_notifications(get_components().storage, limit=limit)
    except StorageError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    if not notifications:
        click.echo("No notifications.")
        return
    for n in notifications:
        data = n.to_dict()
        click.echo(f"{data['createdAt']}  {data['type']:<17} {data['message']}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(notifications_group)
