import os
import click
from flask import current_app
from flask.cli import with_appcontext
from flask_migrate import upgrade as alembic_upgrade, stamp as alembic_stamp, migrate as alembic_migrate

from models import utcnow
from models.customer import CustomerAccount
from app.auth.status import AccountStatus
from app.services import admin_governor, lifecycle
from app.services.exceptions import ServiceError
from app.utils.db import transactional

MIGRATION_ACTOR = "migration-script"
STORED_STATUSES = {s.value for s in AccountStatus}


def _assert_safe_for_upgrade():
    # Prevent accidental prod upgrades unless explicitly allowed
    env = (current_app.config.get("ENV") or "").lower()
    app_env = (os.getenv("APP_ENV") or "").lower()
    if app_env == "production" or env == "production":
        if (os.getenv("ALLOW_DB_MIGRATIONS") or "").lower() not in ("1", "true", "yes"):
            raise click.ClickException("Refusing to run DB migration in production without ALLOW_DB_MIGRATIONS=true")


@click.command("db-migrate-safe")
@click.option("-m", "--message", default="auto migration", help="Migration message")
@with_appcontext
def db_migrate_safe(message):
    """Generate a new migration script from current models."""
    alembic_migrate(message=message)
    click.echo("Migration script generated.")


@click.command("db-upgrade-safe")
@with_appcontext
def db_upgrade_safe():
    """Apply migrations to the configured database."""
    _assert_safe_for_upgrade()
    alembic_upgrade()
    click.echo("Database upgraded.")


@click.command("db-stamp-safe")
@click.option("--revision", default="head", help="Revision to stamp, default 'head'")
@with_appcontext
def db_stamp_safe(revision):
    """Mark the database at a given revision without running migrations."""
    _assert_safe_for_upgrade()
    alembic_stamp(revision)
    click.echo(f"Database stamped at {revision}.")


@click.command("seed-owner-admin")
@click.option("--name", default="Main Admin", help="Display name of the owner account")
@click.option("--password", envvar="OWNER_ADMIN_PASSWORD", help="Initial password, needed only when the owner is missing")
@with_appcontext
def seed_owner_admin(name, password):
    """Create the owner admin for OWNER_ADMIN_EMAIL and re-derive every cached role."""
    owner_email = current_app.config.get("OWNER_ADMIN_EMAIL")
    if not owner_email:
        raise click.ClickException("OWNER_ADMIN_EMAIL is not configured")
    owner = admin_governor.find_admin(owner_email)
    if owner is None and not password:
        raise click.ClickException("--password is required to create the owner admin")
    try:
        with transactional("Failed to seed owner admin"):
            if owner is None:
                owner = admin_governor.create_admin(name, owner_email, password, owner_email)
                click.echo(f"Owner admin created: {owner.email}")
            else:
                click.echo(f"Owner admin already exists: {owner.email}")
            changed = admin_governor.sync_admin_roles(owner_email)
    except ServiceError as e:
        raise click.ClickException(e.message)
    click.echo(f"Admin roles updated: {changed}")


@click.command("sync-admin-roles")
@with_appcontext
def sync_admin_roles():
    """Re-derive every cached admin role from OWNER_ADMIN_EMAIL."""
    owner_email = current_app.config["OWNER_ADMIN_EMAIL"]
    with transactional("Failed to sync admin roles"):
        changed = admin_governor.sync_admin_roles(owner_email)
        main_admins = admin_governor.count_main_admins(owner_email)
    click.echo(f"Admin roles updated: {changed}")
    if main_admins != 1:
        click.echo(f"Warning: {main_admins} accounts resolve to MAIN_ADMIN", err=True)


@click.command("normalize-customer-status")
@with_appcontext
def normalize_customer_status():
    """Fill missing or invalid status fields on customer rows."""
    now = utcnow()
    updated = 0
    with transactional("Failed to normalize customer status"):
        for account in CustomerAccount.query.order_by(CustomerAccount.id).all():
            touched = False
            if account.status not in STORED_STATUSES:
                account.status = AccountStatus.ACTIVE.value
                touched = True
            if account.status_changed_at is None:
                account.status_changed_at = account.created_at or now
                touched = True
            if not account.status_changed_by:
                account.status_changed_by = MIGRATION_ACTOR
                touched = True
            if account.login_attempts is None:
                account.login_attempts = 0
                touched = True
            if account.last_login_at is None:
                account.last_login_at = account.created_at or now
                touched = True
            if touched:
                updated += 1
    click.echo(f"Customer rows normalized: {updated}")


@click.command("reconcile-statuses")
@with_appcontext
def reconcile_statuses():
    """Write back expired suspensions and inactivity for every customer."""
    with transactional("Failed to reconcile customer statuses"):
        counts = lifecycle.reconcile_all(utcnow())
    if not counts:
        click.echo("No customer status changes.")
    for transition, count in sorted(counts.items()):
        click.echo(f"{transition}: {count}")


def register_cli(app):
    app.cli.add_command(db_migrate_safe)
    app.cli.add_command(db_upgrade_safe)
    app.cli.add_command(db_stamp_safe)
    app.cli.add_command(seed_owner_admin)
    app.cli.add_command(sync_admin_roles)
    app.cli.add_command(normalize_customer_status)
    app.cli.add_command(reconcile_statuses)
