"""Flask CLI commands for bootstrapping tenants/admins and token housekeeping."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

import click
from flask.cli import with_appcontext

from backoffice.core.auth import get_refresh_store
from backoffice.core.extensions import db
from backoffice.models import ROLES, Tenant, User
from backoffice.repositories import TenantRepository, UserRepository

LOGGER = logging.getLogger(__name__)


@click.group("tenants")
def tenants_cli() -> None:
    """Tenant administration."""


@tenants_cli.command("create")
@click.option("--name", required=True, help="Display name.")
@click.option("--subdomain", required=True, help="Unique alphanumeric slug.")
@click.option("--email", default=None, help="Contact email.")
@with_appcontext
def create_tenant(name: str, subdomain: str, email: str | None) -> None:
    """Create a tenant and print its id."""
    repo = TenantRepository(session=db.session)
    if repo.get_by_subdomain(subdomain, active_only=False) is not None:
        raise click.UsageError(f"Subdomain {subdomain!r} is already taken.")
    try:
        tenant = repo.add(Tenant(name=name, subdomain=subdomain, email=email))
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--subdomain") from exc
    db.session.commit()
    LOGGER.info("tenant.created", extra={"event": "tenant.created", "tenant_id": tenant.id})
    click.echo(f"Tenant created: id={tenant.id} subdomain={tenant.subdomain}")


@click.group("users")
def users_cli() -> None:
    """User administration."""


@users_cli.command("create")
@click.option("--tenant", "subdomain", required=True, help="Subdomain of the owning tenant.")
@click.option("--email", required=True)
@click.option("--name", required=True)
@click.option("--role", type=click.Choice(ROLES), default="admin", show_default=True)
@click.password_option()
@with_appcontext
def create_user(subdomain: str, email: str, name: str, role: str, password: str) -> None:
    """Create a user (an admin by default) inside an existing tenant."""
    tenant = TenantRepository(session=db.session).get_by_subdomain(subdomain, active_only=False)
    if tenant is None:
        raise click.UsageError(f"Unknown tenant {subdomain!r}.")
    users = UserRepository(session=db.session)
    if users.exists_by_email(email):
        raise click.UsageError(f"Email {email!r} is already registered.")
    try:
        user = User(email=email, name=name, role=role, tenant_id=tenant.id)
        user.password = password
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc
    users.add(user)
    db.session.commit()
    LOGGER.info(
        "user.created",
        extra={"event": "user.created", "user_id": user.id, "tenant_id": tenant.id},
    )
    click.echo(f"User created: id={user.id} email={user.email} role={user.role}")


@click.group("tokens")
def tokens_cli() -> None:
    """Refresh token housekeeping."""


@tokens_cli.command("purge-expired")
@with_appcontext
def purge_expired() -> None:
    """Delete refresh records whose expiry has passed."""
    removed = get_refresh_store().purge_expired(datetime.now(UTC))
    LOGGER.info("tokens.purged", extra={"event": "tokens.purged", "status": removed})
    click.echo(f"Purged {removed} expired refresh token(s).")
