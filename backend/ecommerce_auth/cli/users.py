"""Flask CLI commands for bootstrapping and inspecting admin accounts."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext

from ecommerce_auth.models.user import User, UserRole
from ecommerce_auth.uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

LOGGER = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_LENGTH = 128


def _validate_password(ctx: click.Context, param: click.Parameter, value: str) -> str:
    if not MIN_PASSWORD_LENGTH <= len(value) <= MAX_PASSWORD_LENGTH:
        raise click.BadParameter(
            f"must be between {MIN_PASSWORD_LENGTH} and {MAX_PASSWORD_LENGTH} characters"
        )
    return value


@click.group("users")
def users_cli() -> None:
    """User administration commands."""


@users_cli.command("create-admin")
@click.option("--email", required=True, help="Admin email address.")
@click.option(
    "--password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    callback=_validate_password,
    help="Admin password (prompted when omitted).",
)
@click.option("--first-name", default="Admin", show_default=True)
@click.option("--last-name", default="User", show_default=True)
@with_appcontext
def create_admin(email: str, password: str, first_name: str, last_name: str) -> None:
    """Create an admin account, or promote and reset an existing user.

    The account is active and its email is marked verified.
    """
    method = current_app.config.get("PASSWORD_HASH_METHOD")
    try:
        with SQLAlchemyUnitOfWork() as uow:
            user = uow.users.get_by_email(email)
            created = user is None
            if user is None:
                user = User(email=email, first_name=first_name, last_name=last_name)
                uow.users.add(user)
            user.role = UserRole.ADMIN
            user.is_active = True
            user.mark_email_verified()
            user.set_password(password, method=method)
            uow.users.flush()
            user_id, user_email = user.id, user.email
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    LOGGER.info("cli.admin_%s", "created" if created else "promoted", extra={"user_id": user_id})
    verb = "Created" if created else "Promoted"
    click.echo(f"{verb} admin {user_email} (id={user_id})")


@users_cli.command("list-admins")
@with_appcontext
def list_admins() -> None:
    """Print every admin account."""
    with SQLAlchemyReadOnlyUnitOfWork() as uow:
        rows = [
            (u.id, u.email, u.full_name, u.is_active)
            for u in uow.users.list_by_role(UserRole.ADMIN)
        ]
    if not rows:
        click.echo("No admin accounts.")
        return
    width = max(len(email) for _, email, _, _ in rows)
    for user_id, email, name, is_active in rows:
        state = "active" if is_active else "inactive"
        click.echo(f"{user_id:>5}  {email.ljust(width)}  {name}  [{state}]")
