"""User administration CLI commands."""

import asyncio

import click

from welfaretrack.api.app import build_services
from welfaretrack.auth.roles import Role
from welfaretrack.errors import RecordInvalidError
from welfaretrack.settings import Settings


@click.group()
def users():
    """User commands."""
    pass


@users.command()
@click.option("--email", required=True, help="Login email address.")
@click.option("--password", required=True, help="Initial password.")
@click.option(
    "--role",
    type=click.Choice(Role.values()),
    default=Role.STAFF.value_name,
    show_default=True,
    help="Role of the new user.",
)
def create(email: str, password: str, role: str):
    """Create a user directly, with any role."""
    services = build_services(Settings.from_env())
    services.store.create_all()

    try:
        user = asyncio.run(services.accounts.register(
            email=email,
            password=password,
            password_confirmation=password,
            role=role,
        ))
    except RecordInvalidError as e:
        for message in e.messages:
            click.echo(click.style(message, fg="red"), err=True)
        raise SystemExit(1)
    finally:
        services.store.dispose()

    click.echo(click.style(f"Created {user['role']} user {user['email']} (id {user['id']})", fg="green"))
