"""welfaretrack CLI entry point."""

import click


@click.group()
def cli():
    """welfaretrack: configuration inspection and user administration."""
    pass


# Register subcommand groups
from welfaretrack.cli.config_cmd import config  # noqa: E402
from welfaretrack.cli.users_cmd import users  # noqa: E402

cli.add_command(config)
cli.add_command(users)
