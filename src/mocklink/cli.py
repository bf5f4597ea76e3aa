"""Root CLI group and version flag."""

import click

from mocklink import __version__
from mocklink.commands.check import check
from mocklink.commands.replay import replay


@click.group()
@click.version_option(version=__version__, prog_name="mocklink")
def cli() -> None:
    """mocklink — replay scripted GraphQL responses without a network."""


cli.add_command(check)
cli.add_command(replay)
