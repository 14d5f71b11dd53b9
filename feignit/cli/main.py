"""Main CLI entry point for feignit."""

import sys

import click

from ..utils import setup_logging
from .config_command import config
from .rules_command import rules


@click.group(invoke_without_command=True)
@click.pass_context
@click.help_option("-h", "--help")
def main(ctx):
    """feignit - Inspect configuration and rule dispatch of feignit fakes."""
    setup_logging()

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        sys.exit(1)


main.add_command(config)
main.add_command(rules)
