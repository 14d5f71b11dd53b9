"""Rules command implementation for feignit."""

import click

from ..manager import FakeManager
from ..rules import FakeObjectCallRule
from ..utils import setup_logging


def _describe(rule: FakeObjectCallRule) -> str:
    doc = (type(rule).__doc__ or "").strip().splitlines()
    summary = doc[0] if doc else ""
    return f"{type(rule).__name__:<24} {summary}".rstrip()


@click.command()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose (debug) logging")
@click.help_option("-h", "--help")
def rules(verbose):
    """List the order in which a fake consults its rules."""
    if verbose:
        setup_logging("DEBUG")

    manager = FakeManager()
    position = 1

    click.echo("Reserved rules (before user rules):")
    for rule in manager.pre_user_rules:
        click.echo(f"  {position}. {_describe(rule)}")
        position += 1

    click.echo("")
    click.echo("User rules:")
    click.echo(f"  {position}. (configured rules, highest priority first)")
    position += 1

    click.echo("")

    click.echo("Reserved rules (after user rules):")
    for rule in manager.post_user_rules:
        click.echo(f"  {position}. {_describe(rule)}")
        position += 1
