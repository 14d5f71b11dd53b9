"""Config command implementation for feignit."""

import logging
import sys

import click

from ..config import ConfigurationManager, ConfigValidationError
from ..utils import setup_logging

logger = logging.getLogger(__name__)


@click.command()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose (debug) logging")
@click.help_option("-h", "--help")
def config(verbose):
    """Show configuration sources and the effective settings."""
    if verbose:
        setup_logging("DEBUG")

    try:
        configuration = ConfigurationManager().load_configuration()
    except ConfigValidationError as e:
        logger.error(f"Configuration validation failed: {e}")
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    if not verbose:
        setup_logging(configuration.settings.log_level)

    click.echo("Configuration Sources:")
    for source in configuration.sources:
        status = "✓" if source.exists else "✗"
        click.echo(f"  {status} {source.display_name + ':':<8} {source.path}")

    click.echo("")
    click.echo("Effective Settings:")
    for name, value in configuration.settings.model_dump().items():
        click.echo(f"  {name}: {value}")
