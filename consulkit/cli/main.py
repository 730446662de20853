"""
CLI entry point for consulkit.

Provides a command-line interface over the control-plane API: catalog
queries (optionally blocking), service health, KV access and agent
membership.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from consulkit._version import __version__
from consulkit.cli.context import CLIContext, pass_context
from consulkit.config.settings import get_default_config_path, load_config
from consulkit.exceptions import InvalidConfigurationError
from consulkit.logging_config import setup_logging


@click.group()
@click.option(
    '--config',
    '-c',
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help=f'Path to configuration file (default: {get_default_config_path()})',
)
@click.option(
    '--log-level',
    '-l',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], case_sensitive=False),
    default=None,
    help='Set logging level (default: from configuration)',
)
@click.option(
    '--address',
    '-a',
    envvar='CONSUL_HTTP_ADDR',
    default=None,
    help='Agent address, e.g. http://127.0.0.1:8500',
)
@click.option(
    '--token',
    '-t',
    envvar='CONSUL_HTTP_TOKEN',
    default=None,
    help='ACL token sent with every request',
)
@click.option(
    '--datacenter',
    '-d',
    default=None,
    help='Datacenter to query (default: the agent\'s own)',
)
@click.option(
    '--verbose',
    '-v',
    is_flag=True,
    help='Enable verbose output',
)
@click.version_option(version=__version__, prog_name='consulkit')
@pass_context
def cli(ctx: CLIContext, config: Optional[Path], log_level: Optional[str], address: Optional[str],
        token: Optional[str], datacenter: Optional[str], verbose: bool):
    """
    consulkit - command-line client for the Consul HTTP API.

    Queries the catalog, service health, the KV store and agent membership.
    """
    ctx.verbose = verbose
    ctx.config_path = str(config) if config else None
    ctx.address = address
    ctx.token = token
    ctx.datacenter = datacenter

    # Load configuration
    try:
        ctx.config = load_config(ctx.config_path)
    except InvalidConfigurationError as e:
        click.echo(f"Error: Invalid configuration: {e}", err=True)
        sys.exit(1)

    # Set up logging
    effective_log_level = log_level.upper() if log_level else ctx.config.logging.level
    log_file = Path(ctx.config.logging.file) if ctx.config.logging.file else None
    setup_logging(
        level=effective_log_level,
        log_file=log_file,
        json_format=ctx.config.logging.format == "json",
    )

    if verbose:
        logger = logging.getLogger("consulkit")
        logger.info(f"Loaded configuration from: {ctx.config_path or 'defaults'}")
        logger.info(f"Log level: {effective_log_level}")


@cli.group()
def catalog():
    """Query the service catalog."""
    pass


from consulkit.cli.catalog import datacenters, nodes, services
catalog.add_command(datacenters)
catalog.add_command(nodes)
catalog.add_command(services)


@cli.group()
def health():
    """Query service and check health."""
    pass


from consulkit.cli.health import service, state
health.add_command(service)
health.add_command(state)


@cli.group()
def kv():
    """Read and write the key/value store."""
    pass


from consulkit.cli.kv import delete, get, keys, put
kv.add_command(get)
kv.add_command(put)
kv.add_command(delete)
kv.add_command(keys)


@cli.group()
def agent():
    """Inspect the local agent."""
    pass


from consulkit.cli.agent import members
agent.add_command(members)


if __name__ == '__main__':
    cli()
