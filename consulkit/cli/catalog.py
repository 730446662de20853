"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

CLI commands for catalog queries.

``nodes`` and ``services`` accept ``--index`` to block until the catalog
moves past a known index.
"""

import click

from consulkit.cli.context import echo_json, echo_table, pass_context, run_with_client
from consulkit.core.options import ConsistencyMode, QueryOptions


def _query_options(index, wait, stale) -> QueryOptions:
    return QueryOptions(
        wait_index=index,
        wait_time=wait,
        consistency=ConsistencyMode.STALE if stale else ConsistencyMode.DEFAULT,
    )


_format_option = click.option(
    '--format',
    '-f',
    'output_format',
    type=click.Choice(['table', 'json'], case_sensitive=False),
    default='table',
    help='Output format (default: table)',
)
_index_option = click.option(
    '--index',
    '-i',
    type=int,
    default=None,
    help='Block until the catalog index moves past this value',
)
_wait_option = click.option(
    '--wait',
    '-w',
    type=float,
    default=None,
    help='Maximum blocking time in seconds (with --index)',
)
_stale_option = click.option(
    '--stale',
    is_flag=True,
    help='Allow any server to answer, possibly with stale data',
)


@click.command('datacenters')
@_format_option
@pass_context
def datacenters(cli_ctx, output_format: str):
    """
    List known datacenters.

    Examples:

        consulkit catalog datacenters
    """
    names, _ = run_with_client(cli_ctx, lambda client: client.catalog.list_datacenters())

    if output_format.lower() == 'json':
        echo_json(names)
        return
    for name in names:
        click.echo(name)


@click.command('nodes')
@_format_option
@_index_option
@_wait_option
@_stale_option
@pass_context
def nodes(cli_ctx, output_format: str, index, wait, stale: bool):
    """
    List nodes in the datacenter.

    Examples:

        consulkit catalog nodes

        consulkit catalog nodes --index 1234 --wait 60
    """
    options = _query_options(index, wait, stale)
    result, meta = run_with_client(
        cli_ctx, lambda client: client.catalog.list_datacenter_nodes(options)
    )

    if output_format.lower() == 'json':
        echo_json(result)
        return
    if not result:
        click.echo("No nodes registered.")
    else:
        echo_table(
            ["Node", "Address", "Datacenter"],
            [[n.node, n.address, n.datacenter] for n in result],
        )
    click.echo()
    click.echo(f"Index: {meta.last_index}")


@click.command('services')
@_format_option
@_index_option
@_wait_option
@_stale_option
@pass_context
def services(cli_ctx, output_format: str, index, wait, stale: bool):
    """
    List services in the datacenter with their tags.

    Examples:

        consulkit catalog services --format json
    """
    options = _query_options(index, wait, stale)
    result, meta = run_with_client(
        cli_ctx, lambda client: client.catalog.list_datacenter_services(options)
    )

    if output_format.lower() == 'json':
        echo_json(result)
        return
    if not result:
        click.echo("No services registered.")
    else:
        echo_table(
            ["Service", "Tags"],
            [[name, ",".join(tags)] for name, tags in sorted(result.items())],
        )
    click.echo()
    click.echo(f"Index: {meta.last_index}")
