"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

CLI commands for health queries.
"""

import click

from consulkit.cli.context import echo_json, echo_table, pass_context, run_with_client
from consulkit.sdk.health import HealthState


@click.command('service')
@click.argument('name')
@click.option('--tag', default=None, help='Only instances carrying this tag')
@click.option('--passing', is_flag=True, help='Only instances with all checks passing')
@click.option(
    '--format',
    '-f',
    'output_format',
    type=click.Choice(['table', 'json'], case_sensitive=False),
    default='table',
    help='Output format (default: table)',
)
@pass_context
def service(cli_ctx, name: str, tag, passing: bool, output_format: str):
    """
    Show instances of a service with their health.

    Examples:

        consulkit health service web --passing
    """
    entries, _ = run_with_client(
        cli_ctx,
        lambda client: client.health.service(name, tag=tag, passing_only=passing),
    )

    if output_format.lower() == 'json':
        echo_json(entries)
        return
    if not entries:
        click.echo(f"No instances of {name}.")
        return
    echo_table(
        ["Node", "Service ID", "Address", "Port", "Status"],
        [
            [
                e.node.node,
                e.service.id,
                e.service.address or e.node.address,
                e.service.port,
                "passing" if e.is_passing else "failing",
            ]
            for e in entries
        ],
    )


@click.command('state')
@click.argument(
    'state_name',
    metavar='STATE',
    type=click.Choice([s.value for s in HealthState], case_sensitive=False),
)
@click.option(
    '--format',
    '-f',
    'output_format',
    type=click.Choice(['table', 'json'], case_sensitive=False),
    default='table',
    help='Output format (default: table)',
)
@pass_context
def state(cli_ctx, state_name: str, output_format: str):
    """
    List checks in a given state.

    Examples:

        consulkit health state critical
    """
    checks, _ = run_with_client(
        cli_ctx, lambda client: client.health.state(HealthState(state_name.lower()))
    )

    if output_format.lower() == 'json':
        echo_json(checks)
        return
    if not checks:
        click.echo(f"No checks in state {state_name}.")
        return
    echo_table(
        ["Node", "Check ID", "Service", "Status"],
        [[c.node, c.check_id, c.service_name, c.status] for c in checks],
    )
