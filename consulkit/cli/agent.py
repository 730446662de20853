"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

CLI commands for the local agent.
"""

import click

from consulkit.cli.context import echo_json, echo_table, pass_context, run_with_client

# Serf member status codes.
MEMBER_STATUS = {0: "none", 1: "alive", 2: "leaving", 3: "left", 4: "failed"}


@click.command('members')
@click.option('--wan', is_flag=True, help='List the WAN gossip pool instead of the LAN pool')
@click.option(
    '--format',
    '-f',
    'output_format',
    type=click.Choice(['table', 'json'], case_sensitive=False),
    default='table',
    help='Output format (default: table)',
)
@pass_context
def members(cli_ctx, wan: bool, output_format: str):
    """
    List gossip pool members seen by the agent.

    Examples:

        consulkit agent members --wan
    """
    result, _ = run_with_client(cli_ctx, lambda client: client.agent.members(wan=wan))

    if output_format.lower() == 'json':
        echo_json(result)
        return
    echo_table(
        ["Node", "Address", "Status", "Type", "DC"],
        [
            [
                m.name,
                f"{m.addr}:{m.port}",
                MEMBER_STATUS.get(m.status, str(m.status)),
                m.tags.get("role", ""),
                m.tags.get("dc", ""),
            ]
            for m in result
        ],
    )
