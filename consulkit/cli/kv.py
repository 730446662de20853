"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

CLI commands for the key/value store.
"""

import sys

import click

from consulkit.cli.context import echo_json, pass_context, run_with_client


@click.command('get')
@click.argument('key')
@click.option('--detailed', is_flag=True, help='Show the key metadata as JSON')
@pass_context
def get(cli_ctx, key: str, detailed: bool):
    """
    Print the value stored under KEY.

    Examples:

        consulkit kv get app/config
    """
    pairs, _ = run_with_client(cli_ctx, lambda client: client.kv.get(key))
    if not pairs:
        click.echo(f"Error: Key not found: {key}", err=True)
        sys.exit(1)

    pair = pairs[0]
    if detailed:
        echo_json(pair)
        return
    value = pair.decoded_value or b""
    click.echo(value.decode("utf-8", errors="replace"))


@click.command('put')
@click.argument('key')
@click.argument('value')
@click.option('--flags', type=int, default=0, help='Opaque flags stored with the key')
@click.option('--cas', type=int, default=None, help='Only write if the modify index matches')
@pass_context
def put(cli_ctx, key: str, value: str, flags: int, cas):
    """
    Store VALUE under KEY.

    Examples:

        consulkit kv put app/config '{"debug": true}'
    """
    applied, _ = run_with_client(
        cli_ctx, lambda client: client.kv.put(key, value, flags=flags, cas=cas)
    )
    if not applied:
        click.echo(f"Error: Write to {key} was not applied", err=True)
        sys.exit(1)
    click.echo(f"✓ Wrote {key}")


@click.command('delete')
@click.argument('key')
@click.option('--recurse', is_flag=True, help='Delete every key under KEY')
@pass_context
def delete(cli_ctx, key: str, recurse: bool):
    """
    Delete KEY.

    Examples:

        consulkit kv delete app/ --recurse
    """
    deleted, _ = run_with_client(
        cli_ctx, lambda client: client.kv.delete(key, recurse=recurse)
    )
    if not deleted:
        click.echo(f"Error: Delete of {key} was not applied", err=True)
        sys.exit(1)
    click.echo(f"✓ Deleted {key}")


@click.command('keys')
@click.argument('prefix', default='')
@click.option('--separator', '-s', default=None, help='Fold keys at this separator')
@pass_context
def keys(cli_ctx, prefix: str, separator):
    """
    List key names under PREFIX.

    Examples:

        consulkit kv keys app/ --separator /
    """
    names, _ = run_with_client(
        cli_ctx, lambda client: client.kv.keys(prefix, separator=separator)
    )
    for name in names:
        click.echo(name)
