"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

CLI context for consulkit.

Provides shared context object and helpers for CLI commands.
"""

import asyncio
import json
import sys
from typing import Any, Awaitable, Callable, Optional

import click

from consulkit.core.wire import encode
from consulkit.exceptions import ConsulkitError
from consulkit.sdk.client import Config, ConsulClient


def default_client_factory(config: Config) -> ConsulClient:
    return ConsulClient(config)


# Global context object to share configuration across commands
class CLIContext:
    """Context object for CLI commands."""

    def __init__(self, client_factory: Callable[[Config], ConsulClient] = default_client_factory):
        self.config = None
        self.config_path = None
        self.verbose = False
        self.address: Optional[str] = None
        self.token: Optional[str] = None
        self.datacenter: Optional[str] = None
        self.client_factory = client_factory

    def client_config(self) -> Config:
        """Loaded settings with command-line overrides applied."""
        settings = self.config.consul
        return Config(
            address=self.address or settings.address,
            datacenter=self.datacenter or settings.datacenter,
            token=self.token or settings.token,
            wait_time=settings.wait_time,
            timeout=settings.timeout,
        )

    def client(self) -> ConsulClient:
        return self.client_factory(self.client_config())


pass_context = click.make_pass_decorator(CLIContext, ensure=True)


def run_with_client(cli_ctx: CLIContext, operation: Callable[[ConsulClient], Awaitable[Any]]) -> Any:
    """
    Run ``operation`` against a fresh client, then close it.

    Errors are reported on stderr and end the command with exit code 1.
    """

    async def _run() -> Any:
        async with cli_ctx.client() as client:
            return await operation(client)

    try:
        return asyncio.run(_run())
    except ConsulkitError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def echo_json(value: Any) -> None:
    click.echo(json.dumps(encode(value), indent=2))


def echo_table(headers: list, rows: list) -> None:
    """Print rows as left-aligned columns sized to their widest cell."""
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    header = "  ".join(f"{h:<{widths[i]}}" for i, h in enumerate(headers))
    click.echo(header)
    click.echo("-" * len(header))
    for row in rows:
        click.echo("  ".join(f"{str(cell):<{widths[i]}}" for i, cell in enumerate(row)).rstrip())
