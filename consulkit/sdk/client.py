"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

Consulkit client.

Provides ``Config`` (connection defaults shared by every call),
``ConsulClient`` (the entry point exposing one accessor per resource) and
``ConsulBuilder`` for fluent setup.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional

from consulkit.adapters.base import BaseAdapter
from consulkit.adapters.http import HttpAdapter
from consulkit.config.settings import (
    DEFAULT_ADDRESS,
    DEFAULT_TIMEOUT,
    ConsulSettings,
    normalize_address,
    settings_from_env,
)
from consulkit.exceptions import InvalidConfigurationError
from consulkit.logging_config import get_logger
from consulkit.sdk.agent import AgentOperations
from consulkit.sdk.catalog import CatalogOperations
from consulkit.sdk.connect import ConnectOperations
from consulkit.sdk.health import HealthOperations
from consulkit.sdk.hooks import HookRegistry
from consulkit.sdk.kv import KVOperations
from consulkit.sdk.session import SessionOperations

logger = get_logger(__name__)

DEFAULT_PORT = 8500


@dataclass(frozen=True)
class Config:
    """
    Connection defaults shared by every request.

    Immutable once built, so one ``Config`` can back any number of
    concurrent calls.

    Args:
        address: Agent base URL, e.g. ``http://127.0.0.1:8500``.
        datacenter: Default datacenter; per-call options override it.
        token: Default ACL token; per-call options override it.
        wait_time: Default wait in seconds for blocking queries.
        timeout: Transport timeout in seconds for non-blocking calls.
        adapter: Transport. Defaults to an :class:`HttpAdapter`.
        hooks: Request lifecycle hooks.
    """

    address: str = DEFAULT_ADDRESS
    datacenter: Optional[str] = None
    token: Optional[str] = field(default=None, repr=False)
    wait_time: Optional[float] = None
    timeout: float = DEFAULT_TIMEOUT
    adapter: Optional[BaseAdapter] = field(default=None, compare=False, repr=False)
    hooks: HookRegistry = field(default_factory=HookRegistry, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not self.address:
            raise InvalidConfigurationError("Config.address must not be empty")
        if self.timeout <= 0:
            raise InvalidConfigurationError("Config.timeout must be positive")
        if self.wait_time is not None and self.wait_time <= 0:
            raise InvalidConfigurationError("Config.wait_time must be positive")
        object.__setattr__(self, "address", normalize_address(self.address))
        if self.adapter is None:
            object.__setattr__(self, "adapter", HttpAdapter(timeout=self.timeout))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Config:
        """
        Build a config from ``CONSUL_HTTP_ADDR``, ``CONSUL_HTTP_TOKEN`` and
        ``CONSUL_HTTP_SSL``. A bare ``host:port`` address gets a scheme.
        """
        return cls.from_settings(settings_from_env(environ))

    @classmethod
    def from_consul_host(
        cls,
        host: str,
        port: Optional[int] = None,
        token: Optional[str] = None,
    ) -> Config:
        """Build a config for ``host`` on ``port`` (8500 by default)."""
        if not host:
            raise InvalidConfigurationError("host must not be empty")
        return cls(address=f"{host}:{port or DEFAULT_PORT}", token=token)

    @classmethod
    def from_settings(cls, settings: ConsulSettings) -> Config:
        """Build a config from loaded :class:`ConsulSettings`."""
        return cls(
            address=settings.address,
            datacenter=settings.datacenter,
            token=settings.token,
            wait_time=settings.wait_time,
            timeout=settings.timeout,
        )


class ConsulClient:
    """
    Client for the control-plane HTTP API.

    Quick start::

        async with ConsulClient(Config.from_env()) as client:
            nodes, meta = await client.catalog.list_datacenter_nodes()

    Resource accessors are created on first use and share the client's
    config (and therefore its adapter and hooks).

    Args:
        config: Connection defaults. Defaults to ``Config()`` (local agent).
    """

    def __init__(self, config: Optional[Config] = None) -> None:
        self._config = config or Config()
        self._catalog: Optional[CatalogOperations] = None
        self._health: Optional[HealthOperations] = None
        self._kv: Optional[KVOperations] = None
        self._session: Optional[SessionOperations] = None
        self._agent: Optional[AgentOperations] = None
        self._connect: Optional[ConnectOperations] = None
        logger.debug("ConsulClient initialized", address=self._config.address)

    @property
    def config(self) -> Config:
        return self._config

    @property
    def hooks(self) -> HookRegistry:
        """Lifecycle hooks fired around every request."""
        return self._config.hooks

    # -- Resource accessors --------------------------------------------------

    @property
    def catalog(self) -> CatalogOperations:
        if self._catalog is None:
            self._catalog = CatalogOperations(self)
        return self._catalog

    @property
    def health(self) -> HealthOperations:
        if self._health is None:
            self._health = HealthOperations(self)
        return self._health

    @property
    def kv(self) -> KVOperations:
        if self._kv is None:
            self._kv = KVOperations(self)
        return self._kv

    @property
    def session(self) -> SessionOperations:
        if self._session is None:
            self._session = SessionOperations(self)
        return self._session

    @property
    def agent(self) -> AgentOperations:
        if self._agent is None:
            self._agent = AgentOperations(self)
        return self._agent

    @property
    def connect(self) -> ConnectOperations:
        if self._connect is None:
            self._connect = ConnectOperations(self)
        return self._connect

    # -- Lifecycle -----------------------------------------------------------

    async def close(self) -> None:
        """Release the transport's connections."""
        await self._config.adapter.close()
        logger.debug("ConsulClient closed")

    async def __aenter__(self) -> ConsulClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


# ---------------------------------------------------------------------------
# ConsulBuilder (advanced initialization)
# ---------------------------------------------------------------------------

class ConsulBuilder:
    """Fluent builder for a ConsulClient.

    Example::

        client = (
            ConsulBuilder()
            .set_address("https://consul.internal:8501")
            .set_token("s3cr3t")
            .set_datacenter("dc2")
            .set_wait_time(60)
            .build()
        )
    """

    def __init__(self) -> None:
        self._address: str = DEFAULT_ADDRESS
        self._token: Optional[str] = None
        self._datacenter: Optional[str] = None
        self._wait_time: Optional[float] = None
        self._timeout: float = DEFAULT_TIMEOUT
        self._adapter: Optional[BaseAdapter] = None
        self._hooks = HookRegistry()

    def set_address(self, address: str) -> ConsulBuilder:
        """Set the agent address."""
        self._address = address
        return self

    def set_token(self, token: str) -> ConsulBuilder:
        """Set the default ACL token."""
        self._token = token
        return self

    def set_datacenter(self, datacenter: str) -> ConsulBuilder:
        """Set the default datacenter."""
        self._datacenter = datacenter
        return self

    def set_wait_time(self, seconds: float) -> ConsulBuilder:
        """Set the default blocking-query wait."""
        self._wait_time = seconds
        return self

    def set_timeout(self, seconds: float) -> ConsulBuilder:
        """Set the transport timeout for non-blocking calls."""
        self._timeout = seconds
        return self

    def set_transport(self, adapter: BaseAdapter) -> ConsulBuilder:
        """Override the default HTTP adapter with a custom transport."""
        self._adapter = adapter
        return self

    @property
    def hooks(self) -> HookRegistry:
        """Hooks to register before the client is built."""
        return self._hooks

    def build(self) -> ConsulClient:
        """Construct the ConsulClient.

        Raises:
            InvalidConfigurationError: If the collected values are invalid.
        """
        config = Config(
            address=self._address,
            datacenter=self._datacenter,
            token=self._token,
            wait_time=self._wait_time,
            timeout=self._timeout,
            adapter=self._adapter,
            hooks=self._hooks,
        )
        return ConsulClient(config)
