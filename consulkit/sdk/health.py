"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

Health operations.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Tuple, Union

from consulkit.core.options import QueryMeta, QueryOptions
from consulkit.core.request import path_segment, read
from consulkit.core.wire import WireModel, wire_field
from consulkit.exceptions import ValidationError
from consulkit.sdk.agent import AgentService
from consulkit.sdk.catalog import Node

if TYPE_CHECKING:
    from consulkit.sdk.client import ConsulClient


class HealthState(str, Enum):
    """Check states accepted by the state endpoint. ``ANY`` matches all."""

    ANY = "any"
    PASSING = "passing"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass
class HealthCheck(WireModel):
    """A health check result from the catalog."""

    node: str = wire_field("Node", default="")
    check_id: str = wire_field("CheckID", default="")
    name: str = wire_field("Name", default="")
    status: str = wire_field("Status", default="")
    notes: str = wire_field("Notes", default="")
    output: str = wire_field("Output", default="")
    service_id: str = wire_field("ServiceID", default="")
    service_name: str = wire_field("ServiceName", default="")
    service_tags: List[str] = wire_field("ServiceTags", default_factory=list)
    type: str = wire_field("Type", default="")
    create_index: int = wire_field("CreateIndex", default=0)
    modify_index: int = wire_field("ModifyIndex", default=0)


@dataclass
class ServiceEntry(WireModel):
    """A service instance with its node and every check that applies to it."""

    node: Node = wire_field("Node", default_factory=Node)
    service: AgentService = wire_field("Service", default_factory=AgentService)
    checks: List[HealthCheck] = wire_field("Checks", default_factory=list)

    @property
    def is_passing(self) -> bool:
        return all(check.status == HealthState.PASSING.value for check in self.checks)


class HealthOperations:
    """Health operations."""

    def __init__(self, client: ConsulClient) -> None:
        self._client = client

    async def node_checks(
        self, node: str, options: Optional[QueryOptions] = None
    ) -> Tuple[List[HealthCheck], QueryMeta]:
        """Checks registered against ``node``."""
        segment = path_segment(node, "node")
        return await read(
            f"/v1/health/node/{segment}",
            self._client.config,
            List[HealthCheck],
            options=options,
        )

    async def service_checks(
        self, service: str, options: Optional[QueryOptions] = None
    ) -> Tuple[List[HealthCheck], QueryMeta]:
        """Checks associated with ``service``."""
        segment = path_segment(service, "service")
        return await read(
            f"/v1/health/checks/{segment}",
            self._client.config,
            List[HealthCheck],
            options=options,
        )

    async def service(
        self,
        service: str,
        tag: Optional[str] = None,
        passing_only: bool = False,
        options: Optional[QueryOptions] = None,
    ) -> Tuple[List[ServiceEntry], QueryMeta]:
        """
        Instances of ``service`` with their node and checks.

        Args:
            service: Service name
            tag: Only instances carrying this tag
            passing_only: Only instances whose checks are all passing
            options: Query options (blocking, consistency, filters)
        """
        segment = path_segment(service, "service")
        params = []
        if tag:
            params.append(("tag", tag))
        if passing_only:
            params.append(("passing", ""))
        return await read(
            f"/v1/health/service/{segment}",
            self._client.config,
            List[ServiceEntry],
            params=params,
            options=options,
        )

    async def state(
        self,
        state: Union[HealthState, str],
        options: Optional[QueryOptions] = None,
    ) -> Tuple[List[HealthCheck], QueryMeta]:
        """
        Checks currently in ``state``.

        Raises:
            ValidationError: If ``state`` is not a known health state
        """
        try:
            state = HealthState(state)
        except ValueError as e:
            raise ValidationError(f"invalid health state {state!r}") from e
        return await read(
            f"/v1/health/state/{state.value}",
            self._client.config,
            List[HealthCheck],
            options=options,
        )
