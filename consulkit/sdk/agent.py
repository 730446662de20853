"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

Agent operations.

Talks to the local agent rather than the catalog: cluster membership, the
services and checks registered with this agent, maintenance mode and TTL
check updates. Most of these endpoints are not raft-indexed, so their
``QueryMeta.last_index`` is ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from consulkit.core.options import QueryMeta, QueryOptions, WriteMeta, WriteOptions
from consulkit.core.request import path_segment, read, write
from consulkit.core.wire import WireModel, wire_field
from consulkit.exceptions import MissingParameterError, ValidationError
from consulkit.logging_config import get_logger

if TYPE_CHECKING:
    from consulkit.sdk.client import ConsulClient

logger = get_logger(__name__)

CHECK_STATUSES = ("passing", "warning", "critical")


@dataclass
class ServiceWeights(WireModel):
    """DNS SRV weights applied to a service instance by health status."""

    passing: int = wire_field("Passing", default=0)
    warning: int = wire_field("Warning", default=0)


@dataclass
class AgentService(WireModel):
    """A service instance as registered with an agent."""

    kind: str = wire_field("Kind", default="")
    id: str = wire_field("ID", default="")
    service: str = wire_field("Service", default="")
    tags: List[str] = wire_field("Tags", default_factory=list)
    meta: Dict[str, str] = wire_field("Meta", default_factory=dict)
    port: int = wire_field("Port", default=0)
    address: str = wire_field("Address", default="")
    weights: Optional[ServiceWeights] = wire_field("Weights", default=None)
    enable_tag_override: bool = wire_field("EnableTagOverride", default=False)
    create_index: int = wire_field("CreateIndex", default=0)
    modify_index: int = wire_field("ModifyIndex", default=0)
    content_hash: str = wire_field("ContentHash", default="")
    datacenter: str = wire_field("Datacenter", default="")


@dataclass
class AgentCheck(WireModel):
    """A health check as known to an agent."""

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
class AgentMember(WireModel):
    """A gossip pool member as seen by the local agent."""

    name: str = wire_field("Name", default="")
    addr: str = wire_field("Addr", default="")
    port: int = wire_field("Port", default=0)
    tags: Dict[str, str] = wire_field("Tags", default_factory=dict)
    status: int = wire_field("Status", default=0)
    protocol_min: int = wire_field("ProtocolMin", default=0)
    protocol_max: int = wire_field("ProtocolMax", default=0)
    protocol_cur: int = wire_field("ProtocolCur", default=0)
    delegate_min: int = wire_field("DelegateMin", default=0)
    delegate_max: int = wire_field("DelegateMax", default=0)
    delegate_cur: int = wire_field("DelegateCur", default=0)


@dataclass
class AgentServiceCheck(WireModel):
    """Check definition attached to a service registration.

    Only the fields that are set are sent.
    """

    check_id: Optional[str] = wire_field("CheckID", default=None)
    name: Optional[str] = wire_field("Name", default=None)
    interval: Optional[str] = wire_field("Interval", default=None)
    timeout: Optional[str] = wire_field("Timeout", default=None)
    ttl: Optional[str] = wire_field("TTL", default=None)
    http: Optional[str] = wire_field("HTTP", default=None)
    method: Optional[str] = wire_field("Method", default=None)
    header: Optional[Dict[str, List[str]]] = wire_field("Header", default=None)
    tcp: Optional[str] = wire_field("TCP", default=None)
    grpc: Optional[str] = wire_field("GRPC", default=None)
    grpc_use_tls: Optional[bool] = wire_field("GRPCUseTLS", default=None)
    tls_skip_verify: Optional[bool] = wire_field("TLSSkipVerify", default=None)
    status: Optional[str] = wire_field("Status", default=None)
    notes: Optional[str] = wire_field("Notes", default=None)
    deregister_critical_service_after: Optional[str] = wire_field(
        "DeregisterCriticalServiceAfter", default=None
    )


@dataclass
class AgentServiceRegistration(WireModel):
    """Payload for registering a service with the local agent."""

    name: str = wire_field("Name", default="")
    id: Optional[str] = wire_field("ID", default=None)
    kind: Optional[str] = wire_field("Kind", default=None)
    tags: Optional[List[str]] = wire_field("Tags", default=None)
    port: Optional[int] = wire_field("Port", default=None)
    address: Optional[str] = wire_field("Address", default=None)
    meta: Optional[Dict[str, str]] = wire_field("Meta", default=None)
    enable_tag_override: Optional[bool] = wire_field("EnableTagOverride", default=None)
    weights: Optional[ServiceWeights] = wire_field("Weights", default=None)
    check: Optional[AgentServiceCheck] = wire_field("Check", default=None)
    checks: Optional[List[AgentServiceCheck]] = wire_field("Checks", default=None)


class AgentOperations:
    """
    Local agent operations.

    Example:
        >>> members, _ = await client.agent.members()
        >>> await client.agent.update_ttl("service:web", "passing", "ok")
    """

    def __init__(self, client: ConsulClient) -> None:
        self._client = client

    async def members(self, wan: bool = False) -> Tuple[List[AgentMember], QueryMeta]:
        """Gossip pool members known to the agent (the WAN pool if ``wan``)."""
        params = [("wan", "1")] if wan else []
        return await read(
            "/v1/agent/members",
            self._client.config,
            List[AgentMember],
            params=params,
            require_index=False,
        )

    async def self_info(self) -> Tuple[Dict[str, Any], QueryMeta]:
        """The agent's own configuration and member record, undecoded."""
        return await read(
            "/v1/agent/self",
            self._client.config,
            Dict[str, Any],
            require_index=False,
        )

    async def services(
        self, options: Optional[QueryOptions] = None
    ) -> Tuple[Dict[str, AgentService], QueryMeta]:
        """Services registered with this agent, keyed by service ID."""
        return await read(
            "/v1/agent/services",
            self._client.config,
            Dict[str, AgentService],
            options=options,
            require_index=False,
        )

    async def checks(
        self, options: Optional[QueryOptions] = None
    ) -> Tuple[Dict[str, AgentCheck], QueryMeta]:
        """Checks registered with this agent, keyed by check ID."""
        return await read(
            "/v1/agent/checks",
            self._client.config,
            Dict[str, AgentCheck],
            options=options,
            require_index=False,
        )

    async def register_service(
        self,
        registration: AgentServiceRegistration,
        replace_existing_checks: bool = False,
        options: Optional[WriteOptions] = None,
    ) -> Tuple[None, WriteMeta]:
        """
        Register a service with the local agent.

        Raises:
            MissingParameterError: If the registration has no name
        """
        if not registration.name:
            raise MissingParameterError("name")
        params = [("replace-existing-checks", "true")] if replace_existing_checks else []
        result, meta = await write(
            "/v1/agent/service/register",
            self._client.config,
            body=registration,
            params=params,
            options=options,
        )
        logger.info("agent_service_registered", service=registration.name)
        return result, meta

    async def deregister_service(
        self, service_id: str, options: Optional[WriteOptions] = None
    ) -> Tuple[None, WriteMeta]:
        """Remove a service (and its checks) from the local agent."""
        segment = path_segment(service_id, "service_id")
        result, meta = await write(
            f"/v1/agent/service/deregister/{segment}",
            self._client.config,
            options=options,
        )
        logger.info("agent_service_deregistered", service_id=service_id)
        return result, meta

    async def enable_service_maintenance(
        self,
        service_id: str,
        enable: bool = True,
        reason: Optional[str] = None,
        options: Optional[WriteOptions] = None,
    ) -> Tuple[None, WriteMeta]:
        """Put a service into (or take it out of) maintenance mode."""
        segment = path_segment(service_id, "service_id")
        result, meta = await write(
            f"/v1/agent/service/maintenance/{segment}",
            self._client.config,
            params=_maintenance_params(enable, reason),
            options=options,
        )
        return result, meta

    async def enable_node_maintenance(
        self,
        enable: bool = True,
        reason: Optional[str] = None,
        options: Optional[WriteOptions] = None,
    ) -> Tuple[None, WriteMeta]:
        """Put the whole agent node into (or take it out of) maintenance mode."""
        result, meta = await write(
            "/v1/agent/maintenance",
            self._client.config,
            params=_maintenance_params(enable, reason),
            options=options,
        )
        return result, meta

    async def update_ttl(
        self,
        check_id: str,
        status: str,
        output: str = "",
        options: Optional[WriteOptions] = None,
    ) -> Tuple[None, WriteMeta]:
        """
        Report the status of a TTL check.

        Args:
            check_id: ID of the TTL check
            status: One of ``passing``, ``warning`` or ``critical``
            output: Human-readable output stored with the check

        Raises:
            MissingParameterError: If ``check_id`` is empty
            ValidationError: If ``status`` is not a check status
        """
        segment = path_segment(check_id, "check_id")
        if status not in CHECK_STATUSES:
            raise ValidationError(
                f"invalid check status {status!r}, expected one of {', '.join(CHECK_STATUSES)}"
            )
        result, meta = await write(
            f"/v1/agent/check/update/{segment}",
            self._client.config,
            body={"Status": status, "Output": output},
            options=options,
        )
        return result, meta


def _maintenance_params(enable: bool, reason: Optional[str]) -> List[Tuple[str, str]]:
    params = [("enable", "true" if enable else "false")]
    if reason:
        params.append(("reason", reason))
    return params
