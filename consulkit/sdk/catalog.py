"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

Catalog operations.

The catalog is the cluster-wide registry of nodes and services. Every read
here is raft-indexed and can therefore be used as a blocking query.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from consulkit.core.options import QueryMeta, QueryOptions, WriteMeta, WriteOptions
from consulkit.core.request import path_segment, read, write
from consulkit.core.wire import WireModel, wire_field
from consulkit.exceptions import MissingParameterError
from consulkit.logging_config import get_logger
from consulkit.sdk.agent import AgentCheck, AgentService, ServiceWeights

if TYPE_CHECKING:
    from consulkit.sdk.client import ConsulClient

logger = get_logger(__name__)


@dataclass
class Node(WireModel):
    """A node in the catalog."""

    id: str = wire_field("ID", default="")
    node: str = wire_field("Node", default="")
    address: str = wire_field("Address", default="")
    datacenter: str = wire_field("Datacenter", default="")
    tagged_addresses: Dict[str, str] = wire_field("TaggedAddresses", default_factory=dict)
    meta: Dict[str, str] = wire_field("Meta", default_factory=dict)
    create_index: int = wire_field("CreateIndex", default=0)
    modify_index: int = wire_field("ModifyIndex", default=0)


@dataclass
class CatalogService(WireModel):
    """One instance of a service, flattened together with its node."""

    id: str = wire_field("ID", default="")
    node: str = wire_field("Node", default="")
    address: str = wire_field("Address", default="")
    datacenter: str = wire_field("Datacenter", default="")
    tagged_addresses: Dict[str, str] = wire_field("TaggedAddresses", default_factory=dict)
    node_meta: Dict[str, str] = wire_field("NodeMeta", default_factory=dict)
    service_id: str = wire_field("ServiceID", default="")
    service_name: str = wire_field("ServiceName", default="")
    service_address: str = wire_field("ServiceAddress", default="")
    service_tags: List[str] = wire_field("ServiceTags", default_factory=list)
    service_meta: Dict[str, str] = wire_field("ServiceMeta", default_factory=dict)
    service_port: int = wire_field("ServicePort", default=0)
    service_weights: ServiceWeights = wire_field("ServiceWeights", default_factory=ServiceWeights)
    service_enable_tag_override: bool = wire_field("ServiceEnableTagOverride", default=False)
    create_index: int = wire_field("CreateIndex", default=0)
    modify_index: int = wire_field("ModifyIndex", default=0)


@dataclass
class CatalogNode(WireModel):
    """A node together with the services registered on it."""

    node: Optional[Node] = wire_field("Node", default=None)
    services: Dict[str, AgentService] = wire_field("Services", default_factory=dict)


@dataclass
class CatalogRegistrationPayload(WireModel):
    """
    Payload for a direct catalog registration.

    ``node`` and ``address`` are required. Unset optional fields are left out
    of the request body so the server applies its own defaults.
    """

    node: str = wire_field("Node", default="")
    address: str = wire_field("Address", default="")
    id: Optional[str] = wire_field("ID", default=None)
    datacenter: Optional[str] = wire_field("Datacenter", default=None)
    tagged_addresses: Optional[Dict[str, str]] = wire_field("TaggedAddresses", default=None)
    node_meta: Optional[Dict[str, str]] = wire_field("NodeMeta", default=None)
    service: Optional[AgentService] = wire_field("Service", default=None)
    check: Optional[AgentCheck] = wire_field("Check", default=None)
    skip_node_update: Optional[bool] = wire_field("SkipNodeUpdate", default=None)


@dataclass
class CatalogDeregistrationPayload(WireModel):
    """Payload removing a node, a service or a check from the catalog."""

    node: str = wire_field("Node", default="")
    address: Optional[str] = wire_field("Address", default=None)
    datacenter: Optional[str] = wire_field("Datacenter", default=None)
    service_id: Optional[str] = wire_field("ServiceID", default=None)
    check_id: Optional[str] = wire_field("CheckID", default=None)


class CatalogOperations:
    """
    Catalog operations.

    Example:
        >>> nodes, meta = await client.catalog.list_datacenter_nodes()
        >>> nodes, meta = await client.catalog.list_datacenter_nodes(
        ...     QueryOptions(wait_index=meta.last_index)
        ... )
    """

    def __init__(self, client: ConsulClient) -> None:
        self._client = client

    async def register(
        self,
        registration: CatalogRegistrationPayload,
        options: Optional[WriteOptions] = None,
    ) -> Tuple[None, WriteMeta]:
        """
        Register a node, and optionally a service and check, in the catalog.

        Raises:
            MissingParameterError: If ``node`` or ``address`` is empty
            RequestFailedError: If the server rejects the registration
        """
        if not registration.node:
            raise MissingParameterError("node")
        if not registration.address:
            raise MissingParameterError("address")

        result, meta = await write(
            "/v1/catalog/register",
            self._client.config,
            body=registration,
            options=options,
        )
        logger.info(
            "catalog_registered",
            node=registration.node,
            service=registration.service.service if registration.service else None,
        )
        return result, meta

    async def deregister(
        self,
        deregistration: CatalogDeregistrationPayload,
        options: Optional[WriteOptions] = None,
    ) -> Tuple[None, WriteMeta]:
        """
        Remove a node, service or check from the catalog.

        Raises:
            MissingParameterError: If ``node`` is empty
        """
        if not deregistration.node:
            raise MissingParameterError("node")

        result, meta = await write(
            "/v1/catalog/deregister",
            self._client.config,
            body=deregistration,
            options=options,
        )
        logger.info(
            "catalog_deregistered",
            node=deregistration.node,
            service_id=deregistration.service_id,
            check_id=deregistration.check_id,
        )
        return result, meta

    async def list_datacenters(self) -> Tuple[List[str], QueryMeta]:
        """Known datacenters, in the order the server returns them."""
        return await read("/v1/catalog/datacenters", self._client.config, List[str])

    async def list_datacenter_nodes(
        self, options: Optional[QueryOptions] = None
    ) -> Tuple[List[Node], QueryMeta]:
        """All nodes in the datacenter."""
        return await read(
            "/v1/catalog/nodes", self._client.config, List[Node], options=options
        )

    async def list_datacenter_services(
        self, options: Optional[QueryOptions] = None
    ) -> Tuple[Dict[str, List[str]], QueryMeta]:
        """Service names in the datacenter, mapped to their tags."""
        return await read(
            "/v1/catalog/services",
            self._client.config,
            Dict[str, List[str]],
            options=options,
        )

    async def list_service_nodes(
        self,
        service: str,
        tag: Optional[str] = None,
        options: Optional[QueryOptions] = None,
    ) -> Tuple[List[CatalogService], QueryMeta]:
        """Instances of ``service``, optionally only those carrying ``tag``."""
        segment = path_segment(service, "service")
        params = [("tag", tag)] if tag else []
        return await read(
            f"/v1/catalog/service/{segment}",
            self._client.config,
            List[CatalogService],
            params=params,
            options=options,
        )

    async def node_services(
        self, node: str, options: Optional[QueryOptions] = None
    ) -> Tuple[CatalogNode, QueryMeta]:
        """A node and the services registered on it.

        An unknown node yields ``CatalogNode(node=None)``.
        """
        segment = path_segment(node, "node")
        return await read(
            f"/v1/catalog/node/{segment}",
            self._client.config,
            CatalogNode,
            options=options,
        )
