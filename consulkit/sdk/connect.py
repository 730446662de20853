"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

Service-mesh (Connect) metadata: CA roots and configuration, leaf
certificates and intention checks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from consulkit.core.options import QueryMeta, QueryOptions
from consulkit.core.request import path_segment, read
from consulkit.core.wire import WireModel, wire_field
from consulkit.exceptions import MissingParameterError

if TYPE_CHECKING:
    from consulkit.sdk.client import ConsulClient


@dataclass
class CARoot(WireModel):
    id: str = wire_field("ID", default="")
    name: str = wire_field("Name", default="")
    serial_number: int = wire_field("SerialNumber", default=0)
    signing_key_id: str = wire_field("SigningKeyID", default="")
    root_cert: str = wire_field("RootCert", default="")
    intermediate_certs: List[str] = wire_field("IntermediateCerts", default_factory=list)
    active: bool = wire_field("Active", default=False)
    create_index: int = wire_field("CreateIndex", default=0)
    modify_index: int = wire_field("ModifyIndex", default=0)


@dataclass
class CARootList(WireModel):
    active_root_id: str = wire_field("ActiveRootID", default="")
    trust_domain: str = wire_field("TrustDomain", default="")
    roots: List[CARoot] = wire_field("Roots", default_factory=list)

    @property
    def active_root(self) -> Optional[CARoot]:
        for root in self.roots:
            if root.active:
                return root
        return None


@dataclass
class CAConfig(WireModel):
    """CA provider configuration. ``config`` is provider specific."""

    provider: str = wire_field("Provider", default="")
    config: Dict[str, Any] = wire_field("Config", default_factory=dict)
    create_index: int = wire_field("CreateIndex", default=0)
    modify_index: int = wire_field("ModifyIndex", default=0)


@dataclass
class LeafCert(WireModel):
    """A leaf certificate issued to a service. Timestamps are RFC 3339 strings."""

    serial_number: str = wire_field("SerialNumber", default="")
    cert_pem: str = wire_field("CertPEM", default="")
    private_key_pem: str = wire_field("PrivateKeyPEM", default="")
    service: str = wire_field("Service", default="")
    service_uri: str = wire_field("ServiceURI", default="")
    valid_after: str = wire_field("ValidAfter", default="")
    valid_before: str = wire_field("ValidBefore", default="")
    create_index: int = wire_field("CreateIndex", default=0)
    modify_index: int = wire_field("ModifyIndex", default=0)


@dataclass
class IntentionCheck(WireModel):
    allowed: bool = wire_field("Allowed", default=False)


class ConnectOperations:
    """Connect operations."""

    def __init__(self, client: ConsulClient) -> None:
        self._client = client

    async def ca_roots(
        self, options: Optional[QueryOptions] = None
    ) -> Tuple[CARootList, QueryMeta]:
        """Current trusted CA roots."""
        return await read(
            "/v1/connect/ca/roots", self._client.config, CARootList, options=options
        )

    async def ca_configuration(
        self, options: Optional[QueryOptions] = None
    ) -> Tuple[CAConfig, QueryMeta]:
        """Active CA provider configuration (requires operator read)."""
        return await read(
            "/v1/connect/ca/configuration",
            self._client.config,
            CAConfig,
            options=options,
        )

    async def leaf_cert(
        self, service: str, options: Optional[QueryOptions] = None
    ) -> Tuple[LeafCert, QueryMeta]:
        """Leaf certificate for ``service``, issued through the local agent."""
        segment = path_segment(service, "service")
        return await read(
            f"/v1/agent/connect/ca/leaf/{segment}",
            self._client.config,
            LeafCert,
            options=options,
        )

    async def intention_check(
        self,
        source: str,
        destination: str,
        options: Optional[QueryOptions] = None,
    ) -> Tuple[IntentionCheck, QueryMeta]:
        """
        Whether ``source`` may connect to ``destination``.

        Raises:
            MissingParameterError: If either service name is empty
        """
        if not source:
            raise MissingParameterError("source")
        if not destination:
            raise MissingParameterError("destination")
        return await read(
            "/v1/connect/intentions/check",
            self._client.config,
            IntentionCheck,
            params=[("source", source), ("destination", destination)],
            options=options,
        )
