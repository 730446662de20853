"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

Consulkit SDK: public API surface.

Quick start::

    from consulkit.sdk import Config, ConsulClient
    async with ConsulClient(Config.from_env()) as client:
        nodes, meta = await client.catalog.list_datacenter_nodes()

Advanced::

    from consulkit.sdk import ConsulBuilder
    client = ConsulBuilder().set_address("consul:8500").set_token("t").build()
"""

from consulkit.adapters import BaseAdapter, HttpAdapter, MockAdapter
from consulkit.core.options import (
    ConsistencyMode,
    QueryMeta,
    QueryOptions,
    WriteMeta,
    WriteOptions,
)
from consulkit.sdk.agent import (
    AgentCheck,
    AgentMember,
    AgentOperations,
    AgentService,
    AgentServiceCheck,
    AgentServiceRegistration,
    ServiceWeights,
)
from consulkit.sdk.catalog import (
    CatalogDeregistrationPayload,
    CatalogNode,
    CatalogOperations,
    CatalogRegistrationPayload,
    CatalogService,
    Node,
)
from consulkit.sdk.client import Config, ConsulBuilder, ConsulClient
from consulkit.sdk.connect import (
    CAConfig,
    CARoot,
    CARootList,
    ConnectOperations,
    IntentionCheck,
    LeafCert,
)
from consulkit.sdk.health import HealthCheck, HealthOperations, HealthState, ServiceEntry
from consulkit.sdk.hooks import HookRegistry
from consulkit.sdk.kv import KVOperations, KVPair
from consulkit.sdk.session import (
    SessionBehavior,
    SessionCreatePayload,
    SessionCreateResponse,
    SessionEntry,
    SessionOperations,
)
from consulkit.sdk.watch import watch

__all__ = [
    # client
    "Config",
    "ConsulClient",
    "ConsulBuilder",
    # options and metadata
    "ConsistencyMode",
    "QueryMeta",
    "QueryOptions",
    "WriteMeta",
    "WriteOptions",
    # operations
    "AgentOperations",
    "CatalogOperations",
    "ConnectOperations",
    "HealthOperations",
    "KVOperations",
    "SessionOperations",
    "watch",
    # entities
    "AgentCheck",
    "AgentMember",
    "AgentService",
    "AgentServiceCheck",
    "AgentServiceRegistration",
    "CAConfig",
    "CARoot",
    "CARootList",
    "CatalogDeregistrationPayload",
    "CatalogNode",
    "CatalogRegistrationPayload",
    "CatalogService",
    "HealthCheck",
    "HealthState",
    "IntentionCheck",
    "KVPair",
    "LeafCert",
    "Node",
    "ServiceEntry",
    "ServiceWeights",
    "SessionBehavior",
    "SessionCreatePayload",
    "SessionCreateResponse",
    "SessionEntry",
    # infra
    "HookRegistry",
    "BaseAdapter",
    "HttpAdapter",
    "MockAdapter",
]
