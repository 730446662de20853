"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

Session operations.

Sessions tie KV locks to node health: when a session is invalidated its
locks are released (or its keys deleted, depending on ``behavior``).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Tuple

from consulkit.core.options import QueryMeta, QueryOptions, WriteMeta, WriteOptions
from consulkit.core.request import path_segment, read, write
from consulkit.core.wire import WireModel, wire_field
from consulkit.logging_config import get_logger

if TYPE_CHECKING:
    from consulkit.sdk.client import ConsulClient

logger = get_logger(__name__)


class SessionBehavior(str, Enum):
    """What happens to held locks when a session is invalidated."""

    RELEASE = "release"
    DELETE = "delete"


@dataclass
class SessionEntry(WireModel):
    """A session as stored by the servers. ``lock_delay`` is in nanoseconds."""

    id: str = wire_field("ID", default="")
    name: str = wire_field("Name", default="")
    node: str = wire_field("Node", default="")
    lock_delay: int = wire_field("LockDelay", default=0)
    behavior: str = wire_field("Behavior", default="")
    ttl: str = wire_field("TTL", default="")
    checks: List[str] = wire_field("Checks", default_factory=list)
    node_checks: List[str] = wire_field("NodeChecks", default_factory=list)
    create_index: int = wire_field("CreateIndex", default=0)
    modify_index: int = wire_field("ModifyIndex", default=0)


@dataclass
class SessionCreatePayload(WireModel):
    """
    Session parameters. Durations are server duration strings (``"15s"``).

    Every field is optional; an empty payload creates a session bound to the
    agent's node with the server defaults.
    """

    name: Optional[str] = wire_field("Name", default=None)
    node: Optional[str] = wire_field("Node", default=None)
    lock_delay: Optional[str] = wire_field("LockDelay", default=None)
    behavior: Optional[SessionBehavior] = wire_field("Behavior", default=None)
    ttl: Optional[str] = wire_field("TTL", default=None)
    checks: Optional[List[str]] = wire_field("Checks", default=None)
    node_checks: Optional[List[str]] = wire_field("NodeChecks", default=None)


@dataclass
class SessionCreateResponse(WireModel):
    id: str = wire_field("ID", default="")


class SessionOperations:
    """Session operations."""

    def __init__(self, client: ConsulClient) -> None:
        self._client = client

    async def create(
        self,
        payload: Optional[SessionCreatePayload] = None,
        options: Optional[WriteOptions] = None,
    ) -> Tuple[SessionCreateResponse, WriteMeta]:
        """Create a session and return its ID."""
        created, meta = await write(
            "/v1/session/create",
            self._client.config,
            result_type=SessionCreateResponse,
            body=payload or SessionCreatePayload(),
            options=options,
        )
        logger.info("session_created", session_id=created.id)
        return created, meta

    async def destroy(
        self, session_id: str, options: Optional[WriteOptions] = None
    ) -> Tuple[bool, WriteMeta]:
        """Invalidate a session, releasing its locks."""
        segment = path_segment(session_id, "session_id")
        destroyed, meta = await write(
            f"/v1/session/destroy/{segment}",
            self._client.config,
            result_type=bool,
            options=options,
        )
        logger.info("session_destroyed", session_id=session_id)
        return destroyed, meta

    async def info(
        self, session_id: str, options: Optional[QueryOptions] = None
    ) -> Tuple[List[SessionEntry], QueryMeta]:
        """A single session; an empty list when it does not exist."""
        segment = path_segment(session_id, "session_id")
        return await read(
            f"/v1/session/info/{segment}",
            self._client.config,
            List[SessionEntry],
            options=options,
        )

    async def node(
        self, node: str, options: Optional[QueryOptions] = None
    ) -> Tuple[List[SessionEntry], QueryMeta]:
        """Sessions belonging to ``node``."""
        segment = path_segment(node, "node")
        return await read(
            f"/v1/session/node/{segment}",
            self._client.config,
            List[SessionEntry],
            options=options,
        )

    async def list(
        self, options: Optional[QueryOptions] = None
    ) -> Tuple[List[SessionEntry], QueryMeta]:
        """Every active session in the datacenter."""
        return await read(
            "/v1/session/list",
            self._client.config,
            List[SessionEntry],
            options=options,
        )

    async def renew(
        self, session_id: str, options: Optional[WriteOptions] = None
    ) -> Tuple[List[SessionEntry], WriteMeta]:
        """Reset a session's TTL. Returns the renewed session."""
        segment = path_segment(session_id, "session_id")
        return await write(
            f"/v1/session/renew/{segment}",
            self._client.config,
            result_type=List[SessionEntry],
            options=options,
        )
