"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

Query/write options and response metadata.

Pure data carriers. ``QueryOptions()`` and ``WriteOptions()`` mean "no
override, no blocking", exactly like passing no options at all. No field is
validated in isolation; nonsensical values are left to the server.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional


class ConsistencyMode(str, Enum):
    """Read consistency requested from the servers."""

    DEFAULT = "default"
    STALE = "stale"
    CONSISTENT = "consistent"


@dataclass(frozen=True)
class QueryOptions:
    """
    Per-call parameters for a read.

    Attributes:
        datacenter: Target datacenter, overrides the client default.
        consistency: Consistency mode. ``DEFAULT`` inherits the server's mode.
        wait_index: Block until the data changes past this index. ``0`` and
            ``None`` both mean "do not block".
        wait_hash: Block until the content hash differs (hash-based blocking).
        wait_time: Maximum time in seconds the server may hold the request.
        token: ACL token, overrides the client default.
        near: Sort results by round-trip time from this node (``_agent`` for
            the local agent).
        filter: Server-side filter expression.
        node_meta: Only return nodes carrying all of these metadata pairs.
        use_cache: Allow the agent to answer from its local cache.
        max_age: Upper bound in seconds on the age of a cached response.
    """

    datacenter: Optional[str] = None
    consistency: ConsistencyMode = ConsistencyMode.DEFAULT
    wait_index: Optional[int] = None
    wait_hash: Optional[str] = None
    wait_time: Optional[float] = None
    token: Optional[str] = None
    near: Optional[str] = None
    filter: Optional[str] = None
    node_meta: Dict[str, str] = field(default_factory=dict)
    use_cache: bool = False
    max_age: Optional[float] = None

    @property
    def is_blocking(self) -> bool:
        """Whether these options ask the server for a long poll."""
        return bool(self.wait_index) or bool(self.wait_hash)


@dataclass(frozen=True)
class WriteOptions:
    """Per-call parameters for a write."""

    datacenter: Optional[str] = None
    token: Optional[str] = None
    relay_factor: int = 0


@dataclass(frozen=True)
class QueryMeta:
    """
    Metadata returned alongside every read.

    ``last_index`` is the server's change counter. Pass it back as the next
    call's ``wait_index`` to block until newer data exists. It is ``None``
    only for agent-local endpoints the server never indexes.
    """

    last_index: Optional[int]
    request_time: float
    last_content_hash: Optional[str] = None
    last_contact: float = 0.0
    known_leader: bool = False
    address_translation_enabled: bool = False
    cache_hit: bool = False
    cache_age: Optional[float] = None


@dataclass(frozen=True)
class WriteMeta:
    """Metadata returned alongside every write."""

    request_time: float
