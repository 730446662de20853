"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

Blocking-query loop.

Turns any indexed read into an async stream of changes::

    async for nodes, meta in watch(client.catalog.list_datacenter_nodes):
        reconcile(nodes)

The first call returns immediately with the current data; every following
call blocks on the previous ``last_index``, or on ``last_content_hash`` for
endpoints that are hash-indexed (``agent.services``, ``agent.checks``).
"""

from __future__ import annotations

import dataclasses
from typing import Any, AsyncIterator, Awaitable, Callable, Optional, Tuple

from consulkit.core.options import QueryMeta, QueryOptions
from consulkit.exceptions import ValidationError
from consulkit.logging_config import get_logger

logger = get_logger(__name__)

Fetch = Callable[[QueryOptions], Awaitable[Tuple[Any, QueryMeta]]]


async def watch(
    fetch: Fetch,
    options: Optional[QueryOptions] = None,
    *,
    emit_unchanged: bool = False,
) -> AsyncIterator[Tuple[Any, QueryMeta]]:
    """
    Repeatedly call ``fetch``, blocking on the last seen index.

    Args:
        fetch: A read taking ``QueryOptions`` as its only argument, e.g.
            ``client.catalog.list_datacenter_nodes`` or
            ``lambda o: client.health.service("web", options=o)``
        options: Base options (datacenter, wait time, filters). Their
            ``wait_index`` is the starting baseline; leave it unset to get
            the current data first.
        emit_unchanged: Also yield results whose index did not move (the
            wait elapsed without a change)

    Yields:
        ``(value, QueryMeta)`` for each change.

    Raises:
        ValidationError: A response carries neither an index nor a content
            hash, so there is nothing to block on.

    Errors from ``fetch`` propagate and end the loop; retrying is left to the
    caller.
    """
    base = options or QueryOptions()
    wait_index = base.wait_index or 0
    wait_hash = base.wait_hash
    first = True

    while True:
        if wait_hash is not None and not wait_index:
            call_options = dataclasses.replace(base, wait_index=None, wait_hash=wait_hash)
        else:
            call_options = dataclasses.replace(base, wait_index=wait_index, wait_hash=None)
        value, meta = await fetch(call_options)

        if meta.last_index is None:
            # Agent-local endpoints block on a content hash instead of an index.
            if meta.last_content_hash is None:
                raise ValidationError(
                    "Response carries neither X-Consul-Index nor X-Consul-ContentHash; "
                    "the endpoint does not support blocking queries"
                )
            changed = first or meta.last_content_hash != wait_hash
            first = False
            wait_index = 0
            wait_hash = meta.last_content_hash
            if changed or emit_unchanged:
                yield value, meta
            continue

        # Never block on index 0; it would return immediately forever.
        index = max(meta.last_index, 1)

        if index < wait_index:
            # Index went backwards: the servers restarted or a snapshot was
            # restored. Start over from a non-blocking read.
            logger.info("watch_index_reset", previous_index=wait_index, index=index)
            wait_index = 0
            first = True
            continue

        changed = first or index > wait_index
        first = False
        wait_index = index
        wait_hash = None
        if changed or emit_unchanged:
            yield value, meta
