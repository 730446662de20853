#!/usr/bin/env python
"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

Demo script for blocking queries.

Prints the healthy instances of a service every time they change, using
``watch`` to long-poll the health endpoint. Stop with Ctrl-C.

Usage:
    python watch_services_demo.py web
"""

import asyncio
import sys

from consulkit.logging_config import setup_logging
from consulkit.sdk import ConsulBuilder, QueryOptions, watch


async def watch_service(name: str):
    client = ConsulBuilder().set_wait_time(60).build()

    # Trace every request the client sends.
    client.hooks.on_after_response(
        lambda request, response: print(f"   .. {request.method} {request.path} -> {response.status_code}")
    )

    async with client:
        def fetch(options: QueryOptions):
            return client.health.service(name, passing_only=True, options=options)

        async for entries, meta in watch(fetch):
            print(f"\n{name} @ index {meta.last_index}:")
            for entry in entries:
                address = entry.service.address or entry.node.address
                print(f"   {entry.node.node:<20} {address}:{entry.service.port}")
            if not entries:
                print("   (no healthy instances)")


if __name__ == "__main__":
    setup_logging(level="WARNING", json_format=False)
    service_name = sys.argv[1] if len(sys.argv) > 1 else "consul"
    try:
        asyncio.run(watch_service(service_name))
    except KeyboardInterrupt:
        pass
