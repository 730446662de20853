#!/usr/bin/env python
"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

Demonstration of consulkit SDK client usage.

This script shows how to:
1. Build a client from the CONSUL_HTTP_* environment
2. Register a service with the local agent
3. Query the catalog and service health
4. Store and read a KV entry under a session lock
5. Clean up

Requirements:
- A Consul agent reachable at CONSUL_HTTP_ADDR (default http://127.0.0.1:8500)
"""

import asyncio

from consulkit.sdk import (
    AgentServiceCheck,
    AgentServiceRegistration,
    Config,
    ConsulClient,
    SessionCreatePayload,
)


async def main():
    """Run SDK client demonstration."""
    print("=" * 60)
    print("consulkit SDK Client Demonstration")
    print("=" * 60)

    async with ConsulClient(Config.from_env()) as client:
        # 1. Cluster overview
        print("\n1. Datacenters and members...")
        datacenters, _ = await client.catalog.list_datacenters()
        members, _ = await client.agent.members()
        print(f"   ✓ Datacenters: {', '.join(datacenters)}")
        print(f"   ✓ Members: {', '.join(m.name for m in members)}")

        # 2. Register a service
        print("\n2. Registering service 'demo-web'...")
        await client.agent.register_service(AgentServiceRegistration(
            name="demo-web",
            id="demo-web-1",
            port=8080,
            tags=["demo"],
            check=AgentServiceCheck(ttl="30s", status="passing"),
        ))
        print("   ✓ Service registered")

        # 3. Catalog and health
        print("\n3. Querying catalog and health...")
        instances, meta = await client.catalog.list_service_nodes("demo-web")
        print(f"   ✓ {len(instances)} instance(s) at index {meta.last_index}")
        entries, _ = await client.health.service("demo-web", passing_only=True)
        print(f"   ✓ {len(entries)} passing instance(s)")

        # 4. KV under a session lock
        print("\n4. Writing demo/leader under a session lock...")
        session, _ = await client.session.create(SessionCreatePayload(name="demo", ttl="30s"))
        acquired, _ = await client.kv.put("demo/leader", b"demo-web-1", acquire=session.id)
        pairs, _ = await client.kv.get("demo/leader")
        print(f"   ✓ Lock acquired: {acquired}, value: {pairs[0].decoded_value!r}")

        # 5. Clean up
        print("\n5. Cleaning up...")
        await client.kv.put("demo/leader", b"", release=session.id)
        await client.kv.delete("demo/", recurse=True)
        await client.session.destroy(session.id)
        await client.agent.deregister_service("demo-web-1")
        print("   ✓ Done")


if __name__ == "__main__":
    asyncio.run(main())
