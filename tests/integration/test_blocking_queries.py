"""
Integration tests for blocking queries over the real HTTP adapter.

A small in-process agent built on ``httpx.MockTransport`` holds a catalog
index and answers like the control plane: immediately for non-blocking
reads, with the next index once the data changes for blocking ones.
"""

import json
from typing import List

import httpx
import pytest

from consulkit.adapters.http import HttpAdapter
from consulkit.core.options import QueryOptions
from consulkit.exceptions import HttpError, RequestFailedError
from consulkit.sdk.catalog import CatalogRegistrationPayload
from consulkit.sdk.client import Config, ConsulClient
from consulkit.sdk.watch import watch

pytestmark = pytest.mark.integration


class FakeAgent:
    """Catalog-only agent state served through an httpx mock transport."""

    def __init__(self) -> None:
        self.index = 10
        self.nodes: List[dict] = [{"Node": "node-1", "Address": "10.0.0.1"}]
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.method == "PUT" and path == "/v1/catalog/register":
            payload = json.loads(request.content)
            self.nodes.append({"Node": payload["Node"], "Address": payload["Address"]})
            self.index += 1
            return httpx.Response(200, json=True)

        if request.method == "GET" and path == "/v1/catalog/nodes":
            return httpx.Response(
                200,
                json=self.nodes,
                headers={
                    "X-Consul-Index": str(self.index),
                    "X-Consul-KnownLeader": "true",
                    "X-Consul-LastContact": "0",
                },
            )

        return httpx.Response(404)


@pytest.fixture
def agent():
    return FakeAgent()


@pytest.fixture
def http_client(agent):
    adapter = HttpAdapter(transport=httpx.MockTransport(agent.handler))
    return ConsulClient(Config(address="http://consul.test:8500", token="tok", adapter=adapter))


class TestBlockingQueries:
    @pytest.mark.asyncio
    async def test_non_blocking_then_blocking_read(self, agent, http_client):
        async with http_client as client:
            nodes, meta = await client.catalog.list_datacenter_nodes()
            assert [n.node for n in nodes] == ["node-1"]
            assert meta.last_index == 10
            assert meta.known_leader is True

            await client.catalog.register(CatalogRegistrationPayload(node="node-2", address="10.0.0.2"))

            nodes, meta = await client.catalog.list_datacenter_nodes(
                QueryOptions(wait_index=meta.last_index, wait_time=1)
            )
            assert [n.node for n in nodes] == ["node-1", "node-2"]
            assert meta.last_index == 11

        first, _, blocking = agent.requests
        assert "index" not in first.url.params
        assert blocking.url.params["index"] == "10"
        assert blocking.url.params["wait"] == "1000ms"
        assert blocking.headers["X-Consul-Token"] == "tok"
        assert "token" not in blocking.url.params

    @pytest.mark.asyncio
    async def test_watch_sees_registration(self, agent, http_client):
        async with http_client as client:
            stream = watch(client.catalog.list_datacenter_nodes, QueryOptions(wait_time=1))
            nodes, meta = await stream.__anext__()
            assert meta.last_index == 10

            agent.nodes.append({"Node": "node-3", "Address": "10.0.0.3"})
            agent.index = 12
            nodes, meta = await stream.__anext__()
            await stream.aclose()

        assert meta.last_index == 12
        assert [n.node for n in nodes][-1] == "node-3"

    @pytest.mark.asyncio
    async def test_server_error_surfaces_status(self, http_client):
        async with http_client as client:
            with pytest.raises(RequestFailedError) as exc_info:
                await client.catalog.list_datacenter_services()
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_connection_failure_is_http_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        adapter = HttpAdapter(transport=httpx.MockTransport(refuse))
        async with ConsulClient(Config(adapter=adapter)) as client:
            with pytest.raises(HttpError):
                await client.catalog.list_datacenters()
