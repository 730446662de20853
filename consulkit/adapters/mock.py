"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

Mock transport adapter for local testing.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple, Union

from consulkit.adapters.base import BaseAdapter, TransportRequest, TransportResponse

MockedResult = Union[TransportResponse, Exception]


def json_response(
    body: Any,
    status_code: int = 200,
    index: Optional[int] = None,
    known_leader: bool = True,
    headers: Optional[Dict[str, str]] = None,
) -> TransportResponse:
    """Build a JSON response carrying the usual control-plane headers."""
    all_headers = {"Content-Type": "application/json"}
    if index is not None:
        all_headers["X-Consul-Index"] = str(index)
        all_headers["X-Consul-KnownLeader"] = "true" if known_leader else "false"
        all_headers["X-Consul-LastContact"] = "0"
    if headers:
        all_headers.update(headers)
    return TransportResponse(
        status_code=status_code,
        headers=all_headers,
        content=json.dumps(body).encode("utf-8"),
    )


class MockAdapter(BaseAdapter):
    """In-memory mock adapter for unit tests.

    Args:
        responses: Mapping from ``(method, path)`` tuples to a response, an
            exception to raise, or a list of those served in order (the last
            entry repeats once the list is exhausted).

    Example::

        adapter = MockAdapter({
            ("GET", "/v1/catalog/datacenters"): json_response(["dc1"], index=7),
        })
    """

    def __init__(
        self,
        responses: Optional[Dict[Tuple[str, str], Union[MockedResult, List[MockedResult]]]] = None,
    ) -> None:
        self._responses: Dict[Tuple[str, str], List[MockedResult]] = {}
        for key, value in (responses or {}).items():
            self.add(key[0], key[1], value)
        self._sent: List[TransportRequest] = []
        self._closed = False

    def add(
        self,
        method: str,
        path: str,
        result: Union[MockedResult, List[MockedResult]],
    ) -> None:
        """Register (or replace) the result for ``method path``."""
        queue = list(result) if isinstance(result, list) else [result]
        self._responses[(method.upper(), path)] = queue

    async def send(self, request: TransportRequest) -> TransportResponse:
        self._sent.append(request)
        key = (request.method.upper(), request.path)
        queue = self._responses.get(key)
        if not queue:
            return TransportResponse(
                status_code=404,
                headers={},
                content=b'{"error": "not mocked"}',
            )
        result = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(result, Exception):
            raise result
        return result

    async def close(self) -> None:
        self._closed = True

    @property
    def is_connected(self) -> bool:
        return not self._closed

    @property
    def sent_requests(self) -> List[TransportRequest]:
        """All requests that have been sent through this adapter."""
        return list(self._sent)

    @property
    def last_request(self) -> TransportRequest:
        """The most recent request sent through this adapter."""
        return self._sent[-1]
