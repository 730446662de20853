"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

HTTP transport adapter (default).
"""

from __future__ import annotations

import time
from typing import Any, Dict, Optional

import httpx

from consulkit.exceptions import HttpError
from consulkit.logging_config import get_logger
from consulkit.adapters.base import BaseAdapter, TransportRequest, TransportResponse

logger = get_logger(__name__)


class HttpAdapter(BaseAdapter):
    """Default HTTP transport using ``httpx.AsyncClient``.

    One ``AsyncClient`` (and so one connection pool) is shared by every
    request sent through the adapter.

    Args:
        timeout: Default request timeout in seconds. Blocking queries carry
            their own, longer timeout on the request.
        verify: TLS verification flag or CA bundle path.
        transport: Optional ``httpx`` transport (e.g. ``httpx.MockTransport``).
    """

    def __init__(
        self,
        timeout: float = 10.0,
        verify: Any = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._timeout = timeout
        self._verify = verify
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                verify=self._verify,
                transport=self._transport,
            )
        return self._client

    async def send(self, request: TransportRequest) -> TransportResponse:
        client = self._ensure_client()
        kwargs: Dict[str, Any] = {}
        if request.timeout is not None:
            kwargs["timeout"] = request.timeout

        start = time.monotonic()
        try:
            resp = await client.request(
                method=request.method,
                url=request.url,
                params=request.params,
                headers=request.headers,
                content=request.content,
                **kwargs,
            )
        except httpx.HTTPError as e:
            raise HttpError(f"{request.method} {request.path} failed: {e}") from e
        elapsed = (time.monotonic() - start) * 1000

        return TransportResponse(
            status_code=resp.status_code,
            headers=dict(resp.headers.items()),
            content=resp.content,
            elapsed_ms=round(elapsed, 2),
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.debug("HTTP adapter closed")

    @property
    def is_connected(self) -> bool:
        return self._client is not None and not self._client.is_closed
