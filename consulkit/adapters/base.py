"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

Transport adapter base class and data structures.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlsplit


@dataclass
class TransportRequest:
    """Outbound HTTP request, fully built by the dispatcher."""
    method: str
    url: str
    params: List[Tuple[str, str]] = field(default_factory=list)
    headers: Dict[str, str] = field(default_factory=dict)
    content: Optional[bytes] = None
    timeout: Optional[float] = None

    @property
    def path(self) -> str:
        """URL path without scheme, host or query string."""
        return urlsplit(self.url).path

    def param(self, name: str) -> Optional[str]:
        """First value of query parameter ``name``, or ``None``."""
        for key, value in self.params:
            if key == name:
                return value
        return None


@dataclass
class TransportResponse:
    """Inbound HTTP response, body left undecoded."""
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    content: bytes = b""
    elapsed_ms: float = 0.0


class BaseAdapter(ABC):
    """Abstract base for all transport adapters."""

    @abstractmethod
    async def send(self, request: TransportRequest) -> TransportResponse:
        """Send a request and return the response.

        Raises:
            HttpError: On any transport-level failure.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release adapter resources."""
        ...

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Whether the adapter is in a usable state."""
        ...
