"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

Transport Adapters.
"""

from consulkit.adapters.base import BaseAdapter, TransportRequest, TransportResponse
from consulkit.adapters.http import HttpAdapter
from consulkit.adapters.mock import MockAdapter, json_response

__all__ = [
    "BaseAdapter",
    "TransportRequest",
    "TransportResponse",
    "HttpAdapter",
    "MockAdapter",
    "json_response",
]
