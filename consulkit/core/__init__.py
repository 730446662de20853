"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

Core components for consulkit.

This module contains the core primitives:
- Query/write options and response metadata
- The wire codec for control-plane entities
- The request dispatcher (``consulkit.core.request``)
"""

from consulkit.core.options import (
    ConsistencyMode,
    QueryMeta,
    QueryOptions,
    WriteMeta,
    WriteOptions,
)
from consulkit.core.wire import WireModel, wire_field

__all__ = [
    "ConsistencyMode",
    "QueryMeta",
    "QueryOptions",
    "WriteMeta",
    "WriteOptions",
    "WireModel",
    "wire_field",
]
