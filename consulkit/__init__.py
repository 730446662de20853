"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

consulkit - Async client for the Consul control-plane HTTP API

Covers the service catalog, health, KV store, sessions, agent membership and
service-mesh (connect) metadata, with first-class support for blocking queries.
The client lives in ``consulkit.sdk``.
"""

from consulkit._version import __version__

__all__ = ["__version__"]
