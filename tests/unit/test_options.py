"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

Tests for query/write options and response metadata.
"""

import dataclasses

import pytest

from consulkit.core.options import ConsistencyMode, QueryMeta, QueryOptions, WriteOptions


class TestQueryOptions:
    def test_defaults_mean_no_override(self):
        options = QueryOptions()
        assert options.datacenter is None
        assert options.consistency is ConsistencyMode.DEFAULT
        assert options.wait_index is None
        assert options.token is None
        assert options.node_meta == {}
        assert not options.is_blocking

    def test_zero_index_is_not_blocking(self):
        assert not QueryOptions(wait_index=0).is_blocking

    def test_index_or_hash_is_blocking(self):
        assert QueryOptions(wait_index=42).is_blocking
        assert QueryOptions(wait_hash="abc").is_blocking

    def test_options_are_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            QueryOptions().wait_index = 5


class TestWriteOptions:
    def test_defaults(self):
        options = WriteOptions()
        assert options.datacenter is None
        assert options.token is None
        assert options.relay_factor == 0


class TestQueryMeta:
    def test_defaults(self):
        meta = QueryMeta(last_index=7, request_time=0.01)
        assert meta.last_index == 7
        assert meta.known_leader is False
        assert meta.last_content_hash is None
        assert meta.cache_hit is False
