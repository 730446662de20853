"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

Tests for the request dispatcher.
"""

from typing import Any, List

import pytest

from consulkit.adapters.base import TransportResponse
from consulkit.adapters.mock import MockAdapter, json_response
from consulkit.core.options import ConsistencyMode, QueryOptions, WriteOptions
from consulkit.core.request import (
    DEFAULT_WAIT_TIME,
    build_headers,
    build_query_params,
    decode_body,
    format_duration,
    parse_index,
    parse_query_meta,
    path_segment,
    read,
    write,
)
from consulkit.exceptions import DecodeError, HttpError, MissingParameterError, RequestFailedError
from consulkit.sdk.catalog import Node
from consulkit.sdk.client import Config


def make_config(adapter=None, **kwargs) -> Config:
    return Config(address="http://127.0.0.1:8500", adapter=adapter or MockAdapter(), **kwargs)


class TestQueryParams:
    """Query string construction and precedence."""

    def test_no_options_no_params(self):
        assert build_query_params(make_config()) == []

    def test_caller_params_come_first(self):
        config = make_config(datacenter="dc1")
        params = build_query_params(config, [("recurse", "")], QueryOptions(near="_agent"))
        assert params == [("recurse", ""), ("dc", "dc1"), ("near", "_agent")]

    def test_datacenter_option_overrides_config(self):
        config = make_config(datacenter="dc1")
        params = build_query_params(config, options=QueryOptions(datacenter="dc2"))
        assert params == [("dc", "dc2")]

    def test_config_datacenter_used_without_override(self):
        config = make_config(datacenter="dc1")
        assert build_query_params(config, options=QueryOptions()) == [("dc", "dc1")]

    def test_consistency_flags(self):
        config = make_config()
        stale = build_query_params(config, options=QueryOptions(consistency=ConsistencyMode.STALE))
        consistent = build_query_params(
            config, options=QueryOptions(consistency=ConsistencyMode.CONSISTENT)
        )
        assert stale == [("stale", "")]
        assert consistent == [("consistent", "")]

    def test_zero_index_equals_no_index(self):
        config = make_config()
        assert build_query_params(config, options=QueryOptions(wait_index=0)) == \
            build_query_params(config, options=QueryOptions())

    def test_blocking_index_uses_default_wait(self):
        params = build_query_params(make_config(), options=QueryOptions(wait_index=42))
        assert params == [("index", "42"), ("wait", format_duration(DEFAULT_WAIT_TIME))]
        assert format_duration(DEFAULT_WAIT_TIME) == "300000ms"

    def test_blocking_wait_from_config_then_options(self):
        config = make_config(wait_time=30)
        assert ("wait", "30000ms") in build_query_params(config, options=QueryOptions(wait_index=1))
        assert ("wait", "5000ms") in build_query_params(
            config, options=QueryOptions(wait_index=1, wait_time=5)
        )

    def test_wait_without_index_is_not_sent(self):
        params = build_query_params(make_config(), options=QueryOptions(wait_time=5))
        assert params == []

    def test_hash_blocking(self):
        params = build_query_params(make_config(), options=QueryOptions(wait_hash="abc123"))
        assert params[0] == ("hash", "abc123")
        assert params[1][0] == "wait"

    def test_filter_node_meta_and_cache(self):
        options = QueryOptions(
            filter='Service == "web"',
            node_meta={"rack": "r1"},
            use_cache=True,
        )
        params = build_query_params(make_config(), options=options)
        assert params == [
            ("filter", 'Service == "web"'),
            ("node-meta", "rack:r1"),
            ("cached", ""),
        ]

    def test_write_relay_factor(self):
        config = make_config()
        assert build_query_params(config, options=WriteOptions(relay_factor=3)) == [("relay-factor", "3")]
        assert build_query_params(config, options=WriteOptions()) == []


class TestHeaders:
    """Token handling."""

    def test_no_token_no_header(self):
        assert build_headers(make_config()) == {}

    def test_config_token(self):
        assert build_headers(make_config(token="t1")) == {"X-Consul-Token": "t1"}

    def test_option_token_overrides_config(self):
        headers = build_headers(make_config(token="t1"), QueryOptions(token="t2"))
        assert headers == {"X-Consul-Token": "t2"}

    def test_token_never_in_query(self):
        params = build_query_params(make_config(token="t1"), options=QueryOptions(token="t2"))
        assert all(key != "token" for key, _ in params)

    def test_max_age_header(self):
        headers = build_headers(make_config(), QueryOptions(use_cache=True, max_age=30))
        assert headers["Cache-Control"] == "max-age=30"


class TestQueryMetaParsing:
    """Blocking-query metadata from response headers."""

    def test_full_headers(self):
        meta = parse_query_meta(
            {
                "X-Consul-Index": "123",
                "X-Consul-KnownLeader": "true",
                "X-Consul-LastContact": "250",
                "X-Consul-ContentHash": "deadbeef",
                "X-Cache": "HIT",
                "Age": "12",
            },
            request_time=0.5,
        )
        assert meta.last_index == 123
        assert meta.known_leader is True
        assert meta.last_contact == 0.25
        assert meta.last_content_hash == "deadbeef"
        assert meta.cache_hit is True
        assert meta.cache_age == 12.0
        assert meta.request_time == 0.5

    def test_header_names_are_case_insensitive(self):
        meta = parse_query_meta({"x-consul-index": "9", "x-consul-knownleader": "false"}, 0.0)
        assert meta.last_index == 9
        assert meta.known_leader is False

    def test_missing_index_is_decode_error(self):
        with pytest.raises(DecodeError):
            parse_query_meta({}, 0.0)

    def test_missing_index_allowed_for_unindexed_reads(self):
        assert parse_query_meta({}, 0.0, require_index=False).last_index is None

    @pytest.mark.parametrize("raw", ["abc", "-1", str(2 ** 64), ""])
    def test_invalid_index_is_decode_error(self, raw):
        with pytest.raises(DecodeError):
            parse_index(raw)

    def test_max_index(self):
        assert parse_index(str(2 ** 64 - 1)) == 2 ** 64 - 1


class TestBodyDecoding:
    def test_none_result_type_discards_body(self):
        assert decode_body(None, b"garbage") is None

    def test_empty_body_is_zero_value(self):
        assert decode_body(List[Node], b"") == []

    def test_invalid_json(self):
        with pytest.raises(DecodeError):
            decode_body(List[str], b"{not json")


class TestPathSegment:
    def test_quotes_segment(self):
        assert path_segment("web api", "service") == "web%20api"
        assert path_segment("a/b", "service") == "a%2Fb"

    def test_empty_segment(self):
        with pytest.raises(MissingParameterError):
            path_segment("", "node")


class TestRead:
    """End-to-end reads through the mock adapter."""

    @pytest.mark.asyncio
    async def test_read_decodes_value_and_meta(self):
        adapter = MockAdapter({
            ("GET", "/v1/catalog/datacenters"): json_response(["dc1", "dc2"], index=10),
        })
        value, meta = await read("/v1/catalog/datacenters", make_config(adapter), List[str])

        assert value == ["dc1", "dc2"]
        assert meta.last_index == 10
        assert meta.known_leader is True
        assert meta.request_time >= 0

    @pytest.mark.asyncio
    async def test_read_builds_url_from_address(self):
        adapter = MockAdapter({("GET", "/v1/catalog/nodes"): json_response([], index=1)})
        config = Config(address="http://consul:8500/", adapter=adapter)
        await read("/v1/catalog/nodes", config, List[Node])
        assert adapter.last_request.url == "http://consul:8500/v1/catalog/nodes"

    @pytest.mark.asyncio
    async def test_non_2xx_raises_without_decoding(self):
        adapter = MockAdapter({
            ("GET", "/v1/catalog/nodes"): TransportResponse(status_code=500, content=b"not json"),
        })
        with pytest.raises(RequestFailedError) as exc_info:
            await read("/v1/catalog/nodes", make_config(adapter), List[Node])
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_non_2xx_with_json_body_is_not_decoded(self, monkeypatch):
        decoded = []
        monkeypatch.setattr(
            "consulkit.core.request.decode_body",
            lambda result_type, content: decoded.append(content),
        )
        adapter = MockAdapter({
            ("GET", "/v1/catalog/nodes"): json_response({"Node": "x"}, status_code=500, index=1),
            ("PUT", "/v1/catalog/register"): json_response({"Node": "x"}, status_code=500),
        })
        config = make_config(adapter)

        # A dict body would be a DecodeError for List[Node]; the status wins.
        with pytest.raises(RequestFailedError) as exc_info:
            await read("/v1/catalog/nodes", config, List[Node])
        assert exc_info.value.status_code == 500

        with pytest.raises(RequestFailedError) as exc_info:
            await write("/v1/catalog/register", config, List[Node], body={"Node": "x"})
        assert exc_info.value.status_code == 500
        assert decoded == []

    @pytest.mark.asyncio
    async def test_missing_index_header_is_decode_error(self):
        adapter = MockAdapter({("GET", "/v1/catalog/nodes"): json_response([])})
        with pytest.raises(DecodeError):
            await read("/v1/catalog/nodes", make_config(adapter), List[Node])

    @pytest.mark.asyncio
    async def test_body_type_mismatch_is_decode_error(self):
        adapter = MockAdapter({("GET", "/v1/catalog/nodes"): json_response({"a": 1}, index=1)})
        with pytest.raises(DecodeError):
            await read("/v1/catalog/nodes", make_config(adapter), List[Node])

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self):
        adapter = MockAdapter({("GET", "/v1/catalog/nodes"): HttpError("connection refused")})
        with pytest.raises(HttpError):
            await read("/v1/catalog/nodes", make_config(adapter), List[Node])

    @pytest.mark.asyncio
    async def test_blocking_read_timeout_exceeds_wait(self):
        adapter = MockAdapter({("GET", "/v1/catalog/nodes"): json_response([], index=43)})
        config = make_config(adapter, timeout=10)
        await read("/v1/catalog/nodes", config, List[Node], options=QueryOptions(wait_index=42, wait_time=60))

        request = adapter.last_request
        assert request.param("index") == "42"
        assert request.param("wait") == "60000ms"
        assert request.timeout == pytest.approx(10 + 60 + 60 / 16)
        assert request.timeout > 60

    @pytest.mark.asyncio
    async def test_non_blocking_read_has_no_request_timeout(self):
        adapter = MockAdapter({("GET", "/v1/catalog/nodes"): json_response([], index=1)})
        await read("/v1/catalog/nodes", make_config(adapter), List[Node], options=QueryOptions(wait_index=0))
        assert adapter.last_request.timeout is None
        assert adapter.last_request.param("index") is None


class TestWrite:
    """End-to-end writes through the mock adapter."""

    @pytest.mark.asyncio
    async def test_write_sends_json_body(self):
        adapter = MockAdapter({("PUT", "/v1/catalog/register"): json_response(True)})
        value, meta = await write(
            "/v1/catalog/register", make_config(adapter), body={"Node": "n1"}
        )

        assert value is None
        assert meta.request_time >= 0
        request = adapter.last_request
        assert request.method == "PUT"
        assert request.content == b'{"Node": "n1"}'
        assert request.headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_write_raw_body_and_result(self):
        adapter = MockAdapter({("PUT", "/v1/kv/a"): json_response(True)})
        value, _ = await write("/v1/kv/a", make_config(adapter), result_type=bool, body=b"\x00\x01")
        assert value is True
        assert adapter.last_request.content == b"\x00\x01"

    @pytest.mark.asyncio
    async def test_write_method_override(self):
        adapter = MockAdapter({("DELETE", "/v1/kv/a"): json_response(True)})
        await write("/v1/kv/a", make_config(adapter), method="delete")
        assert adapter.last_request.method == "DELETE"

    @pytest.mark.asyncio
    async def test_write_rejected_payload(self):
        adapter = MockAdapter({
            ("PUT", "/v1/catalog/register"): TransportResponse(status_code=400, content=b"Missing node"),
        })
        with pytest.raises(RequestFailedError) as exc_info:
            await write("/v1/catalog/register", make_config(adapter), body={})
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_write_token_and_datacenter(self):
        adapter = MockAdapter({("PUT", "/v1/session/create"): json_response({"ID": "s1"})})
        config = make_config(adapter, token="t1", datacenter="dc1")
        await write("/v1/session/create", config, options=WriteOptions(datacenter="dc2", token="t2"))

        request = adapter.last_request
        assert request.headers["X-Consul-Token"] == "t2"
        assert request.param("dc") == "dc2"


class TestHooks:
    """Lifecycle hooks fire around the dispatch."""

    @pytest.mark.asyncio
    async def test_hooks_fire_in_order(self):
        adapter = MockAdapter({("GET", "/v1/catalog/datacenters"): json_response(["dc1"], index=1)})
        config = make_config(adapter)
        events: List[Any] = []

        def before(request):
            events.append("before")
            request.headers["X-Trace"] = "abc"
            return request

        config.hooks.on_before_request(before)
        config.hooks.on_after_response(lambda req, resp: events.append(("after", resp.status_code)))

        await read("/v1/catalog/datacenters", config, List[str])

        assert events == ["before", ("after", 200)]
        assert adapter.last_request.headers["X-Trace"] == "abc"

    @pytest.mark.asyncio
    async def test_error_hook_sees_status_failure(self):
        adapter = MockAdapter({("GET", "/v1/catalog/nodes"): TransportResponse(status_code=403)})
        config = make_config(adapter)
        errors: List[Exception] = []
        config.hooks.on_error(lambda req, exc: errors.append(exc))

        with pytest.raises(RequestFailedError):
            await read("/v1/catalog/nodes", config, List[Node])

        assert len(errors) == 1
        assert isinstance(errors[0], RequestFailedError)

    @pytest.mark.asyncio
    async def test_error_hook_sees_decode_failure(self):
        adapter = MockAdapter({("GET", "/v1/catalog/nodes"): json_response([])})
        config = make_config(adapter)
        errors: List[Exception] = []
        config.hooks.on_error(lambda req, exc: errors.append(exc))

        with pytest.raises(DecodeError):
            await read("/v1/catalog/nodes", config, List[Node])
        assert isinstance(errors[0], DecodeError)
