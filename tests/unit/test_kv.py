"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

Tests for key/value store operations.
"""

import base64

import pytest

from consulkit.adapters.base import TransportResponse
from consulkit.adapters.mock import json_response
from consulkit.core.options import QueryOptions
from consulkit.exceptions import DecodeError, EmptyKeyError, RequestFailedError
from consulkit.sdk.kv import KVPair


def _pair(key: str, value: bytes, index: int = 10) -> dict:
    return {
        "Key": key,
        "Value": base64.b64encode(value).decode("ascii"),
        "Flags": 0,
        "CreateIndex": index,
        "ModifyIndex": index,
        "LockIndex": 0,
    }


class TestKVPair:
    def test_decoded_value(self):
        pair = KVPair.from_wire(_pair("app/config", b'{"debug": true}'))
        assert pair.decoded_value == b'{"debug": true}'

    def test_missing_value_is_none(self):
        assert KVPair(key="app/").decoded_value is None

    def test_invalid_base64(self):
        with pytest.raises(DecodeError):
            KVPair(key="k", value="!!!").decoded_value


class TestKVRead:
    @pytest.mark.asyncio
    async def test_get(self, client, mock_adapter):
        mock_adapter.add("GET", "/v1/kv/app/config", json_response([_pair("app/config", b"v1")], index=31))
        pairs, meta = await client.kv.get("app/config")
        assert pairs[0].key == "app/config"
        assert pairs[0].decoded_value == b"v1"
        assert meta.last_index == 31

    @pytest.mark.asyncio
    async def test_get_strips_leading_slash(self, client, mock_adapter):
        mock_adapter.add("GET", "/v1/kv/app/config", json_response([], index=31))
        await client.kv.get("/app/config")
        assert mock_adapter.last_request.path == "/v1/kv/app/config"

    @pytest.mark.asyncio
    async def test_get_missing_key_is_404(self, client, mock_adapter):
        mock_adapter.add("GET", "/v1/kv/missing", TransportResponse(status_code=404, headers={"X-Consul-Index": "31"}))
        with pytest.raises(RequestFailedError) as exc_info:
            await client.kv.get("missing")
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_get_empty_key(self, client, mock_adapter):
        with pytest.raises(EmptyKeyError):
            await client.kv.get("")
        assert mock_adapter.sent_requests == []

    @pytest.mark.asyncio
    async def test_list_uses_recurse(self, client, mock_adapter):
        mock_adapter.add("GET", "/v1/kv/app/", json_response(
            [_pair("app/a", b"1"), _pair("app/b", b"2")], index=32,
        ))
        pairs, _ = await client.kv.list("app/", QueryOptions(wait_index=31))
        params = mock_adapter.last_request.params
        assert params[0] == ("recurse", "")
        assert ("index", "31") in params
        assert [p.decoded_value for p in pairs] == [b"1", b"2"]

    @pytest.mark.asyncio
    async def test_list_whole_store(self, client, mock_adapter):
        mock_adapter.add("GET", "/v1/kv/", json_response([], index=1))
        pairs, _ = await client.kv.list()
        assert pairs == []

    @pytest.mark.asyncio
    async def test_keys_with_separator(self, client, mock_adapter):
        mock_adapter.add("GET", "/v1/kv/app/", json_response(["app/a", "app/sub/"], index=33))
        names, _ = await client.kv.keys("app/", separator="/")
        assert names == ["app/a", "app/sub/"]
        assert mock_adapter.last_request.params == [("keys", ""), ("separator", "/")]


class TestKVWrite:
    @pytest.mark.asyncio
    async def test_put_sends_raw_body(self, client, mock_adapter):
        mock_adapter.add("PUT", "/v1/kv/app/config", json_response(True))
        applied, _ = await client.kv.put("app/config", b'{"debug": true}')
        request = mock_adapter.last_request
        assert applied is True
        assert request.content == b'{"debug": true}'
        assert request.params == []

    @pytest.mark.asyncio
    async def test_put_string_is_utf8(self, client, mock_adapter):
        mock_adapter.add("PUT", "/v1/kv/greeting", json_response(True))
        await client.kv.put("greeting", "héllo")
        assert mock_adapter.last_request.content == "héllo".encode("utf-8")

    @pytest.mark.asyncio
    async def test_put_cas_and_lock_params(self, client, mock_adapter):
        mock_adapter.add("PUT", "/v1/kv/lock", json_response(False))
        applied, _ = await client.kv.put("lock", b"me", flags=42, cas=0, acquire="sess-1")
        assert applied is False
        assert mock_adapter.last_request.params == [("flags", "42"), ("cas", "0"), ("acquire", "sess-1")]

    @pytest.mark.asyncio
    async def test_put_empty_key(self, client):
        with pytest.raises(EmptyKeyError):
            await client.kv.put("", b"v")

    @pytest.mark.asyncio
    async def test_delete_uses_delete_method(self, client, mock_adapter):
        mock_adapter.add("DELETE", "/v1/kv/app/config", json_response(True))
        deleted, _ = await client.kv.delete("app/config", cas=7)
        assert deleted is True
        assert mock_adapter.last_request.method == "DELETE"
        assert mock_adapter.last_request.params == [("cas", "7")]

    @pytest.mark.asyncio
    async def test_delete_recursive(self, client, mock_adapter):
        mock_adapter.add("DELETE", "/v1/kv/app/", json_response(True))
        await client.kv.delete("app/", recurse=True)
        assert mock_adapter.last_request.params == [("recurse", "")]

    @pytest.mark.asyncio
    async def test_delete_empty_key_requires_recurse(self, client, mock_adapter):
        with pytest.raises(EmptyKeyError):
            await client.kv.delete("")
        assert mock_adapter.sent_requests == []
