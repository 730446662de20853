"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

Tests for the request lifecycle hook registry.
"""

import pytest

from consulkit.adapters.base import TransportRequest, TransportResponse
from consulkit.sdk.hooks import HookRegistry


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def registry():
    return HookRegistry()


@pytest.fixture
def sample_request():
    return TransportRequest(
        method="GET",
        url="http://127.0.0.1:8500/v1/catalog/nodes",
        headers={"X-Consul-Token": "tok"},
    )


@pytest.fixture
def sample_response():
    return TransportResponse(status_code=200, content=b"[]", elapsed_ms=42.0)


# ---------------------------------------------------------------------------
# HookRegistry: registration & firing
# ---------------------------------------------------------------------------

class TestBeforeRequest:
    def test_no_callbacks_returns_request(self, registry, sample_request):
        assert registry.fire_before_request(sample_request) is sample_request

    def test_pipeline_order(self, registry, sample_request):
        def first(req):
            req.headers["X-Order"] = "1"
            return req

        def second(req):
            req.headers["X-Order"] += "2"
            return req

        registry.on_before_request(first)
        registry.on_before_request(second)
        result = registry.fire_before_request(sample_request)
        assert result.headers["X-Order"] == "12"

    def test_callback_may_replace_request(self, registry, sample_request):
        replacement = TransportRequest(method="GET", url="http://other:8500/v1/status/leader")
        registry.on_before_request(lambda req: replacement)
        assert registry.fire_before_request(sample_request) is replacement

    def test_failing_callback_is_skipped(self, registry, sample_request):
        def broken(req):
            raise RuntimeError("boom")

        registry.on_before_request(broken)
        assert registry.fire_before_request(sample_request) is sample_request


class TestAfterResponse:
    def test_receives_request_and_response(self, registry, sample_request, sample_response):
        seen = []
        registry.on_after_response(lambda req, resp: seen.append((req.path, resp.status_code)))
        registry.fire_after_response(sample_request, sample_response)
        assert seen == [("/v1/catalog/nodes", 200)]

    def test_failing_callback_does_not_stop_others(self, registry, sample_request, sample_response):
        seen = []

        def broken(req, resp):
            raise ValueError("boom")

        registry.on_after_response(broken)
        registry.on_after_response(lambda req, resp: seen.append("ok"))
        registry.fire_after_response(sample_request, sample_response)
        assert seen == ["ok"]


class TestOnError:
    def test_receives_error(self, registry, sample_request):
        errors = []
        registry.on_error(lambda req, exc: errors.append(exc))
        error = RuntimeError("transport down")
        registry.fire_error(sample_request, error)
        assert errors == [error]

    def test_failing_error_callback_is_swallowed(self, registry, sample_request):
        def broken(req, exc):
            raise RuntimeError("hook failed")

        registry.on_error(broken)
        registry.fire_error(sample_request, ValueError("original"))
