"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

Request dispatcher for the control-plane HTTP API.

Every resource operation goes through :func:`read` or :func:`write`. They turn
options into query parameters and headers, send the request over the
configured adapter, reject non-2xx responses, and decode the body together
with the blocking-query metadata carried in the response headers.

Blocking queries: when a read carries a non-zero ``wait_index`` (or a
``wait_hash``), the ``index``/``hash`` and ``wait`` parameters are sent and
the server holds the request until the data changes or the wait elapses. The
returned ``QueryMeta.last_index`` is the value to pass back on the next call.

Nothing here retries, caches or swallows errors.
"""

from __future__ import annotations

import json
import time
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import quote

from consulkit.adapters.base import TransportRequest, TransportResponse
from consulkit.core.options import ConsistencyMode, QueryMeta, QueryOptions, WriteMeta, WriteOptions
from consulkit.core.wire import WireModel, decode, encode, zero_value
from consulkit.exceptions import DecodeError, MissingParameterError, RequestFailedError
from consulkit.logging_config import get_logger, log_consul_request

if TYPE_CHECKING:
    from consulkit.sdk.client import Config

logger = get_logger(__name__)

Params = List[Tuple[str, str]]

# Wait applied when a caller blocks on an index without choosing a duration.
DEFAULT_WAIT_TIME = 300.0
# Servers add up to wait/16 of jitter to a blocking query.
WAIT_JITTER_DIVISOR = 16

TOKEN_HEADER = "X-Consul-Token"
INDEX_HEADER = "X-Consul-Index"
KNOWN_LEADER_HEADER = "X-Consul-KnownLeader"
LAST_CONTACT_HEADER = "X-Consul-LastContact"
CONTENT_HASH_HEADER = "X-Consul-ContentHash"
TRANSLATE_ADDRESSES_HEADER = "X-Consul-Translate-Addresses"
CACHE_HEADER = "X-Cache"
AGE_HEADER = "Age"

_MAX_INDEX = 2 ** 64 - 1
_NoneType = type(None)


def format_duration(seconds: float) -> str:
    """Format seconds as a duration string the server understands."""
    return f"{int(round(seconds * 1000))}ms"


def path_segment(value: Optional[str], name: str) -> str:
    """
    Percent-encode a caller-supplied path segment.

    Raises:
        MissingParameterError: If the value is empty, before any I/O
    """
    if not value:
        raise MissingParameterError(name)
    return quote(value, safe=":@")


def effective_wait_time(config: Config, options: Optional[QueryOptions]) -> float:
    """Wait duration for a blocking read: options, then client default, then 5 minutes."""
    if options is not None and options.wait_time is not None:
        return options.wait_time
    if config.wait_time is not None:
        return config.wait_time
    return DEFAULT_WAIT_TIME


def build_query_params(
    config: Config,
    params: Optional[Sequence[Tuple[str, str]]] = None,
    options: Union[QueryOptions, WriteOptions, None] = None,
) -> Params:
    """
    Build the ordered query string for a request.

    Order: caller-supplied params, then datacenter (per-call override wins
    over the client default), then read or write options.
    """
    query: Params = list(params or [])

    datacenter = options.datacenter if options is not None and options.datacenter else config.datacenter
    if datacenter:
        query.append(("dc", datacenter))

    if isinstance(options, QueryOptions):
        if options.consistency is ConsistencyMode.STALE:
            query.append(("stale", ""))
        elif options.consistency is ConsistencyMode.CONSISTENT:
            query.append(("consistent", ""))

        # A zero index is the "no baseline" sentinel: never send it.
        if options.wait_index:
            query.append(("index", str(options.wait_index)))
            query.append(("wait", format_duration(effective_wait_time(config, options))))
        elif options.wait_hash:
            query.append(("hash", options.wait_hash))
            query.append(("wait", format_duration(effective_wait_time(config, options))))

        if options.near:
            query.append(("near", options.near))
        if options.filter:
            query.append(("filter", options.filter))
        for key, value in options.node_meta.items():
            query.append(("node-meta", f"{key}:{value}"))
        if options.use_cache:
            query.append(("cached", ""))

    elif isinstance(options, WriteOptions):
        if options.relay_factor:
            query.append(("relay-factor", str(options.relay_factor)))

    return query


def build_headers(
    config: Config,
    options: Union[QueryOptions, WriteOptions, None] = None,
) -> Dict[str, str]:
    """Build request headers. The token only ever travels as a header."""
    headers: Dict[str, str] = {}
    token = options.token if options is not None and options.token else config.token
    if token:
        headers[TOKEN_HEADER] = token
    if isinstance(options, QueryOptions) and options.use_cache and options.max_age is not None:
        headers["Cache-Control"] = f"max-age={int(options.max_age)}"
    return headers


def encode_body(body: Any) -> Tuple[Optional[bytes], Optional[str]]:
    """Serialize a write payload; returns ``(content, content_type)``."""
    if body is None:
        return None, None
    if isinstance(body, bytes):
        return body, "application/octet-stream"
    if isinstance(body, str):
        return body.encode("utf-8"), "text/plain; charset=utf-8"
    if isinstance(body, (WireModel, dict, list)):
        return json.dumps(encode(body)).encode("utf-8"), "application/json"
    raise TypeError(f"cannot encode request body of type {type(body).__name__}")


def _lower_keys(headers: Mapping[str, str]) -> Dict[str, str]:
    return {key.lower(): value for key, value in headers.items()}


def parse_index(value: Optional[str]) -> int:
    """
    Parse the change-index header as an unsigned 64-bit integer.

    Raises:
        DecodeError: If the header is missing or not a valid u64
    """
    if value is None:
        raise DecodeError(f"missing {INDEX_HEADER} header")
    try:
        index = int(value.strip())
    except ValueError as e:
        raise DecodeError(f"invalid {INDEX_HEADER} header {value!r}") from e
    if index < 0 or index > _MAX_INDEX:
        raise DecodeError(f"{INDEX_HEADER} header out of range: {value!r}")
    return index


def parse_query_meta(
    headers: Mapping[str, str],
    request_time: float,
    require_index: bool = True,
) -> QueryMeta:
    """
    Decode blocking-query metadata from response headers.

    Args:
        headers: Response headers (any casing)
        request_time: Round-trip duration in seconds
        require_index: If True a missing index header is a decode failure;
            otherwise ``last_index`` is ``None``

    Raises:
        DecodeError: If a required or present header cannot be parsed
    """
    lowered = _lower_keys(headers)

    raw_index = lowered.get(INDEX_HEADER.lower())
    if raw_index is None and not require_index:
        last_index: Optional[int] = None
    else:
        last_index = parse_index(raw_index)

    last_contact = 0.0
    raw_contact = lowered.get(LAST_CONTACT_HEADER.lower())
    if raw_contact:
        try:
            last_contact = int(raw_contact) / 1000.0
        except ValueError as e:
            raise DecodeError(f"invalid {LAST_CONTACT_HEADER} header {raw_contact!r}") from e

    cache_age: Optional[float] = None
    raw_age = lowered.get(AGE_HEADER.lower())
    if raw_age:
        try:
            cache_age = float(int(raw_age))
        except ValueError as e:
            raise DecodeError(f"invalid {AGE_HEADER} header {raw_age!r}") from e

    return QueryMeta(
        last_index=last_index,
        request_time=request_time,
        last_content_hash=lowered.get(CONTENT_HASH_HEADER.lower()) or None,
        last_contact=last_contact,
        known_leader=lowered.get(KNOWN_LEADER_HEADER.lower(), "").strip().lower() == "true",
        address_translation_enabled=(
            lowered.get(TRANSLATE_ADDRESSES_HEADER.lower(), "").strip().lower() == "true"
        ),
        cache_hit=lowered.get(CACHE_HEADER.lower(), "").strip().upper() == "HIT",
        cache_age=cache_age,
    )


def decode_body(result_type: Any, content: bytes) -> Any:
    """
    Decode a response body into ``result_type``.

    ``None`` as result type discards the body. An empty body decodes to the
    zero value of the type (e.g. an empty list).
    """
    if result_type is None or result_type is _NoneType:
        return None
    if not content or not content.strip():
        return zero_value(result_type)
    try:
        data = json.loads(content)
    except ValueError as e:
        raise DecodeError(f"failed to decode response body: {e}") from e
    return decode(result_type, data)


async def _dispatch(
    method: str,
    path: str,
    config: Config,
    params: Params,
    headers: Dict[str, str],
    content: Optional[bytes] = None,
    timeout: Optional[float] = None,
) -> Tuple[TransportRequest, TransportResponse, float]:
    request = TransportRequest(
        method=method,
        url=f"{config.address.rstrip('/')}{path}",
        params=params,
        headers=headers,
        content=content,
        timeout=timeout,
    )
    request = config.hooks.fire_before_request(request)

    start = time.monotonic()
    try:
        response = await config.adapter.send(request)
    except Exception as exc:
        config.hooks.fire_error(request, exc)
        raise
    elapsed = time.monotonic() - start

    config.hooks.fire_after_response(request, response)
    log_consul_request(
        logger,
        method=method,
        path=path,
        status_code=response.status_code,
        duration_ms=round(elapsed * 1000, 2),
        blocking=timeout is not None,
    )

    if not 200 <= response.status_code < 300:
        error = RequestFailedError(response.status_code)
        config.hooks.fire_error(request, error)
        raise error

    return request, response, elapsed


async def read(
    path: str,
    config: Config,
    result_type: Any = Any,
    params: Optional[Sequence[Tuple[str, str]]] = None,
    options: Optional[QueryOptions] = None,
    *,
    require_index: bool = True,
) -> Tuple[Any, QueryMeta]:
    """
    Issue a GET and decode ``(value, QueryMeta)``.

    Args:
        path: API path, e.g. ``/v1/catalog/nodes``
        config: Client configuration (address, defaults, adapter)
        result_type: Type the body decodes into
        params: Fixed query parameters supplied by the resource operation
        options: Per-call query options
        require_index: Whether a missing index header is a decode failure

    Raises:
        HttpError: Transport failure
        RequestFailedError: Non-2xx status
        DecodeError: Missing/invalid index header or undecodable body
    """
    query = build_query_params(config, params, options)
    headers = build_headers(config, options)

    timeout: Optional[float] = None
    if options is not None and options.is_blocking:
        wait = effective_wait_time(config, options)
        timeout = config.timeout + wait + wait / WAIT_JITTER_DIVISOR

    request, response, elapsed = await _dispatch(
        "GET", path, config, query, headers, timeout=timeout
    )
    try:
        meta = parse_query_meta(response.headers, elapsed, require_index=require_index)
        value = decode_body(result_type, response.content)
    except DecodeError as exc:
        config.hooks.fire_error(request, exc)
        raise
    return value, meta


async def write(
    path: str,
    config: Config,
    result_type: Any = None,
    body: Any = None,
    params: Optional[Sequence[Tuple[str, str]]] = None,
    options: Optional[WriteOptions] = None,
    *,
    method: str = "PUT",
) -> Tuple[Any, WriteMeta]:
    """
    Issue a write (PUT by default) and decode ``(value, WriteMeta)``.

    Args:
        path: API path, e.g. ``/v1/catalog/register``
        config: Client configuration
        result_type: Type the body decodes into; ``None`` discards it
        body: ``WireModel``/dict/list sent as JSON, bytes/str sent raw,
            ``None`` for an empty body
        params: Fixed query parameters supplied by the resource operation
        options: Per-call write options
        method: HTTP method (``PUT``, ``POST`` or ``DELETE``)

    Raises:
        HttpError: Transport failure
        RequestFailedError: Non-2xx status
        DecodeError: Undecodable body
    """
    query = build_query_params(config, params, options)
    headers = build_headers(config, options)
    content, content_type = encode_body(body)
    if content_type:
        headers["Content-Type"] = content_type

    request, response, elapsed = await _dispatch(
        method.upper(), path, config, query, headers, content=content
    )
    try:
        value = decode_body(result_type, response.content)
    except DecodeError as exc:
        config.hooks.fire_error(request, exc)
        raise
    return value, WriteMeta(request_time=elapsed)
