"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

Key/value store operations.

Values travel raw on writes and base64-encoded inside ``KVPair`` on reads;
``KVPair.decoded_value`` gives back the original bytes.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple, Union
from urllib.parse import quote

from consulkit.core.options import QueryMeta, QueryOptions, WriteMeta, WriteOptions
from consulkit.core.request import read, write
from consulkit.core.wire import WireModel, wire_field
from consulkit.exceptions import DecodeError, EmptyKeyError
from consulkit.logging_config import get_logger

if TYPE_CHECKING:
    from consulkit.sdk.client import ConsulClient

logger = get_logger(__name__)


@dataclass
class KVPair(WireModel):
    """A stored key with its metadata. ``value`` is base64 as sent by the server."""

    key: str = wire_field("Key", default="")
    create_index: int = wire_field("CreateIndex", default=0)
    modify_index: int = wire_field("ModifyIndex", default=0)
    lock_index: int = wire_field("LockIndex", default=0)
    flags: int = wire_field("Flags", default=0)
    value: Optional[str] = wire_field("Value", default=None)
    session: str = wire_field("Session", default="")

    @property
    def decoded_value(self) -> Optional[bytes]:
        """The stored bytes, or ``None`` for a key without a value."""
        if self.value is None:
            return None
        try:
            return base64.b64decode(self.value, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecodeError(f"invalid base64 value for key {self.key!r}") from e


def _key_path(key: Optional[str], allow_empty: bool = False) -> str:
    key = (key or "").lstrip("/")
    if not key and not allow_empty:
        raise EmptyKeyError()
    return f"/v1/kv/{quote(key, safe='/')}"


class KVOperations:
    """
    Key/value store operations.

    Example:
        >>> ok, _ = await client.kv.put("app/config", b'{"debug": true}')
        >>> pairs, meta = await client.kv.get("app/config")
        >>> pairs[0].decoded_value
        b'{"debug": true}'
    """

    def __init__(self, client: ConsulClient) -> None:
        self._client = client

    async def get(
        self, key: str, options: Optional[QueryOptions] = None
    ) -> Tuple[List[KVPair], QueryMeta]:
        """
        Read a single key.

        A missing key is reported by the server as a 404 and surfaces as
        ``RequestFailedError`` with ``status_code == 404``.

        Raises:
            EmptyKeyError: If ``key`` is empty
        """
        return await read(
            _key_path(key), self._client.config, List[KVPair], options=options
        )

    async def list(
        self, prefix: str = "", options: Optional[QueryOptions] = None
    ) -> Tuple[List[KVPair], QueryMeta]:
        """Read every key under ``prefix`` (the whole store for ``""``)."""
        return await read(
            _key_path(prefix, allow_empty=True),
            self._client.config,
            List[KVPair],
            params=[("recurse", "")],
            options=options,
        )

    async def keys(
        self,
        prefix: str = "",
        separator: Optional[str] = None,
        options: Optional[QueryOptions] = None,
    ) -> Tuple[List[str], QueryMeta]:
        """Key names under ``prefix``, folded at ``separator`` when given."""
        params = [("keys", "")]
        if separator:
            params.append(("separator", separator))
        return await read(
            _key_path(prefix, allow_empty=True),
            self._client.config,
            List[str],
            params=params,
            options=options,
        )

    async def put(
        self,
        key: str,
        value: Union[bytes, str],
        flags: int = 0,
        cas: Optional[int] = None,
        acquire: Optional[str] = None,
        release: Optional[str] = None,
        options: Optional[WriteOptions] = None,
    ) -> Tuple[bool, WriteMeta]:
        """
        Store ``value`` under ``key``.

        Args:
            key: Key to write
            value: Raw value, sent as the request body
            flags: Opaque 64-bit value stored with the key
            cas: Only write if the key's modify index equals this (0 means
                only if the key does not exist)
            acquire: Session ID acquiring the key's lock
            release: Session ID releasing the key's lock

        Returns:
            ``True`` if the write was applied. ``False`` for a failed CAS or
            lock attempt.

        Raises:
            EmptyKeyError: If ``key`` is empty
        """
        path = _key_path(key)
        params = []
        if flags:
            params.append(("flags", str(flags)))
        if cas is not None:
            params.append(("cas", str(cas)))
        if acquire:
            params.append(("acquire", acquire))
        if release:
            params.append(("release", release))

        if isinstance(value, str):
            value = value.encode("utf-8")
        applied, meta = await write(
            path,
            self._client.config,
            result_type=bool,
            body=value,
            params=params,
            options=options,
        )
        logger.debug("kv_put", key=key, applied=applied)
        return applied, meta

    async def delete(
        self,
        key: str,
        recurse: bool = False,
        cas: Optional[int] = None,
        options: Optional[WriteOptions] = None,
    ) -> Tuple[bool, WriteMeta]:
        """
        Delete ``key``, or every key under it when ``recurse`` is set.

        Raises:
            EmptyKeyError: If ``key`` is empty and ``recurse`` is not set
        """
        path = _key_path(key, allow_empty=recurse)
        params = []
        if recurse:
            params.append(("recurse", ""))
        if cas is not None:
            params.append(("cas", str(cas)))
        deleted, meta = await write(
            path,
            self._client.config,
            result_type=bool,
            params=params,
            options=options,
            method="DELETE",
        )
        logger.debug("kv_delete", key=key, recurse=recurse, deleted=deleted)
        return deleted, meta
