"""RedisStoreClient — StoreClient backed by ``redis.asyncio``.

Records are Redis hashes (``HGET`` / ``HSET``), topics are pub/sub channels
(``PUBLISH``).  Every ``RedisError``, socket-level ``OSError`` or undecodable
reply is translated into ``StoreError`` so the watcher never sees driver
exceptions.

The startup ``ping()`` is bounded as a whole by ``ping_timeout`` (the
configured connect timeout): a server that accepts the connection but never
answers is reported as unreachable instead of stalling startup.

Usage::

    store = RedisStoreClient.from_config(settings.redis)
    await store.ping()
    state = await store.get_field("vehicle", "state")
"""

from __future__ import annotations

import asyncio
from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from edge_watcher.exceptions import StoreConnectionError, StoreError
from edge_watcher.logging import get_logger
from edge_watcher.store.base import StoreClient

log = get_logger(__name__)

_DRIVER_ERRORS = (RedisError, OSError, UnicodeDecodeError)


class RedisStoreClient(StoreClient):
    """StoreClient implementation over a single ``redis.asyncio.Redis`` client."""

    def __init__(
        self,
        client: aioredis.Redis,
        address: str = "redis",
        ping_timeout: float | None = None,
    ) -> None:
        self._client = client
        self._address = address
        self._ping_timeout = ping_timeout
        self._closed = False

    @classmethod
    def from_config(cls, config: Any) -> "RedisStoreClient":
        """Build a client from a ``RedisConfig`` block.

        The connection is established lazily on the first command; call
        ``ping()`` to verify it.  Non-UTF-8 field values are decoded with
        replacement characters rather than failing the read.
        """
        client = aioredis.Redis(
            host=config.host,
            port=config.port,
            db=config.db,
            password=config.password,
            socket_connect_timeout=config.connect_timeout_seconds,
            socket_timeout=config.socket_timeout_seconds,
            decode_responses=True,
            encoding_errors="replace",
        )
        return cls(
            client,
            address=f"{config.host}:{config.port}",
            ping_timeout=config.connect_timeout_seconds,
        )

    @property
    def address(self) -> str:
        return self._address

    # ---------------------------------------------------------------------------
    # StoreClient
    # ---------------------------------------------------------------------------

    async def get_field(self, record_key: str, field_name: str) -> str | None:
        try:
            value = await self._client.hget(record_key, field_name)
        except _DRIVER_ERRORS as exc:
            raise StoreError("hget", str(exc), key=f"{record_key}.{field_name}") from exc
        if value is None:
            return None
        return str(value)

    async def set_field(self, record_key: str, field_name: str, value: str) -> None:
        try:
            await self._client.hset(record_key, field_name, value)
        except _DRIVER_ERRORS as exc:
            raise StoreError("hset", str(exc), key=f"{record_key}.{field_name}") from exc

    async def publish(self, topic: str, message: str) -> int:
        try:
            receivers = await self._client.publish(topic, message)
        except _DRIVER_ERRORS as exc:
            raise StoreError("publish", str(exc), key=topic) from exc
        return int(receivers)

    async def ping(self) -> None:
        try:
            ok = await asyncio.wait_for(self._client.ping(), timeout=self._ping_timeout)
        except asyncio.TimeoutError as exc:
            raise StoreConnectionError(
                self._address, f"PING timed out after {self._ping_timeout}s"
            ) from exc
        except _DRIVER_ERRORS as exc:
            raise StoreConnectionError(self._address, str(exc)) from exc
        if not ok:
            raise StoreConnectionError(self._address, "PING was not acknowledged")
        log.debug("redis_ping_ok", address=self._address)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._client.aclose()
        except (RedisError, OSError) as exc:
            log.warning("redis_close_failed", address=self._address, error=str(exc))
