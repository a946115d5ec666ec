"""Unit tests — store/redis_store.py (redis client mocked)."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from edge_watcher.config import RedisConfig
from edge_watcher.exceptions import StoreConnectionError, StoreError
from edge_watcher.store.redis_store import RedisStoreClient


def _client() -> tuple[RedisStoreClient, AsyncMock]:
    redis_client = AsyncMock()
    return RedisStoreClient(redis_client, address="10.0.0.1:6379"), redis_client


@pytest.mark.unit
class TestFromConfig:
    def test_builds_client_from_config(self) -> None:
        config = RedisConfig(host="10.0.0.1", port=6380, db=2, password="pw", connect_timeout_seconds=2.5)
        with patch("edge_watcher.store.redis_store.aioredis.Redis") as mock_redis:
            store = RedisStoreClient.from_config(config)

        kwargs = mock_redis.call_args.kwargs
        assert kwargs["host"] == "10.0.0.1"
        assert kwargs["port"] == 6380
        assert kwargs["db"] == 2
        assert kwargs["password"] == "pw"
        assert kwargs["socket_connect_timeout"] == 2.5
        assert kwargs["decode_responses"] is True
        assert kwargs["encoding_errors"] == "replace"
        assert store.address == "10.0.0.1:6380"

    async def test_ping_bounded_by_connect_timeout(self) -> None:
        config = RedisConfig(host="10.0.0.1", connect_timeout_seconds=0.05)
        with patch("edge_watcher.store.redis_store.aioredis.Redis") as mock_redis:
            store = RedisStoreClient.from_config(config)

        async def never_answers() -> bool:
            await asyncio.Event().wait()
            return True

        mock_redis.return_value.ping = never_answers
        with pytest.raises(StoreConnectionError, match="timed out"):
            await asyncio.wait_for(store.ping(), timeout=2.0)


@pytest.mark.unit
class TestGetField:
    async def test_returns_value(self) -> None:
        store, redis_client = _client()
        redis_client.hget.return_value = "parked"
        assert await store.get_field("vehicle", "state") == "parked"
        redis_client.hget.assert_awaited_once_with("vehicle", "state")

    async def test_missing_field_returns_none(self) -> None:
        store, redis_client = _client()
        redis_client.hget.return_value = None
        assert await store.get_field("vehicle", "state") is None

    async def test_undecodable_value_is_store_error(self) -> None:
        store, redis_client = _client()
        redis_client.hget.side_effect = UnicodeDecodeError("utf-8", b"\xff\xfe", 0, 1, "invalid start byte")
        with pytest.raises(StoreError) as exc_info:
            await store.get_field("vehicle", "state")
        assert exc_info.value.operation == "hget"

    async def test_redis_error_translated(self) -> None:
        store, redis_client = _client()
        redis_client.hget.side_effect = RedisTimeoutError("Timeout reading from socket")
        with pytest.raises(StoreError) as exc_info:
            await store.get_field("vehicle", "state")
        assert exc_info.value.operation == "hget"
        assert exc_info.value.key == "vehicle.state"
        assert not isinstance(exc_info.value, StoreConnectionError)


@pytest.mark.unit
class TestWrites:
    async def test_set_field(self) -> None:
        store, redis_client = _client()
        await store.set_field("dashboard", "ready", "true")
        redis_client.hset.assert_awaited_once_with("dashboard", "ready", "true")

    async def test_set_field_error(self) -> None:
        store, redis_client = _client()
        redis_client.hset.side_effect = RedisConnectionError("refused")
        with pytest.raises(StoreError, match="hset"):
            await store.set_field("dashboard", "ready", "true")

    async def test_publish_returns_receivers(self) -> None:
        store, redis_client = _client()
        redis_client.publish.return_value = 3
        assert await store.publish("dashboard", "ready") == 3
        redis_client.publish.assert_awaited_once_with("dashboard", "ready")

    async def test_publish_os_error(self) -> None:
        store, redis_client = _client()
        redis_client.publish.side_effect = OSError("network unreachable")
        with pytest.raises(StoreError) as exc_info:
            await store.publish("dashboard", "ready")
        assert exc_info.value.key == "dashboard"


@pytest.mark.unit
class TestPingAndClose:
    async def test_ping_ok(self) -> None:
        store, redis_client = _client()
        redis_client.ping.return_value = True
        await store.ping()

    async def test_ping_failure_is_connection_error(self) -> None:
        store, redis_client = _client()
        redis_client.ping.side_effect = RedisConnectionError("Connection refused")
        with pytest.raises(StoreConnectionError) as exc_info:
            await store.ping()
        assert exc_info.value.address == "10.0.0.1:6379"
        assert "Connection refused" in exc_info.value.message

    async def test_ping_that_never_answers_times_out(self) -> None:
        redis_client = AsyncMock()

        async def never_answers() -> bool:
            await asyncio.Event().wait()
            return True

        redis_client.ping = never_answers
        store = RedisStoreClient(redis_client, address="10.0.0.1:6379", ping_timeout=0.05)

        with pytest.raises(StoreConnectionError) as exc_info:
            await asyncio.wait_for(store.ping(), timeout=2.0)
        assert "PING timed out" in exc_info.value.message
        assert exc_info.value.address == "10.0.0.1:6379"

    async def test_ping_not_acknowledged(self) -> None:
        store, redis_client = _client()
        redis_client.ping.return_value = False
        with pytest.raises(StoreConnectionError, match="not acknowledged"):
            await store.ping()

    async def test_close_is_idempotent(self) -> None:
        store, redis_client = _client()
        await store.close()
        await store.close()
        redis_client.aclose.assert_awaited_once()

    async def test_close_error_is_logged_not_raised(self) -> None:
        store, redis_client = _client()
        redis_client.aclose = AsyncMock(side_effect=RedisConnectionError("gone"))
        await store.close()


@pytest.mark.unit
def test_store_error_message_names_operation() -> None:
    exc = StoreError("hget", "boom", key="vehicle.state")
    assert str(exc) == "Store operation 'hget' on 'vehicle.state' failed: boom"
    assert exc.context["operation"] == "hget"
