"""Store clients — the watcher's only view of the shared key-value store."""

from edge_watcher.store.base import StoreClient
from edge_watcher.store.memory import InMemoryStoreClient
from edge_watcher.store.redis_store import RedisStoreClient

__all__ = ["StoreClient", "InMemoryStoreClient", "RedisStoreClient"]
