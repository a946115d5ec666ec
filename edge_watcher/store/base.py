"""StoreClient — abstract interface to the shared key-value / pub-sub store.

The watcher only ever talks to the store through this interface, so the
backend can be swapped without touching the watch loop:
  - RedisStoreClient    → Redis hashes + pub/sub (production)
  - InMemoryStoreClient → dict-backed, scriptable (tests, local runs)

Result conventions
------------------
- ``get_field`` returns the value, or ``None`` when the record or field is
  absent.  Absent is a normal outcome, not an error.
- Every other failure raises ``StoreError``.
- ``ping`` raises ``StoreConnectionError`` when the store is unreachable.

Implementations impose their own timeouts; callers add none.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class StoreClient(ABC):
    """Abstract store client.  Instances are shared and externally synchronized."""

    @abstractmethod
    async def get_field(self, record_key: str, field_name: str) -> str | None:
        """Return ``field_name`` of the record at ``record_key``, or None if absent."""

    @abstractmethod
    async def set_field(self, record_key: str, field_name: str, value: str) -> None:
        """Write ``value`` into ``field_name`` of the record at ``record_key``."""

    @abstractmethod
    async def publish(self, topic: str, message: str) -> int:
        """Publish ``message`` on ``topic`` and return the number of receivers."""

    @abstractmethod
    async def ping(self) -> None:
        """Verify connectivity.  Raise StoreConnectionError on failure."""

    async def close(self) -> None:
        """Release the underlying connection.  Safe to call more than once."""

    @property
    def address(self) -> str:
        """Human-readable location of the store, used in log records."""
        return self.__class__.__name__
