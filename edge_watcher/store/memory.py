"""InMemoryStoreClient — dict-backed StoreClient.

Holds hashes as ``{record_key: {field_name: value}}`` and records every
published message.  Failures can be injected per operation, and reads can
be scripted so a test drives the watcher through an exact sequence of
observed values::

    store = InMemoryStoreClient()
    store.script_reads(["stand-by", None, "parked"])   # None → absent
    store.fail_on.add("set_field")
"""

from __future__ import annotations

from collections import deque
from typing import Iterable

from edge_watcher.exceptions import StoreConnectionError, StoreError
from edge_watcher.store.base import StoreClient

READ_ERROR = object()
"""Marker usable in ``script_reads`` to make that read raise StoreError."""


class InMemoryStoreClient(StoreClient):
    """Single-process store with failure injection."""

    def __init__(self, hashes: dict[str, dict[str, str]] | None = None) -> None:
        self.hashes: dict[str, dict[str, str]] = {
            key: dict(fields) for key, fields in (hashes or {}).items()
        }
        self.published: list[tuple[str, str]] = []
        self.fail_on: set[str] = set()
        self.calls: list[str] = []
        self.closed = False
        self._scripted: deque[object] = deque()

    def script_reads(self, values: Iterable[object]) -> None:
        """Queue values returned by successive ``get_field`` calls.

        ``None`` means absent and ``READ_ERROR`` raises StoreError.  Once the
        script is exhausted, reads fall back to the stored hashes.  While
        ``"get_field"`` is in ``fail_on``, reads fail without consuming it.
        """
        self._scripted.extend(values)

    # ---------------------------------------------------------------------------
    # StoreClient
    # ---------------------------------------------------------------------------

    async def get_field(self, record_key: str, field_name: str) -> str | None:
        self.calls.append("get_field")
        self._maybe_fail("get_field", f"{record_key}.{field_name}")
        if self._scripted:
            value = self._scripted.popleft()
            if value is READ_ERROR:
                raise StoreError("get_field", "scripted read error", key=f"{record_key}.{field_name}")
            return value  # type: ignore[return-value]
        return self.hashes.get(record_key, {}).get(field_name)

    async def set_field(self, record_key: str, field_name: str, value: str) -> None:
        self.calls.append("set_field")
        self._maybe_fail("set_field", f"{record_key}.{field_name}")
        self.hashes.setdefault(record_key, {})[field_name] = value

    async def publish(self, topic: str, message: str) -> int:
        self.calls.append("publish")
        self._maybe_fail("publish", topic)
        self.published.append((topic, message))
        return 0

    async def ping(self) -> None:
        self.calls.append("ping")
        if "ping" in self.fail_on:
            raise StoreConnectionError(self.address, "injected failure")

    async def close(self) -> None:
        self.closed = True

    @property
    def address(self) -> str:
        return "memory"

    def _maybe_fail(self, operation: str, key: str) -> None:
        if operation in self.fail_on:
            raise StoreError(operation, "injected failure", key=key)
