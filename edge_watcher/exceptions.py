"""edge-watcher — Exception hierarchy.

All exceptions raised by the watcher inherit from EdgeWatcherError so that
callers can catch the full family with a single except clause when needed.

Hierarchy:
    EdgeWatcherError
    ├── ConfigurationError
    └── StoreError
        └── StoreConnectionError
"""

from __future__ import annotations

from typing import Any


class EdgeWatcherError(Exception):
    """Base exception for all edge-watcher errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = context or {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context})"


class ConfigurationError(EdgeWatcherError):
    """The watcher configuration is inconsistent (e.g. an edge that can never fire)."""


# ---------------------------------------------------------------------------
# Store layer
# ---------------------------------------------------------------------------


class StoreError(EdgeWatcherError):
    """A key-value store operation failed.

    Raised by every StoreClient implementation for read, write and publish
    failures.  An absent field is *not* an error — ``get_field`` returns
    ``None`` for that case.
    """

    def __init__(
        self,
        operation: str,
        reason: str,
        key: str | None = None,
    ) -> None:
        target = f" on '{key}'" if key else ""
        super().__init__(
            f"Store operation '{operation}'{target} failed: {reason}",
            context={"operation": operation, "key": key, "reason": reason},
        )
        self.operation = operation
        self.key = key
        self.reason = reason


class StoreConnectionError(StoreError):
    """The store could not be reached.  Fatal when raised at startup."""

    def __init__(self, address: str, reason: str) -> None:
        EdgeWatcherError.__init__(
            self,
            f"Cannot connect to store at {address}: {reason}",
            context={"operation": "ping", "address": address, "reason": reason},
        )
        self.operation = "ping"
        self.key = None
        self.reason = reason
        self.address = address
