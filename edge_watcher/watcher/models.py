"""Transition watcher data models.

All watcher configuration is represented with frozen dataclasses so that it
cannot change once the watcher is constructed.

Key classes
-----------
EdgeDefinition  — the single transition (from_value → to_value) to react to
SetFieldAction  — reaction: write a field of a target record
PublishAction   — reaction: publish a message to a topic
ReactionSpec    — immutable ordered list of reaction actions
ActionOutcome   — per-action result of one reaction run
PollOutcome     — what one poll cycle observed
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Union

from edge_watcher.exceptions import ConfigurationError

if TYPE_CHECKING:
    from edge_watcher.store.base import StoreClient

UNKNOWN_LABEL = "<unknown>"
"""Log label for the observed value before the first successful sample."""


def describe_value(value: str | None) -> str:
    """Render an observed value for log output."""
    return UNKNOWN_LABEL if value is None else value


# ---------------------------------------------------------------------------
# Edge
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EdgeDefinition:
    """The specific transition that triggers reactions.

    The "no prior sample" state is ``None`` on the watcher side, so a string
    ``from_value`` can never match it and the first sample never fires.
    """

    from_value: str
    to_value: str

    def __post_init__(self) -> None:
        if not self.from_value or not self.to_value:
            raise ConfigurationError(
                "Edge values must be non-empty strings",
                context={"from_value": self.from_value, "to_value": self.to_value},
            )
        if self.from_value == self.to_value:
            raise ConfigurationError(
                f"Edge '{self.from_value}' -> '{self.to_value}' can never be observed as a change",
                context={"from_value": self.from_value, "to_value": self.to_value},
            )

    def matches(self, previous: str | None, current: str) -> bool:
        return previous == self.from_value and current == self.to_value

    def __str__(self) -> str:
        return f"{self.from_value} -> {self.to_value}"


# ---------------------------------------------------------------------------
# Reactions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SetFieldAction:
    """Write ``value`` into ``field_name`` of the hash at ``record_key``."""

    record_key: str
    field_name: str
    value: str

    kind = "set_field"

    async def apply(self, store: StoreClient) -> None:
        await store.set_field(self.record_key, self.field_name, self.value)

    def describe(self) -> dict[str, str]:
        return {"record_key": self.record_key, "field_name": self.field_name, "value": self.value}


@dataclass(frozen=True)
class PublishAction:
    """Publish ``message`` on the pub/sub channel ``topic``."""

    topic: str
    message: str

    kind = "publish"

    async def apply(self, store: StoreClient) -> None:
        await store.publish(self.topic, self.message)

    def describe(self) -> dict[str, str]:
        return {"topic": self.topic, "message": self.message}


ReactionAction = Union[SetFieldAction, PublishAction]


@dataclass(frozen=True)
class ReactionSpec:
    """Ordered, immutable list of actions performed when the edge fires."""

    actions: tuple[ReactionAction, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, actions: Iterable[ReactionAction]) -> "ReactionSpec":
        return cls(actions=tuple(actions))

    def __iter__(self):
        return iter(self.actions)

    def __len__(self) -> int:
        return len(self.actions)


@dataclass(frozen=True)
class ActionOutcome:
    """Result of applying one reaction action."""

    action: ReactionAction
    ok: bool
    error: str | None = None


# ---------------------------------------------------------------------------
# Poll results
# ---------------------------------------------------------------------------


class PollOutcome(str, Enum):
    """What a single poll cycle observed."""

    ABSENT = "absent"
    READ_FAILED = "read_failed"
    UNCHANGED = "unchanged"
    CHANGED = "changed"
    EDGE_FIRED = "edge_fired"
