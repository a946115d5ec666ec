"""Transition watcher — poll, diff, react."""

from edge_watcher.watcher.models import (
    ActionOutcome,
    EdgeDefinition,
    PollOutcome,
    PublishAction,
    ReactionSpec,
    SetFieldAction,
)
from edge_watcher.watcher.reaction import ReactionExecutor
from edge_watcher.watcher.transition import TransitionWatcher

__all__ = [
    "ActionOutcome",
    "EdgeDefinition",
    "PollOutcome",
    "PublishAction",
    "ReactionExecutor",
    "ReactionSpec",
    "SetFieldAction",
    "TransitionWatcher",
]
