"""Shared pytest fixtures for the edge-watcher test suite."""

from __future__ import annotations

import os
from typing import Callable, Iterable

import pytest

from edge_watcher.config import Settings
from edge_watcher.store.memory import InMemoryStoreClient
from edge_watcher.watcher.models import (
    EdgeDefinition,
    PublishAction,
    ReactionSpec,
    SetFieldAction,
)
from edge_watcher.watcher.transition import TransitionWatcher


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep EDGE_WATCHER_* variables from the developer's shell out of the tests."""
    for name in list(os.environ):
        if name.upper().startswith("EDGE_WATCHER_"):
            monkeypatch.delenv(name, raising=False)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        redis={"host": "127.0.0.1", "port": 6379},
        watch={"record_key": "vehicle", "field_name": "state", "poll_interval_seconds": 0.01},
        logging={"level": "debug", "format": "console"},
    )


# ---------------------------------------------------------------------------
# Watcher building blocks
# ---------------------------------------------------------------------------


@pytest.fixture
def edge() -> EdgeDefinition:
    return EdgeDefinition(from_value="stand-by", to_value="parked")


@pytest.fixture
def reactions() -> ReactionSpec:
    return ReactionSpec.of(
        [
            SetFieldAction("dashboard", "ready", "true"),
            PublishAction("dashboard", "ready"),
        ]
    )


@pytest.fixture
def store() -> InMemoryStoreClient:
    return InMemoryStoreClient()


@pytest.fixture
def make_watcher(
    store: InMemoryStoreClient,
    edge: EdgeDefinition,
    reactions: ReactionSpec,
) -> Callable[..., TransitionWatcher]:
    """Return a factory building a watcher over ``vehicle.state`` with scripted reads."""

    def _make(reads: Iterable[object] = (), poll_interval: float = 0.01) -> TransitionWatcher:
        store.script_reads(reads)
        return TransitionWatcher(
            store=store,
            record_key="vehicle",
            field_name="state",
            edge=edge,
            reactions=reactions,
            poll_interval=poll_interval,
        )

    return _make
