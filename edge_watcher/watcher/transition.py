"""TransitionWatcher — turns a periodically sampled field into edge events.

Each tick the watcher reads one hash field through the StoreClient,
compares it with the last successfully read value and, when the configured
edge (``from_value`` → ``to_value``) is observed, runs the reaction spec.

Loop contract
-------------
- ``run(stop_event)`` waits on "stop_event set" or "next tick due",
  whichever comes first.  When both are ready, stopping wins.
- Ticks follow a fixed-rate schedule.  A cycle that overruns one or more
  deadlines delays the next cycle; missed ticks are dropped, not replayed.
- Poll cycles never overlap and are never interrupted once started.
- No error raised inside a cycle leaves the loop.  A hang inside the
  StoreClient hangs the loop; the watcher adds no per-call timeout.

Observed value
--------------
``None`` until the first successful read.  The first sample is always
logged as a transition from ``<unknown>``; it can never fire the edge
because ``None`` never equals ``from_value``.
"""

from __future__ import annotations

import asyncio
from typing import Any

from edge_watcher.exceptions import StoreError
from edge_watcher.logging import get_logger
from edge_watcher.store.base import StoreClient
from edge_watcher.watcher.models import (
    EdgeDefinition,
    PollOutcome,
    ReactionSpec,
    describe_value,
)
from edge_watcher.watcher.reaction import ReactionExecutor

log = get_logger(__name__)


class TransitionWatcher:
    """Single logical watcher over one record field."""

    def __init__(
        self,
        store: StoreClient,
        record_key: str,
        field_name: str,
        edge: EdgeDefinition,
        reactions: ReactionSpec,
        poll_interval: float = 0.5,
    ) -> None:
        if poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {poll_interval}")
        self._store = store
        self._record_key = record_key
        self._field_name = field_name
        self._edge = edge
        self._executor = ReactionExecutor(store, reactions)
        self._interval = float(poll_interval)

        self._observed: str | None = None
        self._fire_count = 0
        self._task: asyncio.Task[None] | None = None
        self._stop_event = asyncio.Event()

    @classmethod
    def from_settings(cls, settings: Any, store: StoreClient) -> "TransitionWatcher":
        """Build a watcher from a loaded ``Settings`` instance."""
        return cls(
            store=store,
            record_key=settings.watch.record_key,
            field_name=settings.watch.field_name,
            edge=settings.edge_definition(),
            reactions=settings.reaction_spec(),
            poll_interval=settings.watch.poll_interval_seconds,
        )

    # ---------------------------------------------------------------------------
    # Introspection
    # ---------------------------------------------------------------------------

    @property
    def observed(self) -> str | None:
        """Last successfully read value, or None before the first sample."""
        return self._observed

    @property
    def fire_count(self) -> int:
        return self._fire_count

    @property
    def edge(self) -> EdgeDefinition:
        return self._edge

    @property
    def poll_interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    # ---------------------------------------------------------------------------
    # Background task API
    # ---------------------------------------------------------------------------

    async def start(self) -> None:
        """Run the watch loop as a background task."""
        if self.is_running:
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(
            self.run(self._stop_event), name=f"watcher_{self._record_key}.{self._field_name}"
        )

    async def stop(self) -> None:
        """Request the loop to stop and wait until the current cycle finishes."""
        self._stop_event.set()
        if self._task is not None:
            await self._task
        self._task = None

    # ---------------------------------------------------------------------------
    # Loop
    # ---------------------------------------------------------------------------

    async def run(self, stop_event: asyncio.Event) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time() + self._interval
        log.info(
            "watcher_started",
            record_key=self._record_key,
            field_name=self._field_name,
            edge=str(self._edge),
            interval_seconds=self._interval,
        )

        while not stop_event.is_set():
            delay = max(0.0, next_tick - loop.time())
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=delay)
                break  # stop_event was set
            except asyncio.TimeoutError:
                pass  # tick due
            if stop_event.is_set():
                break

            try:
                await self.poll_cycle()
            except Exception as exc:
                log.error("poll_cycle_crashed", error=f"{type(exc).__name__}: {exc}")

            next_tick += self._interval
            now = loop.time()
            if now > next_tick:
                # Keep the latest missed deadline so exactly one cycle runs immediately.
                skipped = int((now - next_tick) // self._interval)
                next_tick += skipped * self._interval
                if skipped:
                    log.debug("ticks_dropped", count=skipped)

        log.info("watcher_stopping", observed=describe_value(self._observed))

    async def poll_cycle(self) -> PollOutcome:
        """Sample the field once and react if the edge occurred."""
        try:
            current = await self._store.get_field(self._record_key, self._field_name)
        except StoreError as exc:
            log.error(
                "observed_field_read_failed",
                record_key=self._record_key,
                field_name=self._field_name,
                error=str(exc),
            )
            return PollOutcome.READ_FAILED

        if current is None:
            log.info(
                "observed_field_not_found",
                record_key=self._record_key,
                field_name=self._field_name,
            )
            return PollOutcome.ABSENT

        previous = self._observed
        if current == previous:
            return PollOutcome.UNCHANGED

        log.info("state_transition", previous=describe_value(previous), current=current)

        fired = self._edge.matches(previous, current)
        if fired:
            log.info(
                "edge_detected",
                from_value=self._edge.from_value,
                to_value=self._edge.to_value,
                reactions=len(self._executor.reactions),
            )
            self._fire_count += 1
            await self._executor.execute()

        self._observed = current
        return PollOutcome.EDGE_FIRED if fired else PollOutcome.CHANGED
