"""WatcherDaemon — process lifecycle around a single TransitionWatcher.

Startup sequence::

    configure_logging()            (CLI)
        ↓
    WatcherDaemon.run()
        ↓
    install SIGINT / SIGTERM handlers → stop_event.set()
        ↓
    store.ping()                   StoreConnectionError → fatal, nothing watched
        ↓
    TransitionWatcher.run(stop_event)   returns at once if stopped during ping
        ↓
    remove handlers, store.close()

A graceful stop returns normally; the CLI maps that to exit status 0.
"""

from __future__ import annotations

import asyncio
import signal

from edge_watcher.config import Settings
from edge_watcher.exceptions import StoreConnectionError
from edge_watcher.logging import bind_watcher_context, clear_watcher_context, get_logger
from edge_watcher.store.base import StoreClient
from edge_watcher.store.redis_store import RedisStoreClient
from edge_watcher.watcher.transition import TransitionWatcher

log = get_logger(__name__)

_STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class WatcherDaemon:
    """Owns the store connection, the stop event and the watcher."""

    def __init__(self, settings: Settings, store: StoreClient | None = None) -> None:
        self._settings = settings
        self._store = store or RedisStoreClient.from_config(settings.redis)
        self._stop_event = asyncio.Event()
        self._watcher = TransitionWatcher.from_settings(settings, self._store)

    @property
    def watcher(self) -> TransitionWatcher:
        return self._watcher

    def request_stop(self) -> None:
        """Ask the watch loop to exit after the current cycle."""
        if not self._stop_event.is_set():
            log.info("termination_requested")
        self._stop_event.set()

    async def run(self) -> None:
        watch = self._settings.watch
        bind_watcher_context(f"{watch.record_key}.{watch.field_name}")
        log.info(
            "watcher_starting",
            store=self._store.address,
            record_key=watch.record_key,
            field_name=watch.field_name,
        )

        # Handlers go in first so a signal during the ping stops cleanly.
        installed = self._install_signal_handlers()
        try:
            try:
                await self._store.ping()
            except StoreConnectionError as exc:
                log.error("store_unreachable", store=self._store.address, error=exc.reason)
                raise
            log.info("store_connected", store=self._store.address)
            await self._watcher.run(self._stop_event)
        finally:
            self._remove_signal_handlers(installed)
            await self._store.close()
            clear_watcher_context()
        log.info("watcher_shutdown_complete")

    # ---------------------------------------------------------------------------
    # Signals
    # ---------------------------------------------------------------------------

    def _install_signal_handlers(self) -> list[signal.Signals]:
        loop = asyncio.get_running_loop()
        installed: list[signal.Signals] = []
        for sig in _STOP_SIGNALS:
            try:
                loop.add_signal_handler(sig, self.request_stop)
            except (NotImplementedError, RuntimeError):
                # Not supported on this platform or outside the main thread.
                log.debug("signal_handler_unavailable", signal=sig.name)
                continue
            installed.append(sig)
        return installed

    def _remove_signal_handlers(self, installed: list[signal.Signals]) -> None:
        loop = asyncio.get_running_loop()
        for sig in installed:
            loop.remove_signal_handler(sig)


def run_daemon(settings: Settings, store: StoreClient | None = None) -> None:
    """Blocking entry point: run the daemon until a termination signal arrives."""
    asyncio.run(WatcherDaemon(settings, store=store).run())
