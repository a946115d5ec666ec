"""ReactionExecutor — performs the configured side effects when the edge fires.

Actions run sequentially in declared order.  Each one is attempted and
logged on its own: a failed field write does not stop the publish that
follows it.  There is no retry and no rollback.
"""

from __future__ import annotations

from edge_watcher.exceptions import StoreError
from edge_watcher.logging import get_logger
from edge_watcher.store.base import StoreClient
from edge_watcher.watcher.models import ActionOutcome, ReactionSpec

log = get_logger(__name__)


class ReactionExecutor:
    def __init__(self, store: StoreClient, reactions: ReactionSpec) -> None:
        self._store = store
        self._reactions = reactions

    @property
    def reactions(self) -> ReactionSpec:
        return self._reactions

    async def execute(self) -> list[ActionOutcome]:
        outcomes: list[ActionOutcome] = []
        for action in self._reactions:
            try:
                await action.apply(self._store)
            except StoreError as exc:
                log.error("reaction_failed", action=action.kind, error=str(exc), **action.describe())
                outcomes.append(ActionOutcome(action=action, ok=False, error=str(exc)))
                continue
            except Exception as exc:
                log.error(
                    "reaction_crashed",
                    action=action.kind,
                    error=f"{type(exc).__name__}: {exc}",
                    **action.describe(),
                )
                outcomes.append(ActionOutcome(action=action, ok=False, error=str(exc)))
                continue
            log.info("reaction_succeeded", action=action.kind, **action.describe())
            outcomes.append(ActionOutcome(action=action, ok=True))
        return outcomes
