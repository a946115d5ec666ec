"""edge-watcher — react once to a specific state transition in Redis.

A single TransitionWatcher samples one hash field at a fixed interval,
remembers the last value it read, and when it observes the configured edge
(e.g. ``stand-by`` → ``parked``) performs the reaction spec: a field write
and a pub/sub publish, each attempted and logged independently.

Layers (bottom to top):
    1. Store    — StoreClient interface, Redis and in-memory implementations
    2. Watcher  — edge model, reaction executor, poll-diff-react loop
    3. Daemon   — connectivity check, signal wiring, lifecycle
    4. CLI      — typer entry point
"""

__version__ = "0.1.0"
__license__ = "Apache-2.0"

from edge_watcher.watcher.models import EdgeDefinition, ReactionSpec
from edge_watcher.watcher.transition import TransitionWatcher

__all__ = [
    "__version__",
    "EdgeDefinition",
    "ReactionSpec",
    "TransitionWatcher",
]
