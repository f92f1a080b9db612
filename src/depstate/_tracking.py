"""Pass tracking and re-invocation scheduling.

Uses contextvars to track which component is currently executing a pass,
so hooks can find their per-instance storage without it being passed in.

Scheduling: a re-invocation requested while a pass or a batch is open is
deferred into a pending set and flushed once the outermost scope exits.
A component sits in the pending set at most once, so several requests made
before the flush collapse into a single pass.
"""

from __future__ import annotations

import contextvars
import logging
from typing import TYPE_CHECKING

from depstate.errors import RerenderLimitError

if TYPE_CHECKING:
    from depstate.component import Component

logger = logging.getLogger("depstate.tracking")

# Upper bound on flush rounds before a re-invocation loop is reported.
MAX_RERENDERS = 100

# The component whose pass is currently executing.
current_component: contextvars.ContextVar[Component | None] = contextvars.ContextVar(
    "current_component", default=None
)

# Depth of open scopes (passes and batches). When > 0, re-invocations are deferred.
_depth: int = 0

# Components that requested a re-invocation while deferred, awaiting flush.
_pending: dict[int, Component] = {}


def begin_batch() -> None:
    """Enter a deferring scope. Nested scopes are supported."""
    global _depth
    _depth += 1


def end_batch() -> None:
    """Exit a deferring scope. When the outermost scope exits, flush pending passes."""
    global _depth
    _depth -= 1
    if _depth == 0:
        _flush_pending()


def schedule(component: Component) -> None:
    """Request a re-invocation of component.

    Inside a pass or batch, defers. Otherwise, runs the pass immediately.
    """
    if _depth > 0:
        _pending[component._id] = component
        logger.debug("Deferred re-invocation of component %d", component._id)
    else:
        component._run()


def _flush_pending() -> None:
    """Run all pending passes. Handles passes scheduled during the flush."""
    global _depth
    # Passes run during the flush must not start a nested flush of their own.
    _depth += 1
    try:
        _drain()
    finally:
        _depth -= 1


def _drain() -> None:
    """Run rounds until nothing is pending.

    A pass that raises does not stop the others: every scheduled component
    still re-runs, then the first failure is re-raised. Later failures are
    logged.
    """
    rounds = 0
    failure: Exception | None = None
    while _pending:
        rounds += 1
        if rounds > MAX_RERENDERS:
            stuck = sorted(_pending)
            _pending.clear()
            logger.error("Re-invocation loop detected for components %s", stuck)
            raise RerenderLimitError(
                f"Components {stuck} kept requesting re-invocation after "
                f"{MAX_RERENDERS} rounds"
            )
        # Snapshot and clear: passes may schedule new ones while running.
        batch = list(_pending.values())
        _pending.clear()
        logger.debug("Flush round %d: %d component(s)", rounds, len(batch))
        for component in batch:
            try:
                component._run()
            except Exception as exc:
                if failure is None:
                    failure = exc
                else:
                    logger.exception("Pass of component %d failed during flush", component._id)
    if failure is not None:
        raise failure


def get_pending_count() -> int:
    """Number of components waiting to re-run. Useful for testing."""
    return len(_pending)
