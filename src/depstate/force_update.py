"""Force update: a re-invocation signal backed by a monotonically increasing counter.

Each signal() bumps the counter by one and asks the scheduler to re-run the
owning component. The component never re-runs inside the call itself.

Thread safety: call set_scheduler() once from the main thread. After that,
any signal() from a background thread is auto-marshaled. Main-thread
signals remain synchronous.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

from depstate import _anchor
from depstate._tracking import schedule
from depstate.component import Component, require_component

logger = logging.getLogger("depstate.force_update")

# ─── Auto-marshal ────────────────────────────────────────────────────────────
_scheduler = None
_scheduler_thread = None


def set_scheduler(scheduler) -> None:
    """Set the global thread scheduler for cross-thread signals, sets and dispatches.

    Call once from the main/UI thread:
        depstate.set_scheduler(app.call_from_thread)

    After this, any signal(), StateCell.set() or dispatch() from a background
    thread is automatically marshaled. Main-thread calls remain synchronous.
    """
    global _scheduler, _scheduler_thread
    _scheduler = scheduler
    _scheduler_thread = threading.current_thread()


def run_on_scheduler(fn: Callable[[], None]) -> None:
    """Call fn now on the scheduler thread, or marshal it there from any other thread."""
    if _scheduler is not None and threading.current_thread() != _scheduler_thread:
        _scheduler(fn)
    else:
        fn()


class ForceUpdate:
    """Callable re-invocation signal. Calling it is the same as signal()."""

    __slots__ = ("_id", "_owner")

    def __init__(self, owner: Component | None = None) -> None:
        self._id = _anchor.new_id()
        self._owner = owner
        _anchor.counters[self._id] = 0

    @property
    def count(self) -> int:
        """How many times signal() has taken effect so far."""
        return _anchor.counters.get(self._id, 0)

    def signal(self) -> None:
        """Bump the counter and request a re-invocation. Auto-marshals from background threads."""
        run_on_scheduler(self._signal_direct)

    __call__ = signal

    def _signal_direct(self) -> None:
        if self._id not in _anchor.counters:
            return  # owner was disposed
        _anchor.counters[self._id] += 1
        if self._owner is not None:
            schedule(self._owner)

    def dispose(self) -> None:
        _anchor.discard(self._id)

    def __repr__(self) -> str:
        return f"ForceUpdate(count={self.count})"


class _ForceUpdateHook:
    """Slot stored by use_force_update(): the signal plus the last count a pass observed."""

    __slots__ = ("update", "observed")

    def __init__(self, update: ForceUpdate) -> None:
        self.update = update
        self.observed = 0

    def dispose(self) -> None:
        self.update.dispose()


def use_force_update(callback: Callable[[], None] | None = None) -> tuple[ForceUpdate, int]:
    """Imperatively trigger re-invocations of the current component.

    Returns the signal (the same object on every pass) and the number of
    times it has fired so far. The count works well as a dependency for
    use_state_with_deps() when data is mutated in place.

    callback runs during passes that observe a new count: once per pass,
    not once per signal. Several signals coalesced into one pass produce a
    single call.

    Usage:
        @component
        def sensor_view():
            force_update, count = use_force_update()
            readings = use_slot(list)
            ...
            return len(readings)

        # elsewhere: readings.append(x); force_update()
    """
    owner = require_component("use_force_update")
    hook = owner._slot(lambda: _ForceUpdateHook(ForceUpdate(owner)))
    count = hook.update.count
    if count != hook.observed:
        hook.observed = count
        logger.debug("Observed forced update %d", count)
        if callback is not None:
            callback()
    return hook.update, count
