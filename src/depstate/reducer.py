"""Reducer dispatch on top of a dependency-gated StateCell.

The reducer is captured once. Supplying a different reducer on a later
pass has no effect: dispatch keeps its identity for the lifetime of the
component, so it can be used as a dependency without causing resets.
"""

from __future__ import annotations

from typing import Callable, Generic, Iterable, TypeVar

from depstate.cell import Initializer, StateCell, Strategy, _use_state_hook
from depstate.component import use_slot
from depstate.force_update import run_on_scheduler

S = TypeVar("S")

Reducer = Callable[..., S]


class DispatchAdapter(Generic[S]):
    """Turns dispatch(*args) into cell.set(reducer(state, *args))."""

    __slots__ = ("_cell", "_reducer")

    def __init__(self, reducer: Reducer[S], cell: StateCell[S]) -> None:
        self._reducer = reducer
        self._cell = cell

    @property
    def reducer(self) -> Reducer[S]:
        return self._reducer

    @property
    def cell(self) -> StateCell[S]:
        return self._cell

    def dispatch(self, *args) -> None:
        """Apply the reducer to the current state. Auto-marshals from background threads."""
        run_on_scheduler(lambda: self._dispatch_direct(args))

    def _dispatch_direct(self, args: tuple) -> None:
        if self._cell.disposed:
            return
        next_state = self._reducer(self._cell.value, *args)
        self._cell.set(lambda _: next_state)

    __call__ = dispatch

    def __repr__(self) -> str:
        name = getattr(self._reducer, "__name__", repr(self._reducer))
        return f"DispatchAdapter({name}, {self._cell!r})"


def use_reducer_with_deps(
    reducer: Reducer[S],
    initial: Initializer[S],
    deps: Iterable[object],
    *,
    strategy: Strategy = "eager",
) -> tuple[S, DispatchAdapter[S]]:
    """Reducer state for the current component that resets to initial when deps change.

    Only the reducer supplied on the first pass is ever used; the returned
    dispatcher is the same object on every pass.

    Usage:
        @component
        def score(player):
            total, dispatch = use_reducer_with_deps(lambda s, delta: s + delta, 0, [player])
            ...
            dispatch(5)
    """
    state, hook = _use_state_hook(initial, deps, strategy)
    adapter = use_slot(lambda: DispatchAdapter(reducer, hook.cell))
    return state, adapter
