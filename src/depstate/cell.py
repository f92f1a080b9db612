"""State cells: settable state that resets when its dependencies change.

A StateCell holds a value together with the dependency list that produced
it. Reading the cell with a dependency list that differs (slot by slot, by
identity) from the last one recomputes the value from the initializer.
Between such resets the value is ordinary state, changed with set().

All state lives in _anchor. Instances are thin handles holding an _id.
"""

from __future__ import annotations

import inspect
import logging
from typing import Callable, Generic, Iterable, Literal, TypeVar, Union

from depstate import _anchor
from depstate.compare import sequences_equal, values_equal
from depstate.component import use_slot
from depstate.force_update import run_on_scheduler, use_force_update

logger = logging.getLogger("depstate.cell")

S = TypeVar("S")

Strategy = Literal["eager", "deferred"]
STRATEGIES = ("eager", "deferred")

Initializer = Union[S, Callable[..., S]]
Update = Union[S, Callable[[S], S]]

_UNSET = object()

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.VAR_POSITIONAL,
)


def _positional_params(fn: Callable) -> list[inspect.Parameter] | None:
    """Positional parameters of fn, or None when the signature can't be inspected."""
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return None
    return [p for p in signature.parameters.values() if p.kind in _POSITIONAL]


def _takes_previous(params: list[inspect.Parameter] | None) -> bool:
    if params is None:
        return True
    # list, dict and set report (iterable=(), /): an optional positional-only
    # argument is a constructor input, not a previous value.
    return any(
        p.kind != p.POSITIONAL_ONLY or p.default is p.empty for p in params
    )


def _initialize(initializer: Initializer, previous: object = _UNSET):
    """Resolve an initializer. previous is _UNSET on the first evaluation."""
    if not callable(initializer):
        return initializer
    if isinstance(initializer, type):
        return initializer()
    params = _positional_params(initializer)
    if not _takes_previous(params):
        return initializer()
    if previous is _UNSET:
        first = params[0] if params else None
        if first is not None and first.kind != first.VAR_POSITIONAL and first.default is first.empty:
            return initializer(None)
        return initializer()
    return initializer(previous)


class StateCell(Generic[S]):
    """A value that is reset from its initializer whenever its dependencies change.

    strategy="eager" (default) resets inside the read() that notices the
    change. strategy="deferred" lets that read() return the stale value,
    requests a re-invocation, and resets on the next read(); use it only
    when the host forbids mutating cross-pass state during a pass.
    """

    __slots__ = ("_id", "_initializer", "_signal", "_strategy")

    def __init__(
        self,
        initializer: Initializer[S],
        *,
        signal: Callable[[], None] | None = None,
        strategy: Strategy = "eager",
    ) -> None:
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown reset strategy {strategy!r}, expected one of {STRATEGIES}")
        self._id = _anchor.new_id()
        self._initializer = initializer
        self._signal = signal
        self._strategy = strategy
        _anchor.values[self._id] = None
        _anchor.last_deps[self._id] = ()
        _anchor.initialized[self._id] = False
        _anchor.reset_requested[self._id] = False

    @property
    def value(self) -> S:
        """The current value, without checking dependencies."""
        return _anchor.values.get(self._id)

    @property
    def disposed(self) -> bool:
        return self._id not in _anchor.initialized

    @property
    def last_deps(self) -> tuple:
        return _anchor.last_deps[self._id]

    @property
    def initialized(self) -> bool:
        return _anchor.initialized[self._id]

    @property
    def strategy(self) -> Strategy:
        return self._strategy

    def read(self, deps: Iterable[object] = (), initializer: Initializer[S] = _UNSET) -> S:
        """Return the value, resetting it first if deps changed since the last reset.

        A new initializer, when given, replaces the stored one before the
        check. Hooks pass the one supplied on the current pass.
        """
        if initializer is not _UNSET:
            self._initializer = initializer
        deps = tuple(deps)

        if not _anchor.initialized[self._id]:
            self._reset(deps)
        elif not sequences_equal(_anchor.last_deps[self._id], deps):
            if self._strategy == "deferred" and not _anchor.reset_requested[self._id]:
                _anchor.reset_requested[self._id] = True
                logger.debug("Cell %d: reset requested for the next pass", self._id)
                self._notify()
            else:
                self._reset(deps)
        elif _anchor.reset_requested[self._id]:
            # Dependencies went back to what produced the current value.
            _anchor.reset_requested[self._id] = False

        return _anchor.values[self._id]

    def _reset(self, deps: tuple) -> None:
        if _anchor.initialized[self._id]:
            next_value = _initialize(self._initializer, _anchor.values[self._id])
        else:
            next_value = _initialize(self._initializer)
        _anchor.values[self._id] = next_value
        _anchor.last_deps[self._id] = deps
        _anchor.initialized[self._id] = True
        _anchor.reset_requested[self._id] = False
        logger.debug("Cell %d: reset from dependencies %r", self._id, deps)

    def set(self, next: Update[S]) -> None:
        """Store a new value, or the result of calling next with the current one.

        Identity-equal results are ignored: nothing changes and no
        re-invocation is requested. Auto-marshals from background threads.
        """
        run_on_scheduler(lambda: self._set_direct(next))

    def _set_direct(self, next: Update[S]) -> None:
        if self._id not in _anchor.initialized:
            return  # owner was disposed
        current = _anchor.values[self._id]
        resolved = next(current) if callable(next) else next
        if values_equal(current, resolved):
            return
        _anchor.values[self._id] = resolved
        self._notify()

    def _notify(self) -> None:
        if self._signal is not None:
            self._signal()

    def dispose(self) -> None:
        _anchor.discard(self._id)

    def __repr__(self) -> str:
        if not _anchor.initialized.get(self._id, False):
            return "StateCell(<uninitialized>)"
        return f"StateCell({_anchor.values[self._id]!r}, deps={_anchor.last_deps[self._id]!r})"


class _StateHook:
    """Slot stored by use_state_with_deps(): the cell and its setter, captured once."""

    __slots__ = ("cell", "set")

    def __init__(self, cell: StateCell) -> None:
        self.cell = cell
        self.set = cell.set

    def dispose(self) -> None:
        self.cell.dispose()


def use_state_with_deps(
    initial: Initializer[S],
    deps: Iterable[object],
    *,
    strategy: Strategy = "eager",
) -> tuple[S, Callable[[Update[S]], None]]:
    """State for the current component that resets to initial when deps change.

    initial may be a callable. On a reset caused by changed dependencies it
    receives the previous value; on the very first pass there is none.

    Returns the value and a setter that is the same object on every pass.
    The strategy is fixed by the first pass.

    Usage:
        @component
        def editor(document):
            draft, set_draft = use_state_with_deps(lambda: document.text, [document])
            ...
    """
    value, hook = _use_state_hook(initial, deps, strategy)
    return value, hook.set


def _use_state_hook(initial, deps, strategy: Strategy) -> tuple[object, _StateHook]:
    force_update, _ = use_force_update()
    hook = use_slot(lambda: _StateHook(StateCell(initial, signal=force_update, strategy=strategy)))
    return hook.cell.read(deps, initial), hook
