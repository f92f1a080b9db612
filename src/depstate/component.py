"""Components: long-lived owners of hook state, re-run one pass at a time.

A Component wraps a function. Each render() runs the function once with the
component set as the current one, so hooks called inside it reach the
component's own storage. Storage survives between passes; everything else
the function computes is ephemeral.

All state lives in _anchor. Instances are thin handles holding an _id.
"""

from __future__ import annotations

import logging
from typing import Callable, Generic, TypeVar

from depstate import _anchor
from depstate._tracking import begin_batch, current_component, end_batch
from depstate.errors import HookError

logger = logging.getLogger("depstate.component")

T = TypeVar("T")
R = TypeVar("R")

Unsubscribe = Callable[[], None]


class Component(Generic[R]):
    """An owning instance: a render function plus per-instance hook storage."""

    __slots__ = ("_id", "_name")

    def __init__(self, fn: Callable[..., R]) -> None:
        self._id = _anchor.new_id()
        self._name = getattr(fn, "__name__", repr(fn))
        _anchor.render_fns[self._id] = fn
        _anchor.render_args[self._id] = ((), {})
        _anchor.outputs[self._id] = None
        _anchor.pass_counts[self._id] = 0
        _anchor.slots[self._id] = []
        _anchor.slot_cursors[self._id] = 0
        _anchor.subscribers[self._id] = []

    @property
    def _fn(self) -> Callable[..., R]:
        return _anchor.render_fns[self._id]

    @property
    def output(self) -> R | None:
        """What the most recent pass returned."""
        return _anchor.outputs.get(self._id)

    @property
    def pass_count(self) -> int:
        return _anchor.pass_counts.get(self._id, 0)

    @property
    def disposed(self) -> bool:
        return self._id not in _anchor.render_fns

    def render(self, *args, **kwargs) -> R:
        """Run one pass with new arguments. Later re-invocations reuse them."""
        if self.disposed:
            raise HookError(f"Cannot render disposed component {self._name}")
        _anchor.render_args[self._id] = (args, kwargs)
        return self._pass()

    def _run(self) -> None:
        """Called by the scheduler when a re-invocation was requested."""
        if self.disposed:
            return
        self._pass()

    def _pass(self) -> R:
        args, kwargs = _anchor.render_args[self._id]
        _anchor.pass_counts[self._id] += 1
        _anchor.slot_cursors[self._id] = 0
        logger.debug("Pass %d of %s", _anchor.pass_counts[self._id], self._name)

        begin_batch()
        token = current_component.set(self)
        try:
            result = self._fn(*args, **kwargs)
            _anchor.outputs[self._id] = result
            for callback in list(_anchor.subscribers[self._id]):
                callback(result)
        finally:
            current_component.reset(token)
            end_batch()
        return result

    def _slot(self, factory: Callable[[], T]) -> T:
        """Return the object stored at the current call position, creating it on first use."""
        slots = _anchor.slots[self._id]
        index = _anchor.slot_cursors[self._id]
        _anchor.slot_cursors[self._id] = index + 1
        if index == len(slots):
            slots.append(factory())
        return slots[index]

    def subscribe(self, callback: Callable[[R], None]) -> Unsubscribe:
        """Register a callback for every pass output. Returns a function that removes it."""
        _anchor.subscribers[self._id].append(callback)

        def _unsubscribe() -> None:
            subscribers = _anchor.subscribers.get(self._id)
            if subscribers is not None and callback in subscribers:
                subscribers.remove(callback)

        return _unsubscribe

    def dispose(self) -> None:
        """Tear down the instance. Its hook storage is discarded and signals are ignored."""
        if self.disposed:
            return
        for state in _anchor.slots[self._id]:
            dispose = getattr(state, "dispose", None)
            if dispose is not None:
                dispose()
        _anchor.discard(self._id)

    def __repr__(self) -> str:
        state = "disposed" if self.disposed else f"passes={self.pass_count}"
        return f"Component({self._name}, {state})"


def component(fn: Callable[..., R]) -> Component[R]:
    """Decorator/factory to create a Component from a function.

    Usage:
        @component
        def counter(step):
            value, set_value = use_state_with_deps(0, [step])
            return value, set_value

        value, set_value = counter.render(1)
        set_value(lambda v: v + 1)  # re-runs counter
        counter.output[0]  # 1
    """
    return Component(fn)


def require_component(caller: str) -> Component:
    """The component whose pass is running. Raises HookError outside a pass."""
    owner = current_component.get()
    if owner is None:
        raise HookError(f"{caller}() can only be called while a component is rendering")
    return owner


def use_slot(factory: Callable[[], T]) -> T:
    """Per-instance storage that survives across passes.

    The n-th use_slot() call of every pass returns the object the factory
    created on the first pass, so hooks must be called in the same order on
    every pass.
    """
    return require_component("use_slot")._slot(factory)
