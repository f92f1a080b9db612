"""Actions and transactions: batched re-invocation requests.

Wrapping setter calls in an @action or `with transaction()` defers every
requested re-invocation until the outermost scope exits. Each component
then re-runs once, however many of its signals fired inside the scope.
"""

from __future__ import annotations

import functools
from typing import TypeVar, Callable, ParamSpec
from contextlib import contextmanager
from depstate._tracking import begin_batch, end_batch

P = ParamSpec("P")
R = TypeVar("R")


def action(fn: Callable[P, R]) -> Callable[P, R]:
    """Decorator: batch all re-invocation requests made inside fn.

    Components only re-run after fn returns, not during.

    Usage:
        @action
        def load(rows):
            set_rows(rows)
            set_page(0)
            # the owning component re-runs once, seeing both values
    """

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        begin_batch()
        try:
            return fn(*args, **kwargs)
        finally:
            end_batch()

    return wrapper


@contextmanager
def transaction():
    """Context manager for batching re-invocation requests.

    Usage:
        with transaction():
            force_update()
            force_update()
            # one pass runs here, after both signals
    """
    begin_batch()
    try:
        yield
    finally:
        end_batch()
