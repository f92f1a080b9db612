"""Textual integration for depstate. Opt-in: requires textual.

Pass output is delivered to widgets only while the app's widget tree is
queryable. The guard, NoMatches handling and thread marshal live here, not
at callsites, so the core stays unaware of Textual.
"""

import threading
from contextlib import contextmanager

from textual.css.query import NoMatches

# Module-owned pause state, keyed by id(app) so multiple apps work in tests.
_paused_apps: set[int] = set()


@contextmanager
def pause(app):
    """Suspend delivery of pass output during widget replacement."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


def bind(app, component, effect_fn):
    """Forward every pass output of component to effect_fn, safely for Textual.

    Skips delivery while the app is paused or not running, swallows
    NoMatches from widget queries, and marshals cross-thread passes via
    call_from_thread. Returns a function that stops delivery.

    Usage:
        unbind = stx.bind(app, counter, lambda text: app.query_one("#count", Static).update(text))
    """
    _main = threading.get_ident()

    def _guarded(output):
        if not is_safe(app):
            return
        if threading.get_ident() != _main:
            app.call_from_thread(_safe, output)
        else:
            _safe(output)

    def _safe(output):
        try:
            effect_fn(output)
        except NoMatches:
            pass

    return component.subscribe(_guarded)
