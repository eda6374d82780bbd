"""Textual integration for fleetstore. Opt-in — requires textual.

Atom watchers are plain zero-argument callbacks; this module wraps them
so they are safe to point at Textual widgets: skipped while the app is
not running or paused, NoMatches from widget queries swallowed, and
calls from foreign threads marshaled with call_from_thread.
"""

import threading
from contextlib import contextmanager

from textual.css.query import NoMatches

from fleetstore.atom import Atom

# Module-owned pause state, keyed by id(app) so multiple apps work in tests.
_paused_apps: set[int] = set()


@contextmanager
def pause(app):
    """Suspend guarded watchers during widget replacement."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


def guard(app, callback):
    """Wrap a watcher callback so it only touches widgets when that is safe."""
    _main = threading.get_ident()

    def _guarded():
        if not is_safe(app):
            return
        if threading.get_ident() != _main:
            app.call_from_thread(_safe)
        else:
            _safe()

    def _safe():
        try:
            callback()
        except NoMatches:
            pass

    return _guarded


def mount(app, atom: Atom, key: str, callback):
    """add_watch() with a guarded callback. Returns a disposer that removes it.

    Call the disposer from the widget's unmount hook so every add is paired
    with a remove.
    """
    atom.add_watch(key, guard(app, callback))

    def _unmount() -> None:
        atom.remove_watch(key)

    return _unmount
