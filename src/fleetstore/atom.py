"""Atoms — observable cells holding the last known server snapshot.

An Atom holds one immutable snapshot (a list, dict or record). reset() is
the only mutator: it swaps the snapshot and then signals every watcher,
synchronously and in registration order. Watchers receive no arguments;
they deref() the atom to read the new value.

Views must treat a dereffed snapshot as read-only: the atom hands out the
stored object itself, and changing it in place bypasses reset() and
notifies nobody. Handlers always reset with a fresh object.

Thread safety: call set_scheduler() once from the thread that owns the
event loop. After that, any .reset() from another thread is marshaled
through the scheduler. Same-thread resets remain synchronous.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

Watcher = Callable[[], None]

logger = logging.getLogger("fleetstore.atom")

# ─── Auto-marshal ────────────────────────────────────────────────────────────
_scheduler = None
_scheduler_thread = None


def set_scheduler(scheduler) -> None:
    """Set the global thread scheduler for cross-thread atom resets.

    Call once from the event loop's thread:
        fleetstore.set_scheduler(loop.call_soon_threadsafe)

    After this, any Atom.reset() from another thread is marshaled.
    Resets on the scheduler thread remain synchronous.
    """
    global _scheduler, _scheduler_thread
    _scheduler = scheduler
    _scheduler_thread = threading.current_thread()


class Atom(Generic[T]):
    """A single observable snapshot with keyed watchers."""

    __slots__ = ("_value", "_watchers", "__weakref__")

    def __init__(self, value: T) -> None:
        self._value = value
        self._watchers: dict[str, Watcher] = {}

    def deref(self) -> T:
        """Read the current snapshot. Do not mutate it."""
        return self._value

    def reset(self, value: T) -> None:
        """Replace the snapshot. Auto-marshals from foreign threads."""
        if _scheduler is not None and threading.current_thread() != _scheduler_thread:
            _scheduler(lambda v=value: self._reset_direct(v))
        else:
            self._reset_direct(value)

    def _reset_direct(self, value: T) -> None:
        """Swap the value, then notify. Always runs on the scheduler thread."""
        self._value = value
        self._notify()

    def _notify(self) -> None:
        # Snapshot: watchers added or removed by a callback apply to the next reset.
        for key, callback in list(self._watchers.items()):
            try:
                callback()
            except Exception:
                logger.exception("Watcher %r failed", key)

    def add_watch(self, key: str, callback: Watcher) -> None:
        """Register callback under key. Re-using a key replaces its callback."""
        self._watchers[key] = callback

    def remove_watch(self, key: str) -> None:
        """Unregister key. No-op if it is not registered."""
        self._watchers.pop(key, None)

    @property
    def watch_keys(self) -> list[str]:
        return list(self._watchers)

    def __repr__(self) -> str:
        return f"Atom({self._value!r})"


def create_atom(initial: T) -> Atom[T]:
    """Factory for an Atom holding initial.

    Usage:
        devices = create_atom([])
        devices.add_watch("devices-table", lambda: render(devices.deref()))
        devices.reset([{"uuid": "u1", "deviceId": "D1"}])
        # render called once with the new list
        devices.remove_watch("devices-table")
    """
    return Atom(initial)
