"""Dispatcher — synchronous broadcast of actions to every registered handler.

dispatch() hands the same Action object to each handler in registration
order and returns when the last one has run. Two rules keep the causal
chain flat:

- No dispatch within dispatch. A handler that wants to chain another
  action does so from an async continuation, after its request resolved.
  A nested call raises DispatchReentryError.
- A failing handler is logged and skipped; the others still run.
"""

from __future__ import annotations

import itertools
import logging
from typing import Callable

from fleetstore.actions import Action
from fleetstore.exceptions import DispatchReentryError

logger = logging.getLogger("fleetstore.dispatcher")

Handler = Callable[[Action], None]


class Subscription:
    """Disposable handle for a registered handler."""

    __slots__ = ("_dispatcher", "_token", "_disposed")

    def __init__(self, dispatcher: Dispatcher, token: int) -> None:
        self._dispatcher = dispatcher
        self._token = token
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Unregister the handler. Safe to call more than once."""
        if self._disposed:
            return
        self._disposed = True
        self._dispatcher._unregister(self._token)


class Dispatcher:
    """Broadcast channel for Action messages."""

    def __init__(self) -> None:
        self._handlers: dict[int, Handler] = {}  # token -> handler, in registration order
        self._tokens = itertools.count()
        self._dispatching: Action | None = None

    def register(self, handler: Handler) -> Subscription:
        """Add handler at the end of the broadcast order.

        Registering the same callable twice delivers each action to it twice;
        each Subscription removes only its own registration.
        """
        token = next(self._tokens)
        self._handlers[token] = handler
        return Subscription(self, token)

    def _unregister(self, token: int) -> None:
        self._handlers.pop(token, None)

    @property
    def is_dispatching(self) -> bool:
        return self._dispatching is not None

    def dispatch(self, action: Action) -> None:
        """Deliver action to every handler, in registration order.

        Usage:
            dispatcher = Dispatcher()
            dispatcher.register(devices_handler)
            dispatcher.dispatch(Action("search-devices-by-regex", regex="."))
        """
        if self._dispatching is not None:
            raise DispatchReentryError(
                f"Cannot dispatch {action.kind!r} while dispatching {self._dispatching.kind!r}"
            )
        self._dispatching = action
        try:
            for handler in list(self._handlers.values()):
                try:
                    handler(action)
                except Exception:
                    logger.exception("Handler %r failed on %r", handler, action.kind)
        finally:
            self._dispatching = None
