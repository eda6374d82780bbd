"""Error/session funnel — the single place request failures become UI state.

Attached once per console. For every failure published by the gateway:

- 401: the session is gone. The store is cleared back to a fresh session
  and on_session_expired() runs (a real client reloads or re-authenticates).
  Nothing is written to post_status.
- anything else: the server's errorMsg (or a status line, or the transport
  error text) overwrites post_status.

register() also installs the catch-all handler that logs every action and
clears post_status, so each action starts with a clean error slate.
"""

from __future__ import annotations

import logging
from typing import Callable

from fleetstore.actions import Action
from fleetstore.dispatcher import Dispatcher, Subscription
from fleetstore.exceptions import HttpError
from fleetstore.gateway import FailureStream, RequestFailure
from fleetstore.store import Store

logger = logging.getLogger("fleetstore.funnel")

STATUS_ATOM = "post_status"


def failure_message(failure: RequestFailure) -> str:
    """Best human-readable message for a failed request."""
    error = failure.error
    if isinstance(error, HttpError):
        if error.error_msg:
            return error.error_msg
        return f"{error.status} {error.reason}".strip()
    return str(error) or f"{failure.method} {failure.path} failed"


class ErrorFunnel:
    def __init__(
        self,
        store: Store,
        failures: FailureStream,
        on_session_expired: Callable[[], None] | None = None,
    ) -> None:
        self._store = store
        self._on_session_expired = on_session_expired
        self._unsubscribe: Callable[[], None] | None = failures.subscribe(self.on_failure)

    def register(self, dispatcher: Dispatcher) -> Subscription:
        """Install the catch-all action handler. Register it before domain handlers."""
        return dispatcher.register(self.on_action)

    def on_action(self, action: Action) -> None:
        logger.info("%s %s", action.kind, dict(action.payload))
        self._store.reset(STATUS_ATOM, "")

    def report(self, message: str) -> None:
        """Surface a domain error that did not come from a failed request."""
        logger.warning("Reported: %s", message)
        self._store.reset(STATUS_ATOM, message)

    def on_failure(self, failure: RequestFailure) -> None:
        error = failure.error
        if isinstance(error, HttpError) and error.session_expired:
            self._session_expired(failure)
        else:
            self._store.reset(STATUS_ATOM, failure_message(failure))

    def _session_expired(self, failure: RequestFailure) -> None:
        logger.warning("Session expired on %s %s; reloading", failure.method, failure.path)
        self._store.clear()
        if self._on_session_expired is not None:
            self._on_session_expired()

    def dispose(self) -> None:
        """Stop listening for failures. Safe to call more than once."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
