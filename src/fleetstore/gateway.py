"""Request gateway — the one place handlers talk to the backend.

Every request goes through a RequestGateway, which prefixes the API root,
quotes path segments and publishes each failure on its `failures` stream
before re-raising it. The error funnel listens on that stream; handlers
therefore never render errors themselves.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Any, Callable
from urllib.parse import quote, urlencode

from fleetstore.exceptions import HttpError, RequestError, TransportError
from fleetstore.transport import Transport

logger = logging.getLogger("fleetstore.gateway")


@dataclass(frozen=True)
class RequestFailure:
    """A failed request as published on RequestGateway.failures."""

    method: str
    path: str
    error: RequestError

    @property
    def status(self) -> int | None:
        return self.error.status if isinstance(self.error, HttpError) else None


Listener = Callable[[RequestFailure], None]


class FailureStream:
    """Fans each RequestFailure out to the listeners of one gateway.

    Listeners run in subscription order. One that raises is logged and the
    rest still run, so the request path always re-raises its own error.
    """

    def __init__(self) -> None:
        self._listeners: dict[int, Listener] = {}
        self._tokens = itertools.count()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Attach listener. Returns a function that detaches it."""
        token = next(self._tokens)
        self._listeners[token] = listener

        def _unsubscribe() -> None:
            self._listeners.pop(token, None)

        return _unsubscribe

    def emit(self, failure: RequestFailure) -> None:
        for listener in list(self._listeners.values()):
            try:
                listener(failure)
            except Exception:
                logger.exception("Failure listener %r failed on %s %s", listener, failure.method, failure.path)

    def __len__(self) -> int:
        return len(self._listeners)


def path(*segments: object, **query: object) -> str:
    """Build a quoted relative path: path("devices", "D 1", regex=".")."""
    result = "/" + "/".join(quote(str(s), safe="") for s in segments)
    params = {k: v for k, v in query.items() if v is not None}
    if params:
        result += "?" + urlencode(params)
    return result


class RequestGateway:
    def __init__(self, transport: Transport, prefix: str = "/api/v1") -> None:
        self._transport = transport
        self._prefix = prefix.rstrip("/")
        self.failures = FailureStream()

    async def request(self, method: str, rel_path: str, body: Any = None) -> Any:
        full_path = self._prefix + rel_path
        logger.debug("%s %s", method, full_path)
        try:
            return await self._transport.request(method, full_path, body)
        except RequestError as exc:
            self._publish(method, full_path, exc)
            raise

    async def get(self, rel_path: str) -> Any:
        return await self.request("GET", rel_path)

    async def post(self, rel_path: str, body: Any = None) -> Any:
        return await self.request("POST", rel_path, body)

    async def put(self, rel_path: str, body: Any = None) -> Any:
        return await self.request("PUT", rel_path, body)

    async def delete(self, rel_path: str) -> Any:
        return await self.request("DELETE", rel_path)

    async def exists(self, rel_path: str) -> bool:
        """Existence probe: True on 2xx, False on 404.

        A 404 is the expected "absent" answer and is not published as a
        failure. Any other error is published and re-raised.
        """
        full_path = self._prefix + rel_path
        logger.debug("GET %s (probe)", full_path)
        try:
            await self._transport.request("GET", full_path)
        except HttpError as exc:
            if exc.status == 404:
                return False
            self._publish("GET", full_path, exc)
            raise
        except RequestError as exc:
            self._publish("GET", full_path, exc)
            raise
        return True

    def malformed(self, method: str, rel_path: str, detail: str) -> TransportError:
        """Publish a response whose shape the caller could not use.

        Returns the error for the caller to raise; it is handled exactly like
        a network failure.
        """
        error = TransportError(f"{method} {self._prefix + rel_path} returned malformed data: {detail}")
        self._publish(method, self._prefix + rel_path, error)
        return error

    def _publish(self, method: str, full_path: str, error: RequestError) -> None:
        logger.warning("%s %s failed: %s", method, full_path, error)
        self.failures.emit(RequestFailure(method, full_path, error))
