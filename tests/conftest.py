"""Shared fixtures: a scripted in-memory transport and a console built on it."""

import asyncio
import copy

import pytest

from fleetstore import Console
from fleetstore.exceptions import HttpError
from fleetstore.transport import Transport

_UNROUTED = object()


class FakeTransport(Transport):
    """Transport answering from a (method, path) -> response table.

    A response that is an exception is raised. Unrouted requests answer 404,
    which is what an existence probe for an absent resource sees. Setting
    `gate` to an asyncio.Event holds every request until the event is set.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []
        self.gate = None
        self.closed = False

    def on(self, method, path, response=None):
        self.routes[(method, path)] = response
        return self

    async def request(self, method, path, body=None):
        self.calls.append((method, path, body))
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        result = self.routes.get((method, path), _UNROUTED)
        if result is _UNROUTED:
            raise HttpError(404, None, reason="Not Found")
        if isinstance(result, Exception):
            raise result
        return copy.deepcopy(result)

    async def aclose(self):
        self.closed = True

    def paths(self, method=None):
        return [p for m, p, _ in self.calls if method is None or m == method]


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def console(transport):
    return Console(transport, id_factory=lambda: "uuid-1")
