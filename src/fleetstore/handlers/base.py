"""Domain handler base — routes action kinds to async handler methods.

Each domain subclasses DomainHandler and marks methods with @handles:

    class FirmwareHandler(DomainHandler):
        @handles("list-firmware-on-device")
        async def list_firmware(self, action):
            await self.fetch_into("firmware_on_device", path("firmware", action["device"]))

Calling the handler with an Action (which is what the dispatcher does)
looks up the method for action.kind and schedules it as a continuation;
kinds the domain does not know are ignored. The method body runs after
dispatch() has returned, so it may dispatch follow-up actions.

A RequestError ends the continuation quietly: the gateway has already
published it to the error funnel, and the atom keeps its last good value.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Coroutine, Iterable

from fleetstore.actions import Action
from fleetstore.dispatcher import Dispatcher, Subscription
from fleetstore.exceptions import AlreadyExists, RequestError
from fleetstore.funnel import ErrorFunnel
from fleetstore.gateway import RequestGateway
from fleetstore.store import Store
from fleetstore.tasks import TaskTracker

logger = logging.getLogger("fleetstore.handlers")

HandlerMethod = Callable[[Any, Action], Coroutine]


def handles(kind: str) -> Callable[[HandlerMethod], HandlerMethod]:
    """Mark an async method as the handler for one action kind."""

    def decorate(fn: HandlerMethod) -> HandlerMethod:
        fn._handles_kind = kind
        return fn

    return decorate


@dataclass
class HandlerContext:
    """Everything a domain handler touches, injected by the console."""

    store: Store
    gateway: RequestGateway
    dispatcher: Dispatcher
    tasks: TaskTracker
    funnel: ErrorFunnel
    id_factory: Callable[[], object] = field(default=uuid.uuid4)


class DomainHandler:
    domain = "base"
    _routes: dict[str, str] = {}

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        routes = dict(cls._routes)
        for attr, value in vars(cls).items():
            kind = getattr(value, "_handles_kind", None)
            if kind is not None:
                routes[kind] = attr
        cls._routes = routes

    def __init__(self, ctx: HandlerContext) -> None:
        self.ctx = ctx

    @classmethod
    def kinds(cls) -> Iterable[str]:
        return cls._routes.keys()

    def register(self, dispatcher: Dispatcher | None = None) -> Subscription:
        return (dispatcher or self.ctx.dispatcher).register(self)

    def __call__(self, action: Action) -> None:
        attr = self._routes.get(action.kind)
        if attr is None:
            return
        method = getattr(self, attr)
        self.ctx.tasks.spawn(self._run(action, method), name=f"{self.domain}:{action.kind}")

    async def _run(self, action: Action, method: Callable[[Action], Coroutine]) -> None:
        try:
            await method(action)
        except RequestError:
            logger.debug("%s stopped after a failed request", action.kind)

    # ─── Helpers for handler methods ─────────────────────────────────────────

    @property
    def gateway(self) -> RequestGateway:
        return self.ctx.gateway

    @property
    def store(self) -> Store:
        return self.ctx.store

    def dispatch(self, kind: str, **payload: Any) -> None:
        """Dispatch a follow-up action. Only valid from inside a continuation."""
        self.ctx.dispatcher.dispatch(Action(kind, **payload))

    def then_dispatch(self, kind: str, **payload: Any) -> Callable[[], Coroutine]:
        """A workflow step that dispatches a follow-up action."""

        async def step() -> None:
            self.dispatch(kind, **payload)

        return step

    async def fetch_into(
        self,
        atom: str,
        rel_path: str,
        transform: Callable[[Any], Any] | None = None,
    ) -> None:
        """GET rel_path and reset atom with the (optionally transformed) body."""
        body = await self.gateway.get(rel_path)
        if transform is not None:
            try:
                body = transform(body)
            except (KeyError, TypeError, AttributeError) as exc:
                raise self.gateway.malformed("GET", rel_path, repr(exc)) from exc
        self.store.reset(atom, body)

    async def require_absent(self, noun: str, identifier: str, rel_path: str) -> None:
        """Existence probe. Reports and raises AlreadyExists if rel_path exists."""
        if await self.gateway.exists(rel_path):
            exc = AlreadyExists(noun, identifier)
            self.ctx.funnel.report(str(exc))
            raise exc


def project_uuids(records: Any) -> list[str]:
    """Device records -> their uuids."""
    return [record["uuid"] for record in records]
