"""Console — composition root wiring store, dispatcher, gateway and handlers.

One Console is one running application: it owns exactly one store and one
dispatcher and hands them to every handler it creates. Views receive the
console (or its store) explicitly; nothing here is a module global.

Usage:
    async with Console.from_config(load_config()) as console:
        console.store.add_watch("searchable_devices", "devices-table", render)
        console.dispatch(Action("search-devices-by-regex", regex="."))
        await console.settle()
        console.store.remove_watch("searchable_devices", "devices-table")
"""

from __future__ import annotations

import logging
import uuid
from typing import Callable

from fleetstore import db
from fleetstore.actions import Action
from fleetstore.config import ConsoleConfig, configure_logging
from fleetstore.dispatcher import Dispatcher
from fleetstore.funnel import ErrorFunnel
from fleetstore.gateway import RequestGateway
from fleetstore.handlers import DOMAIN_HANDLERS, DomainHandler, HandlerContext
from fleetstore.store import Store
from fleetstore.tasks import TaskTracker
from fleetstore.transport import HttpxTransport, Transport

logger = logging.getLogger("fleetstore.console")


class Console:
    def __init__(
        self,
        transport: Transport,
        *,
        prefix: str = "/api/v1",
        store: Store | None = None,
        id_factory: Callable[[], object] = uuid.uuid4,
        on_session_expired: Callable[[], None] | None = None,
    ) -> None:
        self.transport = transport
        self.store = store if store is not None else db.create()
        self.dispatcher = Dispatcher()
        self.tasks = TaskTracker()
        self.gateway = RequestGateway(transport, prefix)
        self.funnel = ErrorFunnel(self.store, self.gateway.failures, on_session_expired)

        ctx = HandlerContext(
            store=self.store,
            gateway=self.gateway,
            dispatcher=self.dispatcher,
            tasks=self.tasks,
            funnel=self.funnel,
            id_factory=id_factory,
        )
        # Catch-all first: post_status is cleared before any domain handler runs.
        self._subscriptions = [self.funnel.register(self.dispatcher)]
        self.handlers: dict[str, DomainHandler] = {}
        for handler_cls in DOMAIN_HANDLERS:
            handler = handler_cls(ctx)
            self.handlers[handler.domain] = handler
            self._subscriptions.append(handler.register())

    @classmethod
    def from_config(cls, config: ConsoleConfig, **kwargs) -> Console:
        configure_logging(config)
        transport = HttpxTransport(
            config.api.base_url,
            timeout=config.api.timeout_seconds,
            headers=config.api.headers,
        )
        return cls(transport, prefix=config.api.prefix, **kwargs)

    def dispatch(self, action: Action) -> None:
        """Dispatch action. Must be called from the thread running the event loop.

        Raises NoEventLoopError before any handler runs when no loop is running,
        so the action is refused rather than dropped.
        """
        self.tasks.require_loop()
        self.dispatcher.dispatch(action)

    async def settle(self) -> None:
        """Wait until every continuation, including chained ones, has finished."""
        await self.tasks.drain()

    async def aclose(self) -> None:
        await self.settle()
        for sub in self._subscriptions:
            sub.dispose()
        self._subscriptions.clear()
        self.funnel.dispose()
        await self.transport.aclose()

    async def __aenter__(self) -> Console:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
