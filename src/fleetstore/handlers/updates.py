"""Update (install request) actions."""

from __future__ import annotations

from fleetstore.actions import Action
from fleetstore.gateway import path
from fleetstore.handlers.base import DomainHandler, handles


class UpdatesHandler(DomainHandler):
    domain = "updates"

    @handles("get-updates")
    async def get_updates(self, action: Action) -> None:
        await self.fetch_into("updates", path("updates"))

    @handles("get-update")
    async def get_update(self, action: Action) -> None:
        await self.fetch_into("show_update", path("updates", action["id"]))

    @handles("get-update-status")
    async def get_update_status(self, action: Action) -> None:
        await self.fetch_into("update_status", path("updates", action["id"], "status"))

    @handles("create-update")
    async def create_update(self, action: Action) -> None:
        await self.gateway.post(path("updates"), dict(action["update"]))
        self.dispatch("get-updates")

    @handles("cancel-update")
    async def cancel_update(self, action: Action) -> None:
        update_id = action["id"]
        await self.gateway.put(path("updates", update_id, "cancel"))
        self.dispatch("get-update-status", id=update_id)
