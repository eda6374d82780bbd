"""Component (part number) actions."""

from __future__ import annotations

from fleetstore.actions import Action
from fleetstore.gateway import path
from fleetstore.handlers.base import DomainHandler, handles, project_uuids
from fleetstore.workflow import Workflow, WorkflowResult


class ComponentsHandler(DomainHandler):
    domain = "components"

    @handles("search-components-by-regex")
    async def search_components(self, action: Action) -> None:
        await self.fetch_into(
            "searchable_components", path("components", "search", regex=action.get("regex"))
        )

    @handles("get-component")
    async def get_component(self, action: Action) -> None:
        await self.fetch_into("show_component", path("components", action["partNumber"]))

    @handles("create-component")
    async def create_component(self, action: Action) -> WorkflowResult:
        component = dict(action["component"])
        part_number = component["partNumber"]
        workflow = (
            Workflow("create-component")
            .step(
                "probe",
                lambda: self.require_absent("Component", part_number, path("components", part_number)),
                writes=False,
            )
            .step("create", lambda: self.gateway.put(path("components", part_number), component))
            .step("refresh", self.then_dispatch("search-components-by-regex"), writes=False)
        )
        return await workflow.run()

    @handles("destroy-component")
    async def destroy_component(self, action: Action) -> None:
        await self.gateway.delete(path("components", action["partNumber"]))
        self.dispatch("search-components-by-regex")

    @handles("get-devices-for-component")
    async def get_devices_for_component(self, action: Action) -> None:
        await self.fetch_into(
            "devices_for_component",
            path("devices", partNumber=action["partNumber"]),
            transform=project_uuids,
        )
