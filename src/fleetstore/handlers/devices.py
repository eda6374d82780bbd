"""Device actions: listing, search, creation, per-device views and components."""

from __future__ import annotations

from fleetstore.actions import Action
from fleetstore.gateway import path
from fleetstore.handlers.base import DomainHandler, handles, project_uuids
from fleetstore.workflow import Workflow, WorkflowResult


class DevicesHandler(DomainHandler):
    domain = "devices"

    @handles("get-devices")
    async def get_devices(self, action: Action) -> None:
        await self.fetch_into("devices", path("devices"))

    @handles("search-devices-by-regex")
    async def search_devices(self, action: Action) -> None:
        await self.fetch_into("searchable_devices", path("devices", "search", regex=action.get("regex")))

    @handles("create-device")
    async def create_device(self, action: Action) -> WorkflowResult:
        """Probe, create on the core service, associate on the resolver, refresh.

        The uuid is generated client-side before anything is written. A
        device created between the probe and the write makes the write fail
        with a conflict, which is reported like any other failed request.
        """
        device_id = action["device"]["deviceId"]
        device = {
            "uuid": str(self.ctx.id_factory()),
            "deviceId": device_id,
            "deviceType": "Other",
        }
        workflow = (
            Workflow("create-device")
            .step(
                "probe",
                lambda: self.require_absent("Device", device_id, path("devices", device_id)),
                writes=False,
            )
            .step("create", lambda: self.gateway.post(path("devices", "create"), device))
            .step("associate", lambda: self.gateway.put(path("devices", device_id)))
            .step("refresh", self.then_dispatch("search-devices-by-regex"), writes=False)
        )
        return await workflow.run()

    @handles("fetch-affected-devices")
    async def fetch_affected_devices(self, action: Action) -> None:
        # Shared by the package page and the campaign page.
        await self.fetch_into("affected_devices", path("resolve", action["name"], action["version"]))

    @handles("get-devices-for-package")
    async def get_devices_for_package(self, action: Action) -> None:
        await self.fetch_into(
            "devices_for_package",
            path("devices", packageName=action["name"], packageVersion=action["version"]),
            transform=project_uuids,
        )

    @handles("get-devices-queued-for-package")
    async def get_devices_queued_for_package(self, action: Action) -> None:
        await self.fetch_into(
            "devices_queued_for_package",
            path("packages", action["name"], action["version"], "queued"),
        )

    @handles("get-package-queue-for-device")
    async def get_package_queue(self, action: Action) -> None:
        await self.fetch_into("package_queue_for_device", path("devices", action["device"], "queued"))

    @handles("get-package-history-for-device")
    async def get_package_history(self, action: Action) -> None:
        await self.fetch_into("package_history_for_device", path("devices", action["device"], "history"))

    @handles("list-components-on-device")
    async def list_components(self, action: Action) -> None:
        await self.fetch_into("components_on_device", path("devices", action["device"], "component"))

    @handles("add-component-to-device")
    async def add_component(self, action: Action) -> None:
        device = action["device"]
        await self.gateway.put(path("devices", device, "component", action["partNumber"]))
        self.dispatch("list-components-on-device", device=device)

    @handles("sync-packages-for-device")
    async def sync_packages(self, action: Action) -> None:
        await self.gateway.put(path("devices", action["device"], "sync"))
