"""Package actions and install campaigns."""

from __future__ import annotations

from fleetstore.actions import Action
from fleetstore.gateway import path
from fleetstore.handlers.base import DomainHandler, handles


class PackagesHandler(DomainHandler):
    domain = "packages"

    @handles("get-packages")
    async def get_packages(self, action: Action) -> None:
        await self.fetch_into("packages", path("packages"))

    @handles("search-packages-by-regex")
    async def search_packages(self, action: Action) -> None:
        await self.fetch_into("searchable_packages", path("packages", "search", regex=action.get("regex")))

    @handles("get-package")
    async def get_package(self, action: Action) -> None:
        await self.fetch_into("show_package", path("packages", action["name"], action["version"]))

    @handles("get-packages-for-device")
    async def get_packages_for_device(self, action: Action) -> None:
        await self.fetch_into("packages_for_device", path("devices", action["device"], "package"))

    @handles("get-packages-for-filter")
    async def get_packages_for_filter(self, action: Action) -> None:
        await self.fetch_into("packages_for_filter", path("filters", action["filter"], "package"))

    @handles("create-campaign")
    async def create_campaign(self, action: Action) -> None:
        """Queue a package for install on its affected devices."""
        await self.gateway.post(path("install_campaigns"), dict(action["package"]))
        self.dispatch("get-updates")
