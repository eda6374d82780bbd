"""Filter actions, including the package/filter association."""

from __future__ import annotations

from fleetstore.actions import Action
from fleetstore.gateway import path
from fleetstore.handlers.base import DomainHandler, handles
from fleetstore.workflow import Workflow, WorkflowResult


class FiltersHandler(DomainHandler):
    domain = "filters"

    @handles("get-filters")
    async def get_filters(self, action: Action) -> None:
        await self.fetch_into("filters", path("filters"))

    @handles("search-filters-by-regex")
    async def search_filters(self, action: Action) -> None:
        await self.fetch_into("searchable_filters", path("filters", "search", regex=action.get("regex")))

    @handles("get-filter")
    async def get_filter(self, action: Action) -> None:
        await self.fetch_into("show_filter", path("filters", action["name"]))

    @handles("create-filter")
    async def create_filter(self, action: Action) -> WorkflowResult:
        filter_ = dict(action["filter"])
        name = filter_["name"]
        workflow = (
            Workflow("create-filter")
            .step(
                "probe",
                lambda: self.require_absent("Filter", name, path("filters", name)),
                writes=False,
            )
            .step("create", lambda: self.gateway.post(path("filters"), filter_))
            .step("refresh", self.then_dispatch("search-filters-by-regex"), writes=False)
        )
        return await workflow.run()

    @handles("edit-filter")
    async def edit_filter(self, action: Action) -> None:
        filter_ = dict(action["filter"])
        await self.gateway.put(path("filters", filter_["name"]), filter_)
        self.dispatch("get-filter", name=filter_["name"])

    @handles("destroy-filter")
    async def destroy_filter(self, action: Action) -> None:
        await self.gateway.delete(path("filters", action["name"]))
        self.dispatch("search-filters-by-regex")

    @handles("get-filters-for-package")
    async def get_filters_for_package(self, action: Action) -> None:
        await self.fetch_into(
            "filters_for_package", path("packages", action["name"], action["version"], "filter")
        )

    @handles("add-filter-to-package")
    async def add_filter_to_package(self, action: Action) -> None:
        name, version = action["name"], action["version"]
        await self.gateway.put(path("packageFilters", name, version, action["filter"]))
        self.dispatch("get-filters-for-package", name=name, version=version)

    @handles("remove-filter-from-package")
    async def remove_filter_from_package(self, action: Action) -> None:
        name, version = action["name"], action["version"]
        await self.gateway.delete(path("packageFilters", name, version, action["filter"]))
        self.dispatch("get-filters-for-package", name=name, version=version)
