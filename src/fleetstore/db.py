"""Console store schema — one atom per logical backend resource.

Sequence atoms start empty, record atoms start as {}, and post_status
holds the message of the most recent failed request ("" when clear).
"""

from fleetstore.store import Store

SCHEMA: dict[str, object] = {
    # Devices
    "devices": [],
    "searchable_devices": [],
    "affected_devices": [],
    "devices_for_package": [],
    "devices_queued_for_package": [],
    "devices_for_component": [],
    "package_queue_for_device": [],
    "package_history_for_device": [],
    "packages_for_device": [],
    "components_on_device": [],
    "firmware_on_device": [],
    # Packages
    "packages": [],
    "searchable_packages": [],
    "show_package": {},
    "packages_for_filter": [],
    # Filters
    "filters": [],
    "searchable_filters": [],
    "show_filter": {},
    "filters_for_package": [],
    # Components
    "searchable_components": [],
    "show_component": {},
    # Updates
    "updates": [],
    "show_update": {},
    "update_status": {},
    # Status line for the last failed request
    "post_status": "",
}


def create(initial: dict | None = None) -> Store:
    """Create the console store with defaults from SCHEMA."""
    return Store(SCHEMA, initial)
