"""Per-domain action handlers."""

from fleetstore.handlers.base import DomainHandler, HandlerContext, handles
from fleetstore.handlers.components import ComponentsHandler
from fleetstore.handlers.devices import DevicesHandler
from fleetstore.handlers.filters import FiltersHandler
from fleetstore.handlers.firmware import FirmwareHandler
from fleetstore.handlers.packages import PackagesHandler
from fleetstore.handlers.updates import UpdatesHandler

# Registration order is broadcast order.
DOMAIN_HANDLERS: tuple[type[DomainHandler], ...] = (
    UpdatesHandler,
    FiltersHandler,
    DevicesHandler,
    ComponentsHandler,
    FirmwareHandler,
    PackagesHandler,
)

__all__ = [
    "DomainHandler",
    "HandlerContext",
    "handles",
    "DOMAIN_HANDLERS",
    "ComponentsHandler",
    "DevicesHandler",
    "FiltersHandler",
    "FirmwareHandler",
    "PackagesHandler",
    "UpdatesHandler",
]
