"""fleetstore: action dispatch and reactive atoms for a fleet management console."""

from importlib.metadata import version as _version

__version__ = _version("fleetstore")

from fleetstore.atom import Atom, create_atom, set_scheduler
from fleetstore.store import Store
from fleetstore.actions import Action, ACTION_KINDS
from fleetstore.dispatcher import Dispatcher, Subscription
from fleetstore.workflow import Workflow, WorkflowResult
from fleetstore.transport import Transport, HttpxTransport
from fleetstore.gateway import FailureStream, RequestFailure
from fleetstore.console import Console
from fleetstore.config import ConsoleConfig, load_config
from fleetstore.exceptions import (
    FleetstoreError,
    AlreadyExists,
    DispatchReentryError,
    HttpError,
    NoEventLoopError,
    RequestError,
    TransportError,
)
# textual NOT auto-imported: opt-in only

__all__ = [
    "Atom",
    "create_atom",
    "set_scheduler",
    "Store",
    "Action",
    "ACTION_KINDS",
    "Dispatcher",
    "Subscription",
    "Workflow",
    "WorkflowResult",
    "Transport",
    "HttpxTransport",
    "FailureStream",
    "RequestFailure",
    "Console",
    "ConsoleConfig",
    "load_config",
    "FleetstoreError",
    "AlreadyExists",
    "DispatchReentryError",
    "HttpError",
    "NoEventLoopError",
    "RequestError",
    "TransportError",
]
