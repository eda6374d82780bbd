"""Action messages — immutable, discriminated requests for a domain operation.

An Action carries exactly one kind plus a read-only payload:

    Action("add-component-to-device", device="D1", partNumber="P-7")

Views build actions; handlers read the payload with action["device"] or
action.get("regex"). Actions are delivered once and never stored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping


@dataclass(frozen=True, init=False)
class Action:
    kind: str
    payload: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __init__(self, kind: str, **payload: Any) -> None:
        if not kind:
            raise ValueError("Action kind must be a non-empty string")
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "payload", MappingProxyType(dict(payload)))

    @classmethod
    def from_dict(cls, message: Mapping[str, Any]) -> Action:
        """Build from the {"actionType": kind, ...fields} wire shape."""
        fields = dict(message)
        try:
            kind = fields.pop("actionType")
        except KeyError:
            raise ValueError("Action message has no actionType") from None
        return cls(kind, **fields)

    def to_dict(self) -> dict[str, Any]:
        return {"actionType": self.kind, **self.payload}

    def __getitem__(self, key: str) -> Any:
        return self.payload[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self.payload.items())
        return f"Action({self.kind!r}{', ' + fields if fields else ''})"


# Wire vocabulary, grouped by the domain handler that consumes each kind.
DEVICE_ACTIONS = (
    "get-devices",
    "search-devices-by-regex",
    "create-device",
    "fetch-affected-devices",
    "get-devices-for-package",
    "get-devices-queued-for-package",
    "get-package-queue-for-device",
    "get-package-history-for-device",
    "list-components-on-device",
    "add-component-to-device",
    "sync-packages-for-device",
)
FIRMWARE_ACTIONS = ("list-firmware-on-device",)
PACKAGE_ACTIONS = (
    "get-packages",
    "search-packages-by-regex",
    "get-package",
    "get-packages-for-device",
    "get-packages-for-filter",
    "create-campaign",
)
COMPONENT_ACTIONS = (
    "search-components-by-regex",
    "get-component",
    "create-component",
    "destroy-component",
    "get-devices-for-component",
)
FILTER_ACTIONS = (
    "get-filters",
    "search-filters-by-regex",
    "get-filter",
    "create-filter",
    "edit-filter",
    "destroy-filter",
    "get-filters-for-package",
    "add-filter-to-package",
    "remove-filter-from-package",
)
UPDATE_ACTIONS = (
    "get-updates",
    "get-update",
    "get-update-status",
    "create-update",
    "cancel-update",
)

ACTION_KINDS = frozenset(
    DEVICE_ACTIONS
    + FIRMWARE_ACTIONS
    + PACKAGE_ACTIONS
    + COMPONENT_ACTIONS
    + FILTER_ACTIONS
    + UPDATE_ACTIONS
)
