"""fleetstore exception hierarchy."""

from __future__ import annotations


class FleetstoreError(Exception):
    """Base exception for all fleetstore errors."""


class ConfigError(FleetstoreError):
    """Raised when the configuration is invalid or cannot be read."""


class DispatchReentryError(FleetstoreError):
    """Raised when dispatch() is called while another dispatch is running."""


class NoEventLoopError(FleetstoreError):
    """Raised when an action is dispatched with no running event loop to carry it."""


class RequestError(FleetstoreError):
    """Raised when a backend request does not produce a usable response."""


class TransportError(RequestError):
    """Network failure, or a response body that is not valid JSON."""


class HttpError(RequestError):
    """The backend answered with a non-2xx status."""

    def __init__(self, status: int, error_msg: str | None = None, reason: str = "") -> None:
        self.status = status
        self.error_msg = error_msg
        self.reason = reason
        super().__init__(error_msg or f"{status} {reason}".strip())

    @property
    def session_expired(self) -> bool:
        return self.status == 401


class AlreadyExists(FleetstoreError):
    """A client-side existence probe found the resource already present."""

    def __init__(self, noun: str, identifier: str) -> None:
        self.noun = noun
        self.identifier = identifier
        super().__init__(f"{noun} already exists")
