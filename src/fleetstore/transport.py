"""
Transport — the async request capability the console consumes.

Contract:
  - request(method, path, body=None) returns the decoded JSON body
    (None for an empty body)
  - A non-2xx answer raises HttpError carrying the status and, when the
    backend sent one, the errorMsg of its JSON error body
  - Network failures and undecodable bodies raise TransportError
  - Timeouts are the transport's business, not the caller's
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from fleetstore.exceptions import HttpError, TransportError

logger = logging.getLogger("fleetstore.transport")


class Transport(ABC):
    """Interface for the backend request capability."""

    @abstractmethod
    async def request(self, method: str, path: str, body: Any = None) -> Any:
        """Send one request and return its decoded JSON body."""
        ...

    async def aclose(self) -> None:
        """Release connections. Default: nothing to release."""


class HttpxTransport(Transport):
    """Transport backed by a shared httpx.AsyncClient."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Accept": "application/json", **(headers or {})},
        )

    async def request(self, method: str, path: str, body: Any = None) -> Any:
        try:
            response = await self._client.request(method, path, json=body)
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc

        if response.is_error:
            raise HttpError(
                response.status_code,
                _error_message(response),
                reason=response.reason_phrase,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(f"{method} {path} returned malformed JSON") from exc

    async def aclose(self) -> None:
        await self._client.aclose()


def _error_message(response: httpx.Response) -> str | None:
    """Extract errorMsg from a JSON error body, if there is one."""
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict) and isinstance(data.get("errorMsg"), str):
        return data["errorMsg"]
    return None
