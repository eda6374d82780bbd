"""Firmware actions."""

from __future__ import annotations

from fleetstore.actions import Action
from fleetstore.gateway import path
from fleetstore.handlers.base import DomainHandler, handles


class FirmwareHandler(DomainHandler):
    domain = "firmware"

    @handles("list-firmware-on-device")
    async def list_firmware(self, action: Action) -> None:
        await self.fetch_into("firmware_on_device", path("firmware", action["device"]))
