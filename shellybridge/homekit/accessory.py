"""
Bridged accessory representation.

A PlatformAccessory is a pyhap Accessory that also carries the stable UUID
the bridge host caches it under and a ``context`` dict. The host persists the
context and hands it back on restart, so it must only hold plain JSON values.
"""

import uuid
from typing import Any, Dict, Optional

from pyhap.accessory import Accessory
from pyhap.characteristic import Characteristic
from pyhap.const import (
    CATEGORY_BRIDGE,
    CATEGORY_OTHER,
    CATEGORY_SENSOR,
    CATEGORY_SWITCH,
    CATEGORY_WINDOW_COVERING,
)
from pyhap.service import Service

from .driver import get_driver

UUID_NAMESPACE = uuid.UUID("8e0b5c47-3c1c-4f2b-9f4e-2d6a5d0c5e21")

CATEGORY_NAMES = {
    CATEGORY_OTHER: "OTHER",
    CATEGORY_BRIDGE: "BRIDGE",
    CATEGORY_SWITCH: "SWITCH",
    CATEGORY_SENSOR: "SENSOR",
    CATEGORY_WINDOW_COVERING: "WINDOW_COVERING",
}


def generate_uuid(seed: str) -> str:
    """Stable UUID derived from an arbitrary string."""
    return str(uuid.uuid5(UUID_NAMESPACE, seed))


def find_characteristic(service: Service, name: str) -> Optional[Characteristic]:
    """The characteristic with a display name, or None."""
    for char in service.characteristics:
        if char.display_name == name:
            return char
    return None


class PlatformAccessory(Accessory):
    """One accessory as seen by the bridge host."""

    def __init__(
        self,
        display_name: str,
        accessory_uuid: str,
        category: int = CATEGORY_OTHER,
        driver=None,
    ):
        super().__init__(driver or get_driver(), display_name)
        self.uuid = accessory_uuid
        self.category = category
        self.context: Dict[str, Any] = {}

    def __repr__(self) -> str:
        return f"<PlatformAccessory {self.display_name!r} {self.uuid}>"

    @property
    def category_name(self) -> str:
        return CATEGORY_NAMES.get(self.category, str(self.category))

    def add_named_service(self, service_name: str, display_name: Optional[str], *chars) -> Service:
        """
        Add a loader service, optionally carrying a Name and extra characteristics.

        Args:
            service_name: HAP service type, e.g. ``"Switch"``
            display_name: Value of the service's Name characteristic
            chars: Additional (custom) characteristics
        """
        loader = self.driver.loader
        service = loader.get_service(service_name)
        if display_name is not None:
            name = loader.get_char("Name")
            name.set_value(display_name, should_notify=False)
            service.add_characteristic(name)
        service.add_characteristic(*chars)
        self.add_service(service)
        return service

    def add_characteristic(self, service: Service, char: Characteristic) -> Characteristic:
        """Attach a characteristic to a service that is already part of this accessory."""
        service.add_characteristic(char)
        char.broker = self
        self.iid_manager.assign(char)
        return char
