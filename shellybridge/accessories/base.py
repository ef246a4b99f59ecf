"""
Accessory adapter base class.

An adapter binds one device channel to one PlatformAccessory: device
property changes are pushed into characteristic values, and controller
writes are turned into device commands.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from pyhap.characteristic import Characteristic
from pyhap.const import CATEGORY_OTHER
from pyhap.service import Service

from ..events import Subscription
from ..homekit import PlatformAccessory, find_characteristic, generate_uuid
from ..shellies import Device

logger = logging.getLogger(__name__)

MANUFACTURER = "Allterco Robotics"


class ShellyAccessory:
    """
    Base adapter.

    Subclasses implement ``add_services()`` to build the representation and
    ``setup_event_handlers()`` to wire device and characteristic events.
    """

    category: int = CATEGORY_OTHER
    multi_channel: bool = False

    def __init__(
        self,
        device: Device,
        index: int = 0,
        platform_accessory: Optional[PlatformAccessory] = None,
    ):
        self.device = device
        self.index = index
        self._subscriptions: List[Subscription] = []
        self._setters: List[Tuple[Characteristic, Callable]] = []
        self.platform_accessory = platform_accessory or self.create_platform_accessory()
        self.setup_event_handlers()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.device.id} #{self.index}>"

    @property
    def name(self) -> str:
        base = self.device.name or f"{self.device.label} {self.device.id}"
        if self.multi_channel:
            return f"{base} #{self.index + 1}"
        return base

    @property
    def uuid_seed(self) -> str:
        return f"{self.device.type}:{self.device.id}:{self.index}"

    @property
    def context(self) -> Dict[str, Any]:
        """Values persisted with the representation."""
        return {
            "type": self.device.type,
            "id": self.device.id,
            "host": self.device.host,
        }

    def create_platform_accessory(self) -> PlatformAccessory:
        """Build, store and return a fresh representation seeded from the device."""
        pa = PlatformAccessory(self.name, generate_uuid(self.uuid_seed), self.category)
        pa.context.update(self.context)
        pa.set_info_service(manufacturer=MANUFACTURER, model=self.device.type, serial_number=self.device.id)
        self.add_services(pa)
        self.platform_accessory = pa
        return pa

    def add_services(self, pa: PlatformAccessory) -> None:
        raise NotImplementedError

    def setup_event_handlers(self) -> None:
        raise NotImplementedError

    def service(self, name: str) -> Service:
        """The representation's service of a type, added if the cache lacks it."""
        service = self.platform_accessory.get_service(name)
        if service is None:
            service = self.platform_accessory.add_named_service(name, self.name)
        return service

    def characteristic(
        self,
        service_name: str,
        char_name: str,
        factory: Optional[Callable[[], Characteristic]] = None,
    ) -> Characteristic:
        """
        A characteristic of one of the representation's services.

        ``factory`` builds the characteristic when a cached representation
        lacks it; without one the loader's definition is used.
        """
        service = self.service(service_name)
        char = find_characteristic(service, char_name)
        if char is None:
            char = factory() if factory else self.platform_accessory.driver.loader.get_char(char_name)
            self.platform_accessory.add_characteristic(service, char)
        return char

    def on_set(self, char: Characteristic, callback: Callable[[Any], Any]) -> None:
        """Route controller writes of ``char`` to ``callback``."""
        char.setter_callback = callback
        self._setters.append((char, callback))

    def listen(self, prop: str, callback: Callable[[Any, Any], None]) -> None:
        self._subscriptions.append(self.device.subscribe(prop, callback))

    def detach(self) -> None:
        """Drop every device subscription and setter this adapter registered."""
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions.clear()

        for char, callback in self._setters:
            if char.setter_callback == callback:
                char.setter_callback = None
        self._setters.clear()
