"""
DeviceWrapper - owns the accessory adapters of one device.

Besides holding the adapters, the wrapper reacts to device-level events:
- ``online``: load the device settings the first time it is reachable
- ``host``: refresh the addressing stored with each representation
- ``mode``: rebuild the device through the platform (topology changes)
"""

import asyncio
import logging
from typing import TYPE_CHECKING, List, Optional, Sequence, Type

from .accessories import ShellyAccessory, build_accessories, device_layout
from .events import Subscription
from .homekit import PlatformAccessory
from .shellies import Device

if TYPE_CHECKING:
    from .platform import ShellyPlatform

logger = logging.getLogger(__name__)


class DeviceWrapper:
    """
    Per-device owner of adapters and device subscriptions.

    ``accessories=None`` builds the default adapter set for the device; an
    explicit sequence (possibly empty) is used as given.
    """

    def __init__(
        self,
        platform: "ShellyPlatform",
        device: Device,
        accessories: Optional[Sequence[ShellyAccessory]] = None,
    ):
        self.platform = platform
        self.device = device
        if accessories is None:
            self.accessories: List[ShellyAccessory] = build_accessories(device)
        else:
            self.accessories = list(accessories)

        self._settings_task: Optional[asyncio.Task] = None
        self._subscriptions: List[Subscription] = [
            device.subscribe("online", self.online_changed),
            device.subscribe("host", self.host_changed),
            device.subscribe("mode", self.mode_changed),
        ]

        if device.online:
            self.schedule_settings_load()

    def __repr__(self) -> str:
        return f"<DeviceWrapper {self.device.type} {self.device.id} ({len(self.accessories)} accessories)>"

    @property
    def platform_accessories(self) -> List[PlatformAccessory]:
        return [a.platform_accessory for a in self.accessories]

    # -------------------------------------------------------------------------
    # Accessories
    # -------------------------------------------------------------------------

    def add_accessory(self, accessory: ShellyAccessory) -> None:
        self.accessories.append(accessory)

    def find_accessory(self, cls: Type[ShellyAccessory], index: int) -> Optional[ShellyAccessory]:
        for accessory in self.accessories:
            if type(accessory) is cls and accessory.index == index:
                return accessory
        return None

    def ensure_accessories(self) -> List[ShellyAccessory]:
        """
        Add any default adapter that is missing.

        Returns:
            The adapters that were created
        """
        layout = device_layout(self.device)
        if layout is None:
            return []

        created = []
        for index in range(layout.channels):
            if self.find_accessory(layout.accessory_class, index) is None:
                accessory = layout.accessory_class(self.device, index)
                self.add_accessory(accessory)
                created.append(accessory)
        return created

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    def schedule_settings_load(self) -> None:
        if self._settings_task is not None and not self._settings_task.done():
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(
                f"No running event loop, settings for {self.device.id} "
                f"will load when it reconnects"
            )
            return
        self._settings_task = loop.create_task(self.load_settings())

    async def load_settings(self) -> None:
        """Fetch settings once; a failure marks the device offline."""
        device = self.device
        if device.settings is not None:
            return
        if device.transport is None:
            logger.debug(f"No transport for {device.type} {device.id}, not loading settings")
            return

        try:
            settings = await device.get_settings()
        except Exception as e:
            logger.warning(f"Failed to load settings for {device.type} {device.id}: {e}")
            device.online = False
            return

        device.settings = settings
        name = settings.get("name") if isinstance(settings, dict) else None
        if name:
            device.name = name
        logger.debug(f"Loaded settings for {device.type} {device.id}")

    # -------------------------------------------------------------------------
    # Device events
    # -------------------------------------------------------------------------

    def online_changed(self, online: bool, was_online: bool) -> None:
        if online:
            self.schedule_settings_load()

    def host_changed(self, host: str, old_host: str) -> None:
        logger.info(f"{self.device.type} {self.device.id} moved from {old_host} to {host}")
        accessories = self.platform_accessories
        for pa in accessories:
            pa.context["host"] = host
        self.platform.bridge.update_platform_accessories(accessories)

    def mode_changed(self, mode: str, old_mode: str) -> None:
        logger.info(f"{self.device.type} {self.device.id} switched from {old_mode} to {mode} mode")
        device = self.device
        self.platform.remove_device(device)
        self.platform.add_device(device)

    # -------------------------------------------------------------------------
    # Teardown
    # -------------------------------------------------------------------------

    def destroy(self) -> None:
        """Drop every device subscription and detach every adapter."""
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions.clear()

        if self._settings_task is not None and not self._settings_task.done():
            self._settings_task.cancel()
        self._settings_task = None

        for accessory in self.accessories:
            accessory.detach()
        self.accessories.clear()
