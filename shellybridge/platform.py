"""
Shelly platform - keeps discovered devices and bridge accessories in sync.

Flow:
    bridge launched -> directory.start()
    directory "discover" -> add_device() -> DeviceWrapper -> register accessories
    directory "stale"    -> remove_device() -> unregister + destroy wrapper
    cached accessory     -> configure_accessory() -> re-attach adapter
"""

import logging
from typing import Dict, Optional

from .accessories import accessory_from_context, is_supported
from .config import PLATFORM_NAME, PLUGIN_NAME, PlatformConfig
from .device_wrapper import DeviceWrapper
from .homekit import BridgeHost, PlatformAccessory
from .shellies import Device, DeviceDirectory

logger = logging.getLogger(__name__)


class ShellyPlatform:
    """
    Coordinator between the device directory and the bridge host.

    Usage:
        platform = ShellyPlatform(PlatformConfig.load("config.json"), bridge, directory)
        bridge.configure_platform(platform)
        bridge.finish_launching()
    """

    def __init__(
        self,
        config: Optional[PlatformConfig],
        bridge: BridgeHost,
        directory: Optional[DeviceDirectory] = None,
    ):
        self.config = config or PlatformConfig()
        self.bridge = bridge
        self.directory = directory or DeviceDirectory()
        self.device_wrappers: Dict[Device, DeviceWrapper] = {}

        if self.config.has_credentials:
            self.directory.set_auth_credentials(self.config.username, self.config.password)
        if self.config.request_timeout:
            self.directory.request_timeout = self.config.request_timeout
        if self.config.stale_timeout is not None:
            self.directory.stale_timeout = self.config.stale_timeout

        self._subscriptions = [
            bridge.subscribe("did_finish_launching", self.did_finish_launching),
            self.directory.subscribe("discover", self.discover_device_handler),
            self.directory.subscribe("stale", self.device_stale_handler),
        ]

    # -------------------------------------------------------------------------
    # Event handlers
    # -------------------------------------------------------------------------

    def did_finish_launching(self) -> None:
        logger.info("Bridge launched, starting device discovery")
        self.directory.start(self.config.network_interface)

    def discover_device_handler(self, device: Device) -> None:
        self.add_device(device)

    def device_stale_handler(self, device: Device) -> None:
        self.remove_device(device)

    # -------------------------------------------------------------------------
    # Device management
    # -------------------------------------------------------------------------

    def add_device(self, device: Device) -> None:
        """Expose a device. Unknown models are ignored; known devices are upserted."""
        if not is_supported(device.type):
            logger.debug(f"Ignoring unsupported device type {device.type!r}")
            return

        wrapper = self.device_wrappers.get(device)
        if wrapper is not None:
            created = wrapper.ensure_accessories()
            if created:
                self.bridge.register_platform_accessories(
                    PLUGIN_NAME, PLATFORM_NAME, [a.platform_accessory for a in created]
                )
                logger.info(f"Added {len(created)} accessories to {device.type} {device.id}")
            return

        wrapper = DeviceWrapper(self, device)
        self.device_wrappers[device] = wrapper
        self.bridge.register_platform_accessories(
            PLUGIN_NAME, PLATFORM_NAME, wrapper.platform_accessories
        )
        logger.info(
            f"Added {device.type} {device.id} at {device.host} "
            f"({len(wrapper.accessories)} accessories)"
        )

    def remove_device(self, device: Device) -> None:
        """Withdraw a device's accessories. Unknown devices are a no-op."""
        wrapper = self.device_wrappers.get(device)
        if wrapper is None:
            return

        self.bridge.unregister_platform_accessories(
            PLUGIN_NAME, PLATFORM_NAME, wrapper.platform_accessories
        )
        wrapper.destroy()
        del self.device_wrappers[device]
        logger.info(f"Removed {device.type} {device.id}")

    def configure_accessory(self, platform_accessory: PlatformAccessory) -> None:
        """Re-attach an accessory restored from the bridge cache."""
        context = platform_accessory.context
        device_type = context.get("type")
        device_id = context.get("id")

        if not device_type or not device_id or not is_supported(device_type):
            logger.warning(f"Cannot restore accessory {platform_accessory.display_name!r}")
            return

        device = self.directory.get_device(device_type, device_id)
        if device is None:
            device = self.directory.create_device(device_type, device_id, context.get("host", ""))
            if context.get("mode"):
                device.mode = context["mode"]
            self.directory.add_device(device)

        wrapper = self.device_wrappers.get(device)
        if wrapper is None:
            wrapper = DeviceWrapper(self, device, [])
            self.device_wrappers[device] = wrapper

        if any(a.platform_accessory is platform_accessory for a in wrapper.accessories):
            logger.debug(f"Accessory {platform_accessory.display_name!r} already restored")
            return

        accessory = accessory_from_context(device, platform_accessory)
        if accessory is None:
            logger.warning(f"No accessory matches cached {platform_accessory.display_name!r}")
            return

        existing = wrapper.find_accessory(type(accessory), accessory.index)
        if existing is not None:
            accessory.detach()
            self.bridge.unregister_platform_accessories(
                PLUGIN_NAME, PLATFORM_NAME, [platform_accessory]
            )
            logger.debug(f"Dropped duplicate cached accessory {platform_accessory.display_name!r}")
            return

        wrapper.add_accessory(accessory)
        logger.debug(f"Restored {platform_accessory.display_name!r}")
