"""Relay accessories: one Switch service per relay channel."""

import logging
from typing import Any, Dict, Optional

from pyhap.const import CATEGORY_SWITCH

from ..characteristics import CONSUMPTION, consumption_characteristic
from ..homekit import PlatformAccessory
from ..shellies import Device
from .base import ShellyAccessory

logger = logging.getLogger(__name__)


class ShellyRelayAccessory(ShellyAccessory):
    """
    Exposes relay ``index`` of a device as a switch.

    When ``power_meter_index`` is given the switch also carries a
    Consumption characteristic fed by that power meter.
    """

    category = CATEGORY_SWITCH

    def __init__(
        self,
        device: Device,
        index: int,
        power_meter_index: Optional[int] = None,
        platform_accessory: Optional[PlatformAccessory] = None,
    ):
        self.power_meter_index = power_meter_index
        super().__init__(device, index, platform_accessory)

    @property
    def multi_channel(self) -> bool:
        return self.device.relay_count > 1

    @property
    def context(self) -> Dict[str, Any]:
        context = super().context
        context["index"] = self.index
        return context

    def add_services(self, pa: PlatformAccessory) -> None:
        chars = []
        if self.power_meter_index is not None:
            chars.append(consumption_characteristic(self.device.power_meter(self.power_meter_index)))
        switch = pa.add_named_service("Switch", self.name, *chars)
        switch.get_characteristic("On").set_value(self.device.relay(self.index), should_notify=False)

    def setup_event_handlers(self) -> None:
        self.on_set(self.characteristic("Switch", "On"), self.set_relay)
        self.listen(f"relay{self.index}", self.relay_changed)

        if self.power_meter_index is not None:
            self.listen(f"power_meter{self.power_meter_index}", self.power_meter_changed)

    async def set_relay(self, value: bool) -> None:
        """Controller write to On."""
        if self.device.relay(self.index) == value:
            return

        logger.debug(f"Setting {self.device.id} relay {self.index} to {value}")
        try:
            await self.device.set_relay(self.index, value)
        except Exception as e:
            logger.error(f"Failed to set relay {self.index} of {self.device.id}: {e}")
            raise

    def relay_changed(self, value: bool, old: bool) -> None:
        self.characteristic("Switch", "On").set_value(value)

    def power_meter_changed(self, value: float, old: float) -> None:
        self.characteristic("Switch", CONSUMPTION, consumption_characteristic).set_value(value)


class Shelly1RelayAccessory(ShellyRelayAccessory):
    """The single relay of a Shelly 1."""

    def __init__(
        self,
        device: Device,
        index: int = 0,
        platform_accessory: Optional[PlatformAccessory] = None,
    ):
        super().__init__(device, index, None, platform_accessory)


class Shelly2RelayAccessory(ShellyRelayAccessory):
    """One relay of a Shelly 2 in relay mode; both share the device's power meter."""

    def __init__(
        self,
        device: Device,
        index: int = 0,
        platform_accessory: Optional[PlatformAccessory] = None,
    ):
        super().__init__(device, index, 0, platform_accessory)

    @property
    def context(self) -> Dict[str, Any]:
        context = super().context
        context["mode"] = "relay"
        return context


class ShellyHDRelayAccessory(ShellyRelayAccessory):
    """One metered relay of a Shelly HD."""

    def __init__(
        self,
        device: Device,
        index: int = 0,
        platform_accessory: Optional[PlatformAccessory] = None,
    ):
        super().__init__(device, index, index, platform_accessory)


class Shelly4ProRelayAccessory(ShellyRelayAccessory):
    """One metered relay of a Shelly 4Pro."""

    def __init__(
        self,
        device: Device,
        index: int = 0,
        platform_accessory: Optional[PlatformAccessory] = None,
    ):
        super().__init__(device, index, index, platform_accessory)
