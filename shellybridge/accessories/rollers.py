"""Roller shutter accessory for a Shelly 2 in roller mode."""

import logging
from typing import Any, Dict, Optional

from pyhap.const import CATEGORY_WINDOW_COVERING

from ..characteristics import CONSUMPTION, consumption_characteristic
from ..homekit import PlatformAccessory
from ..shellies import Device
from .base import ShellyAccessory

logger = logging.getLogger(__name__)

# PositionState values
DECREASING = 0
INCREASING = 1
STOPPED = 2

ROLLER_STATES = {
    "stop": STOPPED,
    "open": INCREASING,
    "close": DECREASING,
}


def position_state(roller_state: str) -> int:
    return ROLLER_STATES.get(roller_state, STOPPED)


class Shelly2RollerShutterAccessory(ShellyAccessory):
    """Window covering driven by both relays of a Shelly 2."""

    category = CATEGORY_WINDOW_COVERING

    def __init__(
        self,
        device: Device,
        index: int = 0,
        platform_accessory: Optional[PlatformAccessory] = None,
    ):
        self.power_meter_index = 0
        super().__init__(device, index, platform_accessory)

    @property
    def uuid_seed(self) -> str:
        return f"{self.device.type}:{self.device.id}:roller"

    @property
    def context(self) -> Dict[str, Any]:
        context = super().context
        context["mode"] = "roller"
        return context

    def add_services(self, pa: PlatformAccessory) -> None:
        covering = pa.add_named_service(
            "WindowCovering",
            self.name,
            consumption_characteristic(self.device.power_meter(self.power_meter_index)),
        )
        position = self.device.roller_position
        covering.get_characteristic("CurrentPosition").set_value(position, should_notify=False)
        covering.get_characteristic("TargetPosition").set_value(position, should_notify=False)
        covering.get_characteristic("PositionState").set_value(
            position_state(self.device.roller_state), should_notify=False
        )

    def setup_event_handlers(self) -> None:
        self.on_set(self.characteristic("WindowCovering", "TargetPosition"), self.set_position)
        self.listen("roller_state", self.roller_state_changed)
        self.listen("roller_position", self.roller_position_changed)
        self.listen(f"power_meter{self.power_meter_index}", self.power_meter_changed)

    async def set_position(self, value: int) -> None:
        """Controller write to TargetPosition."""
        logger.debug(f"Moving {self.device.id} roller to {value}")
        try:
            await self.device.set_roller_position(value)
        except Exception as e:
            logger.error(f"Failed to move roller of {self.device.id}: {e}")
            raise

    def roller_state_changed(self, value: str, old: str) -> None:
        self.characteristic("WindowCovering", "PositionState").set_value(position_state(value))
        if value == "stop":
            self.characteristic("WindowCovering", "TargetPosition").set_value(self.device.roller_position)

    def roller_position_changed(self, value: int, old: int) -> None:
        self.characteristic("WindowCovering", "CurrentPosition").set_value(value)
        if self.device.roller_state == "stop":
            self.characteristic("WindowCovering", "TargetPosition").set_value(value)

    def power_meter_changed(self, value: float, old: float) -> None:
        self.characteristic("WindowCovering", CONSUMPTION, consumption_characteristic).set_value(value)
