"""
Device model -> accessory layout mapping.

Each supported model (and, for the Shelly 2, each mode) maps to one adapter
class and the number of channels it is instantiated for.
"""

from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Tuple, Type

from ..homekit import PlatformAccessory
from ..shellies import Device
from .base import ShellyAccessory
from .relays import (
    Shelly1RelayAccessory,
    Shelly2RelayAccessory,
    Shelly4ProRelayAccessory,
    ShellyHDRelayAccessory,
)
from .rollers import Shelly2RollerShutterAccessory
from .sensors import ShellyHTAccessory


class DeviceCategory(str, Enum):
    """Device models this bridge knows how to expose."""
    SHELLY1 = "SHSW-1"
    SHELLY2 = "SHSW-21"
    SHELLY_HD = "SHSW-22"
    SHELLY4PRO = "SHSW-44"
    SHELLY_HT = "SHHT-1"

    @classmethod
    def from_type(cls, device_type: str) -> Optional["DeviceCategory"]:
        try:
            return cls(device_type)
        except ValueError:
            return None

    @property
    def has_modes(self) -> bool:
        return self is DeviceCategory.SHELLY2


class AccessoryLayout(NamedTuple):
    accessory_class: Type[ShellyAccessory]
    channels: int


DEFAULT_MODE = "relay"

ACCESSORY_LAYOUTS: Dict[Tuple[DeviceCategory, Optional[str]], AccessoryLayout] = {
    (DeviceCategory.SHELLY1, None): AccessoryLayout(Shelly1RelayAccessory, 1),
    (DeviceCategory.SHELLY2, "relay"): AccessoryLayout(Shelly2RelayAccessory, 2),
    (DeviceCategory.SHELLY2, "roller"): AccessoryLayout(Shelly2RollerShutterAccessory, 1),
    (DeviceCategory.SHELLY_HD, None): AccessoryLayout(ShellyHDRelayAccessory, 2),
    (DeviceCategory.SHELLY4PRO, None): AccessoryLayout(Shelly4ProRelayAccessory, 4),
    (DeviceCategory.SHELLY_HT, None): AccessoryLayout(ShellyHTAccessory, 1),
}


def is_supported(device_type: str) -> bool:
    return DeviceCategory.from_type(device_type) is not None


def layout_for(device_type: str, mode: Optional[str] = None) -> Optional[AccessoryLayout]:
    """The adapter layout for a model/mode, or None for unknown models."""
    category = DeviceCategory.from_type(device_type)
    if category is None:
        return None
    if category.has_modes:
        return ACCESSORY_LAYOUTS.get((category, mode), ACCESSORY_LAYOUTS[(category, DEFAULT_MODE)])
    return ACCESSORY_LAYOUTS[(category, None)]


def device_layout(device: Device) -> Optional[AccessoryLayout]:
    return layout_for(device.type, getattr(device, "mode", None))


def build_accessories(device: Device) -> List[ShellyAccessory]:
    """Create the full adapter set for a device in its current mode."""
    layout = device_layout(device)
    if layout is None:
        return []
    return [layout.accessory_class(device, index) for index in range(layout.channels)]


def accessory_from_context(
    device: Device,
    platform_accessory: PlatformAccessory,
) -> Optional[ShellyAccessory]:
    """Re-attach a cached representation to an adapter for ``device``."""
    context = platform_accessory.context
    mode = context.get("mode", getattr(device, "mode", None))
    layout = layout_for(device.type, mode)
    if layout is None:
        return None

    index = context.get("index", 0)
    if not 0 <= index < layout.channels:
        return None
    return layout.accessory_class(device, index, platform_accessory=platform_accessory)
