"""Accessory adapters for Shelly devices."""

from .base import ShellyAccessory
from .relays import (
    ShellyRelayAccessory,
    Shelly1RelayAccessory,
    Shelly2RelayAccessory,
    ShellyHDRelayAccessory,
    Shelly4ProRelayAccessory,
)
from .rollers import Shelly2RollerShutterAccessory
from .sensors import ShellyHTAccessory
from .factory import (
    ACCESSORY_LAYOUTS,
    AccessoryLayout,
    DeviceCategory,
    accessory_from_context,
    build_accessories,
    device_layout,
    is_supported,
    layout_for,
)

__all__ = [
    "ShellyAccessory",
    "ShellyRelayAccessory",
    "Shelly1RelayAccessory",
    "Shelly2RelayAccessory",
    "ShellyHDRelayAccessory",
    "Shelly4ProRelayAccessory",
    "Shelly2RollerShutterAccessory",
    "ShellyHTAccessory",
    "ACCESSORY_LAYOUTS",
    "AccessoryLayout",
    "DeviceCategory",
    "accessory_from_context",
    "build_accessories",
    "device_layout",
    "is_supported",
    "layout_for",
]
