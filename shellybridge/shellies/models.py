"""
Supported Shelly models.

Each model declares the properties its hardware reports. ``MODELS`` maps the
model identifier announced on the network to the class representing it.
"""

from typing import Dict, Type

from .device import Device, DeviceProperty


class Shelly1(Device):
    """Single relay, no power metering."""
    type = "SHSW-1"
    label = "Shelly 1"
    relay_count = 1

    relay0 = DeviceProperty(False)


class Shelly2(Device):
    """Dual relay that can also drive a roller shutter."""
    type = "SHSW-21"
    label = "Shelly 2"
    relay_count = 2
    power_meter_count = 1

    relay0 = DeviceProperty(False)
    relay1 = DeviceProperty(False)
    power_meter0 = DeviceProperty(0.0)
    mode = DeviceProperty("relay")
    roller_state = DeviceProperty("stop")
    roller_position = DeviceProperty(0)

    async def set_roller_position(self, position: int):
        """Move the roller to an absolute position (0-100)."""
        if not 0 <= position <= 100:
            raise ValueError(f"Roller position out of range: {position}")
        return await self.request("/roller/0", {"go": "to_pos", "roller_pos": position})


class ShellyHD(Device):
    """Dual relay with one power meter per channel."""
    type = "SHSW-22"
    label = "Shelly HD"
    relay_count = 2
    power_meter_count = 2

    relay0 = DeviceProperty(False)
    relay1 = DeviceProperty(False)
    power_meter0 = DeviceProperty(0.0)
    power_meter1 = DeviceProperty(0.0)


class Shelly4Pro(Device):
    """DIN rail unit with four metered relays."""
    type = "SHSW-44"
    label = "Shelly 4Pro"
    relay_count = 4
    power_meter_count = 4

    relay0 = DeviceProperty(False)
    relay1 = DeviceProperty(False)
    relay2 = DeviceProperty(False)
    relay3 = DeviceProperty(False)
    power_meter0 = DeviceProperty(0.0)
    power_meter1 = DeviceProperty(0.0)
    power_meter2 = DeviceProperty(0.0)
    power_meter3 = DeviceProperty(0.0)


class ShellyHT(Device):
    """Battery powered humidity and temperature sensor."""
    type = "SHHT-1"
    label = "Shelly H&T"

    humidity = DeviceProperty(0.0)
    temperature = DeviceProperty(0.0)


class UnknownDevice(Device):
    """Placeholder for models this library does not know."""
    label = "Unknown Shelly"

    def __init__(self, device_type: str, device_id: str, host: str, **kwargs):
        self.type = device_type
        super().__init__(device_id, host, **kwargs)


MODELS: Dict[str, Type[Device]] = {
    cls.type: cls
    for cls in (Shelly1, Shelly2, ShellyHD, Shelly4Pro, ShellyHT)
}
