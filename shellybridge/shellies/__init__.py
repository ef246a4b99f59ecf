"""
Shelly device library.

Models Shelly units as observable Device objects and keeps a directory of
the ones currently present on the network.
"""

from .device import (
    Device,
    DeviceProperty,
    DeviceRequestError,
    DeviceTransport,
    DeviceUnavailableError,
    RequestOptions,
    ShellyError,
)
from .models import (
    MODELS,
    Shelly1,
    Shelly2,
    Shelly4Pro,
    ShellyHD,
    ShellyHT,
    UnknownDevice,
)
from .directory import DeviceDirectory, DEFAULT_STALE_TIMEOUT

__all__ = [
    "Device",
    "DeviceProperty",
    "DeviceRequestError",
    "DeviceTransport",
    "DeviceUnavailableError",
    "RequestOptions",
    "ShellyError",
    "MODELS",
    "Shelly1",
    "Shelly2",
    "Shelly4Pro",
    "ShellyHD",
    "ShellyHT",
    "UnknownDevice",
    "DeviceDirectory",
    "DEFAULT_STALE_TIMEOUT",
]
