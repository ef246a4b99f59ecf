"""
shellybridge - Shelly devices as HomeKit bridge accessories

Keeps the Shelly devices found on the local network in sync with the
accessories a HomeKit bridge exposes: relays become switches, a Shelly 2 in
roller mode becomes a window covering and the H&T becomes a pair of sensors.

Example:
    >>> from shellybridge import BridgeHost, DeviceDirectory, ShellyPlatform
    >>> bridge = BridgeHost()
    >>> directory = DeviceDirectory()
    >>> platform = ShellyPlatform(None, bridge, directory)
    >>> directory.announce("SHSW-1", "ABC123", "192.168.1.2")
"""

__version__ = "0.4.0"

from .config import PlatformConfig
from .device_wrapper import DeviceWrapper
from .homekit import BridgeHost
from .platform import ShellyPlatform
from .shellies import DeviceDirectory

__all__ = [
    "__version__",
    "PlatformConfig",
    "DeviceWrapper",
    "BridgeHost",
    "ShellyPlatform",
    "DeviceDirectory",
]
