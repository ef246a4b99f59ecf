"""
HomeKit accessory model.

Accessories, services and characteristics come from HAP-python; this
package adds the bridged accessory representation, controller writes and the
in-process bridge host that platforms register their accessories with.
"""

from .accessory import (
    CATEGORY_NAMES,
    PlatformAccessory,
    find_characteristic,
    generate_uuid,
)
from .bridge import BridgeHost
from .characteristics import client_write
from .driver import LocalDriver, get_driver

__all__ = [
    "CATEGORY_NAMES",
    "PlatformAccessory",
    "find_characteristic",
    "generate_uuid",
    "BridgeHost",
    "client_write",
    "LocalDriver",
    "get_driver",
]
