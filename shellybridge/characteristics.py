"""Custom characteristics exposed next to the standard HomeKit ones."""

import uuid

from pyhap.characteristic import (
    HAP_FORMAT_FLOAT,
    PROP_FORMAT,
    PROP_MAX_VALUE,
    PROP_MIN_STEP,
    PROP_MIN_VALUE,
    PROP_PERMISSIONS,
    PROP_UNIT,
    Characteristic,
)
from pyhap.const import HAP_PERMISSION_NOTIFY, HAP_PERMISSION_READ

# Current power draw in watts, as understood by the Eve app
CONSUMPTION = "Consumption"
CONSUMPTION_UUID = uuid.UUID("E863F10D-079E-48FF-8F27-9C2605A29F52")
CONSUMPTION_PROPERTIES = {
    PROP_FORMAT: HAP_FORMAT_FLOAT,
    PROP_UNIT: "W",
    PROP_MIN_VALUE: 0,
    PROP_MAX_VALUE: 65535,
    PROP_MIN_STEP: 0.1,
    PROP_PERMISSIONS: [HAP_PERMISSION_READ, HAP_PERMISSION_NOTIFY],
}


def consumption_characteristic(value: float = 0.0) -> Characteristic:
    """A fresh Consumption characteristic holding ``value``."""
    char = Characteristic(CONSUMPTION, CONSUMPTION_UUID, dict(CONSUMPTION_PROPERTIES))
    char.set_value(value, should_notify=False)
    return char
