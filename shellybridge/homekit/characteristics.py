"""
Controller writes.

pyhap calls ``setter_callback`` synchronously from its HAP server. Device
commands here are coroutines, so in-process writes go through
``client_write()``, which awaits the setter and stores the value only once
the setter succeeded.
"""

import inspect
import logging
from typing import Any

from pyhap.characteristic import Characteristic

logger = logging.getLogger(__name__)


async def client_write(char: Characteristic, value: Any) -> None:
    """
    Apply a write from a controller.

    Raises:
        Whatever the setter raises; the stored value is left untouched
    """
    value = char.to_valid_value(value)
    char.valid_value_or_raise(value)

    setter = char.setter_callback
    if setter is not None:
        result = setter(value)
        if inspect.isawaitable(result):
            await result

    logger.debug(f"{char.display_name} written: {value!r}")
    char.set_value(value)
