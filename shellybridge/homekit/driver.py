"""
In-process stand-in for the HAP accessory driver.

Accessories need a driver for their service/characteristic loader and for
publishing value changes. Pairing and the HAP server are not run here, so
this driver only keeps the loader, counts configuration changes and
re-emits published values to local subscribers.
"""

import logging
from typing import Any, Callable, Dict, Optional

from pyhap.loader import get_loader

from ..events import Observable, Subscription

logger = logging.getLogger(__name__)


class LocalDriver:
    """
    Minimal driver surface used by pyhap accessories.

    Usage:
        driver = LocalDriver()
        driver.subscribe("publish", lambda data: print(data))
    """

    def __init__(self, loader=None):
        self.loader = loader or get_loader()
        self.config_version = 1
        self._events = Observable()

    def subscribe(self, event: str, callback: Callable) -> Subscription:
        return self._events.subscribe(event, callback)

    def publish(
        self,
        data: Dict[str, Any],
        sender_client_addr: Optional[Any] = None,
        immediate: bool = False,
    ) -> None:
        """Called by accessories whenever a characteristic value changes."""
        self._events.emit("publish", data)

    def config_changed(self) -> None:
        """The set of exposed accessories changed."""
        self.config_version += 1
        logger.debug(f"Accessory configuration is now version {self.config_version}")


_driver: Optional[LocalDriver] = None


def get_driver() -> LocalDriver:
    """Process-wide driver shared by accessories created without one."""
    global _driver
    if _driver is None:
        _driver = LocalDriver()
    return _driver
