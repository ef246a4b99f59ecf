"""
Bridge host.

Holds the accessories a platform registered on a pyhap Bridge and drives the
platform's startup: cached accessories are handed to
``configure_accessory()`` first, then ``did_finish_launching`` fires.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional

from pyhap.accessory import Bridge

from ..events import Observable, Subscription
from .accessory import PlatformAccessory
from .driver import LocalDriver, get_driver

logger = logging.getLogger(__name__)


class BridgeHost:
    """
    In-process bridge host.

    Usage:
        bridge = BridgeHost(cached_accessories=restored)
        platform = ShellyPlatform(config, bridge, directory)
        bridge.configure_platform(platform)
        bridge.finish_launching()
    """

    def __init__(
        self,
        cached_accessories: Optional[Iterable[PlatformAccessory]] = None,
        driver: Optional[LocalDriver] = None,
        display_name: str = "Shelly Bridge",
    ):
        self.driver = driver or get_driver()
        self.bridge = Bridge(self.driver, display_name)
        self._cached: List[PlatformAccessory] = list(cached_accessories or [])
        self._accessories: Dict[str, PlatformAccessory] = {}
        for pa in self._cached:
            self._attach(pa)
        self._events = Observable()
        self._launched = False

    @property
    def accessories(self) -> List[PlatformAccessory]:
        """Every accessory currently registered."""
        return list(self._accessories.values())

    @property
    def launched(self) -> bool:
        return self._launched

    def subscribe(self, event: str, callback: Callable) -> Subscription:
        return self._events.subscribe(event, callback)

    def configure_platform(self, platform) -> None:
        """Hand each cached accessory to the platform, once."""
        cached, self._cached = self._cached, []
        for pa in cached:
            platform.configure_accessory(pa)

    def finish_launching(self) -> None:
        if self._launched:
            return
        self._launched = True
        logger.info(f"Bridge launched with {len(self._accessories)} cached accessories")
        self._events.emit("did_finish_launching")

    def register_platform_accessories(
        self,
        plugin_name: str,
        platform_name: str,
        accessories: List[PlatformAccessory],
    ) -> None:
        for pa in accessories:
            if pa.uuid in self._accessories:
                logger.warning(f"Accessory {pa.display_name} ({pa.uuid}) already registered")
                self._detach(self._accessories[pa.uuid])
            self._attach(pa)
        self.driver.config_changed()
        logger.debug(f"{plugin_name}/{platform_name}: registered {len(accessories)} accessories")

    def unregister_platform_accessories(
        self,
        plugin_name: str,
        platform_name: str,
        accessories: List[PlatformAccessory],
    ) -> None:
        for pa in accessories:
            if self._accessories.get(pa.uuid) is pa:
                self._detach(pa)
        self.driver.config_changed()
        logger.debug(f"{plugin_name}/{platform_name}: unregistered {len(accessories)} accessories")

    def update_platform_accessories(self, accessories: List[PlatformAccessory]) -> None:
        for pa in accessories:
            if pa.uuid in self._accessories and self._accessories[pa.uuid] is not pa:
                self._detach(self._accessories[pa.uuid])
                self._attach(pa)
        self.driver.config_changed()
        logger.debug(f"Updated {len(accessories)} accessories")

    def _attach(self, pa: PlatformAccessory) -> None:
        # A detached accessory keeps its aid, which may have been handed out again
        if pa.aid is not None and pa.aid in self.bridge.accessories:
            pa.aid = None
        self.bridge.add_accessory(pa)
        self._accessories[pa.uuid] = pa

    def _detach(self, pa: PlatformAccessory) -> None:
        self._accessories.pop(pa.uuid, None)
        if self.bridge.accessories.get(pa.aid) is pa:
            del self.bridge.accessories[pa.aid]
