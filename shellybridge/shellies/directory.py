"""
Device directory - tracks every Shelly device currently known.

The directory is fed by a discovery source through ``announce()``. It emits:
- ``discover(device)`` the first time a device is announced
- ``stale(device)`` when a device has not been announced for ``stale_timeout``
"""

import asyncio
import logging
import time
from typing import Callable, Dict, Iterator, Optional, Tuple

from ..events import Observable, Subscription
from .device import Device, DeviceTransport, RequestOptions
from .models import MODELS, UnknownDevice

logger = logging.getLogger(__name__)

# Devices unseen for this long are dropped (milliseconds)
DEFAULT_STALE_TIMEOUT = 8 * 60 * 60 * 1000

# How often the stale check runs while started (seconds)
STALE_CHECK_INTERVAL = 60.0


class DeviceDirectory:
    """
    Registry of devices keyed by (type, id).

    Usage:
        directory = DeviceDirectory(transport=my_transport)
        directory.subscribe("discover", on_discover)
        directory.start()
        directory.announce("SHSW-1", "ABC123", "192.168.1.2")
    """

    def __init__(self, transport: Optional[DeviceTransport] = None):
        self.transport = transport
        self.options = RequestOptions()
        self.stale_timeout: int = DEFAULT_STALE_TIMEOUT
        self.network_interface: Optional[str] = None
        self._devices: Dict[Tuple[str, str], Device] = {}
        self._events = Observable()
        self._stale_task: Optional[asyncio.Task] = None
        self._running = False

    def __len__(self) -> int:
        return len(self._devices)

    def __iter__(self) -> Iterator[Device]:
        return iter(list(self._devices.values()))

    @property
    def running(self) -> bool:
        return self._running

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    @property
    def request_timeout(self) -> Optional[int]:
        """Request timeout in milliseconds."""
        return self.options.timeout_ms

    @request_timeout.setter
    def request_timeout(self, value: Optional[int]) -> None:
        self.options.timeout_ms = value

    def set_auth_credentials(self, username: str, password: str) -> None:
        """Credentials sent with every device request."""
        self.options.username = username
        self.options.password = password

    def subscribe(self, event: str, callback: Callable) -> Subscription:
        return self._events.subscribe(event, callback)

    # -------------------------------------------------------------------------
    # Device bookkeeping
    # -------------------------------------------------------------------------

    def create_device(self, device_type: str, device_id: str, host: str) -> Device:
        """Create (but do not add) a device of the given model."""
        cls = MODELS.get(device_type)
        if cls is None:
            return UnknownDevice(
                device_type, device_id, host,
                transport=self.transport, options=self.options,
            )
        return cls(device_id, host, transport=self.transport, options=self.options)

    def get_device(self, device_type: str, device_id: str) -> Optional[Device]:
        return self._devices.get((device_type, device_id))

    def has_device(self, device: Device) -> bool:
        return self._devices.get((device.type, device.id)) is device

    def add_device(self, device: Device) -> None:
        """Track a device without announcing it (e.g. restored from a cache)."""
        key = (device.type, device.id)
        if not device.last_seen:
            device.last_seen = time.time()
        if key in self._devices and self._devices[key] is not device:
            logger.warning(f"Replacing existing device {device.type} {device.id}")
        self._devices[key] = device

    def remove_device(self, device: Device) -> None:
        if self.has_device(device):
            del self._devices[(device.type, device.id)]

    def announce(
        self,
        device_type: str,
        device_id: str,
        host: str,
        now: Optional[float] = None,
    ) -> Device:
        """
        Record that a device was seen on the network.

        ``discover`` fires the first time a device is announced, including
        devices that were added earlier without being announced.

        Returns:
            The (possibly new) device
        """
        now = time.time() if now is None else now
        device = self.get_device(device_type, device_id)

        if device is None:
            device = self.create_device(device_type, device_id, host)
            self.add_device(device)

        device.last_seen = now
        device.host = host
        device.online = True

        if not device.discovered:
            device.discovered = True
            logger.info(f"Discovered {device_type} {device_id} at {host}")
            self._events.emit("discover", device)
        return device

    def check_stale(self, now: Optional[float] = None) -> int:
        """
        Drop devices that have not been announced within ``stale_timeout``.

        Returns:
            Number of devices dropped
        """
        if not self.stale_timeout:
            return 0

        now = time.time() if now is None else now
        cutoff = now - self.stale_timeout / 1000.0
        stale = [d for d in self._devices.values() if d.last_seen < cutoff]

        for device in stale:
            logger.info(f"Device {device.type} {device.id} is stale")
            device.online = False
            self.remove_device(device)
            self._events.emit("stale", device)

        return len(stale)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self, network_interface: Optional[str] = None) -> None:
        """Start watching for stale devices. Requires a running event loop."""
        if self._running:
            return

        self.network_interface = network_interface
        self._running = True
        self._stale_task = asyncio.get_running_loop().create_task(self._watch_stale())
        logger.info(f"Device directory started (interface={network_interface or 'any'})")

    async def stop(self) -> None:
        if not self._running:
            return

        self._running = False
        if self._stale_task:
            self._stale_task.cancel()
            try:
                await self._stale_task
            except asyncio.CancelledError:
                pass
            self._stale_task = None
        logger.info("Device directory stopped")

    async def _watch_stale(self) -> None:
        while self._running:
            await asyncio.sleep(STALE_CHECK_INTERVAL)
            try:
                self.check_stale()
            except Exception as e:
                logger.error(f"Stale check failed: {e}")
