"""
Shelly device base class.

A Device mirrors the last known state of one physical unit. State lives in
observable properties: assigning a new value emits an event named after the
property with ``(new_value, old_value)``. Commands are coroutines routed
through a pluggable transport; the wire protocol itself lives elsewhere.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, Tuple

from ..events import Observable, Subscription

logger = logging.getLogger(__name__)


class ShellyError(Exception):
    """Base class for device library errors."""


class DeviceUnavailableError(ShellyError):
    """Raised when a command cannot be sent to a device at all."""


class DeviceRequestError(ShellyError):
    """Raised when a device request fails or times out."""

    def __init__(self, device_id: str, path: str, message: str):
        self.device_id = device_id
        self.path = path
        self.message = message
        super().__init__(f"{device_id} {path}: {message}")


class DeviceTransport(Protocol):
    """Sends one request to a device and returns its decoded reply."""

    async def request(
        self,
        host: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        auth: Optional[Tuple[str, str]] = None,
    ) -> Dict[str, Any]:
        ...


@dataclass
class RequestOptions:
    """Request settings shared by every device of a directory."""
    timeout_ms: Optional[int] = None
    username: Optional[str] = None
    password: Optional[str] = None

    @property
    def auth(self) -> Optional[Tuple[str, str]]:
        if self.username is None:
            return None
        return (self.username, self.password or "")

    @property
    def timeout_seconds(self) -> Optional[float]:
        if not self.timeout_ms:
            return None
        return self.timeout_ms / 1000.0


class DeviceProperty:
    """Descriptor for a device attribute that emits change events."""

    def __init__(self, default: Any = None):
        self.default = default
        self.name = ""

    def __set_name__(self, owner, name: str) -> None:
        self.name = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return instance._values.get(self.name, self.default)

    def __set__(self, instance, value: Any) -> None:
        old = instance._values.get(self.name, self.default)
        if old == value and type(old) is type(value):
            return
        instance._values[self.name] = value
        instance._events.emit(self.name, value, old)


class Device:
    """
    One physical Shelly unit.

    Subclasses declare their model identifier, a human readable label and
    the observable properties the hardware reports.
    """

    type: str = ""
    label: str = "Shelly"
    relay_count: int = 0
    power_meter_count: int = 0

    host = DeviceProperty("")
    online = DeviceProperty(False)
    name = DeviceProperty(None)
    settings = DeviceProperty(None)

    def __init__(
        self,
        device_id: str,
        host: str,
        transport: Optional[DeviceTransport] = None,
        options: Optional[RequestOptions] = None,
    ):
        self.id = device_id
        self._values: Dict[str, Any] = {}
        self._events = Observable()
        self.transport = transport
        self.options = options or RequestOptions()
        self.last_seen = 0.0
        self.discovered = False
        self.host = host

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.type} {self.id} @ {self.host}>"

    # -------------------------------------------------------------------------
    # Observation
    # -------------------------------------------------------------------------

    def subscribe(self, prop: str, callback) -> Subscription:
        """Call ``callback(new, old)`` whenever ``prop`` changes."""
        return self._events.subscribe(prop, callback)

    def listener_count(self, prop: Optional[str] = None) -> int:
        return self._events.listener_count(prop)

    def event_names(self):
        return self._events.event_names()

    # -------------------------------------------------------------------------
    # Channel helpers
    # -------------------------------------------------------------------------

    def relay(self, index: int) -> bool:
        self._check_relay_index(index)
        return getattr(self, f"relay{index}")

    def power_meter(self, index: int) -> float:
        if not 0 <= index < self.power_meter_count:
            raise ValueError(f"{self.type} has no power meter {index}")
        return getattr(self, f"power_meter{index}")

    def _check_relay_index(self, index: int) -> None:
        if not 0 <= index < self.relay_count:
            raise ValueError(f"{self.type} has no relay {index}")

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    async def request(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Send a request through the transport.

        Raises:
            DeviceUnavailableError: No transport is configured
            DeviceRequestError: The transport failed or timed out
        """
        if self.transport is None:
            raise DeviceUnavailableError(f"No transport configured for {self.type} {self.id}")

        logger.debug(f"Request {self.id} {path} {params or {}}")
        try:
            return await asyncio.wait_for(
                self.transport.request(self.host, path, params, self.options.auth),
                timeout=self.options.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise DeviceRequestError(self.id, path, "request timed out") from e
        except ShellyError:
            raise
        except Exception as e:
            raise DeviceRequestError(self.id, path, str(e)) from e

    async def get_settings(self) -> Dict[str, Any]:
        """Fetch the device settings document."""
        return await self.request("/settings")

    async def set_relay(self, index: int, value: bool) -> Dict[str, Any]:
        """Switch one relay on or off."""
        self._check_relay_index(index)
        return await self.request(f"/relay/{index}", {"turn": "on" if value else "off"})
