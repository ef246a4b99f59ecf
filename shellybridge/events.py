"""
Observer primitives shared by devices, characteristics and the bridge.

Every subscription returns a handle that can cancel exactly the callback it
registered, so owners can tear down their own listeners without touching
anyone else's.
"""

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class Subscription:
    """Handle for a single registered callback."""

    def __init__(self, observable: "Observable", event: str, callback: Callable[..., Any]):
        self._observable = observable
        self.event = event
        self.callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        """Remove the callback. Calling this more than once does nothing."""
        if not self._active:
            return
        self._active = False
        self._observable._remove(self)

    def __repr__(self) -> str:
        state = "active" if self._active else "cancelled"
        return f"<Subscription {self.event!r} {state}>"


class Observable:
    """
    Minimal synchronous event source.

    Usage:
        source = Observable()
        sub = source.subscribe("relay0", lambda new, old: print(new))
        source.emit("relay0", True, False)
        sub.cancel()
    """

    def __init__(self):
        self._listeners: Dict[str, List[Subscription]] = defaultdict(list)

    def subscribe(self, event: str, callback: Callable[..., Any]) -> Subscription:
        """Register a callback for an event and return its handle."""
        subscription = Subscription(self, event, callback)
        self._listeners[event].append(subscription)
        return subscription

    def emit(self, event: str, *args: Any) -> None:
        """Invoke every callback registered for an event, in order."""
        # Snapshot so callbacks may cancel subscriptions mid-emit
        for subscription in list(self._listeners.get(event, ())):
            if subscription.active:
                subscription.callback(*args)

    def listener_count(self, event: Optional[str] = None) -> int:
        """Number of live callbacks for one event, or for all events."""
        if event is not None:
            return len(self._listeners.get(event, ()))
        return sum(len(subs) for subs in self._listeners.values())

    def event_names(self) -> List[str]:
        """Events that currently have at least one callback."""
        return [name for name, subs in self._listeners.items() if subs]

    def _remove(self, subscription: Subscription) -> None:
        subs = self._listeners.get(subscription.event)
        if not subs:
            return
        try:
            subs.remove(subscription)
        except ValueError:
            logger.debug(f"Subscription for {subscription.event!r} already removed")
        if not subs:
            del self._listeners[subscription.event]
