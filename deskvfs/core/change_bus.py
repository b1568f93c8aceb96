"""
deskvfs Change Bus

Coarse change notifications for the virtual filesystem. Each event
names one directory whose children may have changed; subscribers are
expected to re-read that directory rather than apply a diff.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, List

from deskvfs.logger import get_logger


@dataclass(frozen=True)
class ChangeEvent:
    """A "directory possibly changed" notification."""
    path: str
    timestamp: float = field(default_factory=time.time, compare=False)


Subscriber = Callable[[ChangeEvent], None]


class ChangeBus:
    """
    Synchronous publish/subscribe channel for ChangeEvents.

    Subscribers are called in subscription order on the publishing
    thread. A subscriber that raises is logged and skipped; delivery to
    the others continues.

    Example:
        >>> bus = ChangeBus()
        >>> token = bus.subscribe(lambda event: print(event.path))
        >>> bus.publish('/home/victxrlarixs/')
        /home/victxrlarixs/
    """

    def __init__(self):
        self._logger = get_logger('bus')
        self._subscribers: dict[int, Subscriber] = {}
        self._next_token = 1
        self._lock = threading.Lock()
        self._published = 0

    def subscribe(self, callback: Subscriber) -> int:
        """
        Register a subscriber.

        Args:
            callback: Called with each ChangeEvent

        Returns:
            Token to pass to unsubscribe()
        """
        with self._lock:
            token = self._next_token
            self._next_token += 1
            self._subscribers[token] = callback
        return token

    def unsubscribe(self, token: int) -> bool:
        """Remove a subscriber. Returns False if the token is unknown."""
        with self._lock:
            return self._subscribers.pop(token, None) is not None

    def publish(self, path: str) -> ChangeEvent:
        """
        Broadcast a change of the directory at path.

        Args:
            path: Canonical path of the affected directory

        Returns:
            The delivered event
        """
        event = ChangeEvent(path=path)

        with self._lock:
            subscribers: List[Subscriber] = list(self._subscribers.values())
            self._published += 1

        for callback in subscribers:
            try:
                callback(event)
            except Exception as e:
                self._logger.error(
                    f"Change subscriber failed: {e}",
                    context={'path': path, 'subscriber': getattr(callback, '__name__', repr(callback))}
                )

        return event

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @property
    def published_count(self) -> int:
        """Number of events published so far."""
        return self._published


class ChangeRecorder:
    """
    Subscriber that keeps every event it receives.

    Handy for collaborators that batch re-renders, and for tests.
    """

    def __init__(self, bus: Optional[ChangeBus] = None):
        self.events: List[ChangeEvent] = []
        self._bus = bus
        self._token: Optional[int] = bus.subscribe(self) if bus else None

    def __call__(self, event: ChangeEvent) -> None:
        self.events.append(event)

    @property
    def paths(self) -> List[str]:
        return [event.path for event in self.events]

    def clear(self) -> None:
        self.events.clear()

    def detach(self) -> None:
        if self._bus is not None and self._token is not None:
            self._bus.unsubscribe(self._token)
            self._token = None
