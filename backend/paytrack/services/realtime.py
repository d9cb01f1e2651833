# Overview: Registry of open websocket subscribers and the broadcast primitive.

from __future__ import annotations

import logging
import threading
from typing import Any, Iterable


logger = logging.getLogger(__name__)


def _is_open(handle: Any) -> bool:
    # simple_websocket.Server exposes `connected`; it flips to False on close
    return bool(getattr(handle, "connected", False))


class SubscriberRegistry:
    """
    Thread-safe set of subscriber handles.

    Handles are added when a websocket connects and discarded when its
    receive loop ends. broadcast() iterates over a snapshot taken under the
    lock, so connects and disconnects during a broadcast never disturb it.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: set = set()

    def add(self, handle: Any) -> None:
        with self._lock:
            self._subscribers.add(handle)
        logger.debug("Subscriber connected (%d open)", len(self))

    def discard(self, handle: Any) -> None:
        with self._lock:
            self._subscribers.discard(handle)
        logger.debug("Subscriber disconnected (%d open)", len(self))

    def snapshot(self) -> list:
        with self._lock:
            return list(self._subscribers)

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def broadcast(self, payload: str) -> int:
        """
        Send payload to every open subscriber.

        Each send is attempted independently: a closed or failing handle is
        skipped and logged without affecting the others. No retry.
        Returns the number of subscribers the payload was handed to.
        """
        return _send_all(self.snapshot(), payload)


def _send_all(handles: Iterable[Any], payload: str) -> int:
    delivered = 0
    for handle in handles:
        if not _is_open(handle):
            continue
        try:
            handle.send(payload)
            delivered += 1
        except Exception as e:
            logger.warning("Push to subscriber failed: %s", e)
    return delivered
