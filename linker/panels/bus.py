"""
Synchronous publish/subscribe bus for highlight messages.

Delivery order is subscription order. A publish delivers to the subscribers
present when it starts; a subscriber removed during delivery receives
nothing after ``unsubscribe`` returns.
"""

import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict

from .messages import HighlightMessage

logger = logging.getLogger(__name__)

MessageHandler = Callable[[HighlightMessage], None]


@dataclass(frozen=True)
class Subscription:
    """Token returned by ``subscribe``; pass it back to ``unsubscribe``."""

    id: int
    name: str = ""


class MessageBus:
    """Delivers each published message to every subscriber, in order."""

    def __init__(self):
        self._lock = threading.RLock()
        self._handlers: Dict[int, MessageHandler] = {}
        self._names: Dict[int, str] = {}
        self._ids = itertools.count(1)

    def subscribe(self, handler: MessageHandler, name: str = "") -> Subscription:
        with self._lock:
            subscription = Subscription(id=next(self._ids), name=name)
            self._handlers[subscription.id] = handler
            self._names[subscription.id] = name
        logger.debug("Subscribed %s (%s)", subscription.id, name or "anonymous")
        return subscription

    def unsubscribe(self, subscription: Subscription) -> bool:
        """Remove a subscriber. Returns False if it was not subscribed."""
        with self._lock:
            removed = self._handlers.pop(subscription.id, None) is not None
            self._names.pop(subscription.id, None)
        return removed

    def is_subscribed(self, subscription: Subscription) -> bool:
        with self._lock:
            return subscription.id in self._handlers

    def publish(self, message: HighlightMessage) -> int:
        """
        Deliver ``message`` synchronously.

        A failing handler is logged and skipped; delivery continues.

        Returns:
            Number of handlers the message was delivered to
        """
        with self._lock:
            snapshot = list(self._handlers)

        delivered = 0
        for subscription_id in snapshot:
            with self._lock:
                handler = self._handlers.get(subscription_id)
            if handler is None:
                continue
            try:
                handler(message)
                delivered += 1
            except Exception as e:  # pylint: disable=broad-except
                logger.warning(
                    "Handler %s failed on %s: %s",
                    self._names.get(subscription_id) or subscription_id,
                    message.type.value,
                    e,
                )

        logger.debug("Delivered %s to %s handlers", message.type.value, delivered)
        return delivered

    def __len__(self) -> int:
        with self._lock:
            return len(self._handlers)
