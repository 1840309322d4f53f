from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable, Dict, List, Any

logger = logging.getLogger(__name__)


class MessageBus:
    """Very lightweight in-process pub-sub message bus."""

    def __init__(self):
        self._subscribers: Dict[str, List[Callable[[Any], None]]] = defaultdict(list)

    def subscribe(self, topic: str, cb: Callable[[Any], None]) -> Callable[[], None]:
        """Register ``cb`` for ``topic`` and return a function that removes it."""
        self._subscribers[topic].append(cb)

        def unsubscribe():
            if cb in self._subscribers.get(topic, []):
                self._subscribers[topic].remove(cb)

        return unsubscribe

    def publish(self, topic: str, payload: Any):
        # a failing subscriber must not stop the others or the publisher
        for cb in list(self._subscribers.get(topic, [])):
            try:
                cb(payload)
            except Exception:
                logger.exception("[bus] subscriber %r failed on topic=%s", cb, topic)
