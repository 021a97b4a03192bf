"""Local invalidation signal between an actor's actions and their open views.

Stands in for the browser-wide "marketplace-update" event: after the local
actor creates, buys or cancels a listing, every subscribed view refetches
immediately instead of waiting for its next poll.
"""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Invalidatable(Protocol):
    def invalidate(self) -> None: ...


class InvalidationBus:
    def __init__(self) -> None:
        self._subscribers: list[Invalidatable] = []

    def subscribe(self, view: Invalidatable) -> None:
        if view not in self._subscribers:
            self._subscribers.append(view)

    def unsubscribe(self, view: Invalidatable) -> None:
        if view in self._subscribers:
            self._subscribers.remove(view)

    def publish(self, reason: str) -> None:
        logger.debug("marketplace-update (%s) -> %d views", reason, len(self._subscribers))
        for view in list(self._subscribers):
            view.invalidate()
