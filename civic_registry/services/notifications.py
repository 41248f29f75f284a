from __future__ import annotations

import logging
from typing import Awaitable, Callable, List

from civic_registry.models.events import RegistryEvent
from civic_registry.repositories.event_repository import EventRepository

logger = logging.getLogger(__name__)

Listener = Callable[[RegistryEvent], Awaitable[None]]


class NotificationService:
    """
    Fire-and-forget delivery of registry events.

    `publish` is called after the state change is committed, so neither a
    failed event insert nor a failing listener is reported to the caller;
    both are logged with their traceback.
    """

    def __init__(self, repo: EventRepository):
        self.repo = repo
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    async def list_events(self, event_type: str | None = None, limit: int = 200):
        return await self.repo.list(event_type=event_type, limit=limit)

    async def publish(self, event: RegistryEvent) -> None:
        try:
            await self.repo.create(event.model_dump())
        except Exception:
            logger.exception("could not persist %s %s", event.type, event.id)
        else:
            logger.debug("published %s %s", event.type, event.id)

        for listener in self._listeners:
            try:
                await listener(event)
            except Exception:
                logger.exception("listener %r failed on %s", listener, event.id)
