"""
Event publisher interface.

Services publish project-scoped change events through ``IEventPublisher``;
the realtime stream consumes them through ``IEventStream``.
"""

import asyncio
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator


class IEventPublisher(ABC):
    """Broadcasts change events to subscribers of a project."""

    @abstractmethod
    async def publish(self, project_id: str, event: dict[str, Any]) -> None:
        """
        Publish an event to the project's subscribers.

        Having no subscribers is not an error.

        Args:
            project_id: Project scope of the event
            event: JSON-serializable payload ({"action", "resource", "payload"})
        """
        pass


class NullEventPublisher(IEventPublisher):
    """Publisher that drops every event."""

    async def publish(self, project_id: str, event: dict[str, Any]) -> None:
        return None


class IEventStream(IEventPublisher):
    """Publisher whose events can also be consumed per project."""

    @abstractmethod
    async def connect(self, project_id: str) -> asyncio.Queue[dict[str, Any]]:
        """Register a subscriber and return the queue its events arrive on."""
        pass

    @abstractmethod
    async def disconnect(self, project_id: str, queue: asyncio.Queue[dict[str, Any]]) -> None:
        """Remove a subscriber; unknown queues are ignored."""
        pass

    @asynccontextmanager
    async def subscribe(self, project_id: str) -> AsyncIterator[asyncio.Queue[dict[str, Any]]]:
        """Subscription that is always released, even if the consumer fails."""
        queue = await self.connect(project_id)
        try:
            yield queue
        finally:
            await self.disconnect(project_id, queue)
