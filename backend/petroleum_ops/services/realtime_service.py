"""
In-process realtime fan-out.

Each stream subscriber owns a bounded queue of event dicts. A subscriber that
stops draining its queue loses its oldest events instead of blocking
publishers or other subscribers.
"""

import asyncio
import logging
from collections import defaultdict
from typing import Any

from petroleum_ops.interfaces.event_publisher import IEventStream

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 100


class RealtimeManager(IEventStream):
    """Project-scoped subscriber registry implementing the event stream."""

    def __init__(self, max_queue_size: int = DEFAULT_QUEUE_SIZE) -> None:
        self._max_queue_size = max_queue_size
        self._subscribers: defaultdict[str, list[asyncio.Queue[dict[str, Any]]]] = defaultdict(list)
        self._lock = asyncio.Lock()

    async def connect(self, project_id: str) -> asyncio.Queue[dict[str, Any]]:
        queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=self._max_queue_size)
        async with self._lock:
            self._subscribers[project_id].append(queue)
            count = len(self._subscribers[project_id])
        logger.debug("Subscriber joined project %s (%d connected)", project_id, count)
        return queue

    async def disconnect(self, project_id: str, queue: asyncio.Queue[dict[str, Any]]) -> None:
        async with self._lock:
            queues = self._subscribers.get(project_id, [])
            if queue in queues:
                queues.remove(queue)
            if not queues:
                self._subscribers.pop(project_id, None)
        logger.debug("Subscriber left project %s", project_id)

    async def subscriber_count(self, project_id: str) -> int:
        async with self._lock:
            return len(self._subscribers.get(project_id, []))

    async def publish(self, project_id: str, event: dict[str, Any]) -> None:
        async with self._lock:
            queues = list(self._subscribers.get(project_id, []))
        for queue in queues:
            if queue.full():
                queue.get_nowait()
                logger.warning("Dropped oldest event for a slow subscriber of project %s", project_id)
            queue.put_nowait(event)
