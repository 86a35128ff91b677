"""
Realtime API endpoints.

Server-Sent Events stream of a project's milestone, task and progress
changes. Mounted under ``/api/realtime``.
"""

import asyncio
import json
from typing import Annotated, Any, AsyncGenerator

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from petroleum_ops.api.deps import EventStream
from petroleum_ops.core.config import Settings, get_settings

router = APIRouter()

KEEPALIVE_COMMENT = ": keep-alive\n\n"
SSE_HEADERS = {"Cache-Control": "no-cache", "X-Accel-Buffering": "no"}


def format_sse(event: str, data: Any) -> str:
    """Encode one SSE message; ``event`` names it, ``data`` is sent as JSON."""
    payload = json.dumps(data, separators=(",", ":"), default=str)
    return f"event: {event}\ndata: {payload}\n\n"


def event_name(event: dict[str, Any]) -> str:
    """``<resource>.<action>`` (e.g. ``task.updated``), or ``message``."""
    resource, action = event.get("resource"), event.get("action")
    if resource and action:
        return f"{resource}.{action}"
    return "message"


@router.get("/projects/{project_id}/stream")
async def stream_project_events(
    project_id: str,
    request: Request,
    stream: EventStream,
    settings: Annotated[Settings, Depends(get_settings)],
) -> StreamingResponse:
    """Stream change events of one project until the client disconnects."""
    keepalive = settings.REALTIME_KEEPALIVE_SECONDS

    async def event_generator() -> AsyncGenerator[str, None]:
        async with stream.subscribe(project_id) as queue:
            yield format_sse("connected", {"projectId": project_id})
            while not await request.is_disconnected():
                try:
                    event = await asyncio.wait_for(queue.get(), timeout=keepalive)
                except asyncio.TimeoutError:
                    yield KEEPALIVE_COMMENT
                    continue
                yield format_sse(event_name(event), event)

    return StreamingResponse(event_generator(), media_type="text/event-stream", headers=SSE_HEADERS)
