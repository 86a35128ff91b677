"""API routers."""

from petroleum_ops.api import (
    milestones,
    operation_progress,
    realtime,
)

__all__ = [
    "milestones",
    "operation_progress",
    "realtime",
]
