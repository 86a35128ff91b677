"""Abstract interfaces for infrastructure abstraction."""

from petroleum_ops.interfaces.event_publisher import IEventPublisher, IEventStream, NullEventPublisher
from petroleum_ops.interfaces.milestone_repository import IMilestoneRepository
from petroleum_ops.interfaces.operation_progress_repository import IOperationProgressRepository

__all__ = [
    "IEventPublisher",
    "IEventStream",
    "NullEventPublisher",
    "IMilestoneRepository",
    "IOperationProgressRepository",
]
