"""
Dependency injection for API endpoints.

This module provides FastAPI dependencies that inject the correct
infrastructure implementations based on environment configuration.
"""

from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends, Header

from petroleum_ops.core.config import Settings, get_settings
from petroleum_ops.interfaces.event_publisher import IEventPublisher, IEventStream
from petroleum_ops.interfaces.milestone_repository import IMilestoneRepository
from petroleum_ops.interfaces.operation_progress_repository import IOperationProgressRepository
from petroleum_ops.services.milestone_service import MilestoneService
from petroleum_ops.services.operation_progress_service import OperationProgressService
from petroleum_ops.services.status_transitions import StatusTransitionPolicy


# ===========================================
# Repository Dependencies
# ===========================================


@lru_cache()
def get_milestone_repository() -> IMilestoneRepository:
    """Get milestone repository instance."""
    from petroleum_ops.infrastructure.local.milestone_repository import SqliteMilestoneRepository
    return SqliteMilestoneRepository()


@lru_cache()
def get_operation_progress_repository() -> IOperationProgressRepository:
    """Get operation progress repository instance."""
    from petroleum_ops.infrastructure.local.operation_progress_repository import (
        SqliteOperationProgressRepository,
    )
    return SqliteOperationProgressRepository()


# ===========================================
# Realtime
# ===========================================


@lru_cache()
def get_event_publisher() -> IEventStream:
    """Get the project-scoped realtime publisher (also consumed by the stream route)."""
    from petroleum_ops.services.realtime_service import RealtimeManager
    return RealtimeManager(max_queue_size=get_settings().REALTIME_QUEUE_SIZE)


# ===========================================
# Services
# ===========================================


def get_milestone_service(
    repo: Annotated[IMilestoneRepository, Depends(get_milestone_repository)],
    publisher: Annotated[IEventPublisher, Depends(get_event_publisher)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> MilestoneService:
    """Get milestone service wired with the configured status policy."""
    return MilestoneService(
        repo,
        publisher,
        StatusTransitionPolicy(strict=settings.STRICT_STATUS_TRANSITIONS),
    )


def get_operation_progress_service(
    repo: Annotated[IOperationProgressRepository, Depends(get_operation_progress_repository)],
    publisher: Annotated[IEventPublisher, Depends(get_event_publisher)],
) -> OperationProgressService:
    """Get operation progress service."""
    return OperationProgressService(repo, publisher)


# ===========================================
# Acting user
# ===========================================


def get_actor(x_user_id: Annotated[Optional[str], Header()] = None) -> Optional[str]:
    """Acting user ID from the X-User-Id header (used only for audit fields)."""
    if x_user_id and x_user_id.strip():
        return x_user_id.strip()
    return None


# Type aliases for cleaner dependency injection
MilestoneSvc = Annotated[MilestoneService, Depends(get_milestone_service)]
OperationProgressSvc = Annotated[OperationProgressService, Depends(get_operation_progress_service)]
EventStream = Annotated[IEventStream, Depends(get_event_publisher)]
Actor = Annotated[Optional[str], Depends(get_actor)]
