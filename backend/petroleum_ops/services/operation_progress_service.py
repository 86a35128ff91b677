"""
Operation progress service.

Records dated planned-vs-actual progress entries for a project. Variance and
status are derived on every save; entries are soft-deleted.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional
from uuid import uuid4

from petroleum_ops.core.exceptions import NotFoundError, ValidationError
from petroleum_ops.interfaces.event_publisher import IEventPublisher, NullEventPublisher
from petroleum_ops.interfaces.operation_progress_repository import IOperationProgressRepository
from petroleum_ops.models.enums import EventAction, OperationProgressStatus
from petroleum_ops.models.operation_progress import (
    OperationProgress,
    OperationProgressCreate,
    OperationProgressUpdate,
)
from petroleum_ops.services.milestone_service import Payload, parse_payload
from petroleum_ops.utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)

AHEAD_THRESHOLD = 5
AT_RISK_THRESHOLD = -10


def classify_variance(planned: float, actual: float) -> tuple[float, OperationProgressStatus]:
    """
    Derive variance and schedule status.

    >>> classify_variance(75, 70)
    (-5, <OperationProgressStatus.BEHIND: 'behind'>)
    """
    variance = actual - planned
    if variance >= AHEAD_THRESHOLD:
        return variance, OperationProgressStatus.AHEAD
    if variance <= AT_RISK_THRESHOLD:
        return variance, OperationProgressStatus.AT_RISK
    if variance < 0:
        return variance, OperationProgressStatus.BEHIND
    return variance, OperationProgressStatus.ON_TRACK


class OperationProgressService:
    """Operation progress log for projects."""

    def __init__(
        self,
        repo: IOperationProgressRepository,
        publisher: Optional[IEventPublisher] = None,
    ):
        self._repo = repo
        self._publisher = publisher or NullEventPublisher()

    async def list_entries(
        self,
        project_id: str,
        entry_date: Optional[date] = None,
        status: Optional[str] = None,
    ) -> list[OperationProgress]:
        """List entries, newest first. ``status`` of None or "all" disables the filter."""
        status_filter = None
        if status and status != "all":
            try:
                status_filter = OperationProgressStatus(status)
            except ValueError as exc:
                allowed = ", ".join(item.value for item in OperationProgressStatus)
                raise ValidationError(f"status: Must be one of all, {allowed}") from exc
        return await self._repo.find_by_project(project_id, entry_date, status_filter)

    async def create_entry(
        self,
        project_id: str,
        data: Payload,
        actor: Optional[str] = None,
    ) -> OperationProgress:
        payload = parse_payload(OperationProgressCreate, data)
        variance, status = classify_variance(payload.planned_progress, payload.actual_progress)

        now = now_utc()
        entry = OperationProgress(
            id=str(uuid4()),
            project_id=project_id,
            variance=variance,
            status=status,
            updated_by=actor,
            created_at=now,
            updated_at=now,
            **payload.model_dump(),
        )
        created = await self._repo.insert(entry)
        logger.info("Created progress entry %s in project %s (%s)", created.id, project_id, status.value)
        await self._publish(created, EventAction.CREATED)
        return created

    async def update_entry(
        self,
        entry_id: str,
        patch: Payload,
        actor: Optional[str] = None,
    ) -> OperationProgress:
        update = parse_payload(OperationProgressUpdate, patch)
        current = await self._repo.get_by_id(entry_id)
        if current is None:
            raise NotFoundError(f"Progress entry {entry_id} not found")

        changes = {
            field: value
            for field, value in update.model_dump(exclude_unset=True).items()
            if value is not None
        }
        planned = changes.get("planned_progress", current.planned_progress)
        actual = changes.get("actual_progress", current.actual_progress)
        changes["variance"], changes["status"] = classify_variance(planned, actual)
        if actor:
            changes["updated_by"] = actor

        updated = await self._repo.update_by_id(entry_id, changes)
        if updated is None:
            raise NotFoundError(f"Progress entry {entry_id} not found")

        logger.info("Updated progress entry %s (%s)", entry_id, updated.status.value)
        await self._publish(updated, EventAction.UPDATED)
        return updated

    async def delete_entry(self, entry_id: str, actor: Optional[str] = None) -> None:
        """Soft-delete a progress entry."""
        changes: dict = {"is_deleted": True}
        if actor:
            changes["updated_by"] = actor
        deleted = await self._repo.update_by_id(entry_id, changes)
        if deleted is None:
            raise NotFoundError(f"Progress entry {entry_id} not found")

        logger.info("Deleted progress entry %s", entry_id)
        await self._publisher.publish(
            deleted.project_id,
            {
                "action": EventAction.DELETED.value,
                "resource": "progress",
                "payload": {"id": entry_id},
            },
        )

    async def _publish(self, entry: OperationProgress, action: EventAction) -> None:
        await self._publisher.publish(
            entry.project_id,
            {
                "action": action.value,
                "resource": "progress",
                "payload": entry.model_dump(mode="json", by_alias=True),
            },
        )
