"""
Milestone service.

Owns a project's milestones and their nested tasks: validates input, resolves
documents, applies the status policy, persists single-document updates and
publishes change events.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, TypeVar, Union
from uuid import uuid4

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from petroleum_ops.core.exceptions import NotFoundError, ValidationError, format_validation_errors
from petroleum_ops.interfaces.event_publisher import IEventPublisher, NullEventPublisher
from petroleum_ops.interfaces.milestone_repository import IMilestoneRepository
from petroleum_ops.models.enums import EventAction, ProgressStatus
from petroleum_ops.models.milestone import (
    Milestone,
    MilestoneCreate,
    MilestoneTask,
    MilestoneTaskCreate,
    MilestoneTaskUpdate,
    MilestoneUpdate,
)
from petroleum_ops.models.progress import ProgressReport
from petroleum_ops.services.progress_calculator import build_progress_report
from petroleum_ops.services.status_transitions import StatusTransitionPolicy
from petroleum_ops.utils.datetime_utils import now_utc, today_utc

logger = logging.getLogger(__name__)

TModel = TypeVar("TModel", bound=BaseModel)
Payload = Union[Mapping[str, Any], BaseModel]


def parse_payload(model_cls: type[TModel], data: Payload) -> TModel:
    """Validate a raw payload into ``model_cls``, raising the app ValidationError."""
    if isinstance(data, model_cls):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    try:
        return model_cls.model_validate(data)
    except PydanticValidationError as exc:
        logger.debug("Rejected %s payload: %s", model_cls.__name__, exc.errors())
        raise ValidationError(format_validation_errors(exc.errors())) from exc


def _stamp(changes: dict[str, Any], actor: Optional[str]) -> dict[str, Any]:
    """Add updated_by when the acting user is known."""
    if actor:
        return {**changes, "updated_by": actor}
    return changes


class MilestoneService:
    """Milestone/task store for projects."""

    def __init__(
        self,
        repo: IMilestoneRepository,
        publisher: Optional[IEventPublisher] = None,
        transitions: Optional[StatusTransitionPolicy] = None,
    ):
        self._repo = repo
        self._publisher = publisher or NullEventPublisher()
        self._transitions = transitions or StatusTransitionPolicy()

    # ===========================================
    # Reads
    # ===========================================

    async def list_milestones(self, project_id: str) -> list[Milestone]:
        """Milestones of a project ordered by planned date, deleted tasks hidden."""
        milestones = await self._repo.find_by_project(project_id)
        return [self._visible(milestone) for milestone in milestones]

    async def get_milestone(self, milestone_id: str) -> Milestone:
        return self._visible(await self._require_milestone(milestone_id))

    async def get_progress(self, project_id: str) -> ProgressReport:
        """Recompute the progress report from the project's current milestones."""
        milestones = await self._repo.find_by_project(project_id)
        return build_progress_report(milestones)

    # ===========================================
    # Milestones
    # ===========================================

    async def create_milestone(
        self,
        project_id: str,
        data: Payload,
        actor: Optional[str] = None,
    ) -> Milestone:
        """
        Create a milestone with an empty task list.

        Raises:
            ValidationError: name, description or plannedDate missing or malformed
        """
        payload = parse_payload(MilestoneCreate, data)
        if not project_id or not project_id.strip():
            raise ValidationError("projectId: Field required")

        actual_date = payload.actual_date
        if payload.status == ProgressStatus.COMPLETED:
            actual_date = actual_date or today_utc()
        elif actual_date is not None:
            raise ValidationError("actualDate: Only allowed when status is completed")

        now = now_utc()
        milestone = Milestone(
            id=str(uuid4()),
            project_id=project_id,
            name=payload.name,
            description=payload.description,
            planned_date=payload.planned_date,
            actual_date=actual_date,
            status=payload.status,
            tasks=[],
            created_by=actor,
            updated_by=actor,
            created_at=now,
            updated_at=now,
        )
        created = await self._repo.insert(milestone)
        logger.info("Created milestone %s in project %s", created.id, project_id)
        await self._publish(created.project_id, EventAction.CREATED, "milestone", created)
        return created

    async def update_milestone(
        self,
        milestone_id: str,
        patch: Payload,
        actor: Optional[str] = None,
    ) -> Milestone:
        """
        Merge a patch into a milestone.

        Moving to completed defaults actualDate to today; moving away from
        completed clears it.

        Raises:
            ValidationError: malformed patch, actualDate on an open milestone,
                or an illegal transition in strict mode
            NotFoundError: milestone does not exist
        """
        update = parse_payload(MilestoneUpdate, patch)
        current = await self._require_milestone(milestone_id)

        changes = {
            field: value
            for field, value in update.model_dump(exclude_unset=True).items()
            if value is not None
        }

        new_status = changes.get("status", current.status)
        if new_status != current.status:
            self._transitions.check(current.status, new_status, "Milestone")

        if new_status == ProgressStatus.COMPLETED:
            if update.actual_date is not None:
                changes["actual_date"] = update.actual_date
            elif current.status != ProgressStatus.COMPLETED or current.actual_date is None:
                changes["actual_date"] = today_utc()
        else:
            if update.actual_date is not None:
                raise ValidationError("actualDate: Only allowed when status is completed")
            if current.actual_date is not None:
                changes["actual_date"] = None

        updated = await self._repo.update_by_id(milestone_id, _stamp(changes, actor))
        if updated is None:
            raise NotFoundError(f"Milestone {milestone_id} not found")

        logger.info("Updated milestone %s (%s)", milestone_id, ", ".join(sorted(changes)))
        visible = self._visible(updated)
        await self._publish(visible.project_id, EventAction.UPDATED, "milestone", visible)
        return visible

    async def delete_milestone(self, milestone_id: str, actor: Optional[str] = None) -> None:
        """Soft-delete a milestone."""
        current = await self._require_milestone(milestone_id)
        deleted = await self._repo.update_by_id(milestone_id, _stamp({"is_deleted": True}, actor))
        if deleted is None:
            raise NotFoundError(f"Milestone {milestone_id} not found")

        logger.info("Deleted milestone %s", milestone_id)
        await self._publish(
            current.project_id,
            EventAction.DELETED,
            "milestone",
            {"id": milestone_id},
        )

    # ===========================================
    # Tasks
    # ===========================================

    async def create_task(
        self,
        milestone_id: str,
        data: Payload,
        actor: Optional[str] = None,
    ) -> MilestoneTask:
        """
        Append a task to a milestone.

        Raises:
            ValidationError: name, startDate or endDate missing or malformed
            NotFoundError: milestone does not exist
        """
        payload = parse_payload(MilestoneTaskCreate, data)
        task = MilestoneTask(id=str(uuid4()), **payload.model_dump())

        updated = await self._repo.update_tasks(
            milestone_id,
            lambda tasks: [*tasks, task],
            _stamp({}, actor),
        )
        if updated is None:
            raise NotFoundError(f"Milestone {milestone_id} not found")

        logger.info("Created task %s in milestone %s", task.id, milestone_id)
        await self._publish_task(updated.project_id, EventAction.CREATED, milestone_id, task)
        return task

    async def update_task(
        self,
        milestone_id: str,
        task_id: str,
        patch: Payload,
        actor: Optional[str] = None,
    ) -> MilestoneTask:
        """
        Merge a patch into one task of a milestone.

        status and completionPercentage are independent; neither implies the other.

        Raises:
            ValidationError: malformed patch or illegal transition in strict mode
            NotFoundError: milestone or task does not exist
        """
        update = parse_payload(MilestoneTaskUpdate, patch)
        changes = {
            field: value
            for field, value in update.model_dump(exclude_unset=True).items()
            if value is not None
        }

        def apply(tasks: list[MilestoneTask]) -> list[MilestoneTask]:
            task = self._require_task(tasks, milestone_id, task_id)
            if "status" in changes:
                self._transitions.check(task.status, changes["status"], "Task")
            merged = task.model_copy(update=changes)
            return [merged if item.id == task_id else item for item in tasks]

        updated = await self._repo.update_tasks(milestone_id, apply, _stamp({}, actor))
        if updated is None:
            raise NotFoundError(f"Milestone {milestone_id} not found")

        updated_task = updated.find_task(task_id)
        logger.info("Updated task %s in milestone %s", task_id, milestone_id)
        await self._publish_task(updated.project_id, EventAction.UPDATED, milestone_id, updated_task)
        return updated_task

    async def delete_task(self, milestone_id: str, task_id: str, actor: Optional[str] = None) -> None:
        """Soft-delete one task of a milestone."""

        def apply(tasks: list[MilestoneTask]) -> list[MilestoneTask]:
            task = self._require_task(tasks, milestone_id, task_id)
            deleted = task.model_copy(update={"is_deleted": True})
            return [deleted if item.id == task_id else item for item in tasks]

        updated = await self._repo.update_tasks(milestone_id, apply, _stamp({}, actor))
        if updated is None:
            raise NotFoundError(f"Milestone {milestone_id} not found")

        logger.info("Deleted task %s in milestone %s", task_id, milestone_id)
        await self._publish(
            updated.project_id,
            EventAction.DELETED,
            "task",
            {"id": task_id, "milestoneId": milestone_id},
        )

    # ===========================================
    # Helpers
    # ===========================================

    async def _require_milestone(self, milestone_id: str) -> Milestone:
        milestone = await self._repo.get_by_id(milestone_id)
        if milestone is None:
            logger.debug("Milestone %s not found", milestone_id)
            raise NotFoundError(f"Milestone {milestone_id} not found")
        return milestone

    @staticmethod
    def _require_task(tasks: list[MilestoneTask], milestone_id: str, task_id: str) -> MilestoneTask:
        for task in tasks:
            if task.id == task_id and not task.is_deleted:
                return task
        logger.debug("Task %s not found in milestone %s", task_id, milestone_id)
        raise NotFoundError(f"Task {task_id} not found")

    @staticmethod
    def _visible(milestone: Milestone) -> Milestone:
        return milestone.model_copy(update={"tasks": milestone.active_tasks()})

    async def _publish_task(
        self,
        project_id: str,
        action: EventAction,
        milestone_id: str,
        task: MilestoneTask,
    ) -> None:
        payload = task.model_dump(mode="json", by_alias=True)
        payload["milestoneId"] = milestone_id
        await self._publish(project_id, action, "task", payload)

    async def _publish(
        self,
        project_id: str,
        action: EventAction,
        resource: str,
        payload: Union[BaseModel, dict[str, Any]],
    ) -> None:
        if isinstance(payload, BaseModel):
            payload = payload.model_dump(mode="json", by_alias=True)
        await self._publisher.publish(
            project_id,
            {"action": action.value, "resource": resource, "payload": payload},
        )
