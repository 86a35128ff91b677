"""
Milestone model definitions.

A milestone is a dated deliverable of a project. It owns an ordered list of
tasks; tasks never exist outside their milestone and are stored embedded in
the milestone document.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from petroleum_ops.models.common import CamelModel, ISODate
from petroleum_ops.models.enums import ProgressStatus


# ===========================================
# Milestone tasks
# ===========================================


class MilestoneTaskBase(CamelModel):
    """Base milestone task fields."""

    name: str = Field(..., min_length=1, max_length=200, description="Task name")
    start_date: ISODate = Field(..., description="Planned start date")
    end_date: ISODate = Field(..., description="Planned end date")
    depends_on: list[str] = Field(
        default_factory=list,
        description="IDs of tasks this task depends on (informational only)",
    )
    notes: Optional[str] = Field(None, max_length=2000)


class MilestoneTaskCreate(MilestoneTaskBase):
    """Schema for creating a milestone task."""

    status: ProgressStatus = ProgressStatus.PLANNED
    completion_percentage: int = Field(0, ge=0, le=100)


class MilestoneTaskUpdate(CamelModel):
    """Schema for updating a milestone task."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    status: Optional[ProgressStatus] = None
    completion_percentage: Optional[int] = Field(None, ge=0, le=100)
    start_date: Optional[ISODate] = None
    end_date: Optional[ISODate] = None
    depends_on: Optional[list[str]] = None
    notes: Optional[str] = Field(None, max_length=2000)


class MilestoneTask(MilestoneTaskBase):
    """Complete milestone task model."""

    id: str
    status: ProgressStatus = ProgressStatus.PLANNED
    completion_percentage: int = Field(0, ge=0, le=100)
    is_deleted: bool = False


# ===========================================
# Milestones
# ===========================================


class MilestoneBase(CamelModel):
    """Base milestone fields."""

    name: str = Field(..., min_length=1, max_length=200, description="Milestone name")
    description: str = Field(..., min_length=1, max_length=2000, description="Milestone description")
    planned_date: ISODate = Field(..., description="Planned completion date")


class MilestoneCreate(MilestoneBase):
    """Schema for creating a milestone."""

    status: ProgressStatus = ProgressStatus.PLANNED
    actual_date: Optional[ISODate] = None


class MilestoneUpdate(CamelModel):
    """Schema for updating a milestone."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    planned_date: Optional[ISODate] = None
    status: Optional[ProgressStatus] = None
    actual_date: Optional[ISODate] = None


class Milestone(MilestoneBase):
    """Complete milestone model."""

    id: str
    project_id: str = Field(..., description="Project ID")
    status: ProgressStatus = ProgressStatus.PLANNED
    actual_date: Optional[ISODate] = Field(None, description="Set only while completed")
    tasks: list[MilestoneTask] = Field(default_factory=list)
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    is_deleted: bool = False

    def active_tasks(self) -> list[MilestoneTask]:
        """Tasks that have not been soft-deleted, in insertion order."""
        return [task for task in self.tasks if not task.is_deleted]

    def find_task(self, task_id: str) -> Optional[MilestoneTask]:
        for task in self.tasks:
            if task.id == task_id and not task.is_deleted:
                return task
        return None
