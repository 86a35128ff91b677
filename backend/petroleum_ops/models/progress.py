"""
Progress summary models.

Summaries are derived from the current milestone set on every read and are
never persisted.
"""

from pydantic import Field

from petroleum_ops.models.common import CamelModel
from petroleum_ops.models.enums import ProgressStatus


class ProgressSummary(CamelModel):
    """Overall completion and per-status task counts for a project."""

    overall: int = Field(0, ge=0, le=100, description="Overall completion percentage")
    completed: int = 0
    in_progress: int = 0
    planned: int = 0
    delayed: int = 0


class MilestoneProgress(CamelModel):
    """Progress of a single milestone."""

    milestone_id: str
    name: str
    status: ProgressStatus
    suggested_status: ProgressStatus = Field(
        ..., description="Status implied by the milestone's tasks (advisory)"
    )
    completion: int = Field(0, ge=0, le=100, description="Mean task completion percentage")
    task_count: int = 0


class ProgressReport(ProgressSummary):
    """Project summary with a per-milestone breakdown."""

    total: int = 0
    milestones: list[MilestoneProgress] = Field(default_factory=list)
