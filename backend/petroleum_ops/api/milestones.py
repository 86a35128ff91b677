"""
Milestone API endpoints.

Provides CRUD operations for project milestones, their nested tasks and the
derived progress summary. Mounted under ``/api/projects``.
"""

from fastapi import APIRouter, status

from petroleum_ops.api.deps import Actor, MilestoneSvc
from petroleum_ops.models.common import ApiListResponse, ApiResponse
from petroleum_ops.models.milestone import (
    Milestone,
    MilestoneCreate,
    MilestoneTask,
    MilestoneTaskCreate,
    MilestoneTaskUpdate,
    MilestoneUpdate,
)
from petroleum_ops.models.progress import ProgressReport

router = APIRouter()


# ===========================================
# Milestones
# ===========================================


@router.get("/{project_id}/milestones", response_model=ApiListResponse[Milestone])
async def list_project_milestones(project_id: str, service: MilestoneSvc):
    """List milestones for a project, earliest planned date first."""
    milestones = await service.list_milestones(project_id)
    return ApiListResponse[Milestone](count=len(milestones), data=milestones)


@router.get("/{project_id}/milestones/summary", response_model=ApiResponse[ProgressReport])
async def get_project_progress_summary(project_id: str, service: MilestoneSvc):
    """Overall progress and per-status task counts, recomputed on every call."""
    report = await service.get_progress(project_id)
    return ApiResponse[ProgressReport](data=report)


@router.post(
    "/{project_id}/milestones",
    response_model=ApiResponse[Milestone],
    status_code=status.HTTP_201_CREATED,
)
async def create_milestone(
    project_id: str,
    milestone: MilestoneCreate,
    service: MilestoneSvc,
    actor: Actor,
):
    """Create a new milestone."""
    created = await service.create_milestone(project_id, milestone, actor)
    return ApiResponse[Milestone](data=created)


@router.get("/milestones/{milestone_id}", response_model=ApiResponse[Milestone])
async def get_milestone(milestone_id: str, service: MilestoneSvc):
    """Get a milestone by ID."""
    milestone = await service.get_milestone(milestone_id)
    return ApiResponse[Milestone](data=milestone)


@router.put("/milestones/{milestone_id}", response_model=ApiResponse[Milestone])
async def update_milestone(
    milestone_id: str,
    milestone: MilestoneUpdate,
    service: MilestoneSvc,
    actor: Actor,
):
    """Update a milestone."""
    updated = await service.update_milestone(milestone_id, milestone, actor)
    return ApiResponse[Milestone](data=updated)


@router.delete("/milestones/{milestone_id}", response_model=ApiResponse[dict])
async def delete_milestone(milestone_id: str, service: MilestoneSvc, actor: Actor):
    """Soft-delete a milestone."""
    await service.delete_milestone(milestone_id, actor)
    return ApiResponse[dict](data={})


# ===========================================
# Milestone tasks
# ===========================================


@router.post(
    "/{project_id}/milestones/{milestone_id}/tasks",
    response_model=ApiResponse[MilestoneTask],
    status_code=status.HTTP_201_CREATED,
)
async def create_milestone_task(
    project_id: str,
    milestone_id: str,
    task: MilestoneTaskCreate,
    service: MilestoneSvc,
    actor: Actor,
):
    """Append a task to a milestone."""
    created = await service.create_task(milestone_id, task, actor)
    return ApiResponse[MilestoneTask](data=created)


@router.put(
    "/{project_id}/milestones/{milestone_id}/tasks/{task_id}",
    response_model=ApiResponse[MilestoneTask],
)
async def update_milestone_task(
    project_id: str,
    milestone_id: str,
    task_id: str,
    task: MilestoneTaskUpdate,
    service: MilestoneSvc,
    actor: Actor,
):
    """Update a task of a milestone."""
    updated = await service.update_task(milestone_id, task_id, task, actor)
    return ApiResponse[MilestoneTask](data=updated)


@router.delete(
    "/{project_id}/milestones/{milestone_id}/tasks/{task_id}",
    response_model=ApiResponse[dict],
)
async def delete_milestone_task(
    project_id: str,
    milestone_id: str,
    task_id: str,
    service: MilestoneSvc,
    actor: Actor,
):
    """Soft-delete a task of a milestone."""
    await service.delete_task(milestone_id, task_id, actor)
    return ApiResponse[dict](data={})
